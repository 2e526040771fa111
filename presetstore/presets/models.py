"""
In-memory model of a preset file.

A PresetFile is an ordered map of named groups. Each group is an ordered
map of key -> string value plus optional comment text on the group and
on individual keys. The header is stored as the hidden group "_presets_"
and carries the owning component type and the version stamp.

Values are opaque strings. Interpreting them is the reflector's job.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .errors import InvalidNameError, PresetNotFoundError


HEADER_GROUP = "_presets_"
HEADER_ELEMENT_NAME = "element-name"
HEADER_VERSION = "version"

# Groups whose names start with this are never listed as presets
PRIVATE_PREFIX = "_"
META_PREFIX = "_meta/"


def is_hidden(name: str) -> bool:
    """Visibility is purely syntactic: a private prefix hides the group."""
    return name.startswith(PRIVATE_PREFIX)


def meta_key(tag: str) -> str:
    """Key under which a metadata tag is stored inside a group."""
    return f"{META_PREFIX}{tag}"


def validate_group_name(name: str) -> str:
    if not isinstance(name, str) or not name:
        raise InvalidNameError("group name", name)
    if "[" in name or "]" in name or "\n" in name or "\r" in name:
        raise InvalidNameError("group name", name)
    return name


def validate_key(key: str) -> str:
    if not isinstance(key, str) or not key or key != key.strip():
        raise InvalidNameError("key", key)
    if any(ch in key for ch in "=[]\n\r") or key[0] == "#":
        raise InvalidNameError("key", key)
    return key


class Group(BaseModel):
    """
    A named collection of entries (a preset, or a private bookkeeping group).

    Property keys and metadata keys ("_meta/<tag>") share one entry map.
    """

    model_config = ConfigDict(extra="forbid")

    name: str
    entries: Dict[str, str] = Field(default_factory=dict)
    comment: Optional[str] = None
    key_comments: Dict[str, str] = Field(default_factory=dict)

    @property
    def hidden(self) -> bool:
        return is_hidden(self.name)

    def keys(self) -> List[str]:
        return list(self.entries)

    def get(self, key: str) -> Optional[str]:
        return self.entries.get(key)

    def set(self, key: str, value: str) -> None:
        """Set a value; last write wins."""
        validate_key(key)
        self.entries[key] = str(value)

    def remove(self, key: str) -> bool:
        """Remove a key and its comment. Returns False if it was not present."""
        self.key_comments.pop(key, None)
        return self.entries.pop(key, None) is not None

    def set_key_comment(self, key: str, comment: Optional[str]) -> None:
        if comment:
            self.key_comments[key] = comment
        else:
            self.key_comments.pop(key, None)


class PresetFile(BaseModel):
    """
    One component type's presets: header, groups and file-level comment.

    Instances are mutated in place by every store operation and are the
    unit of persistence.
    """

    model_config = ConfigDict(extra="forbid")

    groups: Dict[str, Group] = Field(default_factory=dict)
    comment: Optional[str] = None
    # "#" lines after the last entry of the file
    trailing_comment: Optional[str] = None

    @classmethod
    def new(cls, identity: str, version: Optional[str] = None) -> "PresetFile":
        """Create a file holding only the header."""
        preset_file = cls()
        header = preset_file.ensure_group(HEADER_GROUP)
        header.set(HEADER_ELEMENT_NAME, identity)
        if version:
            header.set(HEADER_VERSION, version)
        return preset_file

    @property
    def identity(self) -> Optional[str]:
        header = self.groups.get(HEADER_GROUP)
        return header.get(HEADER_ELEMENT_NAME) if header else None

    @property
    def version(self) -> Optional[str]:
        header = self.groups.get(HEADER_GROUP)
        return header.get(HEADER_VERSION) if header else None

    def stamp_version(self, version: str) -> None:
        self.ensure_group(HEADER_GROUP).set(HEADER_VERSION, version)

    def has_group(self, name: str) -> bool:
        return name in self.groups

    def get_group(self, name: str) -> Optional[Group]:
        return self.groups.get(name)

    def require_group(self, name: str) -> Group:
        group = self.groups.get(name)
        if group is None:
            raise PresetNotFoundError(name)
        return group

    def ensure_group(self, name: str) -> Group:
        """Return the named group, creating an empty one if needed."""
        group = self.groups.get(name)
        if group is None:
            validate_group_name(name)
            group = Group(name=name)
            self.groups[name] = group
        return group

    def remove_group(self, name: str) -> bool:
        return self.groups.pop(name, None) is not None

    def put_group(self, group: Group) -> None:
        """Insert a copy of group, replacing any group of the same name wholesale."""
        self.groups[group.name] = group.model_copy(deep=True)

    def public_names(self) -> List[str]:
        """Names of the user-facing presets, lexicographically sorted."""
        return sorted(name for name in self.groups if not is_hidden(name))

    def copy_group(self, source: str, target: str) -> Group:
        """
        Copy the comment, every key and every key comment of source into target.

        Keys already in target that source lacks are left alone.

        Raises:
            PresetNotFoundError: If source does not exist
        """
        origin = self.require_group(source)
        destination = self.ensure_group(target)
        if origin.comment:
            destination.comment = origin.comment
        for key, value in list(origin.entries.items()):
            comment = origin.key_comments.get(key)
            if comment:
                destination.key_comments[key] = comment
            destination.entries[key] = value
        return destination
