"""
PresetStore: the public preset API for one live component.

Every operation goes through the registry's cached PresetFile for the
component's type and holds that type's lock while it reads or mutates it.
Mutations are persisted to the user tier immediately.

Failures never raise out of this class. Operations report success with
their return value and log the cause:
- a missing preset or a failed write fails the call
- a single property that cannot be read, written or (de)serialized is
  logged and skipped
"""

import logging
from typing import Any, Dict, List, Optional

from ..persistence import PersistError
from ..reflection import ModelReflector, PropertyReflector
from .errors import (
    InvalidNameError,
    PresetStoreError,
    PropertyNotApplicableError,
    SerializationError,
)
from .models import HEADER_GROUP, META_PREFIX, PresetFile, meta_key, validate_group_name, validate_key
from .registry import PresetRegistry

logger = logging.getLogger(__name__)


def validate_preset_name(name: str) -> str:
    """A group name the facade may create, rename or delete; never the header."""
    validate_group_name(name)
    if name == HEADER_GROUP:
        raise InvalidNameError("preset name", name)
    return name


class PresetStore:
    """
    Load, save, rename and delete presets of a component, plus their metadata.

    All instances of one component type share the same presets.

    Args:
        component: The live object whose properties are preset
        registry: Registry holding the cached preset files
        reflector: Property access for component (defaults to ModelReflector)
        identity: Component type identifier (defaults to reflector.type_name)
    """

    def __init__(
        self,
        component: Any,
        registry: PresetRegistry,
        reflector: Optional[PropertyReflector] = None,
        identity: Optional[str] = None,
    ):
        self.component = component
        self.registry = registry
        self.reflector = reflector or ModelReflector()
        self.identity = identity or self.reflector.type_name(component)

    def _presets(self) -> Optional[PresetFile]:
        try:
            return self.registry.get_or_load(self.identity)
        except PresetStoreError as e:
            logger.warning(f"No presets for {self.identity}: {e}")
            return None

    def _persist(self) -> bool:
        try:
            self.registry.save(self.identity)
        except PersistError as e:
            logger.warning(f"Could not save presets for {self.identity}: {e}")
            return False
        return True

    # Queries

    def list_presets(self) -> List[str]:
        """Public preset names, sorted. Hidden groups are never listed."""
        with self.registry.lock(self.identity):
            presets = self._presets()
            if presets is None:
                return []
            return presets.public_names()

    def list_properties(self) -> List[str]:
        """Names of the component properties that presets store."""
        try:
            return list(self.reflector.list_settable_properties(self.component))
        except PresetStoreError as e:
            logger.warning(f"Cannot list properties of {self.identity}: {e}")
            return []

    def has_preset(self, name: str) -> bool:
        with self.registry.lock(self.identity):
            presets = self._presets()
            return presets is not None and presets.has_group(name)

    # Preset operations

    def load_preset(self, name: str) -> bool:
        """
        Apply the stored values of preset name to the component.

        Properties without a stored value and stored keys that match no
        property are skipped.

        Returns:
            False if the preset does not exist
        """
        with self.registry.lock(self.identity):
            presets = self._presets()
            if presets is None:
                return False
            group = presets.get_group(name) if name else None
            if group is None:
                logger.warning(f"No preset named '{name}' for {self.identity}")
                return False
            entries = dict(group.entries)

        logger.debug(f"Loading preset '{name}' for {self.identity}")
        properties = self.list_properties()

        for prop in properties:
            text = entries.get(prop)
            if text is None:
                logger.warning(f"Parameter '{prop}' not in preset '{name}'")
                continue
            try:
                value_type = self.reflector.property_type(self.component, prop)
                value = self.reflector.deserialize(value_type, text)
                self.reflector.set_property(self.component, prop, value)
            except PropertyNotApplicableError as e:
                logger.warning(str(e))
            except SerializationError as e:
                logger.warning(f"Deserialization of value '{text}' for property '{prop}' failed: {e}")

        for key in entries:
            if not key.startswith(META_PREFIX) and key not in properties:
                logger.debug(f"Stored key '{key}' in preset '{name}' is not a property of {self.identity}")

        return True

    def save_preset(self, name: str) -> bool:
        """
        Store the component's current property values as preset name.

        An existing preset of that name is overwritten key by key.

        Returns:
            False if the name is invalid or the presets could not be written
        """
        try:
            validate_preset_name(name)
        except InvalidNameError as e:
            logger.warning(str(e))
            return False

        logger.info(f"Saving preset '{name}' for {self.identity}")
        values: Dict[str, str] = {}
        for prop in self.list_properties():
            try:
                value = self.reflector.get_property(self.component, prop)
                values[prop] = self.reflector.serialize(value)
            except PropertyNotApplicableError as e:
                logger.warning(str(e))
            except SerializationError as e:
                logger.warning(f"Serialization for property '{prop}' failed: {e}")

        with self.registry.lock(self.identity):
            presets = self._presets()
            if presets is None:
                return False
            group = presets.ensure_group(name)
            for key, text in values.items():
                try:
                    group.set(key, text)
                except InvalidNameError as e:
                    logger.warning(f"Property cannot be stored in a preset: {e}")
            return self._persist()

    def rename_preset(self, old_name: str, new_name: str) -> bool:
        """
        Rename a preset, carrying over its keys and comments.

        A preset already called new_name is overwritten key by key.

        Returns:
            False if old_name does not exist, either name is invalid or the
            header group, or the presets could not be written
        """
        try:
            validate_preset_name(old_name)
            validate_preset_name(new_name)
        except InvalidNameError as e:
            logger.warning(str(e))
            return False

        with self.registry.lock(self.identity):
            presets = self._presets()
            if presets is None:
                return False
            if not presets.has_group(old_name):
                logger.warning(f"No preset named '{old_name}' for {self.identity}")
                return False
            if old_name != new_name:
                presets.copy_group(old_name, new_name)
                presets.remove_group(old_name)
            return self._persist()

    def delete_preset(self, name: str) -> bool:
        """
        Delete a preset.

        Returns:
            False if it does not exist, names the header group or the presets
            could not be written
        """
        try:
            validate_preset_name(name)
        except InvalidNameError as e:
            logger.warning(str(e))
            return False

        with self.registry.lock(self.identity):
            presets = self._presets()
            if presets is None:
                return False
            if not presets.remove_group(name):
                logger.warning(f"No preset named '{name}' for {self.identity}")
                return False
            return self._persist()

    # Metadata

    def set_meta(self, name: str, tag: str, value: Optional[str]) -> bool:
        """
        Attach a metadata tag to preset name; an empty value removes it.

        Setting a tag creates the preset if needed.

        Returns:
            False if name/tag are invalid or the presets could not be written
        """
        key = meta_key(tag) if tag else ""
        try:
            validate_preset_name(name)
            validate_key(key)
        except InvalidNameError as e:
            logger.warning(str(e))
            return False

        with self.registry.lock(self.identity):
            presets = self._presets()
            if presets is None:
                return False
            if value:
                presets.ensure_group(name).set(key, value)
            else:
                group = presets.get_group(name)
                if group is not None:
                    group.remove(key)
            return self._persist()

    def get_meta(self, name: str, tag: str) -> Optional[str]:
        """Value of metadata tag on preset name, or None."""
        with self.registry.lock(self.identity):
            presets = self._presets()
            if presets is None or not name or not tag:
                return None
            group = presets.get_group(name)
            return group.get(meta_key(tag)) if group is not None else None
