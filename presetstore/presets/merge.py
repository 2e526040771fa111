"""
Reconcile the system and user tiers of a component type.

Rules:
- Neither tier: a fresh file holding only the header.
- One tier: that tier as-is.
- Both, user version >= system version: the user tier as-is.
- Both, system version newer: the system tier is the base and every
  public user group replaces its namesake wholesale. Hidden user groups
  stay behind. The caller must persist the result.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..version import parse_version
from .models import PresetFile

logger = logging.getLogger(__name__)


@dataclass
class MergeResult:
    preset_file: PresetFile
    updated_from_system: bool = False


def overlay_user(base: PresetFile, user: PresetFile) -> PresetFile:
    """Fold the public groups and comments of user onto base, in place."""
    if user.comment:
        base.comment = user.comment
    if user.trailing_comment:
        base.trailing_comment = user.trailing_comment

    for group in user.groups.values():
        if group.hidden:
            continue
        base.put_group(group)

    return base


def merge_tiers(
    identity: str,
    system: Optional[PresetFile],
    user: Optional[PresetFile],
) -> MergeResult:
    """Produce the effective preset file for identity from its two tiers."""
    if system is None and user is None:
        logger.info(f"No preset files for {identity}, starting empty")
        return MergeResult(PresetFile.new(identity))

    if system is None:
        return MergeResult(user)

    if user is None:
        return MergeResult(system)

    system_version = parse_version(system.version)
    user_version = parse_version(user.version)

    if user_version >= system_version:
        logger.debug(
            f"Keeping user presets for {identity} "
            f"(user {user.version} >= system {system.version})"
        )
        return MergeResult(user)

    logger.info(
        f"System presets for {identity} are newer "
        f"(system {system.version} > user {user.version}), merging user presets on top"
    )
    return MergeResult(overlay_user(system, user), updated_from_system=True)
