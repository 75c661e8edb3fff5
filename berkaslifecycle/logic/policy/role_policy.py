"""
===============================================================================
Role Policy – static role -> actions / editable sections table
-------------------------------------------------------------------------------
Purpose:
    Answer "may this role do X" and "may this role write section Y".
    Pure functions of the role; nothing is stored.

Decisions implemented:
    - Unknown roles and unknown actions are denied (fail closed).
    - Roles and actions are accepted as enum members or strings
      (case-insensitive).
    - QC decisions are a separate capability (ADMIN, QUALITY_CONTROL).
===============================================================================
"""
from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import FrozenSet

from core.models.user import UserRole
from berkaslifecycle.models.section import Section


class BerkasAction(str, Enum):
    VIEW = "view"
    CREATE = "create"
    EDIT = "edit"
    DELETE = "delete"
    MOVE_STAGE = "move_stage"
    PRINT = "print"


@dataclass(slots=True, frozen=True)
class RolePermissions:
    actions: FrozenSet[BerkasAction]
    editable_sections: FrozenSet[Section]


_ALL_ACTIONS = frozenset(BerkasAction)
_READ_MOVE_PRINT = frozenset({BerkasAction.VIEW, BerkasAction.MOVE_STAGE, BerkasAction.PRINT})

ROLE_PERMISSIONS: dict[UserRole, RolePermissions] = {
    UserRole.ADMIN: RolePermissions(
        actions=_ALL_ACTIONS,
        editable_sections=frozenset(Section),
    ),
    UserRole.DATA_BERKAS: RolePermissions(
        actions=_READ_MOVE_PRINT | {BerkasAction.CREATE, BerkasAction.EDIT},
        editable_sections=frozenset({Section.DATA_BERKAS}),
    ),
    UserRole.DATA_UKUR: RolePermissions(
        actions=_READ_MOVE_PRINT | {BerkasAction.EDIT},
        editable_sections=frozenset({Section.DATA_BERKAS, Section.DATA_UKUR}),
    ),
    UserRole.DATA_PEMETAAN: RolePermissions(
        actions=_READ_MOVE_PRINT | {BerkasAction.EDIT},
        editable_sections=frozenset({Section.DATA_BERKAS, Section.DATA_PEMETAAN}),
    ),
    UserRole.QUALITY_CONTROL: RolePermissions(
        actions=_READ_MOVE_PRINT,
        editable_sections=frozenset(),
    ),
}

QC_ROLES: FrozenSet[UserRole] = frozenset({UserRole.ADMIN, UserRole.QUALITY_CONTROL})

ROLE_DISPLAY_NAMES: dict[UserRole, str] = {
    UserRole.ADMIN: "Administrator",
    UserRole.DATA_BERKAS: "Operator Data Berkas",
    UserRole.DATA_UKUR: "Operator Data Ukur",
    UserRole.DATA_PEMETAAN: "Operator Data Pemetaan",
    UserRole.QUALITY_CONTROL: "Quality Control",
}


def _parse_action(action: BerkasAction | str) -> BerkasAction | None:
    if isinstance(action, BerkasAction):
        return action
    try:
        return BerkasAction(str(action).strip().lower())
    except ValueError:
        return None


def _parse_section(section: Section | str) -> Section | None:
    if isinstance(section, Section):
        return section
    try:
        return Section(str(section).strip().upper())
    except ValueError:
        return None


class RolePolicy:
    """Stateless lookups over ROLE_PERMISSIONS."""

    @staticmethod
    def can_perform(role: UserRole | str | None, action: BerkasAction | str) -> bool:
        parsed_role = UserRole.parse(role)
        parsed_action = _parse_action(action)
        if parsed_role is None or parsed_action is None:
            return False
        return parsed_action in ROLE_PERMISSIONS[parsed_role].actions

    @staticmethod
    def editable_sections(role: UserRole | str | None) -> FrozenSet[Section]:
        parsed_role = UserRole.parse(role)
        if parsed_role is None:
            return frozenset()
        return ROLE_PERMISSIONS[parsed_role].editable_sections

    @classmethod
    def can_edit_section(cls, role: UserRole | str | None, section: Section | str) -> bool:
        parsed = _parse_section(section)
        return parsed is not None and parsed in cls.editable_sections(role)

    @staticmethod
    def can_submit_qc(role: UserRole | str | None) -> bool:
        return UserRole.parse(role) in QC_ROLES

    @staticmethod
    def display_name(role: UserRole | str | None) -> str:
        parsed = UserRole.parse(role)
        return ROLE_DISPLAY_NAMES[parsed] if parsed else str(role or "")
