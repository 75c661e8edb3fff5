"""
===============================================================================
Section Classifier – field names -> sections, payload filtering, completeness
-------------------------------------------------------------------------------
Ordering rule:
    filter_allowed() runs BEFORE classify(). A payload is first reduced to
    the fields the role may write (unknown names dropped as well), then the
    remaining names are classified. Fields the role could not write therefore
    never cause a rejection and are never written. Stripped names go to the
    module log only.
===============================================================================
"""
from __future__ import annotations
import logging
from typing import Any, Iterable, Mapping, Set

from core.models.user import UserRole
from berkaslifecycle.logic.policy.role_policy import RolePolicy
from berkaslifecycle.models.section import FIELD_SECTION, REQUIRED_FIELDS, Section, canonical_field

logger = logging.getLogger(__name__)


def _is_filled(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip() != ""
    return True


class SectionClassifier:
    """Pure helpers; no state."""

    @staticmethod
    def normalize(payload: Mapping[str, Any]) -> dict[str, Any]:
        """Rename camelCase aliases to snake_case; unknown keys are kept as-is."""
        out: dict[str, Any] = {}
        for key, value in payload.items():
            out[canonical_field(key) or key] = value
        return out

    @staticmethod
    def classify(field_names: Iterable[str]) -> Set[Section]:
        """
        Sections touched by *field_names*. Unknown names are ignored; if none
        map, the default is {DATA_BERKAS}.
        """
        sections: Set[Section] = set()
        for name in field_names:
            canon = canonical_field(name)
            if canon is not None:
                sections.add(FIELD_SECTION[canon])
        return sections or {Section.DATA_BERKAS}

    @classmethod
    def filter_allowed(cls, payload: Mapping[str, Any], role: UserRole | str | None) -> dict[str, Any]:
        """Keep only known fields inside the role's editable sections."""
        allowed = RolePolicy.editable_sections(role)
        kept: dict[str, Any] = {}
        stripped: list[str] = []
        for key, value in payload.items():
            canon = canonical_field(key)
            if canon is not None and FIELD_SECTION[canon] in allowed:
                kept[canon] = value
            else:
                stripped.append(key)
        if stripped:
            logger.info("Stripped %d field(s) not writable by role %s: %s",
                        len(stripped), role, ", ".join(sorted(stripped)))
        return kept

    @staticmethod
    def is_section_complete(values: Mapping[str, Any], section: Section) -> bool:
        return all(_is_filled(values.get(name)) for name in REQUIRED_FIELDS[section])
