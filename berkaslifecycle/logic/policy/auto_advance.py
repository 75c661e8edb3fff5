"""
Auto-advance resolver.

The status a file "should" be at follows from which sections are filled in.
It only ever moves a file forward; files parked at a QC gate stay there.
"""
from __future__ import annotations
from typing import Any, Mapping

from berkaslifecycle.logic.policy.section_classifier import SectionClassifier
from berkaslifecycle.models.berkas_status import BerkasStatus
from berkaslifecycle.models.section import SECTION_ORDER, Section

# Section still to be filled -> stage the file waits in
_SECTION_STAGE: dict[Section, BerkasStatus] = {
    Section.DATA_BERKAS: BerkasStatus.DATA_BERKAS,
    Section.DATA_UKUR: BerkasStatus.DATA_UKUR,
    Section.DATA_PEMETAAN: BerkasStatus.PEMETAAN,
}


def next_status(values: Mapping[str, Any]) -> BerkasStatus:
    """First incomplete section's stage, or KKS when every section is complete."""
    for section in SECTION_ORDER:
        if not SectionClassifier.is_section_complete(values, section):
            return _SECTION_STAGE[section]
    return BerkasStatus.KKS


def resolve(current: BerkasStatus, values: Mapping[str, Any]) -> BerkasStatus:
    """max(current, next_status(values)) in progression order."""
    target = next_status(values)
    return target if target.rank > current.rank else current
