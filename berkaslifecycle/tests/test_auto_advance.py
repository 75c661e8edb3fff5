from __future__ import annotations

import itertools

import pytest

from berkaslifecycle.logic.policy.auto_advance import next_status, resolve
from berkaslifecycle.models.berkas_status import BerkasStatus

BERKAS = {"no_berkas": "B-1", "nama_pemohon": "Ani", "jenis_permohonan": "Ukur PB", "status_tanah": "Milik"}
UKUR = {"koordinator_ukur": "K", "petugas_ukur": "P"}
PEMETAAN = {"petugas_pemetaan": "M"}


def test_next_status_follows_first_incomplete_section():
    assert next_status({}) is BerkasStatus.DATA_BERKAS
    assert next_status(BERKAS) is BerkasStatus.DATA_UKUR
    assert next_status({**BERKAS, **UKUR}) is BerkasStatus.PEMETAAN
    assert next_status({**BERKAS, **UKUR, **PEMETAAN}) is BerkasStatus.KKS


def test_later_sections_do_not_count_while_earlier_is_incomplete():
    assert next_status({**UKUR, **PEMETAAN}) is BerkasStatus.DATA_BERKAS


def test_next_status_is_deterministic():
    values = {**BERKAS, **UKUR}
    assert {next_status(values) for _ in range(5)} == {BerkasStatus.PEMETAAN}


def test_adding_fields_never_moves_status_backward():
    fields = {**BERKAS, **UKUR, **PEMETAAN}
    names = list(fields)
    for size in range(len(names)):
        for subset in itertools.combinations(names, size):
            base = {n: fields[n] for n in subset}
            before = next_status(base)
            for extra in set(names) - set(subset):
                after = next_status({**base, extra: fields[extra]})
                assert after.rank >= before.rank


@pytest.mark.parametrize("current", [BerkasStatus.KKS, BerkasStatus.KASI])
def test_resolve_never_regresses_parked_files(current):
    assert resolve(current, BERKAS) is current
    assert resolve(current, {}) is current


def test_resolve_moves_forward():
    assert resolve(BerkasStatus.DATA_BERKAS, BERKAS) is BerkasStatus.DATA_UKUR
    assert resolve(BerkasStatus.DATA_UKUR, {**BERKAS, **UKUR, **PEMETAAN}) is BerkasStatus.KKS
