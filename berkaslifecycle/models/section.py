"""
===============================================================================
Sections – field catalogue of a case file
-------------------------------------------------------------------------------
Every editable field belongs to exactly one section. Each department owns
one section; the role policy decides who may write which.

Field names are snake_case. The camelCase names used by the web client are
accepted as aliases (including its historical misspelling
'noStpPersiapuanUkur' / 'tanggalStpPersiapuan').
===============================================================================
"""
from __future__ import annotations
from enum import Enum


class Section(str, Enum):
    DATA_BERKAS = "DATA_BERKAS"
    DATA_UKUR = "DATA_UKUR"
    DATA_PEMETAAN = "DATA_PEMETAAN"


# Fill order used by the auto-advance resolver
SECTION_ORDER: tuple[Section, ...] = (Section.DATA_BERKAS, Section.DATA_UKUR, Section.DATA_PEMETAAN)

SECTION_FIELDS: dict[Section, tuple[str, ...]] = {
    Section.DATA_BERKAS: (
        "no_berkas",
        "di_302",
        "tanggal_302",
        "nama_pemohon",
        "jenis_permohonan",
        "status_tanah",
        "keadaan_tanah",
        "kecamatan",
        "desa",
        "luas",
        "luas_302",
        "luas_su",
        "no_305",
        "nib",
        "notaris",
        "biaya_ukur",
        "tanggal_berkas",
        "keterangan",
    ),
    Section.DATA_UKUR: (
        "koordinator_ukur",
        "nip",
        "surat_tugas_an",
        "petugas_ukur",
        "no_gu",
        "no_stp_persiapan_ukur",
        "tanggal_stp_persiapan",
        "no_stp",
        "tanggal_stp",
        "posisi_berkas_ukur",
    ),
    Section.DATA_PEMETAAN: (
        "petugas_pemetaan",
        "posisi_berkas_metaan",
        "keterangan_pemetaan",
    ),
}

# Fields that must be non-empty for a section to count as complete
REQUIRED_FIELDS: dict[Section, tuple[str, ...]] = {
    Section.DATA_BERKAS: ("no_berkas", "nama_pemohon", "jenis_permohonan", "status_tanah"),
    Section.DATA_UKUR: ("koordinator_ukur", "petugas_ukur"),
    Section.DATA_PEMETAAN: ("petugas_pemetaan",),
}

# Required on create (status_tanah may follow later)
CREATE_REQUIRED: tuple[str, ...] = ("no_berkas", "nama_pemohon", "jenis_permohonan")

FIELD_SECTION: dict[str, Section] = {
    name: section for section, names in SECTION_FIELDS.items() for name in names
}

ALL_FIELDS: tuple[str, ...] = tuple(FIELD_SECTION)

DATE_FIELDS: frozenset[str] = frozenset(n for n in ALL_FIELDS if n.startswith("tanggal"))
NUMBER_FIELDS: frozenset[str] = frozenset({"biaya_ukur"})


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(p[:1].upper() + p[1:] for p in rest)


FIELD_ALIASES: dict[str, str] = {_camel(n): n for n in ALL_FIELDS if _camel(n) != n}
FIELD_ALIASES.update(
    {
        "luasSU": "luas_su",
        "noStpPersiapuanUkur": "no_stp_persiapan_ukur",
        "tanggalStpPersiapuan": "tanggal_stp_persiapan",
    }
)


def canonical_field(name: str) -> str | None:
    """snake_case field name for *name*, or None if it is not a section field."""
    if name in FIELD_SECTION:
        return name
    return FIELD_ALIASES.get(name)
