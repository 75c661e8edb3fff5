from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Mapping, Optional

from .berkas_status import BerkasStatus
from .qc import QcRecord
from .section import ALL_FIELDS


@dataclass(slots=True)
class Berkas:
    """
    Aggregate root for one land-survey case file.

    Notes:
    - section fields are grouped as DATA_BERKAS / DATA_UKUR / DATA_PEMETAAN
      (see models.section for the catalogue)
    - 'qc_kks' / 'qc_kasi' hold the latest decision at each QC gate
    - 'version' increments on every write and guards conditional updates
    """

    id: str
    status: BerkasStatus = BerkasStatus.DATA_BERKAS

    # DATA_BERKAS
    no_berkas: Optional[str] = None
    di_302: Optional[str] = None
    tanggal_302: Optional[date] = None
    nama_pemohon: Optional[str] = None
    jenis_permohonan: Optional[str] = None
    status_tanah: Optional[str] = None
    keadaan_tanah: Optional[str] = None
    kecamatan: Optional[str] = None
    desa: Optional[str] = None
    luas: Optional[str] = None
    luas_302: Optional[str] = None
    luas_su: Optional[str] = None
    no_305: Optional[str] = None
    nib: Optional[str] = None
    notaris: Optional[str] = None
    biaya_ukur: Optional[float] = None
    tanggal_berkas: Optional[date] = None
    keterangan: Optional[str] = None

    # DATA_UKUR
    koordinator_ukur: Optional[str] = None
    nip: Optional[str] = None
    surat_tugas_an: Optional[str] = None
    petugas_ukur: Optional[str] = None
    no_gu: Optional[str] = None
    no_stp_persiapan_ukur: Optional[str] = None
    tanggal_stp_persiapan: Optional[date] = None
    no_stp: Optional[str] = None
    tanggal_stp: Optional[date] = None
    posisi_berkas_ukur: Optional[str] = None

    # DATA_PEMETAAN
    petugas_pemetaan: Optional[str] = None
    posisi_berkas_metaan: Optional[str] = None
    keterangan_pemetaan: Optional[str] = None

    # QC gates
    qc_kks: QcRecord = field(default_factory=QcRecord)
    qc_kasi: QcRecord = field(default_factory=QcRecord)

    # Bookkeeping
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    version: int = 0

    # ------------------------------------------------------------------ #
    def field_values(self) -> Dict[str, Any]:
        """All section fields as a dict (snake_case keys)."""
        return {name: getattr(self, name) for name in ALL_FIELDS}

    def apply(self, values: Mapping[str, Any]) -> None:
        for name, value in values.items():
            if name in ALL_FIELDS:
                setattr(self, name, value)

    def is_terminal(self) -> bool:
        return self.status.is_terminal()
