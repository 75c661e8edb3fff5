"""
===============================================================================
Berkas Repository Protocol – persistence contract for case files
-------------------------------------------------------------------------------
Design:
    - Protocol only; the SQLite implementation lives in ./sqlite.
    - Writes are expected to run inside the caller's transaction so that a
      record change and its audit entry commit together.
===============================================================================
"""
from __future__ import annotations
from typing import Dict, List, Optional, Protocol

from berkaslifecycle.models.berkas import Berkas
from berkaslifecycle.models.berkas_status import BerkasStatus


class BerkasRepository(Protocol):
    """
    Methods
    -------
    get_by_id(berkas_id) -> Optional[Berkas]
    insert(berkas) -> None
        Raises ValidationError when no_berkas already exists.
    update(berkas, expected_version=None) -> None
        Writes every column and bumps 'version'. With expected_version the
        write is conditional and raises ConcurrentModificationError on mismatch.
    delete(berkas_id) -> bool
    search(query, status, limit) -> list[Berkas]
        Newest activity first.
    count_by_status() -> dict[BerkasStatus, int]
    """

    def get_by_id(self, berkas_id: str) -> Optional[Berkas]:
        ...

    def insert(self, berkas: Berkas) -> None:
        ...

    def update(self, berkas: Berkas, expected_version: Optional[int] = None) -> None:
        ...

    def delete(self, berkas_id: str) -> bool:
        ...

    def search(
        self,
        query: Optional[str] = None,
        status: Optional[BerkasStatus] = None,
        limit: Optional[int] = None,
    ) -> List[Berkas]:
        ...

    def count_by_status(self) -> Dict[BerkasStatus, int]:
        ...
