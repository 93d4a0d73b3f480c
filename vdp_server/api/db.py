from __future__ import annotations
from typing import Iterator, List

from .models import LicenseRecord


class LicenseStore:
    """Process-scoped list of issued licenses.

    Owned by the application (``APP.state.store``) and handed to the routes
    through ``get_store``. Nothing is persisted: the list starts empty with
    every process and grows without bound.
    """

    def __init__(self) -> None:
        self._records: List[LicenseRecord] = []

    def add(self, record: LicenseRecord) -> LicenseRecord:
        self._records.append(record)
        return record

    def all(self) -> List[LicenseRecord]:
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[LicenseRecord]:
        return iter(list(self._records))
