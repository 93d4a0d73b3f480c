from __future__ import annotations
import csv
import io
import logging
from dataclasses import dataclass, replace
from datetime import date, datetime
from pathlib import Path
from typing import List, Optional

log = logging.getLogger(__name__)

GLOBAL_MAC = 'Globale'
CSV_HEADERS = ["Date", "Cle", "MAC", "Expiration"]
TIMESTAMP_FORMAT = '%d/%m/%Y %H:%M:%S'


@dataclass(frozen=True, eq=False)
class LicenseRecord:
    """One issued license as seen by the client.

    `timestamp` is set when the record enters the local history and is
    distinct from the server's `createdAt`. Equality is identity: two
    issuances with the same key are still two records.
    """
    licenseKey: str
    expirationDate: str
    macAddress: str = GLOBAL_MAC
    createdAt: Optional[str] = None
    success: bool = True
    message: Optional[str] = None
    timestamp: Optional[str] = None

    @classmethod
    def from_response(cls, data: dict) -> "LicenseRecord":
        return cls(
            licenseKey=data["licenseKey"],
            expirationDate=data["expirationDate"],
            macAddress=data.get("macAddress") or GLOBAL_MAC,
            createdAt=data.get("createdAt"),
            success=bool(data.get("success", True)),
            message=data.get("message"),
        )

    @property
    def is_hardware_bound(self) -> bool:
        return bool(self.macAddress) and self.macAddress != GLOBAL_MAC


class History:
    """Session-scoped list of issued licenses, newest first.

    Only append (`record_success`) and removal by identity are supported.
    """

    def __init__(self) -> None:
        self._items: List[LicenseRecord] = []

    def __len__(self) -> int:
        return len(self._items)

    @property
    def items(self) -> List[LicenseRecord]:
        return list(self._items)

    def record_success(self, record: LicenseRecord, now: Optional[datetime] = None) -> LicenseRecord:
        enriched = replace(record, timestamp=(now or datetime.now()).strftime(TIMESTAMP_FORMAT))
        self._items.insert(0, enriched)
        return enriched

    def search(self, query: str | None) -> List[LicenseRecord]:
        if not query:
            return list(self._items)
        q = query.lower()
        return [
            r for r in self._items
            if q in r.licenseKey.lower() or (r.macAddress and q in r.macAddress.lower())
        ]

    def stats(self) -> dict:
        hardware = sum(1 for r in self._items if r.is_hardware_bound)
        return {
            "total": len(self._items),
            "hardwareBound": hardware,
            "global": len(self._items) - hardware,
        }

    def delete(self, record: LicenseRecord) -> bool:
        before = len(self._items)
        self._items = [r for r in self._items if r is not record]
        return len(self._items) != before

    def delete_filtered(self, query: str | None, index: int) -> Optional[LicenseRecord]:
        """Delete the record shown at `index` of the filtered view for `query`."""
        view = self.search(query)
        if not 0 <= index < len(view):
            return None
        record = view[index]
        self.delete(record)
        return record

    # ========= CSV export =========
    def export_csv(self) -> Optional[str]:
        if not self._items:
            return None
        buf = io.StringIO()
        buf.write(";".join(CSV_HEADERS) + "\n")
        writer = csv.writer(buf, delimiter=';', quoting=csv.QUOTE_ALL, lineterminator='\n')
        for r in self._items:
            writer.writerow([r.timestamp or '', r.licenseKey, r.macAddress or '', r.expirationDate])
        return buf.getvalue().rstrip("\n")

    def write_csv(self, directory: str | Path, prefix: str = 'VDP', today: Optional[date] = None) -> Optional[Path]:
        content = self.export_csv()
        if content is None:
            return None
        day = (today or date.today()).isoformat()
        path = Path(directory) / f'{prefix}_Licenses_{day}.csv'
        with open(path, 'w', newline='', encoding='utf-8') as f:
            f.write(content)
        log.info("exported %d licenses to %s", len(self._items), path)
        return path
