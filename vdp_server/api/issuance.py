from __future__ import annotations
"""
License key derivation and issuance.

Key format: VDP-<8 upper hex>-<mac suffix>-<0..999>
- the hex part comes from 4 random bytes
- the mac suffix is the hardware id without ':' cut to 6 chars, or GLB
- the trailing number is not cryptographic and keys may collide
"""

import logging
import math
import random
import re
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from .db import LicenseStore
from .errors import InternalError, ValidationError
from .models import GLOBAL_MAC, LicenseRecord

log = logging.getLogger(__name__)

KEY_PREFIX = "VDP"
GLOBAL_SUFFIX = "GLB"
_LEADING_INT = re.compile(r"[+-]?\d+")


def parse_duration(value: Any) -> int:
    """Return the whole number of days or raise ValidationError.

    Accepts ints, floats and numeric strings. Numbers are truncated; strings
    keep only their leading integer ("5.9" -> 5, "1e3" -> 1).
    Missing, zero, boolean and non numeric values are rejected.
    """
    if value is None or isinstance(value, bool):
        raise ValidationError()
    if isinstance(value, str):
        value = value.strip()
        if not value:
            raise ValidationError()
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError() from None
    if number == 0 or math.isnan(number) or math.isinf(number):
        raise ValidationError()
    if isinstance(value, str):
        m = _LEADING_INT.match(value)
        if not m:
            # numeric but without leading digits, e.g. ".5"
            raise ValidationError()
        return int(m.group(0))
    return int(number)


def mac_suffix(mac_address: Optional[str]) -> str:
    if not mac_address:
        return GLOBAL_SUFFIX
    return mac_address.replace(":", "")[:6]


def derive_key(mac_address: Optional[str]) -> str:
    random_hex = secrets.token_hex(4).upper()
    trailing = random.randint(0, 999)
    return f"{KEY_PREFIX}-{random_hex}-{mac_suffix(mac_address)}-{trailing}"


def _iso_utc(dt: datetime) -> str:
    return dt.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def generate_license(
    store: LicenseStore,
    mac_address: Optional[str],
    duration_days: Any,
    now: Optional[datetime] = None,
) -> LicenseRecord:
    """Mint a license, append it to `store` and return it."""
    days = parse_duration(duration_days)
    try:
        issued_at = now or datetime.now(timezone.utc)
        expiration = (issued_at.astimezone(timezone.utc) + timedelta(days=days)).date()
        record = LicenseRecord(
            licenseKey=derive_key(mac_address),
            expirationDate=expiration.isoformat(),
            macAddress=mac_address or GLOBAL_MAC,
            createdAt=_iso_utc(issued_at),
        )
    except (OverflowError, ValueError) as e:
        # e.g. a duration that pushes the date past year 9999
        log.exception("license generation failed")
        raise InternalError() from e
    store.add(record)
    log.info("license issued %s (expires %s)", record.licenseKey, record.expirationDate)
    return record
