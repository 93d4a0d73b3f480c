from __future__ import annotations
"""
Client for the issuance API.
- generate: POST /admin/generate-license -> LicenseRecord
- health:   GET /health

The API base comes from the 'api_base' setting, then VDP_API_BASE, then localhost.
The stored API key stays local unless the operator turns on the
'send_api_key' setting (for servers started with LICENSE_API_KEY).
"""

import logging
import os
from typing import Optional

import requests

from vdp_admin.data.database import SettingsRepository, get_setting
from vdp_admin.history import LicenseRecord

log = logging.getLogger(__name__)

DEFAULT_API_BASE = os.getenv("VDP_API_BASE", "http://localhost:3000")
TIMEOUT = 10  # seconds
GENERIC_ERROR = "Erreur serveur."
SEND_API_KEY = "send_api_key"


class LicenseError(Exception):
    pass


class IssuanceClient:
    def __init__(self, base_url: Optional[str] = None, api_key: Optional[str] = None) -> None:
        self.base_url = (base_url or get_setting("api_base") or DEFAULT_API_BASE).rstrip("/")
        self.api_key = api_key

    @classmethod
    def from_settings(cls, settings: SettingsRepository, api_key: Optional[str] = None) -> "IssuanceClient":
        """Build a client from the stored settings. `api_key` is attached only when
        the 'send_api_key' setting is on."""
        send_key = settings.get(SEND_API_KEY) == "1"
        return cls(
            base_url=settings.get("api_base") or DEFAULT_API_BASE,
            api_key=api_key if send_key else None,
        )

    def _headers(self) -> dict:
        return {"x-api-key": self.api_key} if self.api_key else {}

    # ===== Public API =====
    def generate(self, duration_days: int, mac_address: Optional[str] = None) -> LicenseRecord:
        """Ask the server for a new license. Raises LicenseError on any failure."""
        url = f"{self.base_url}/admin/generate-license"
        payload = {"durationDays": duration_days}
        mac = (mac_address or "").strip()
        if mac:
            payload["macAddress"] = mac
        try:
            r = requests.post(url, json=payload, headers=self._headers(), timeout=TIMEOUT)
        except requests.RequestException as e:
            log.warning("issuance server unreachable: %s", e)
            raise LicenseError(f"Impossible de joindre le serveur : {e}") from e
        try:
            data = r.json() or {}
        except ValueError:
            data = {}
        if r.status_code != 200 or not data.get("success"):
            raise LicenseError(data.get("message") or GENERIC_ERROR)
        try:
            return LicenseRecord.from_response(data)
        except KeyError as e:
            raise LicenseError("Réponse inattendue du serveur.") from e

    def health(self) -> bool:
        try:
            r = requests.get(f"{self.base_url}/health", timeout=TIMEOUT)
        except requests.RequestException:
            return False
        if r.status_code != 200:
            return False
        try:
            return (r.json() or {}).get("status") == "running"
        except ValueError:
            return False
