from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Any, Optional

from pydantic import BaseModel

GLOBAL_MAC = "Globale"
SUCCESS_MESSAGE = "Licence générée avec succès"


@dataclass(frozen=True)
class LicenseRecord:
    licenseKey: str
    expirationDate: str
    macAddress: str
    createdAt: str
    success: bool = True
    message: str = SUCCESS_MESSAGE

    def to_dict(self) -> dict:
        return asdict(self)


# ====== Models (I/O) ======
class GenerateLicenseReq(BaseModel):
    macAddress: Optional[str] = None
    # validated by the service so that every bad duration gets the same 400
    durationDays: Any = None


class GenerateLicenseResp(BaseModel):
    success: bool
    licenseKey: str
    expirationDate: str
    macAddress: str
    createdAt: str
    message: str


class ErrorResp(BaseModel):
    success: bool = False
    message: str


class HealthResp(BaseModel):
    status: str
