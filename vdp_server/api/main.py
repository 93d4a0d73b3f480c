from __future__ import annotations
import os
import hmac
import logging
from typing import Optional

from fastapi import FastAPI, Header, Request, Depends
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .db import LicenseStore
from .errors import ApiKeyError, InternalError, IssuanceError, ValidationError
from .issuance import generate_license
from .models import ErrorResp, GenerateLicenseReq, GenerateLicenseResp, HealthResp

log = logging.getLogger(__name__)

# ====== Configuration ======
PORT = int(os.getenv("PORT", "3000"))
# Empty means permissive: the key is only looked at and logged.
API_KEY = os.getenv("LICENSE_API_KEY", "")


def _error(exc: IssuanceError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"success": False, "message": exc.message})


def get_store(request: Request) -> LicenseStore:
    return request.app.state.store


def _extract_key(x_api_key: Optional[str], authorization: Optional[str]) -> Optional[str]:
    if x_api_key:
        return x_api_key
    if authorization:
        parts = authorization.split(" ")
        if len(parts) > 1 and parts[1]:
            return parts[1]
    return None


def check_api_key(
    request: Request,
    x_api_key: str | None = Header(None),
    authorization: str | None = Header(None),
) -> Optional[str]:
    key = _extract_key(x_api_key, authorization)
    log.info("[AUTH] Requête reçue avec clé : %s", "PRESENT" if key else "ABSENTE")
    expected = request.app.state.api_key
    if expected and not (key and hmac.compare_digest(key.encode(), expected.encode())):
        raise ApiKeyError()
    return key


def create_app(api_key: Optional[str] = None, store: Optional[LicenseStore] = None) -> FastAPI:
    app = FastAPI(title="VDP License Issuance API")
    app.state.store = store if store is not None else LicenseStore()
    app.state.api_key = API_KEY if api_key is None else api_key

    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

    @app.exception_handler(IssuanceError)
    async def issuance_error_handler(request: Request, exc: IssuanceError):
        return _error(exc)

    @app.exception_handler(RequestValidationError)
    async def body_error_handler(request: Request, exc: RequestValidationError):
        # malformed JSON or wrong field types: same answer as a missing duration
        return _error(ValidationError())

    # ====== API Endpoints ======
    @app.post(
        "/admin/generate-license",
        response_model=GenerateLicenseResp,
        responses={400: {"model": ErrorResp}, 401: {"model": ErrorResp}, 500: {"model": ErrorResp}},
    )
    async def admin_generate_license(
        req: GenerateLicenseReq,
        _key: Optional[str] = Depends(check_api_key),
        store: LicenseStore = Depends(get_store),
    ):
        try:
            record = generate_license(store, req.macAddress, req.durationDays)
        except IssuanceError:
            raise
        except Exception as e:
            log.exception("unexpected failure while generating a license")
            raise InternalError() from e
        return record.to_dict()

    # ====== Health ======
    @app.get("/health", response_model=HealthResp)
    async def health():
        return {"status": "running"}

    return app


APP = create_app()


def run() -> None:
    import uvicorn

    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    log.info("Backend prêt sur http://localhost:%s", PORT)
    uvicorn.run(APP, host="0.0.0.0", port=PORT)


if __name__ == "__main__":
    run()
