from __future__ import annotations
import logging
import re
from dataclasses import dataclass
from typing import Optional

from vdp_admin.data.database import SettingsRepository

log = logging.getLogger(__name__)

# Persisted keys
KEY_USERNAME = 'admin_username'
KEY_PASSWORD = 'admin_password'
KEY_API_KEY = 'api_key'

# Known-weak defaults, expected to be changed from the profile page
DEFAULT_USERNAME = 'admin'
DEFAULT_PASSWORD = 'admin123'

ADMIN_ROLE = 'Super Administrator'
MIN_USERNAME_LENGTH = 3
MIN_API_KEY_LENGTH = 32
PASSWORD_SYMBOLS = '!@#$%^&*(),.?":{}|<>'

# Min 8 characters with at least one letter, one digit and one symbol
_PASSWORD_RE = re.compile(r'(?=.*[a-zA-Z])(?=.*\d)(?=.*[' + re.escape(PASSWORD_SYMBOLS) + r']).{8,}', re.ASCII)

MSG_BAD_CREDENTIALS = "Identifiants invalides."
MSG_USERNAME_TOO_SHORT = "L'utilisateur doit faire au moins 3 caractères."
MSG_WEAK_PASSWORD = "Critères : Min. 8 caractères, incluant lettres, chiffres et symboles."
MSG_API_KEY_TOO_SHORT = "La clé API doit contenir au moins 32 caractères."


class ValidationError(ValueError):
    pass


class AuthError(Exception):
    pass


@dataclass
class Session:
    username: str
    role: str = ADMIN_ROLE


def is_strong_password(candidate: str) -> bool:
    return bool(_PASSWORD_RE.fullmatch(candidate or ''))


class CredentialStore:
    """Operator identity and API key, persisted through the settings table.

    Values are read from storage on every access, so the store always sees
    what the last mutation wrote. Missing keys fall back to the defaults.
    """

    def __init__(self, settings: SettingsRepository | None = None) -> None:
        self.settings = settings or SettingsRepository()

    @property
    def username(self) -> str:
        return self.settings.get(KEY_USERNAME) or DEFAULT_USERNAME

    @property
    def password(self) -> str:
        return self.settings.get(KEY_PASSWORD) or DEFAULT_PASSWORD

    @property
    def api_key(self) -> str:
        return self.settings.get(KEY_API_KEY) or ''

    def matches(self, username: str, password: str) -> bool:
        return username == self.username and password == self.password

    def set_username(self, username: str) -> None:
        self.settings.set(KEY_USERNAME, username)

    def set_password(self, password: str) -> None:
        self.settings.set(KEY_PASSWORD, password)

    def set_api_key(self, api_key: str) -> None:
        self.settings.set(KEY_API_KEY, api_key)


class AuthService:
    """Login gate and identity mutations for the single operator."""

    def __init__(self, store: CredentialStore | None = None) -> None:
        self.store = store or CredentialStore()
        self.session: Optional[Session] = None
        self._logout_pending = False

    @property
    def is_authenticated(self) -> bool:
        return self.session is not None

    def login(self, username: str, password: str) -> Session:
        if not self.store.matches(username, password):
            log.info("login refused")
            # same message whichever field was wrong
            raise AuthError(MSG_BAD_CREDENTIALS)
        self.session = Session(username=self.store.username)
        self._logout_pending = False
        log.info("operator %s logged in", self.session.username)
        return self.session

    # === Logout (request then confirm) ===
    @property
    def logout_pending(self) -> bool:
        return self._logout_pending

    def request_logout(self) -> None:
        if self.session is not None:
            self._logout_pending = True

    def cancel_logout(self) -> None:
        self._logout_pending = False

    def confirm_logout(self) -> bool:
        if not self._logout_pending:
            return False
        self.session = None
        self._logout_pending = False
        log.info("operator logged out")
        return True

    # === Identity management ===
    def update_username(self, candidate: str) -> str:
        trimmed = (candidate or '').strip()
        if len(trimmed) < MIN_USERNAME_LENGTH:
            raise ValidationError(MSG_USERNAME_TOO_SHORT)
        self.store.set_username(trimmed)
        if self.session is not None:
            self.session.username = trimmed
        return trimmed

    def update_password(self, candidate: str) -> None:
        if not is_strong_password(candidate):
            raise ValidationError(MSG_WEAK_PASSWORD)
        self.store.set_password(candidate)

    def save_api_key(self, candidate: str) -> None:
        # kept for later use, the server is not asked to validate it
        if len(candidate or '') < MIN_API_KEY_LENGTH:
            raise ValidationError(MSG_API_KEY_TOO_SHORT)
        self.store.set_api_key(candidate)
