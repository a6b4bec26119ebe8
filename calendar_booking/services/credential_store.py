# calendar_booking/services/credential_store.py
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional, Protocol, Sequence

from pydantic import ValidationError as PydanticValidationError

from calendar_booking.core.config import get_settings
from calendar_booking.schemas.credentials import Credentials

logger = logging.getLogger(__name__)


class CredentialSource(Protocol):
    """
    A place credentials can be read from.

    `fetch()` returns None when the source has nothing usable; it must not raise.
    """

    name: str

    def fetch(self) -> Optional[Credentials]: ...


class EnvironmentTokenSource:
    """
    Refresh token supplied by the operator (e.g. a deployment secret).
    """

    name = "environment"

    def __init__(self, refresh_token: str | None) -> None:
        self._refresh_token = refresh_token

    def fetch(self) -> Optional[Credentials]:
        if not self._refresh_token:
            return None
        return Credentials(refresh_token=self._refresh_token)


class TokenFileSource:
    """
    JSON token file on local storage, written after the OAuth callback.
    """

    name = "token-file"

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def fetch(self) -> Optional[Credentials]:
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
            credentials = Credentials.model_validate(payload)
        except (OSError, ValueError, PydanticValidationError) as exc:
            logger.info("No usable token file at %s: %s", self.path, exc)
            return None

        if not credentials.is_usable:
            logger.warning("Token file %s holds no access or refresh token", self.path)
            return None
        return credentials


class CredentialStore:
    """
    Holds the single active credential set for this process.

    Sources are polled in priority order on `load()`; the first one yielding
    credentials wins. The store is shared by every request and written only
    by `load()`, the OAuth callback and access-token refresh, without locking.
    """

    def __init__(
        self,
        sources: Sequence[CredentialSource],
        token_path: str | Path | None = None,
    ) -> None:
        self._sources = list(sources)
        self._token_path = Path(token_path) if token_path else None
        self._credentials: Optional[Credentials] = None

    @property
    def credentials(self) -> Optional[Credentials]:
        return self._credentials

    @property
    def has_credentials(self) -> bool:
        return self._credentials is not None and self._credentials.is_usable

    def install(self, credentials: Credentials) -> None:
        self._credentials = credentials

    def clear(self) -> None:
        self._credentials = None

    def load(self) -> bool:
        """
        Install credentials from the first source that has them.

        Returns whether credentials are installed afterwards. Never raises.
        """
        for source in self._sources:
            credentials = source.fetch()
            if credentials is not None:
                self.install(credentials)
                logger.info("Loaded credentials from %s source", source.name)
                return True

        logger.warning("No credentials found. Authentication via /auth is required.")
        return self.has_credentials

    def ensure_loaded(self) -> bool:
        """
        Lazily reload credentials when none are installed.
        """
        if self.has_credentials:
            return True
        return self.load()

    def save(self, credentials: Credentials) -> None:
        """
        Persist credentials to the token file, best effort.

        Failures (e.g. a read-only filesystem) are logged and swallowed.
        """
        if self._token_path is None:
            return
        try:
            self._token_path.write_text(
                credentials.model_dump_json(exclude_none=True),
                encoding="utf-8",
            )
        except OSError as exc:
            logger.error("Could not save tokens to %s: %s", self._token_path, exc)
            return
        logger.info("Tokens saved to %s", self._token_path)


def build_credential_store(settings=None) -> CredentialStore:
    """
    Construct a store wired to application settings: environment first,
    then the local token file.
    """
    settings = settings or get_settings()
    return CredentialStore(
        sources=[
            EnvironmentTokenSource(settings.GOOGLE_REFRESH_TOKEN),
            TokenFileSource(settings.TOKEN_PATH),
        ],
        token_path=settings.TOKEN_PATH,
    )
