"""Session token storage."""

import json
import logging
from pathlib import Path
from typing import Optional, Protocol

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"


class TokenStore(Protocol):
    """Where the login flow leaves the bearer token."""

    def get_token(self) -> Optional[str]:
        ...

    def set_token(self, token: str) -> None:
        ...

    def clear(self) -> None:
        ...


class MemoryTokenStore:
    """Token held for the lifetime of the process."""

    def __init__(self, token: Optional[str] = None):
        self._token = token

    def get_token(self) -> Optional[str]:
        return self._token or None

    def set_token(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None


class FileTokenStore:
    """Token persisted as {"token": ...} in a small JSON file."""

    def __init__(self, path: Path):
        self._path = path

    def get_token(self) -> Optional[str]:
        try:
            with open(self._path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return None
        except (OSError, ValueError):
            logger.warning("Unreadable session file %s, treating as logged out", self._path)
            return None
        token = data.get(TOKEN_KEY) if isinstance(data, dict) else None
        return token or None

    def set_token(self, token: str) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with open(self._path, "w", encoding="utf-8") as f:
            json.dump({TOKEN_KEY: token}, f)

    def clear(self) -> None:
        self._path.unlink(missing_ok=True)
