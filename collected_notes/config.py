from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


PRODUCTION_URL = "https://api.collectednotes.com"
DEV_URL = "http://localhost:3000"
TOKEN_FILENAME = ".collected-notes"


class ConfigurationError(RuntimeError):
    """Raised when required configuration is missing or malformed."""


class TokenNotFoundError(ConfigurationError):
    """Raised when no usable API token can be read from the token file."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"API token not found. Please ensure the token is stored in {path}")
        self.path = path


@dataclass
class ClientSettings:
    '''Everything needed to build an API client for one invocation'''

    base_url: str
    token: str
    debug_log: bool = False


def token_path() -> Path:
    return Path.home() / TOKEN_FILENAME


def resolve_base_url(dev: bool) -> str:
    return DEV_URL if dev else PRODUCTION_URL


def load_token(path: Optional[Path] = None) -> str:
    """Read the bearer token, trimmed of surrounding whitespace.

    Missing, unreadable and blank files are all reported the same way.
    """

    path = path or token_path()
    try:
        token = path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as exc:
        raise TokenNotFoundError(path) from exc

    if not token:
        raise TokenNotFoundError(path)
    return token


def load_settings(dev: bool, *, debug_log: bool = False, path: Optional[Path] = None) -> ClientSettings:
    """Resolve the base URL and token for the current invocation."""

    return ClientSettings(
        base_url=resolve_base_url(dev)
        ,token=load_token(path)
        ,debug_log=debug_log
    )
