"""
Credentials and persisted session state.

Credentials come from the process environment and are never written to disk.
The session state is Playwright's ``storage_state`` JSON (cookies plus per-origin
localStorage) captured after a verified login and restored into every later
browser context via ``new_context(storage_state=...)``.
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from playwright.async_api import BrowserContext

from sydney_e2e.errors import ConfigurationError

logger = logging.getLogger(__name__)

USER_ENV = "E2E_TESTS_USER"
PASSWORD_ENV = "E2E_TESTS_PASSWORD"


@dataclass(frozen=True)
class Credentials:
    username: str
    password: str = field(repr=False)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Credentials":
        """Read the login pair from ``E2E_TESTS_USER`` / ``E2E_TESTS_PASSWORD``.

        Raises:
            ConfigurationError: if either variable is unset or blank.
        """
        env = os.environ if environ is None else environ
        username = (env.get(USER_ENV) or "").strip()
        password = env.get(PASSWORD_ENV) or ""
        if not username or not password.strip():
            raise ConfigurationError(
                f"Login credentials not found. Please ensure {USER_ENV} and "
                f"{PASSWORD_ENV} environment variables are set."
            )
        return cls(username=username, password=password)


@dataclass
class AuthState:
    """Parsed view of a storage-state artifact."""

    cookies: List[Dict[str, Any]] = field(default_factory=list)
    origins: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.cookies and not any(o.get("localStorage") for o in self.origins)

    def cookie_names(self) -> List[str]:
        return [cookie["name"] for cookie in self.cookies]


async def save_auth_state(context: BrowserContext, path: Path) -> Path:
    """Write the context's cookies and storage to ``path``.

    Returns:
        Path to the saved state file
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    state = await context.storage_state(path=str(path))
    logger.info("Saved auth state (%d cookies) to %s", len(state.get("cookies", [])), path)
    return path


def read_auth_state(path: Path) -> AuthState:
    """Load a saved artifact without touching a browser."""
    with open(path, encoding="utf-8") as f:
        state = json.load(f)
    return AuthState(cookies=state.get("cookies", []), origins=state.get("origins", []))


def auth_state_exists(path: Path) -> bool:
    """True if ``path`` holds a readable, non-empty storage state."""
    path = Path(path)
    if not path.exists():
        return False
    try:
        return not read_auth_state(path).is_empty
    except (OSError, ValueError):
        return False


def clear_auth_state(path: Path) -> None:
    """Delete a previously saved artifact, if any."""
    path = Path(path)
    if path.exists():
        path.unlink()
        logger.info("Cleared auth state: %s", path)
