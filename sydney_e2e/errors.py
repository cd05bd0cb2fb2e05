"""Exceptions raised by the session bootstrap and admin helpers.

Playwright's own ``TimeoutError`` is not wrapped: an unsatisfied wait inside a
helper propagates as-is and fails the enclosing test.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Optional

AuthFailureReason = Literal["server_message", "still_on_login_page", "unverified"]


class E2ESetupError(Exception):
    """Base class for suite setup failures."""


class ConfigurationError(E2ESetupError):
    """Required run configuration (credentials) is missing. Fatal for the run."""


@dataclass(eq=False)
class NavigationError(E2ESetupError):
    """An expected page element never appeared within its timeout."""

    selector: str
    url: str
    message: str
    screenshot: Optional[Path] = None
    page_excerpt: str = ""

    def __str__(self) -> str:
        text = f"{self.message} (selector={self.selector!r}, url={self.url})"
        if self.screenshot:
            text += f"\nScreenshot: {self.screenshot}"
        if self.page_excerpt:
            text += f"\nPage text: {self.page_excerpt}"
        return text


@dataclass(eq=False)
class AuthenticationError(E2ESetupError):
    """The login form was submitted but the logged-in state could not be verified."""

    reason: AuthFailureReason
    message: str
    url: str
    screenshot: Optional[Path] = None

    def __str__(self) -> str:
        return self.message


@dataclass(eq=False)
class CustomizerError(E2ESetupError):
    """The customizer settings endpoint rejected an update."""

    setting_key: str
    status_code: int
    body: str = ""

    def __str__(self) -> str:
        return (
            f"Failed to set customizer setting {self.setting_key!r}: "
            f"HTTP {self.status_code} {self.body[:200]}"
        )
