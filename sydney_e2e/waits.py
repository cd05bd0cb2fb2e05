"""Bounded polling for element presence.

``wait_for_visible`` answers "did this show up in time?" with a value instead
of an exception, so callers can branch on it.
"""
from __future__ import annotations

from dataclasses import dataclass

import anyio
from playwright.async_api import Page


@dataclass(frozen=True)
class Presence:
    """Outcome of a visibility wait."""

    found: bool
    selector: str
    elapsed: float

    def __bool__(self) -> bool:
        return self.found


async def wait_for_visible(
    page: Page,
    selector: str,
    timeout: float = 10.0,
    interval: float = 0.25,
) -> Presence:
    """Poll until the first match of ``selector`` is visible or ``timeout`` seconds pass.

    The check runs at least once, so ``timeout=0`` is an immediate probe. The
    last sleep is cut short at the deadline.
    """
    locator = page.locator(selector).first
    started = anyio.current_time()
    deadline = started + timeout

    while True:
        if await locator.is_visible():
            return Presence(True, selector, anyio.current_time() - started)
        if anyio.current_time() >= deadline:
            return Presence(False, selector, anyio.current_time() - started)
        await anyio.sleep(min(interval, max(deadline - anyio.current_time(), 0)))
