"""Detection of PHP errors and WordPress failure screens in rendered pages."""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import List, Pattern

_PATTERNS = [
    r"Fatal error:",
    r"Warning:",
    r"Notice:",
    r"Parse error:",
    r"Deprecated:",
    r"Strict Standards:",
    r"<b>Fatal error</b>",
    r"<b>Warning</b>",
    r"<b>Notice</b>",
    r"<b>Parse error</b>",
    r"Call to undefined function",
    r"Call to undefined method",
    r"Undefined variable",
    r"Undefined index",
    r"Undefined offset",
    r"Cannot redeclare",
    r"Class .* not found",
    r"Function .* not found",
    r"Maximum execution time exceeded",
    r"Memory limit exceeded",
    r"Stack trace:",
    r"PHP Stack trace:",
]

PHP_ERROR_PATTERNS: List[Pattern[str]] = [re.compile(p, re.IGNORECASE) for p in _PATTERNS]

FRONTEND_ERROR_INDICATORS = [
    "There has been a critical error on this website",
    "The website is temporarily unable to service your request",
    "Internal Server Error",
    "Service Unavailable",
    "Database connection error",
    "WordPress database error",
]

ADMIN_ERROR_INDICATORS = FRONTEND_ERROR_INDICATORS + [
    "Sorry, you are not allowed to access this page",
    "Cheatin&#8217; uh?",
    "Are you sure you want to do this?",
]


@dataclass(frozen=True)
class PhpErrorMatch:
    pattern: str
    excerpt: str


def find_php_errors(content: str, context: int = 60) -> List[PhpErrorMatch]:
    """Return one match per pattern found in ``content`` (HTML or text)."""
    matches: List[PhpErrorMatch] = []
    for pattern in PHP_ERROR_PATTERNS:
        found = pattern.search(content)
        if found:
            start = max(found.start() - context, 0)
            excerpt = content[start:found.end() + context]
            matches.append(PhpErrorMatch(pattern=pattern.pattern, excerpt=excerpt))
    return matches


def assert_no_php_errors(content: str, where: str) -> None:
    errors = find_php_errors(content)
    if errors:
        first = errors[0]
        raise AssertionError(
            f"PHP error detected in {where}: Pattern matched - {first.pattern}\n{first.excerpt}"
        )
