"""Security helpers for logging and configuration.

Provides secret redaction for log output and a check that local ``.env``
files are not about to be committed.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

logger = logging.getLogger(__name__)

__all__ = [
    "REDACTED",
    "check_env_file_in_gitignore",
    "sanitize_for_logging",
    "warn_if_env_not_ignored",
]

REDACTED = "[REDACTED]"

# (pattern, replacement) pairs applied in order
_SECRET_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (
        re.compile(
            r"(?:api[_-]?key|password|secret|token)['\"]?\s*[:=]"
            r"\s*['\"]?[^\s'\"]+['\"]?",
            re.IGNORECASE,
        ),
        REDACTED,
    ),
    (re.compile(r"Bearer\s+[A-Za-z0-9\-_.]+"), f"Bearer {REDACTED}"),
    (re.compile(r"\bsk-[A-Za-z0-9\-_]+"), REDACTED),
)


def sanitize_for_logging(text: str) -> str:
    """Remove likely secrets from text before it is logged.

    Example:
        >>> sanitize_for_logging("curl -H 'Authorization: Bearer abc.def'")
        "curl -H 'Authorization: Bearer [REDACTED]'"
        >>> sanitize_for_logging("export API_KEY=hunter2")
        'export [REDACTED]'
    """
    for pattern, replacement in _SECRET_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


def check_env_file_in_gitignore(directory: Path) -> bool:
    """Return True if ``directory/.gitignore`` ignores ``.env`` files."""
    gitignore = directory / ".gitignore"
    if not gitignore.exists():
        return False

    for raw_line in gitignore.read_text(encoding="utf-8").splitlines():
        line = raw_line.split("#", 1)[0].strip()
        if not line:
            continue
        if line.lstrip("/") in {".env", ".env*", ".env.*", "*.env"}:
            return True
    return False


def warn_if_env_not_ignored(directory: Path | None = None) -> bool:
    """Log a warning when a .env file exists but is not git-ignored.

    Returns:
        True if a warning was emitted.
    """
    directory = directory or Path.cwd()
    if not (directory / ".env").exists():
        return False
    if not (directory / ".git").exists():
        return False
    if check_env_file_in_gitignore(directory):
        return False

    logger.warning(
        f".env file in {directory} is not listed in .gitignore; "
        "secrets may be committed"
    )
    return True
