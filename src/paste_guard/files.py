"""File upload helpers — only text and source files get scanned."""

from __future__ import annotations
import logging
import re
from pathlib import Path

logger = logging.getLogger(__name__)

_TEXT_SUFFIX = re.compile(
    r"\.(txt|md|csv|json|js|ts|py|java|c|cpp|h|html|css|xml|log)$", re.IGNORECASE
)


def is_text_file(name: str, mime_type: str = "") -> bool:
    """Guess whether an uploaded file is text we can scan."""
    mime_type = (mime_type or "").lower()
    return (
        mime_type.startswith("text/")
        or mime_type == "application/json"
        or "javascript" in mime_type
        or bool(_TEXT_SUFFIX.search(name or ""))
    )


def read_text_file(path: str | Path, mime_type: str = "") -> str:
    """Read a file's text, or "" if it is binary or unreadable (skip it)."""
    path = Path(path)
    if not is_text_file(path.name, mime_type):
        logger.debug("skipping non-text file %s", path.name)
        return ""
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        logger.warning("cannot read %s: %s", path, e)
        return ""
