"""
Helper utilities for docwatch.

Common path and timestamp functions used across the pipeline.
"""

import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from docwatch.errors import MissingExtension, MissingIdentity

# Wire format for stored timestamps, always UTC with millisecond precision
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S"

_RFC3339 = re.compile(
    r"^(\d{4}-\d{2}-\d{2})[Tt ](\d{2}:\d{2}:\d{2})(?:\.(\d+))?([Zz]|[+-]\d{2}:\d{2})$"
)


def now_utc() -> datetime:
    """Get current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """
    Encode a datetime as ``YYYY-MM-DDTHH:MM:SS.sssZ``.

    Naive datetimes are assumed to already be UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return f"{value.strftime(TIMESTAMP_FORMAT)}.{value.microsecond // 1000:03d}Z"


def parse_iso_timestamp(ts_str: str) -> datetime:
    """
    Parse an RFC3339 timestamp string into an aware UTC datetime.

    Accepts ``Z`` or numeric offsets and any fractional-second precision
    (digits past microseconds are truncated).

    Raises:
        ValueError: If the string is not a valid RFC3339 timestamp
    """
    match = _RFC3339.match(ts_str.strip())
    if not match:
        raise ValueError(f"Not an RFC3339 timestamp: {ts_str!r}")

    date_part, time_part, fraction, offset = match.groups()
    fraction = (fraction or "0")[:6].ljust(6, "0")
    if offset in ("Z", "z"):
        offset = "+00:00"

    parsed = datetime.fromisoformat(f"{date_part}T{time_part}.{fraction}{offset}")
    return parsed.astimezone(timezone.utc)


def _is_valid_text(name: str) -> bool:
    # Undecodable bytes surface as lone surrogates after os.fsdecode
    try:
        name.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def derive_identity(path: Path) -> str:
    """
    Derive the natural lookup key for a path: its file name without extension.

    Args:
        path: Changed file path

    Returns:
        File stem, e.g. ``cat`` for ``/data/images/cat.png``

    Raises:
        MissingIdentity: If the path has no file name or it is not valid text
    """
    if not path.name:
        raise MissingIdentity("Path does not have a file name component", path)
    if not _is_valid_text(path.name):
        raise MissingIdentity("File name is not valid text", path)
    return path.stem


def get_file_extension(path: Path) -> str:
    """
    Get file extension without dot.

    Raises:
        MissingExtension: If the path has no extension
    """
    extension = path.suffix.lstrip('.')
    if not extension:
        raise MissingExtension("Failed to extract file extension", path)
    if not _is_valid_text(extension):
        raise MissingExtension("File extension is not valid text", path)
    return extension


def safe_path(path: str, base: Optional[Path] = None) -> Path:
    """
    Convert string to an absolute Path, handling edge cases.

    Args:
        path: Path string
        base: Directory that relative paths are resolved against

    Returns:
        Path object
    """
    resolved = Path(path).expanduser()
    if not resolved.is_absolute() and base is not None:
        resolved = base / resolved
    return resolved.resolve()
