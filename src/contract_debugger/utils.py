from __future__ import annotations

import re
from datetime import datetime, timezone
from pathlib import PurePath

_WORD_SEPARATORS = re.compile(r"[-_]")
_WORD_START = re.compile(r"\b\w")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_rfc3339(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def display_name(file_name: str) -> str:
    """Turn ``my-token_v2.json`` into ``My Token V2``."""
    stem = PurePath(file_name).stem
    spaced = _WORD_SEPARATORS.sub(" ", stem)
    return _WORD_START.sub(lambda match: match.group(0).upper(), spaced)

