"""Display-name convention helpers: <Entity>_<Category>_<NNN>.<EXT>."""
from __future__ import annotations

import re
from typing import Iterable, Optional, Tuple

UNKNOWN_ENTITY = "Unknown"
SEQUENCE_WIDTH = 3

_UNSAFE_CHARS = re.compile(r'[/\\:*?"<>|\x00-\x1f\x7f]')
_WHITESPACE = re.compile(r"\s+")
_SEQUENCE_TAIL = re.compile(r"^(?P<stem>.+)_(?P<seq>\d+)$")


def file_extension(file_name: str, default: str = "PDF") -> str:
    """Uppercase extension without the dot; ``default`` when there is none."""
    base = (file_name or "").replace("\\", "/").rsplit("/", 1)[-1]
    stem, dot, ext = base.rpartition(".")
    if not dot or not stem or not ext.strip():
        return default.upper()
    return ext.strip().upper()


def file_stem(file_name: str) -> str:
    base = (file_name or "").replace("\\", "/").rsplit("/", 1)[-1]
    stem, dot, ext = base.rpartition(".")
    if not dot or not stem:
        return base
    return stem


def sanitize_entity(value: Optional[str]) -> str:
    cleaned = _UNSAFE_CHARS.sub("", value or "")
    cleaned = _WHITESPACE.sub(" ", cleaned).strip().strip(".")
    return cleaned or UNKNOWN_ENTITY


def split_display_name(display_name: str) -> Tuple[str, Optional[int], str]:
    """Split into (stem, sequence or None, EXT)."""
    base, dot, ext = (display_name or "").rpartition(".")
    if not dot or not base:
        base, ext = display_name or "", ""
    match = _SEQUENCE_TAIL.match(base)
    if match:
        return match.group("stem"), int(match.group("seq")), ext.upper()
    return base, None, ext.upper()


def format_sequence(number: int) -> str:
    return str(number).zfill(SEQUENCE_WIDTH)


def compose(prefix: str, number: int, extension: str) -> str:
    return f"{prefix}_{format_sequence(number)}.{extension}"


def next_sequence(prefix: str, taken_names: Iterable[str]) -> int:
    """max(NNN) + 1 over names in the ``<prefix>_NNN.<ext>`` series, or 1.

    Prefix comparison ignores case; any extension counts toward the series.
    """
    wanted = prefix.casefold()
    highest = 0
    for name in taken_names:
        stem, seq, _ = split_display_name(name)
        if seq is not None and stem.casefold() == wanted:
            highest = max(highest, seq)
    return highest + 1


def unique_plain_name(file_name: str, taken_names: Iterable[str], default_extension: str = "PDF") -> str:
    """Keep an uploaded name, adding ``_NNN`` only when it clashes.

    The bare name counts as the first of its series, so the first clash
    yields ``_002``.
    """
    stem = sanitize_entity(file_stem(file_name))
    extension = file_extension(file_name, default_extension)
    candidate = f"{stem}.{extension}"
    taken = list(taken_names)
    if candidate.casefold() not in {name.casefold() for name in taken}:
        return candidate
    number = max(next_sequence(stem, taken), 2)
    return compose(stem, number, extension)


def same_series(first: str, second: str) -> bool:
    """True when both names share stem and extension, ignoring the sequence."""
    a_stem, _, a_ext = split_display_name(first)
    b_stem, _, b_ext = split_display_name(second)
    return a_stem.casefold() == b_stem.casefold() and a_ext == b_ext
