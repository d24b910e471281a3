"""Decoding of the gateway's cumulative `text` field."""

from typing import NamedTuple

INPUT_DELIMITER = "*"


class DecodedInput(NamedTuple):
    entries: tuple[str, ...]
    latest: str
    level: int


def decode(text: str | None) -> DecodedInput:
    """
    Split cumulative USSD text into the user's entries.

    The gateway resends every entry of the dialogue joined by `*`, so
    "1*Jane*2" means three screens answered so far. Empty segments are
    dropped; `level` is the number of real entries.
    """
    entries = tuple(part for part in (text or "").split(INPUT_DELIMITER) if part)
    latest = entries[-1] if entries else ""
    return DecodedInput(entries=entries, latest=latest, level=len(entries))
