"""Album and track name normalization used for fuzzy matching."""

import re
from typing import Optional

# Edition and version markers that don't change which release an album is.
_MARKERS = (
    r"deluxe\s*edition",
    r"deluxe",
    r"expanded\s*edition",
    r"expanded",
    r"remastered",
    r"remaster",
    r"anniversary\s*edition",
    r"special\s*edition",
    r"bonus\s*tracks?",
    r"digital\s*edition",
    r"standard\s*edition",
    r"international\s*version",
    r"international",
    r"explicit",
    r"clean",
)

# Only the "... edition" / "... version" markers are also stripped without brackets.
_BARE_MARKERS = (
    r"deluxe\s*edition",
    r"expanded\s*edition",
    r"anniversary\s*edition",
    r"special\s*edition",
    r"digital\s*edition",
    r"standard\s*edition",
    r"international\s*version",
)

EDITION_PATTERNS = (
    [re.compile(rf"\({marker}\)") for marker in _MARKERS]
    + [re.compile(rf"\[{marker}\]") for marker in _MARKERS]
    + [re.compile(marker) for marker in _BARE_MARKERS]
)

# ASCII word characters only: accented letters are dropped like punctuation.
# Any Unicode whitespace survives and is collapsed below.
_PUNCTUATION = re.compile(r"[^A-Za-z0-9_\s]")
_WHITESPACE = re.compile(r"\s+")


def _strip_once(text: str) -> str:
    for pattern in EDITION_PATTERNS:
        text = pattern.sub("", text)
    text = _PUNCTUATION.sub("", text)
    return _WHITESPACE.sub(" ", text).strip()


def normalize_album_name(name: Optional[str]) -> str:
    """
    Reduce an album title to the part that identifies the release.

    "Nevermind (Remastered)", "NEVERMIND" and "Nevermind [Deluxe Edition]" all
    become "nevermind". Stripping punctuation can expose a new marker
    ("deluxe-edition" -> "deluxeedition"), so the pass repeats until nothing
    changes; every pass that changes the text shortens it.
    """
    if not name:
        return ""

    normalized = name.lower()
    while True:
        stripped = _strip_once(normalized)
        if stripped == normalized:
            return stripped
        normalized = stripped


def normalize_track_name(name: Optional[str]) -> str:
    """Case-insensitive, trimmed track name."""
    return (name or "").strip().lower()
