"""Text normalization shared by the dictionary, disambiguator and extractor.

Every string that takes part in matching (offer text, keywords, indicators,
segment triggers) goes through ``normalize_text`` so that comparisons are
case-insensitive and accent-insensitive.
"""

import re
import unicodedata

# Ligatures and typographic characters NFKD leaves alone
_TRANSLATION = str.maketrans({
    "œ": "oe",
    "æ": "ae",
    "’": "'",
    "‘": "'",
})

_WHITESPACE_RE = re.compile(r"\s+")

# Segment boundaries: line breaks, sentence ends, semicolons and bullet glyphs.
# A period only ends a sentence when followed by whitespace, so "node.js" and
# ".net" stay intact.
_SEGMENT_SPLIT_RE = re.compile(r"\n|(?<=[.!?])[ \t]+|;|[•·▪▸►◦‣]")

# Characters that glue onto technical tokens (c++, c#, .net, node.js)
_TOKEN_CHARS = "a-z0-9"


def strip_accents(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text.translate(_TRANSLATION))
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_text(text: str | None) -> str:
    """Lowercase, strip accents and collapse whitespace.

    Returns an empty string for ``None`` or non-string input.
    """
    if not isinstance(text, str):
        return ""
    return _WHITESPACE_RE.sub(" ", strip_accents(text.lower())).strip()


def split_segments(text: str | None) -> list[str]:
    """Split raw text into line/sentence segments, keeping empty markers.

    Empty strings in the output mark blank lines, which end a header's scope
    during segment classification.
    """
    if not isinstance(text, str) or not text:
        return []
    return [normalize_text(part) for part in _SEGMENT_SPLIT_RE.split(text.replace("\r\n", "\n"))]


def keyword_pattern(keyword: str) -> re.Pattern:
    """Compile a word-boundary-respecting pattern for a normalized keyword.

    Multi-word aliases match as contiguous phrases with any whitespace between
    words. Boundaries are checked with lookarounds instead of ``\\b`` because
    keywords such as ``c++``, ``c#`` or ``.net`` start or end with
    non-word characters.
    """
    parts = [re.escape(part) for part in keyword.split()]
    body = r"\s+".join(parts)
    return re.compile(rf"(?<![{_TOKEN_CHARS}.#+]){body}(?![{_TOKEN_CHARS}#+])")


def indicator_pattern(indicator: str) -> re.Pattern:
    """Compile a pattern for a context indicator.

    Indicators and segment triggers are domain words ("developpeur", "requis")
    and tolerate a plural or feminine ending, so "reseau" also matches
    "reseaux" and "requis" matches "requises".
    """
    parts = [re.escape(part) for part in indicator.split()]
    body = r"\s+".join(parts)
    return re.compile(rf"(?<![{_TOKEN_CHARS}]){body}(?:e|s|x|es)?(?![{_TOKEN_CHARS}])")
