"""Text normalization and string similarity shared by the matcher and scorers."""

import math
import re
import unicodedata
from difflib import SequenceMatcher

_WHITESPACE = re.compile(r"\s+")
_TOKEN = re.compile(r"[a-z0-9#+]+(?:[.\-/][a-z0-9#+]+)*")
_SENTENCE_SPLIT = re.compile(r"(?<=[.!?;\n])\s+")

# "Python (found in: Work Experience, page 2)" / "Python - found in: CV"
_ANNOTATION = re.compile(
    r"^(?P<name>.+?)\s*(?:[\(\[]\s*found in\s*:\s*(?P<paren>[^\)\]]*)[\)\]]"
    r"|[-–|]\s*found in\s*:\s*(?P<dash>.+))\s*$",
    re.IGNORECASE,
)


def normalize(text: str | None) -> str:
    """Casefold, NFKC-normalize and collapse whitespace. ``None`` becomes ``""``."""
    if not text:
        return ""
    text = unicodedata.normalize("NFKC", str(text)).casefold()
    return _WHITESPACE.sub(" ", text).strip()


def split_annotation(raw: str) -> tuple[str, str | None]:
    """Split an annotated skill string into ``(name, found_in)``.

    Unannotated strings are returned unchanged with ``None``.
    """
    match = _ANNOTATION.match(raw.strip())
    if not match:
        return raw.strip(), None
    found_in = match.group("paren") or match.group("dash") or ""
    return match.group("name").strip(), found_in.strip() or None


def tokenize(text: str | None) -> list[str]:
    return _TOKEN.findall(normalize(text))


def sequence_ratio(a: str, b: str) -> float:
    """Character-level similarity in [0, 1] (difflib ratio)."""
    if not a or not b:
        return 0.0
    return SequenceMatcher(None, a, b).ratio()


def token_jaccard(a: str, b: str) -> float:
    tokens_a, tokens_b = set(tokenize(a)), set(tokenize(b))
    if not tokens_a or not tokens_b:
        return 0.0
    return len(tokens_a & tokens_b) / len(tokens_a | tokens_b)


def contains_phrase(text: str, phrase: str) -> bool:
    """Whole-word containment of an already normalized phrase in normalized text."""
    if not phrase or not text:
        return False
    pattern = r"(?<![a-z0-9])" + re.escape(phrase) + r"(?![a-z0-9])"
    return re.search(pattern, text) is not None


def sentences(text: str | None) -> list[str]:
    if not text:
        return []
    return [s.strip() for s in _SENTENCE_SPLIT.split(str(text)) if s.strip()]


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for non-negative input."""
    return int(math.floor(value + 0.5))


def clamp_score(value: float) -> int:
    return max(0, min(100, round_half_up(value)))
