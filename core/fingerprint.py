# core/fingerprint.py
import re
from typing import List, Sequence
import mmh3
from core.entities import Fingerprint

_PUNCT = re.compile(r"[^\w\s]")
_WS = re.compile(r"\s+")

FINGERPRINT_NGRAM = 5
FINGERPRINT_MAX_NGRAMS = 20


def normalize(text: str) -> str:
    """
    Lower-case, punctuation -> space, collapse whitespace, trim.
    Idempotent: normalize(normalize(t)) == normalize(t).
    """
    text = _PUNCT.sub(" ", text.lower())
    return _WS.sub(" ", text).strip()


def tokenize(text: str) -> List[str]:
    normalized = normalize(text)
    return normalized.split() if normalized else []


def word_ngrams(words: Sequence[str], n: int) -> List[str]:
    if n <= 0 or len(words) < n:
        return []
    return [" ".join(words[i : i + n]) for i in range(len(words) - n + 1)]


def hash32(text: str) -> int:
    return mmh3.hash(text, signed=False)


def fingerprint(text: str) -> Fingerprint:
    normalized = normalize(text)
    grams = word_ngrams(normalized.split(), FINGERPRINT_NGRAM)
    return Fingerprint(
        primary_hash=hash32(normalized),
        secondary_hash=hash32(normalized[::-1]),
        ngram_hashes=tuple(hash32(g) for g in grams[:FINGERPRINT_MAX_NGRAMS]),
    )


def fingerprint_overlap(a: Fingerprint, b: Fingerprint) -> float:
    """Jaccard over n-gram hashes; a cheap near-duplicate hint."""
    sa, sb = set(a.ngram_hashes), set(b.ngram_hashes)
    if not sa or not sb:
        return 0.0
    return len(sa & sb) / len(sa | sb)


def same_text(a: str, b: str, fa: Fingerprint, fb: Fingerprint) -> bool:
    """
    Equal primary hashes short-circuit to an equality check on the normalized
    text, so a hash collision can never flag unrelated text on its own.
    """
    if fa.primary_hash != fb.primary_hash:
        return False
    return normalize(a) == normalize(b)
