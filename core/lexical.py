# core/lexical.py
"""
Lexical channels.

- Dice coefficient over character bigrams (order-sensitive; the sentence pre-filter)
- Jaccard and overlap coefficient over word sets (order-independent)
- Jaccard over word n-gram sets
- Structural similarity from sentence-length and sentence-opening patterns
"""

import re
from collections import Counter
from dataclasses import dataclass
from typing import List, Sequence, Set, Tuple
from core.entities import Segment
from core.fingerprint import normalize, tokenize, word_ngrams

_WS = re.compile(r"\s+")


def _bigrams(text: str) -> Counter:
    return Counter(text[i : i + 2] for i in range(len(text) - 1))


def dice_coefficient(a: str, b: str) -> float:
    """
    Sørensen-Dice over character bigrams of whitespace-free strings.
    Symmetric; identical strings score 1.0 and strings shorter than two
    characters score 0.0 unless identical.
    """
    a = _WS.sub("", a)
    b = _WS.sub("", b)
    if a == b:
        return 1.0 if a else 0.0
    if len(a) < 2 or len(b) < 2:
        return 0.0
    ba, bb = _bigrams(a), _bigrams(b)
    shared = sum((ba & bb).values())
    return 2.0 * shared / (len(a) - 1 + len(b) - 1)


def string_ratio(a: str, b: str) -> float:
    """Dice ratio on normalized text."""
    return dice_coefficient(normalize(a), normalize(b))


def jaccard(a: Set[str], b: Set[str]) -> float:
    union = a | b
    if not union:
        return 0.0
    return len(a & b) / len(union)


def overlap_coefficient(a: Set[str], b: Set[str]) -> float:
    smaller = min(len(a), len(b))
    if smaller == 0:
        return 0.0
    return len(a & b) / smaller


@dataclass(frozen=True)
class LexicalScore:
    score: float
    jaccard: float
    overlap: float
    common_words: int
    unique_words_a: int
    unique_words_b: int


def lexical_similarity(a: str, b: str) -> LexicalScore:
    """Document lexical score: (Jaccard + overlap) / 2 over word sets."""
    wa, wb = set(tokenize(a)), set(tokenize(b))
    j = jaccard(wa, wb)
    o = overlap_coefficient(wa, wb)
    return LexicalScore(
        score=(j + o) / 2,
        jaccard=j,
        overlap=o,
        common_words=len(wa & wb),
        unique_words_a=len(wa),
        unique_words_b=len(wb),
    )


def ngram_similarity(a: str, b: str, n: int = 3, max_phrases: int = 5) -> Tuple[float, List[str]]:
    """
    Jaccard over word n-gram sets, plus up to `max_phrases` shared n-grams
    in the order they first appear in `a`.
    """
    grams_a = word_ngrams(tokenize(a), n)
    grams_b = set(word_ngrams(tokenize(b), n))
    set_a = set(grams_a)
    if not set_a or not grams_b:
        return 0.0, []
    shared: List[str] = []
    seen: Set[str] = set()
    for g in grams_a:
        if g in grams_b and g not in seen:
            seen.add(g)
            shared.append(g)
    return jaccard(set_a, grams_b), shared[:max_phrases]


@dataclass(frozen=True)
class StructuralScore:
    score: float
    length_similarity: float
    opening_similarity: float
    avg_sentence_length_a: float
    avg_sentence_length_b: float
    sentences_a: int
    sentences_b: int


def _avg_words(sentences: Sequence[Segment]) -> float:
    if not sentences:
        return 0.0
    return sum(len(s.text.split()) for s in sentences) / len(sentences)


def _openings(sentences: Sequence[Segment]) -> Set[str]:
    out: Set[str] = set()
    for s in sentences:
        words = tokenize(s.text)
        if words:
            out.add(words[0])
    return out


def structural_similarity(a: Sequence[Segment], b: Sequence[Segment]) -> StructuralScore:
    avg_a, avg_b = _avg_words(a), _avg_words(b)
    longest = max(avg_a, avg_b)
    length_sim = 1 - abs(avg_a - avg_b) / longest if longest > 0 else 0.0
    opening_sim = jaccard(_openings(a), _openings(b))
    return StructuralScore(
        score=(length_sim + opening_sim) / 2,
        length_similarity=length_sim,
        opening_similarity=opening_sim,
        avg_sentence_length_a=avg_a,
        avg_sentence_length_b=avg_b,
        sentences_a=len(a),
        sentences_b=len(b),
    )
