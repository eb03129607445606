# core/stylometry.py
"""
Writing-style profiles and paragraph-to-paragraph style shift detection.

Readability is a simplified Flesch reading ease:
  206.835 - 1.015 * words_per_sentence - 84.6 * syllables_per_word
"""

import re
from functools import lru_cache
from typing import List, Optional, Tuple
import nltk
from nltk.tokenize import RegexpTokenizer
from core.segmenter import segment, segment_paragraphs
from model.style import (
    AverageStyle,
    ShiftSeverity,
    StyleProfile,
    StyleShift,
    StyleShiftResult,
)
from model.thresholds import DEFAULT_THRESHOLDS, DetectionThresholds
import logging

logger = logging.getLogger(__name__)

_SILENT_SUFFIX = re.compile(r"(?:[^laeiouy]es|ed|[^laeiouy]e)$")
_LEADING_Y = re.compile(r"^y")
_VOWEL_GROUP = re.compile(r"[aeiouy]{1,2}")


@lru_cache(maxsize=1)
def _word_tokenizer() -> RegexpTokenizer:
    return RegexpTokenizer(r"\w+")


def count_syllables(word: str) -> int:
    word = word.lower()
    if len(word) <= 3:
        return 1
    word = _SILENT_SUFFIX.sub("", word)
    word = _LEADING_Y.sub("", word)
    groups = _VOWEL_GROUP.findall(word)
    return len(groups) if groups else 1


def _pos_counts(words: List[str]) -> Optional[Tuple[int, int, int]]:
    """(adjectives, verbs, nouns), or None when the tagger model is not installed."""
    try:
        tagged = nltk.pos_tag(words)
    except LookupError:
        logger.debug("style.pos_tagger.unavailable")
        return None
    adjectives = sum(1 for _, tag in tagged if tag.startswith("JJ"))
    verbs = sum(1 for _, tag in tagged if tag.startswith("VB"))
    nouns = sum(1 for _, tag in tagged if tag.startswith("NN"))
    return adjectives, verbs, nouns


def style_fingerprint(lexical_diversity: float, avg_words: float, readability: float) -> str:
    return f"{lexical_diversity * 1000:.0f}-{avg_words:.0f}-{readability:.0f}"


def analyze_style(text: str) -> Optional[StyleProfile]:
    """
    Style profile of `text`, or None when it has no words.
    Lexical diversity is always recomputed from this text alone.
    """
    raw_words = _word_tokenizer().tokenize(text or "")
    if not raw_words:
        return None
    words = [w.lower() for w in raw_words]
    n_words = len(words)
    n_sentences = max(len(segment(text)), 1)

    lexical_diversity = len(set(words)) / n_words
    avg_words = n_words / n_sentences

    commas = text.count(",")
    semicolons = text.count(";")
    exclamations = text.count("!")
    questions = text.count("?")

    pos = _pos_counts(raw_words)
    adjectives, verbs, nouns = pos if pos is not None else (0, 0, 0)

    syllables = sum(count_syllables(w) for w in words)
    flesch = 206.835 - 1.015 * avg_words - 84.6 * (syllables / n_words)

    return StyleProfile(
        lexicalDiversity=round(lexical_diversity, 3),
        avgWordsPerSentence=round(avg_words, 1),
        punctuationDensity=round((commas + semicolons) / n_sentences, 2),
        exclamationRate=round(exclamations / n_sentences, 2),
        questionRate=round(questions / n_sentences, 2),
        adjectiveRate=round(adjectives / n_words, 3),
        verbRate=round(verbs / n_words, 3),
        nounRate=round(nouns / n_words, 3),
        readabilityScore=round(flesch, 1),
        fingerprint=style_fingerprint(lexical_diversity, avg_words, flesch),
        posTagged=pos is not None,
    )


def _shift_between(
    index: int, prev: StyleProfile, curr: StyleProfile, t: DetectionThresholds
) -> Optional[StyleShift]:
    lexical = abs(curr.lexicalDiversity - prev.lexicalDiversity)
    sentence = abs(curr.avgWordsPerSentence - prev.avgWordsPerSentence)
    readability = abs(curr.readabilityScore - prev.readabilityScore)

    if not (
        lexical > t.styleLexicalShift
        or sentence > t.styleSentenceShift
        or readability > t.styleReadabilityShift
    ):
        return None

    high = lexical > t.styleLexicalHigh or sentence > t.styleSentenceHigh
    return StyleShift(
        paragraphIndex=index,
        severity=ShiftSeverity.high if high else ShiftSeverity.medium,
        lexicalDelta=round(lexical, 3),
        sentenceLengthDelta=round(sentence, 1),
        readabilityDelta=round(readability, 1),
        suspicion=(
            "High - potential copy-paste"
            if lexical > t.styleLexicalHigh
            else "Medium - review recommended"
        ),
    )


def detect_style_shifts(
    text: str, thresholds: DetectionThresholds = DEFAULT_THRESHOLDS
) -> StyleShiftResult:
    """
    Compare each qualifying paragraph's profile with the previous one.
    `paragraphIndex` is the 0-based position (among qualifying paragraphs)
    of the paragraph where the new style starts.

    With fewer than two profiled paragraphs the result is `consistent=True`
    with `sufficientData=False`.
    """
    paragraphs = segment_paragraphs(text, min_chars=thresholds.minParagraphChars)
    profiled: List[Tuple[int, StyleProfile]] = []
    for p in paragraphs:
        profile = analyze_style(p.text)
        if profile is not None:
            profiled.append((p.index, profile))
    if len(profiled) < 2:
        return StyleShiftResult(
            shifts=[],
            consistent=True,
            sufficientData=False,
            paragraphsAnalyzed=len(profiled),
            avgStyle=_average(profiled),
        )

    shifts: List[StyleShift] = []
    for (_, prev), (idx, curr) in zip(profiled, profiled[1:]):
        shift = _shift_between(idx, prev, curr, thresholds)
        if shift is not None:
            shifts.append(shift)

    return StyleShiftResult(
        shifts=shifts,
        consistent=not shifts,
        sufficientData=True,
        paragraphsAnalyzed=len(profiled),
        avgStyle=_average(profiled),
    )


def _average(profiled: List[Tuple[int, StyleProfile]]) -> Optional[AverageStyle]:
    if not profiled:
        return None
    n = len(profiled)
    return AverageStyle(
        lexicalDiversity=round(sum(p.lexicalDiversity for _, p in profiled) / n, 3),
        avgWordsPerSentence=round(sum(p.avgWordsPerSentence for _, p in profiled) / n, 1),
    )
