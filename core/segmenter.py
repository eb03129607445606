# core/segmenter.py
import re
from functools import lru_cache
from typing import Iterator, List, Tuple
from nltk.tokenize.punkt import PunktSentenceTokenizer
from core.entities import Segment

_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")

MIN_SENTENCE_CHARS = 20
MIN_SENTENCE_WORDS = 3
MIN_PARAGRAPH_CHARS = 100


@lru_cache(maxsize=1)
def _sentence_tokenizer() -> PunktSentenceTokenizer:
    # Untrained Punkt: boundary rules only, no corpus download needed.
    return PunktSentenceTokenizer()


def _trimmed(text: str, start: int, end: int) -> Tuple[int, int]:
    chunk = text[start:end]
    lead = len(chunk) - len(chunk.lstrip())
    trail = len(chunk) - len(chunk.rstrip())
    return start + lead, end - trail


def _sentence_spans(text: str) -> Iterator[Tuple[int, int]]:
    for start, end in _sentence_tokenizer().span_tokenize(text):
        s, e = _trimmed(text, start, end)
        if e > s:
            yield s, e


def segment(
    text: str,
    min_chars: int = MIN_SENTENCE_CHARS,
    min_words: int = MIN_SENTENCE_WORDS,
) -> List[Segment]:
    """
    Split `text` into sentences in document order. Fragments of `min_chars`
    characters or fewer, or of `min_words` words or fewer, are dropped.
    Offsets point into `text` itself.
    """
    if not text or not text.strip():
        return []
    out: List[Segment] = []
    for s, e in _sentence_spans(text):
        sentence = text[s:e]
        if len(sentence) <= min_chars or len(sentence.split()) <= min_words:
            continue
        out.append(Segment(text=sentence, start=s, end=e, index=len(out)))
    return out


def segment_paragraphs(text: str, min_chars: int = MIN_PARAGRAPH_CHARS) -> List[Segment]:
    """
    Blank-line delimited paragraphs longer than `min_chars` (after trimming).
    """
    if not text or not text.strip():
        return []
    bounds: List[Tuple[int, int]] = []
    cursor = 0
    for m in _PARAGRAPH_BREAK.finditer(text):
        bounds.append((cursor, m.start()))
        cursor = m.end()
    bounds.append((cursor, len(text)))

    out: List[Segment] = []
    for start, end in bounds:
        s, e = _trimmed(text, start, end)
        if e - s <= min_chars:
            continue
        out.append(Segment(text=text[s:e], start=s, end=e, index=len(out)))
    return out
