# core/citations.py
import re
from typing import List
from model.report import CitationPatterns, CitationReport

_QUOTED = re.compile(r"\"([^\"\n]+)\"|“([^”\n]+)”")

_PARENTHETICAL = re.compile(r"\([^)]*\d{4}[^)]*\)")  # (Author, 2023)
_NUMERIC = re.compile(r"\[\d+\]")  # [1]
_FOOTNOTE = re.compile(r"\^\d+")  # ^1
_APA = re.compile(r"\b[A-Z][a-z]+,?\s+(?:&\s+)?[A-Z][a-z]+,?\s+\(\d{4}\)")  # Smith & Jones (2020)
_REFERENCES = re.compile(r"references|bibliography|works cited", re.IGNORECASE)

QUOTES_WITHOUT_CITATIONS = "Quoted text found without proper citations"


def quoted_passages(text: str) -> List[str]:
    out: List[str] = []
    for m in _QUOTED.finditer(text):
        passage = (m.group(1) or m.group(2) or "").strip()
        if passage:
            out.append(passage)
    return out


def detect_citations(text: str, ratio: float = 0.5) -> CitationReport:
    """
    Quoted passages and citation markers.

    Formatting holds when parenthetical + numeric + APA markers number at
    least `ratio` x quotes; footnotes are reported but do not count toward it.
    A text with no quotes is properly formatted.
    """
    quotes = quoted_passages(text)
    patterns = CitationPatterns(
        parenthetical=_PARENTHETICAL.findall(text),
        numeric=_NUMERIC.findall(text),
        footnote=_FOOTNOTE.findall(text),
        apa=_APA.findall(text),
    )
    patterns = patterns.model_copy(
        update={
            "total": len(patterns.parenthetical)
            + len(patterns.numeric)
            + len(patterns.footnote)
            + len(patterns.apa)
        }
    )

    markers = len(patterns.parenthetical) + len(patterns.numeric) + len(patterns.apa)
    properly_formatted = markers >= len(quotes) * ratio

    if quotes and properly_formatted:
        score = 1.0
    elif quotes:
        score = 0.3
    else:
        score = 0.8

    return CitationReport(
        quotedText=quotes,
        quotedCount=len(quotes),
        citations=patterns,
        hasReferencesSection=bool(_REFERENCES.search(text)),
        properlyFormatted=properly_formatted,
        warning=QUOTES_WITHOUT_CITATIONS if quotes and not properly_formatted else None,
        score=score,
    )
