# core/matcher.py
from dataclasses import dataclass
from typing import List, Sequence, Tuple
from core.embeddings import EmbeddingMemo
from core.entities import Segment
from core.lexical import string_ratio
from core.semantic import SemanticComparator
from model.match import Match, MatchConfidence, MatchType, SegmentSpan
from model.submission import Candidate
from model.thresholds import DetectionThresholds
from util.functions import pct

# (-similarity, original index, candidate index, matched index)
SortKey = Tuple[float, int, int, int]


@dataclass(frozen=True)
class RankedMatch:
    key: SortKey
    match: Match


def classify_match(
    lexical: float, semantic: float, t: DetectionThresholds
) -> MatchType:
    """First rule that holds wins; order matters."""
    if lexical >= t.exactMatch:
        return MatchType.exact_copy
    if semantic >= t.semanticMatch and lexical < t.moderateSimilarity:
        return MatchType.paraphrase
    if lexical >= t.highSimilarity:
        return MatchType.near_duplicate
    return MatchType.similar_content


def confidence_for(similarity: float, t: DetectionThresholds) -> MatchConfidence:
    if similarity >= t.exactMatch:
        return MatchConfidence.very_high
    if similarity >= t.highSimilarity:
        return MatchConfidence.high
    if similarity >= t.matchThreshold:
        return MatchConfidence.medium
    return MatchConfidence.low


def _span(seg: Segment) -> SegmentSpan:
    return SegmentSpan(text=seg.text, startOffset=seg.start, endOffset=seg.end)


async def match_candidate(
    sentences: Sequence[Segment],
    candidate: Candidate,
    candidate_index: int,
    candidate_sentences: Sequence[Segment],
    comparator: SemanticComparator,
    memo: EmbeddingMemo,
    t: DetectionThresholds,
) -> List[RankedMatch]:
    """
    Every submission sentence against every sentence of one candidate.
    The Dice pre-filter gates the semantic channel; a match is emitted when
    max(lexical, semantic) reaches the match threshold.
    """
    out: List[RankedMatch] = []
    for sentence in sentences:
        for other in candidate_sentences:
            lexical = string_ratio(sentence.text, other.text)
            if lexical < t.prefilter:
                continue
            semantic = await comparator.similarity(sentence.text, other.text, memo, lexical)
            effective = max(lexical, semantic.score)
            if effective < t.matchThreshold:
                continue
            match = Match(
                originalSegment=_span(sentence),
                matchedSegment=_span(other),
                sourceId=candidate.sourceId or f"submission_{candidate_index}",
                authorId=candidate.authorId,
                submittedOn=candidate.submittedOn,
                origin=candidate.origin,
                similarity=pct(effective),
                lexicalSimilarity=round(lexical, 4),
                semanticSimilarity=round(semantic.score, 4),
                semanticMethod=semantic.method,
                type=classify_match(lexical, semantic.score, t),
                confidence=confidence_for(effective, t),
                isDirect=lexical >= t.exactMatch,
                isParaphrase=semantic.score >= t.semanticMatch and lexical < t.exactMatch,
            )
            key = (-effective, sentence.index, candidate_index, other.index)
            out.append(RankedMatch(key=key, match=match))
    return out


def collect_matches(ranked: Sequence[RankedMatch]) -> List[Match]:
    """
    Sort by descending similarity, then drop repeated (original, matched)
    text pairs. Dedup keeps the first occurrence, which after the sort is
    the highest-similarity one; ties resolve by document positions so the
    result never depends on the order comparisons finished in.
    """
    seen: set[Tuple[str, str]] = set()
    out: List[Match] = []
    for item in sorted(ranked, key=lambda r: r.key):
        pair = (item.match.originalSegment.text, item.match.matchedSegment.text)
        if pair in seen:
            continue
        seen.add(pair)
        out.append(item.match)
    return out
