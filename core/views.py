# core/views.py
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence
from core.entities import Segment
from model.match import Match
from model.report import (
    HeatmapEntry,
    HighlightRange,
    SourceAttribution,
    Timeline,
    Visualization,
)
from util.constants import HeatmapColors

TIMELINE_DISCLAIMER = (
    "Attribution is a heuristic based on the earliest submission date among "
    "matched sources. It is not proof of who copied from whom."
)


def heatmap_color(similarity: float) -> str:
    if similarity >= 90:
        return HeatmapColors.RED
    if similarity >= 75:
        return HeatmapColors.ORANGE
    if similarity >= 60:
        return HeatmapColors.YELLOW
    if similarity >= 40:
        return HeatmapColors.LIGHT_GREEN
    return HeatmapColors.GREEN


def build_heatmap(sentences: Sequence[Segment], matches: Sequence[Match]) -> List[HeatmapEntry]:
    """One entry per sentence; similarity is the best match overlapping its range."""
    out: List[HeatmapEntry] = []
    for seg in sentences:
        hits = [
            m
            for m in matches
            if m.originalSegment.startOffset < seg.end
            and m.originalSegment.endOffset > seg.start
        ]
        best = max((m.similarity for m in hits), default=0.0)
        out.append(
            HeatmapEntry(
                text=seg.text,
                start=seg.start,
                end=seg.end,
                similarity=best,
                color=heatmap_color(best),
                hasMatch=best > 0,
                matchCount=len(hits),
            )
        )
    return out


def build_highlights(matches: Sequence[Match], limit: int) -> List[HighlightRange]:
    return [
        HighlightRange(
            start=m.originalSegment.startOffset,
            end=m.originalSegment.endOffset,
            similarity=m.similarity,
            color=heatmap_color(m.similarity),
            type=m.type,
        )
        for m in matches[:limit]
    ]


def build_visualization(
    sentences: Sequence[Segment], matches: Sequence[Match], highlight_limit: int
) -> Visualization:
    return Visualization(
        heatmap=build_heatmap(sentences, matches),
        highlightRanges=build_highlights(matches, highlight_limit),
    )


def _as_utc(ts: datetime) -> datetime:
    # Naive timestamps are taken as UTC so they compare with aware ones
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def _attributions(matches: Sequence[Match]) -> List[SourceAttribution]:
    grouped: Dict[str, List[Match]] = {}
    for m in matches:
        grouped.setdefault(m.sourceId, []).append(m)
    out: List[SourceAttribution] = []
    for source_id, items in grouped.items():
        total = sum(m.similarity for m in items)
        first = items[0]
        out.append(
            SourceAttribution(
                sourceId=source_id,
                authorId=first.authorId,
                submittedOn=first.submittedOn,
                matchCount=len(items),
                totalSimilarity=round(total, 1),
                avgSimilarity=round(total / len(items), 1),
            )
        )
    return out


def build_timeline(current_submission: Optional[datetime], matches: Sequence[Match]) -> Timeline:
    """
    Group matches by source and name the earliest-dated source as the likely
    original. Sources without a date never win; ties keep the first source
    in match order.
    """
    if not matches:
        return Timeline(
            analysis="No matches to analyze",
            currentSubmission=current_submission,
            disclaimer=TIMELINE_DISCLAIMER,
        )

    sources = _attributions(matches)
    dated = [s for s in sources if s.submittedOn is not None]
    if not dated:
        return Timeline(
            analysis="Submission dates unavailable for matched sources",
            currentSubmission=current_submission,
            totalMatchedSubmissions=len(sources),
            sources=sources,
            verdict="Origin cannot be inferred without submission dates",
            disclaimer=TIMELINE_DISCLAIMER,
        )

    earliest = dated[0]
    for s in dated[1:]:
        if _as_utc(s.submittedOn) < _as_utc(earliest.submittedOn):
            earliest = s

    if current_submission is not None and _as_utc(current_submission) < _as_utc(earliest.submittedOn):
        verdict = "Current submission predates all matched work"
    else:
        verdict = "Current submission likely copied from earlier work"

    return Timeline(
        analysis=f"Matched {len(sources)} source(s)",
        currentSubmission=current_submission,
        totalMatchedSubmissions=len(sources),
        earliestMatch=earliest,
        likelyOriginal=earliest.authorId or earliest.sourceId,
        sources=sources,
        verdict=verdict,
        disclaimer=TIMELINE_DISCLAIMER,
    )
