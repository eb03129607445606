# tests/test_views.py
from datetime import datetime, timezone

import pytest

from core.entities import Segment
from core.views import (
    TIMELINE_DISCLAIMER,
    build_heatmap,
    build_highlights,
    build_timeline,
    heatmap_color,
)
from util.constants import HeatmapColors


class TestHeatmapColor:
    @pytest.mark.parametrize(
        "similarity,color",
        [
            (95, HeatmapColors.RED),
            (90, HeatmapColors.RED),
            (80, HeatmapColors.ORANGE),
            (65, HeatmapColors.YELLOW),
            (45, HeatmapColors.LIGHT_GREEN),
            (0, HeatmapColors.GREEN),
        ],
    )
    def test_bands(self, similarity, color):
        assert heatmap_color(similarity) == color


class TestHeatmap:
    def test_best_overlapping_match_wins(self, make_match):
        sentences = [
            Segment(text="first", start=0, end=20, index=0),
            Segment(text="second", start=21, end=40, index=1),
        ]
        matches = [
            make_match(similarity=80.0, start=0, end=20),
            make_match(similarity=92.0, start=0, end=20, matched="other"),
        ]
        heatmap = build_heatmap(sentences, matches)

        assert heatmap[0].similarity == 92.0
        assert heatmap[0].color == HeatmapColors.RED
        assert heatmap[0].matchCount == 2
        assert heatmap[1].hasMatch is False
        assert heatmap[1].color == HeatmapColors.GREEN

    def test_highlights_capped(self, make_match):
        matches = [make_match(similarity=90.0) for _ in range(5)]
        assert len(build_highlights(matches, 3)) == 3


class TestTimeline:
    def test_no_matches(self):
        timeline = build_timeline(None, [])
        assert timeline.analysis == "No matches to analyze"
        assert timeline.likelyOriginal is None
        assert timeline.disclaimer == TIMELINE_DISCLAIMER

    def test_earliest_source_is_likely_original(self, make_match):
        early = datetime(2024, 1, 10, tzinfo=timezone.utc)
        late = datetime(2024, 3, 1)
        matches = [
            make_match(similarity=95.0, source_id="late", submitted_on=late, author_id="bob"),
            make_match(similarity=90.0, source_id="early", submitted_on=early, author_id="amy"),
            make_match(similarity=85.0, source_id="early", submitted_on=early, author_id="amy", text="x"),
        ]
        timeline = build_timeline(datetime(2024, 4, 1, tzinfo=timezone.utc), matches)

        assert timeline.totalMatchedSubmissions == 2
        assert timeline.likelyOriginal == "amy"
        assert timeline.earliestMatch.matchCount == 2
        assert timeline.earliestMatch.avgSimilarity == pytest.approx(87.5)
        assert timeline.verdict == "Current submission likely copied from earlier work"

    def test_current_submission_predates_sources(self, make_match):
        matches = [make_match(source_id="s1", submitted_on=datetime(2024, 5, 1, tzinfo=timezone.utc))]
        timeline = build_timeline(datetime(2024, 1, 1, tzinfo=timezone.utc), matches)
        assert timeline.verdict == "Current submission predates all matched work"
        assert timeline.likelyOriginal == "s1"

    def test_undated_sources(self, make_match):
        timeline = build_timeline(None, [make_match(source_id="s1")])
        assert timeline.earliestMatch is None
        assert timeline.likelyOriginal is None
        assert [s.sourceId for s in timeline.sources] == ["s1"]
