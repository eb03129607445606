# tests/test_matcher.py
import pytest

from core.embeddings import NullEmbedder
from core.matcher import (
    RankedMatch,
    classify_match,
    collect_matches,
    confidence_for,
    match_candidate,
)
from core.segmenter import segment
from core.semantic import SemanticComparator
from model.match import MatchConfidence, MatchType
from model.submission import Candidate
from model.thresholds import DEFAULT_THRESHOLDS, DetectionThresholds

T = DEFAULT_THRESHOLDS


class TestClassifyMatch:
    @pytest.mark.parametrize("semantic", [0.0, 0.5, 0.99])
    def test_high_lexical_is_exact_regardless_of_semantic(self, semantic):
        assert classify_match(0.96, semantic, T) == MatchType.exact_copy

    def test_paraphrase_needs_low_lexical_and_high_semantic(self):
        assert classify_match(0.65, 0.92, T) == MatchType.paraphrase
        assert classify_match(0.72, 0.92, T) == MatchType.similar_content

    def test_near_duplicate(self):
        assert classify_match(0.90, 0.50, T) == MatchType.near_duplicate

    def test_similar_content_fallthrough(self):
        assert classify_match(0.76, 0.80, T) == MatchType.similar_content

    def test_thresholds_are_per_call(self):
        strict = DetectionThresholds(exactMatch=0.99)
        assert classify_match(0.96, 0.0, strict) == MatchType.near_duplicate


class TestConfidence:
    @pytest.mark.parametrize(
        "sim,expected",
        [
            (0.97, MatchConfidence.very_high),
            (0.90, MatchConfidence.high),
            (0.80, MatchConfidence.medium),
            (0.50, MatchConfidence.low),
        ],
    )
    def test_bands(self, sim, expected):
        assert confidence_for(sim, T) == expected


class TestMatchCandidate:
    async def test_identical_sentence_is_exact_copy(self, letter_embedder):
        text = "Water boils at one hundred degrees at sea level."
        sentences = segment(text)
        cand = Candidate(text=f"Intro sentence that is unrelated to water. {text}", sourceId="s1")
        comparator = SemanticComparator(letter_embedder)

        ranked = await match_candidate(
            sentences, cand, 0, segment(cand.text), comparator, comparator.memo(), T
        )

        assert len(ranked) == 1
        match = ranked[0].match
        assert match.type == MatchType.exact_copy
        assert match.confidence == MatchConfidence.very_high
        assert match.similarity == pytest.approx(100.0)
        assert match.isDirect is True
        assert match.matchedSegment.startOffset == cand.text.index(text)

    async def test_lexical_only_when_embeddings_missing(self):
        text = "Water boils at one hundred degrees at sea level."
        sentences = segment(text)
        cand = Candidate(text="Water boils at one hundred degrees near sea level.")
        comparator = SemanticComparator(NullEmbedder())

        ranked = await match_candidate(
            sentences, cand, 3, segment(cand.text), comparator, comparator.memo(), T
        )

        match = ranked[0].match
        assert match.semanticMethod == "lexical_fallback"
        assert match.semanticSimilarity == match.lexicalSimilarity
        assert match.sourceId == "submission_3"

    async def test_prefilter_skips_unrelated_sentences(self, letter_embedder, essay, unrelated_essay):
        comparator = SemanticComparator(letter_embedder)
        cand = Candidate(text=unrelated_essay, sourceId="s1")
        ranked = await match_candidate(
            segment(essay), cand, 0, segment(cand.text), comparator, comparator.memo(), T
        )
        assert ranked == []
        assert letter_embedder.calls == []


class TestCollectMatches:
    def test_sorted_descending_and_deduplicated(self, make_match):
        low = make_match(similarity=80.0, text="a", matched="b")
        high = make_match(similarity=95.0, text="a", matched="b")
        other = make_match(similarity=90.0, text="c", matched="d")
        ranked = [
            RankedMatch(key=(-0.80, 0, 0, 0), match=low),
            RankedMatch(key=(-0.90, 1, 0, 0), match=other),
            RankedMatch(key=(-0.95, 0, 1, 0), match=high),
        ]

        result = collect_matches(ranked)

        assert result == [high, other]

    def test_ties_resolve_by_position(self, make_match):
        first = make_match(similarity=90.0, text="a", matched="x", source_id="s1")
        second = make_match(similarity=90.0, text="b", matched="y", source_id="s2")
        ranked = [
            RankedMatch(key=(-0.9, 1, 0, 0), match=second),
            RankedMatch(key=(-0.9, 0, 1, 0), match=first),
        ]
        assert collect_matches(ranked) == [first, second]
