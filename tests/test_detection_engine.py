# tests/test_detection_engine.py
from datetime import datetime, timezone
from unittest.mock import patch

import pytest

from core import detection_engine
from core.detection_engine import (
    FIRST_SUBMISSION,
    PlagiarismEngine,
    resolve_candidates,
    validate_candidate,
)
from model.match import MatchType
from model.report import VerdictTier
from model.submission import Candidate
from util.errors import MalformedInputError

from conftest import YieldingEmbedder


class TestCandidateValidation:
    def test_default_source_id(self):
        cand = validate_candidate({"text": "Some prior essay text."}, 4, "peer")
        assert cand.sourceId == "submission_4"
        assert cand.origin == "peer"

    def test_reference_sources_tagged_internet(self):
        cand = validate_candidate(Candidate(text="Public article."), 0, "internet")
        assert cand.origin == "internet"
        assert cand.sourceId == "reference_0"

    @pytest.mark.parametrize("item", [{"text": "   "}, {"sourceId": "x"}, 42, {"text": 7}])
    def test_malformed(self, item):
        with pytest.raises(MalformedInputError):
            validate_candidate(item, 0, "peer")

    def test_resolve_collects_warnings(self):
        valid, warnings = resolve_candidates(
            [{"text": ""}, {"text": "Good text here.", "sourceId": "ok"}, None], "peer"
        )
        assert [c.sourceId for c in valid] == ["ok"]
        assert [w.code for w in warnings] == ["malformed_input", "malformed_input"]
        assert warnings[0].sourceId == "submission_0"


class TestCheckNoComparisons:
    async def test_empty_corpus(self, engine, essay):
        report = await engine.check(essay, [], check_internet=False)
        assert report.checked is True
        assert report.noComparisons is True
        assert report.overallScore == 0
        assert report.verdict.verdict == "Cannot Determine"
        assert report.verdict.tier == VerdictTier.info
        assert report.message == FIRST_SUBMISSION

    async def test_reference_sources_ignored_without_internet_flag(self, engine, essay):
        report = await engine.check(essay, [], reference_sources=[{"text": essay}])
        assert report.noComparisons is True

    async def test_only_malformed_candidates(self, engine, essay):
        report = await engine.check(essay, [{"text": ""}])
        assert report.noComparisons is True
        assert len(report.warnings) == 1


class TestCheck:
    async def test_copied_submission(self, engine, essay, unrelated_essay):
        candidates = [
            {"text": unrelated_essay, "sourceId": "castles"},
            {"text": essay, "sourceId": "copy", "authorId": "amy",
             "submittedOn": "2024-01-01T00:00:00Z"},
        ]
        report = await engine.check(
            essay, candidates, submitted_on=datetime(2024, 2, 1, tzinfo=timezone.utc)
        )

        assert report.checked is True and report.error is False
        assert report.detectionMethods.sentenceLevel.exactCopies == 3
        assert {m.sourceId for m in report.sentenceMatches} == {"copy"}
        assert all(m.type == MatchType.exact_copy for m in report.sentenceMatches)
        # 100 * 0.6 + 15 * 0.3 + 3 * 2
        assert report.overallScore == pytest.approx(70.5)
        assert report.verdict.tier == VerdictTier.critical
        assert report.summary.totalComparisons == 2
        assert report.summary.recommendation == "Manual review required"
        assert report.timeline.likelyOriginal == "amy"
        assert len(report.visualization.heatmap) == 3
        assert all(h.hasMatch for h in report.visualization.heatmap)

    async def test_lexical_only_when_embeddings_unavailable(self, lexical_engine, essay):
        report = await lexical_engine.check(essay, [{"text": essay}])

        assert report.sentenceMatches
        for m in report.sentenceMatches:
            assert m.semanticMethod == "lexical_fallback"
            assert m.semanticSimilarity == m.lexicalSimilarity
        assert "embedding_unavailable" in [w.code for w in report.warnings]

    async def test_internet_sources_compared_when_enabled(self, engine, essay):
        report = await engine.check(
            essay, [], reference_sources=[{"text": essay, "sourceId": "wiki"}], check_internet=True
        )
        assert report.noComparisons is False
        assert {m.origin for m in report.sentenceMatches} == {"internet"}

    async def test_malformed_candidate_skipped_not_fatal(self, engine, essay):
        report = await engine.check(essay, [{"text": ""}, 42, {"text": essay}])
        assert report.checked is True
        assert len(report.warnings) == 2
        assert report.sentenceMatches

    async def test_deterministic(self, engine, essay, unrelated_essay):
        candidates = [{"text": essay, "sourceId": "a"}, {"text": unrelated_essay, "sourceId": "b"},
                      {"text": essay, "sourceId": "c"}]
        first = await engine.check(essay, candidates)
        second = await engine.check(essay, candidates)
        assert first.model_dump_json() == second.model_dump_json()

    async def test_embeds_each_sentence_once_per_run(self, engine, letter_embedder, essay):
        await engine.check(essay, [{"text": essay}, {"text": essay}])
        assert len(letter_embedder.calls) == len(set(letter_embedder.calls))

    async def test_concurrent_candidates_embed_each_sentence_once(self, essay):
        embedder = YieldingEmbedder()
        engine = PlagiarismEngine(embedder, concurrency=3)
        await engine.check(essay, [{"text": essay}] * 3)
        assert len(embedder.calls) == len(set(embedder.calls)) == 3

    async def test_unavailable_embeddings_warning_counts_distinct_sentences(self, essay):
        engine = PlagiarismEngine(YieldingEmbedder(available=False), concurrency=3)
        report = await engine.check(essay, [{"text": essay}] * 3)
        assert [w.message for w in report.warnings] == [
            "Embeddings unavailable for 3 sentence(s); lexical similarity used"
        ]


class TestCheckFailures:
    async def test_blank_submission(self, engine):
        report = await engine.check("   ", [{"text": "anything"}])
        assert report.checked is False
        assert report.error is True
        assert report.verdict.tier == VerdictTier.error

    async def test_unexpected_failure_is_reported(self, engine, essay):
        with patch.object(detection_engine, "detect_citations", side_effect=RuntimeError("kaboom")):
            report = await engine.check(essay, [{"text": essay}])
        assert report.checked is False
        assert report.error is True
        assert report.message == "Plagiarism detection failed: kaboom"
        assert report.verdict.verdict == "Detection Failed"


class TestAnalyzeStyle:
    def test_bundles_style_and_citations(self, engine, essay):
        result = engine.analyze_style(essay)
        assert result.overallStyle is not None
        assert result.styleShifts.sufficientData is False
        assert result.citations.quotedCount == 0
