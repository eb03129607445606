# tests/test_scoring.py
import pytest

from core.scoring import (
    document_summary,
    document_tier,
    document_verdict,
    recommendation,
    sentence_score,
    sentence_tier,
    sentence_verdict,
    weighted_score,
)
from model.match import MatchType
from model.report import CitationReport, DocumentMetric, VerdictTier
from model.style import ShiftSeverity, StyleShift
from model.thresholds import DEFAULT_THRESHOLDS, MethodWeights

RULES = DEFAULT_THRESHOLDS.scoring
CLEAN = CitationReport()


def _shift(severity: ShiftSeverity) -> StyleShift:
    return StyleShift(
        paragraphIndex=1,
        severity=severity,
        lexicalDelta=0.3,
        sentenceLengthDelta=2.0,
        readabilityDelta=5.0,
        suspicion="High - potential copy-paste",
    )


class TestSentenceScore:
    def test_no_matches_scores_zero(self):
        assert sentence_score([], CitationReport(properlyFormatted=False), [], RULES) == 0.0

    def test_composition(self, make_match):
        matches = [make_match(similarity=80.0), make_match(similarity=90.0, kind=MatchType.exact_copy)]
        # 85 * 0.6 + min(100, 10) * 0.3 + 1 * 2
        assert sentence_score(matches, CLEAN, [], RULES) == pytest.approx(56.0)

    def test_penalties(self, make_match):
        matches = [make_match(similarity=50.0)]
        base = 50 * 0.6 + 5 * 0.3
        citations = CitationReport(quotedCount=1, properlyFormatted=False)
        shifts = [_shift(ShiftSeverity.high), _shift(ShiftSeverity.medium)]
        assert sentence_score(matches, citations, shifts, RULES) == pytest.approx(base + 10 + 5)

    def test_clamped_to_hundred(self, make_match):
        matches = [make_match(similarity=100.0, kind=MatchType.exact_copy) for _ in range(30)]
        assert sentence_score(matches, CLEAN, [], RULES) == 100.0


class TestSentenceTier:
    def test_exact_match_count_escalates_to_critical(self):
        # six exact copies with a blended score below 70
        assert sentence_tier(40.0, 6, 0, RULES) == VerdictTier.critical

    def test_exact_match_count_escalates_to_high(self):
        assert sentence_tier(10.0, 3, 0, RULES) == VerdictTier.high

    def test_paraphrase_count_escalates_to_moderate(self):
        assert sentence_tier(10.0, 0, 5, RULES) == VerdictTier.moderate

    @pytest.mark.parametrize(
        "score,tier",
        [
            (75.0, VerdictTier.critical),
            (55.0, VerdictTier.high),
            (35.0, VerdictTier.moderate),
            (20.0, VerdictTier.low),
            (5.0, VerdictTier.safe),
        ],
    )
    def test_score_bands(self, score, tier):
        assert sentence_tier(score, 0, 0, RULES) == tier

    def test_six_exact_copies_end_to_end(self, make_match):
        matches = [make_match(similarity=96.0, kind=MatchType.exact_copy) for _ in range(6)]
        score = sentence_score(matches, CLEAN, [], RULES)
        verdict = sentence_verdict(score, 6, 0, 0, RULES)
        assert verdict.tier == VerdictTier.critical
        assert verdict.verdict == "Critical - High Plagiarism"


class TestSentenceVerdict:
    def test_style_shift_warning_appended(self):
        verdict = sentence_verdict(5.0, 0, 0, 2, RULES)
        assert verdict.verdict == "Original Work"
        assert verdict.message.endswith("Warning: 2 writing style shift(s) detected.")

    def test_recommendations(self):
        assert recommendation(VerdictTier.critical) == "Manual review required"
        assert recommendation(VerdictTier.moderate) == "Review recommended"
        assert recommendation(VerdictTier.low) == "No action needed"


class TestWeightedScore:
    def _metrics(self, semantic_error: bool):
        return [
            DocumentMetric(method="exact_match", score=1.0, isPlagiarism=True),
            DocumentMetric(method="lexical_similarity", score=0.5, isPlagiarism=False),
            DocumentMetric(method="ngram_similarity", score=0.5, isPlagiarism=False),
            DocumentMetric(method="structural_similarity", score=0.5, isPlagiarism=False),
            DocumentMetric(
                method="semantic_similarity",
                score=0.0,
                isPlagiarism=False,
                error=semantic_error,
            ),
        ]

    def test_failed_method_drops_out_of_denominator(self):
        # (0.3 + 0.1 + 0.05 + 0.05) / 0.7
        assert weighted_score(self._metrics(True), MethodWeights()) == pytest.approx(0.5 / 0.7)

    def test_zero_score_keeps_its_weight(self):
        assert weighted_score(self._metrics(False), MethodWeights()) == pytest.approx(0.5)

    def test_all_failed(self):
        metric = DocumentMetric(method="exact_match", score=1.0, isPlagiarism=True, error=True)
        assert weighted_score([metric], MethodWeights()) == 0.0


class TestDocumentVerdict:
    @pytest.mark.parametrize(
        "score,tier",
        [(0.9, VerdictTier.critical), (0.75, VerdictTier.high), (0.55, VerdictTier.moderate), (0.2, VerdictTier.safe)],
    )
    def test_tiers(self, score, tier):
        assert document_tier(score, RULES) == tier

    def test_flags_and_summary(self):
        metrics = [
            DocumentMetric(method="exact_match", score=0.97, isPlagiarism=True),
            DocumentMetric(method="lexical_similarity", score=0.9, isPlagiarism=True),
            DocumentMetric(method="ngram_similarity", score=0.2, isPlagiarism=False),
        ]
        verdict = document_verdict(0.9, metrics, RULES)
        assert verdict.verdict == "High Plagiarism Risk"
        assert verdict.overallScore == 90.0
        assert verdict.criticalFlags == 2
        assert verdict.flaggedMetrics == ["exact_match", "lexical_similarity"]
        assert document_summary([], verdict).action == "Manual review recommended"
        assert document_summary([], verdict).message == (
            "No significant similarity detected with previous submissions."
        )
