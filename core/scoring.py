# core/scoring.py
from typing import List, Sequence
from model.match import Match, MatchType
from model.report import (
    CitationReport,
    DocumentComparison,
    DocumentMetric,
    DocumentSummary,
    DocumentVerdict,
    Verdict,
    VerdictTier,
)
from model.style import ShiftSeverity, StyleShift
from model.thresholds import MethodWeights, ScoringRules
from util.constants import HeatmapColors

NO_COMPARISON_VERDICT = Verdict(
    verdict="Cannot Determine",
    tier=VerdictTier.info,
    color=HeatmapColors.GREY,
    overallScore=0.0,
    message="No peer comparison data available",
)

_SENTENCE_TIERS = {
    VerdictTier.critical: (
        "Critical - High Plagiarism",
        HeatmapColors.RED,
        "Significant plagiarism detected. Manual review required immediately.",
    ),
    VerdictTier.high: (
        "High Risk",
        HeatmapColors.ORANGE,
        "Substantial similarity found. Instructor review strongly recommended.",
    ),
    VerdictTier.moderate: (
        "Moderate Risk",
        HeatmapColors.YELLOW,
        "Notable similarities detected. Review suggested.",
    ),
    VerdictTier.low: (
        "Low Risk",
        HeatmapColors.LIGHT_GREEN,
        "Minor similarities found. Likely acceptable overlap.",
    ),
    VerdictTier.safe: (
        "Original Work",
        HeatmapColors.GREEN,
        "No significant plagiarism detected. Work appears original.",
    ),
}

_DOCUMENT_TIERS = {
    VerdictTier.critical: ("High Plagiarism Risk", HeatmapColors.RED, "Manual review recommended"),
    VerdictTier.high: ("Moderate Plagiarism Risk", HeatmapColors.ORANGE, "Instructor review suggested"),
    VerdictTier.moderate: ("Low Plagiarism Risk", HeatmapColors.YELLOW, "No action needed"),
    VerdictTier.safe: ("Minimal Plagiarism Risk", HeatmapColors.GREEN, "No action needed"),
}


def failed_verdict(message: str) -> Verdict:
    return Verdict(
        verdict="Detection Failed",
        tier=VerdictTier.error,
        color=HeatmapColors.GREY,
        overallScore=0.0,
        message=message,
    )


# ---------------- Sentence level ----------------


def count_type(matches: Sequence[Match], kind: MatchType) -> int:
    return sum(1 for m in matches if m.type == kind)


def high_severity_shifts(shifts: Sequence[StyleShift]) -> int:
    return sum(1 for s in shifts if s.severity == ShiftSeverity.high)


def sentence_score(
    matches: Sequence[Match],
    citations: CitationReport,
    shifts: Sequence[StyleShift],
    rules: ScoringRules,
) -> float:
    """
    avg_similarity * 0.6 + min(100, count * 5) * 0.3 + exact_count * 2,
    plus citation and high-severity style penalties, clamped to [0, 100].
    No matches scores 0 regardless of penalties.
    """
    if not matches:
        return 0.0
    avg = sum(m.similarity for m in matches) / len(matches)
    volume = min(100.0, len(matches) * rules.pointsPerMatch)
    exact = count_type(matches, MatchType.exact_copy)
    base = avg * rules.avgSimilarityWeight + volume * rules.matchCountWeight + exact * rules.exactMatchBonus

    penalty = 0.0
    if not citations.properlyFormatted:
        penalty += rules.citationPenalty
    penalty += high_severity_shifts(shifts) * rules.highShiftPenalty

    return round(max(0.0, min(100.0, base + penalty)), 1)


def sentence_tier(score: float, exact: int, paraphrases: int, rules: ScoringRules) -> VerdictTier:
    """Strict order, first rule wins; count rules can escalate a low blended score."""
    if score >= rules.criticalScore or exact >= rules.criticalExactMatches:
        return VerdictTier.critical
    if score >= rules.highScore or exact >= rules.highExactMatches:
        return VerdictTier.high
    if score >= rules.moderateScore or paraphrases >= rules.moderateParaphrases:
        return VerdictTier.moderate
    if score >= rules.lowScore:
        return VerdictTier.low
    return VerdictTier.safe


def sentence_verdict(
    score: float, exact: int, paraphrases: int, shift_count: int, rules: ScoringRules
) -> Verdict:
    tier = sentence_tier(score, exact, paraphrases, rules)
    label, color, message = _SENTENCE_TIERS[tier]
    if shift_count > 0:
        message += f" Warning: {shift_count} writing style shift(s) detected."
    return Verdict(verdict=label, tier=tier, color=color, overallScore=score, message=message)


def recommendation(tier: VerdictTier) -> str:
    if tier in (VerdictTier.critical, VerdictTier.high):
        return "Manual review required"
    if tier == VerdictTier.moderate:
        return "Review recommended"
    return "No action needed"


# ---------------- Document level ----------------


def weighted_score(metrics: Sequence[DocumentMetric], weights: MethodWeights) -> float:
    """
    Weighted mean over metrics that produced a score. A failed metric
    (error=True) drops out of both numerator and denominator.
    """
    total = 0.0
    weight_sum = 0.0
    for m in metrics:
        if m.error:
            continue
        w = weights.for_method(m.method)
        total += m.score * w
        weight_sum += w
    if weight_sum <= 0:
        return 0.0
    return total / weight_sum


def document_tier(score: float, rules: ScoringRules) -> VerdictTier:
    if score >= rules.documentCritical:
        return VerdictTier.critical
    if score >= rules.documentHigh:
        return VerdictTier.high
    if score >= rules.documentModerate:
        return VerdictTier.moderate
    return VerdictTier.safe


def document_verdict(
    highest: float, top_metrics: Sequence[DocumentMetric], rules: ScoringRules
) -> DocumentVerdict:
    tier = document_tier(highest, rules)
    label, color, action = _DOCUMENT_TIERS[tier]
    flagged = [m.method for m in top_metrics if m.isPlagiarism]
    return DocumentVerdict(
        verdict=label,
        tier=tier,
        color=color,
        overallScore=round(highest * 100, 1),
        message=action,
        criticalFlags=len(flagged),
        flaggedMetrics=flagged,
    )


def document_summary(results: List[DocumentComparison], verdict: DocumentVerdict) -> DocumentSummary:
    if not results:
        message = "No significant similarity detected with previous submissions."
    else:
        message = f"Found {len(results)} submission(s) with notable similarity."
    return DocumentSummary(message=message, action=_DOCUMENT_TIERS[verdict.tier][2])
