# model/report.py
from datetime import datetime
from enum import Enum
from typing import Any
from pydantic import BaseModel, ConfigDict
from model.match import Match, MatchType
from model.style import StyleProfile, StyleShift
from util.types import DocumentMethod, ReasonCode


class VerdictTier(str, Enum):
    safe = "safe"
    low = "low"
    moderate = "moderate"
    high = "high"
    critical = "critical"
    # Not risk tiers: "could not evaluate" and "failed to run"
    info = "info"
    error = "error"


class Verdict(BaseModel):
    model_config = ConfigDict(frozen=True)

    verdict: str
    tier: VerdictTier
    color: str
    overallScore: float = 0.0
    message: str


class ReportWarning(BaseModel):
    code: ReasonCode
    message: str
    sourceId: str | None = None


# ---------------- Citations ----------------


class CitationPatterns(BaseModel):
    parenthetical: list[str] = []
    numeric: list[str] = []
    footnote: list[str] = []
    apa: list[str] = []
    total: int = 0


class CitationReport(BaseModel):
    quotedText: list[str] = []
    quotedCount: int = 0
    citations: CitationPatterns = CitationPatterns()
    hasReferencesSection: bool = False
    properlyFormatted: bool = True
    warning: str | None = None
    score: float = 0.8


# ---------------- Derived views ----------------


class HeatmapEntry(BaseModel):
    text: str
    start: int
    end: int
    similarity: float
    color: str
    hasMatch: bool
    matchCount: int


class HighlightRange(BaseModel):
    start: int
    end: int
    similarity: float
    color: str
    type: MatchType


class Visualization(BaseModel):
    heatmap: list[HeatmapEntry] = []
    highlightRanges: list[HighlightRange] = []


class SourceAttribution(BaseModel):
    sourceId: str
    authorId: str | None = None
    submittedOn: datetime | None = None
    matchCount: int
    totalSimilarity: float
    avgSimilarity: float


class Timeline(BaseModel):
    analysis: str
    currentSubmission: datetime | None = None
    totalMatchedSubmissions: int = 0
    earliestMatch: SourceAttribution | None = None
    likelyOriginal: str | None = None
    sources: list[SourceAttribution] = []
    verdict: str | None = None
    disclaimer: str


# ---------------- Sentence-level report ----------------


class SentenceLevelStats(BaseModel):
    total: int = 0
    exactCopies: int = 0
    paraphrases: int = 0
    nearDuplicates: int = 0
    similarContent: int = 0


class CitationStats(BaseModel):
    detected: bool = False
    properlyFormatted: bool = True
    total: int = 0


class StyleStats(BaseModel):
    consistent: bool = True
    shiftsDetected: int = 0
    sufficientData: bool = False


class DetectionMethods(BaseModel):
    sentenceLevel: SentenceLevelStats
    citations: CitationStats
    styleAnalysis: StyleStats


class StyleAnalysis(BaseModel):
    overallStyle: StyleProfile | None = None
    shifts: list[StyleShift] = []
    consistent: bool = True
    sufficientData: bool = False


class Summary(BaseModel):
    totalComparisons: int = 0
    matchesFound: int = 0
    highConfidenceMatches: int = 0
    recommendation: str = "No action needed"


class Report(BaseModel):
    """
    One evaluation of a submission against a comparison set.
    `checked=False, error=True` means the engine failed to run, which is
    distinct from a clean run that found nothing.
    """

    checked: bool = True
    error: bool = False
    noComparisons: bool = False
    message: str | None = None
    overallScore: float = 0.0
    verdict: Verdict
    detectionMethods: DetectionMethods | None = None
    sentenceMatches: list[Match] = []
    citations: CitationReport | None = None
    styleAnalysis: StyleAnalysis | None = None
    timeline: Timeline | None = None
    visualization: Visualization | None = None
    summary: Summary | None = None
    warnings: list[ReportWarning] = []


# ---------------- Document-level report ----------------


class DocumentMetric(BaseModel):
    method: DocumentMethod
    score: float
    isPlagiarism: bool
    # error=True removes the metric from the weighted blend
    error: bool = False
    reason: ReasonCode | None = None
    details: dict[str, Any] = {}


class SentencePair(BaseModel):
    sentence1: str
    sentence2: str
    similarity: float
    index1: int
    index2: int


class DocumentComparison(BaseModel):
    sourceId: str
    authorId: str | None = None
    submittedOn: datetime | None = None
    overallScore: float
    percentageMatch: float
    metrics: list[DocumentMetric]
    matchingSentences: list[SentencePair] = []
    isSuspicious: bool
    fingerprintOverlap: float = 0.0
    identicalText: bool = False


class DocumentVerdict(Verdict):
    criticalFlags: int = 0
    flaggedMetrics: list[DocumentMethod] = []


class DocumentSummary(BaseModel):
    message: str
    action: str


class DocumentComparisonReport(BaseModel):
    checked: bool = True
    error: bool = False
    noComparisons: bool = False
    message: str | None = None
    totalComparisons: int = 0
    suspiciousMatches: int = 0
    highestSimilarity: float = 0.0
    verdict: DocumentVerdict
    detailedResults: list[DocumentComparison] = []
    summary: DocumentSummary | None = None
    warnings: list[ReportWarning] = []
