# model/thresholds.py
from pydantic import BaseModel, ConfigDict, Field
from util.types import DocumentMethod


class MethodWeights(BaseModel):
    """Document-level blend weights, renormalised over the methods that produced a score."""

    model_config = ConfigDict(frozen=True)

    exactMatch: float = Field(default=0.30, ge=0)
    lexical: float = Field(default=0.20, ge=0)
    semantic: float = Field(default=0.30, ge=0)
    structural: float = Field(default=0.10, ge=0)
    ngram: float = Field(default=0.10, ge=0)

    def for_method(self, method: DocumentMethod) -> float:
        return {
            "exact_match": self.exactMatch,
            "lexical_similarity": self.lexical,
            "semantic_similarity": self.semantic,
            "structural_similarity": self.structural,
            "ngram_similarity": self.ngram,
        }[method]


class MethodThresholds(BaseModel):
    """Per-method score at which a single document-level metric is flagged."""

    model_config = ConfigDict(frozen=True)

    exactMatch: float = Field(default=0.95, ge=0, le=1)
    lexical: float = Field(default=0.80, ge=0, le=1)
    semantic: float = Field(default=0.85, ge=0, le=1)
    structural: float = Field(default=0.75, ge=0, le=1)
    ngram: float = Field(default=0.70, ge=0, le=1)

    def for_method(self, method: DocumentMethod) -> float:
        return {
            "exact_match": self.exactMatch,
            "lexical_similarity": self.lexical,
            "semantic_similarity": self.semantic,
            "structural_similarity": self.structural,
            "ngram_similarity": self.ngram,
        }[method]


class ScoringRules(BaseModel):
    model_config = ConfigDict(frozen=True)

    # Sentence-level score composition (percent scale)
    avgSimilarityWeight: float = 0.6
    matchCountWeight: float = 0.3
    pointsPerMatch: float = 5.0
    exactMatchBonus: float = 2.0
    citationPenalty: float = 10.0
    highShiftPenalty: float = 5.0

    # Sentence-level verdict tiers (percent scale / counts)
    criticalScore: float = 70.0
    criticalExactMatches: int = 5
    highScore: float = 50.0
    highExactMatches: int = 3
    moderateScore: float = 30.0
    moderateParaphrases: int = 5
    lowScore: float = 15.0

    # Document-level verdict tiers (0..1 scale)
    documentCritical: float = 0.85
    documentHigh: float = 0.70
    documentModerate: float = 0.50


class DetectionThresholds(BaseModel):
    """
    Immutable tuning knobs for one evaluation.
    Passed per invocation; callers override by building a new instance
    (e.g. `DetectionThresholds(exactMatch=0.9)` or `t.model_copy(update=...)`).
    """

    model_config = ConfigDict(frozen=True)

    # Sentence matching (0..1)
    exactMatch: float = Field(default=0.95, ge=0, le=1)
    highSimilarity: float = Field(default=0.85, ge=0, le=1)
    moderateSimilarity: float = Field(default=0.70, ge=0, le=1)
    semanticMatch: float = Field(default=0.90, ge=0, le=1)
    prefilter: float = Field(default=0.60, ge=0, le=1)
    matchThreshold: float = Field(default=0.75, ge=0, le=1)

    # Segmentation
    minSentenceChars: int = Field(default=20, ge=0)
    minSentenceWords: int = Field(default=3, ge=0)
    minParagraphChars: int = Field(default=100, ge=0)

    # Style shifts
    styleLexicalShift: float = 0.15
    styleLexicalHigh: float = 0.25
    styleSentenceShift: float = 5.0
    styleSentenceHigh: float = 10.0
    styleReadabilityShift: float = 20.0

    # Citations
    citationRatio: float = Field(default=0.5, ge=0)

    # Document-level comparison (0..1)
    semanticGate: float = Field(default=0.5, ge=0, le=1)
    reportDocument: float = Field(default=0.4, ge=0, le=1)
    suspiciousDocument: float = Field(default=0.5, ge=0, le=1)
    documentSentenceMatch: float = Field(default=0.7, ge=0, le=1)
    ngramSize: int = Field(default=3, ge=1)

    # Report sizes
    sentenceMatchesReported: int = Field(default=20, ge=0)
    highlightRangesReported: int = Field(default=50, ge=0)
    documentMatchesReported: int = Field(default=5, ge=0)

    weights: MethodWeights = MethodWeights()
    methodThresholds: MethodThresholds = MethodThresholds()
    scoring: ScoringRules = ScoringRules()


DEFAULT_THRESHOLDS = DetectionThresholds()
