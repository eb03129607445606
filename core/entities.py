# core/entities.py
from dataclasses import dataclass, field
from typing import Optional, Tuple
from util.types import ReasonCode, SemanticMethod


@dataclass(frozen=True)
class Fingerprint:
    """
    Hash signature of normalized text. Pre-filter only, never a verdict on its own.
    """

    primary_hash: int  # uint32 of normalized text
    secondary_hash: int  # uint32 of the character-reversed normalized text
    ngram_hashes: Tuple[int, ...]  # first 20 overlapping 5-word n-grams


@dataclass(frozen=True)
class Segment:
    text: str
    start: int  # char offset into the original (non-normalized) text
    end: int
    index: int = 0  # position in document order


@dataclass(frozen=True)
class SemanticOutcome:
    score: float  # 0..1
    method: SemanticMethod
    reason: Optional[ReasonCode] = None  # set when the embedding path was not used


@dataclass
class JudgeResult:
    semantic_similarity: float
    is_plagiarism: bool
    reasoning: str = ""
    paraphrased_sections: list[str] = field(default_factory=list)
    shared_concepts: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class JudgeOutcome:
    score: float
    is_plagiarism: bool
    error: bool = False
    reason: Optional[ReasonCode] = None
    result: Optional[JudgeResult] = None
