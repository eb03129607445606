# model/match.py
from datetime import datetime
from enum import Enum
from pydantic import BaseModel, Field
from util.types import CandidateOrigin, SemanticMethod


class MatchType(str, Enum):
    exact_copy = "exact_copy"
    paraphrase = "paraphrase"
    near_duplicate = "near_duplicate"
    similar_content = "similar_content"


class MatchConfidence(str, Enum):
    very_high = "very_high"
    high = "high"
    medium = "medium"
    low = "low"


class SegmentSpan(BaseModel):
    text: str
    startOffset: int
    endOffset: int


class Match(BaseModel):
    originalSegment: SegmentSpan
    matchedSegment: SegmentSpan
    sourceId: str
    authorId: str | None = None
    submittedOn: datetime | None = None
    origin: CandidateOrigin = "peer"

    # Effective similarity, percent
    similarity: float = Field(ge=0, le=100)
    lexicalSimilarity: float = Field(ge=0, le=1)
    semanticSimilarity: float = Field(ge=0, le=1)
    semanticMethod: SemanticMethod
    type: MatchType
    confidence: MatchConfidence
    isDirect: bool
    isParaphrase: bool
