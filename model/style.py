# model/style.py
from enum import Enum
from pydantic import BaseModel, Field


class StyleProfile(BaseModel):
    lexicalDiversity: float = Field(ge=0, le=1)
    avgWordsPerSentence: float
    punctuationDensity: float
    exclamationRate: float
    questionRate: float
    adjectiveRate: float
    verbRate: float
    nounRate: float
    readabilityScore: float
    fingerprint: str
    # False when the POS tagger model was unavailable and the three rates are 0
    posTagged: bool = True


class ShiftSeverity(str, Enum):
    high = "high"
    medium = "medium"


class StyleShift(BaseModel):
    paragraphIndex: int
    severity: ShiftSeverity
    lexicalDelta: float
    sentenceLengthDelta: float
    readabilityDelta: float
    suspicion: str


class AverageStyle(BaseModel):
    lexicalDiversity: float
    avgWordsPerSentence: float


class StyleShiftResult(BaseModel):
    shifts: list[StyleShift] = []
    consistent: bool = True
    # False when fewer than two paragraphs qualified: "consistent" is then a convention
    sufficientData: bool = False
    paragraphsAnalyzed: int = 0
    avgStyle: AverageStyle | None = None
