# model/api.py
from typing import Any
from pydantic import BaseModel, Field
from model.report import CitationReport
from model.style import StyleProfile, StyleShiftResult
from model.submission import SubmissionMetadata
from model.thresholds import DetectionThresholds


class CheckRequest(BaseModel):
    text: str = Field(min_length=1)
    # Validated one by one by the engine; malformed entries become report warnings
    candidates: list[Any] = []
    referenceSources: list[Any] = []
    checkInternet: bool = False
    metadata: SubmissionMetadata | None = None
    thresholds: DetectionThresholds | None = None


class CompareDocumentsRequest(BaseModel):
    text: str = Field(min_length=1)
    candidates: list[Any] = []
    thresholds: DetectionThresholds | None = None
    apiKey: str | None = None


class AnalyzeStyleRequest(BaseModel):
    text: str = Field(min_length=1)
    thresholds: DetectionThresholds | None = None


class AnalyzeStyleResponse(BaseModel):
    overallStyle: StyleProfile | None = None
    styleShifts: StyleShiftResult
    citations: CitationReport
