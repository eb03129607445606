# service/plagiarism_service.py
import json
import logging
from datetime import datetime
from typing import Any, List, Optional
from fastapi import UploadFile
from pydantic import ValidationError
from config.settings import settings
from core.detection_engine import PlagiarismEngine
from core.pdf_text import extract_submission_text
from core.semantic_judge import AnthropicSemanticJudge, SemanticJudge
from model.api import (
    AnalyzeStyleRequest,
    AnalyzeStyleResponse,
    CheckRequest,
    CompareDocumentsRequest,
)
from model.report import DocumentComparisonReport, Report
from model.thresholds import DetectionThresholds
from util.enums import ErrorMessage
from util.errors import AppError
from util.timing import timed

logger = logging.getLogger(__name__)

_PDF_TYPES = {"application/pdf", "application/x-pdf"}


def _raise(error: ErrorMessage) -> None:
    raise AppError(error.value.message, error.value.http_status)


class PlagiarismService:
    """
    HTTP-facing wrapper: request models in, reports out. Timing lives here so
    reports stay free of wall-clock data.
    """

    def __init__(self, engine: PlagiarismEngine) -> None:
        self._engine = engine

    async def check(self, req: CheckRequest) -> Report:
        submitted_on = req.metadata.submittedOn if req.metadata else None
        with timed(
            logger,
            "check",
            candidates=len(req.candidates),
            references=len(req.referenceSources),
            internet=req.checkInternet,
        ):
            report = await self._engine.check(
                req.text,
                req.candidates,
                reference_sources=req.referenceSources,
                check_internet=req.checkInternet,
                submitted_on=submitted_on,
                thresholds=req.thresholds,
            )
        if report.error:
            logger.warning("check.error message=%s", report.message)
        return report

    async def check_file(
        self,
        file: UploadFile,
        candidates_json: str,
        check_internet: bool = False,
        reference_sources_json: str = "[]",
        submitted_on: Optional[datetime] = None,
        thresholds_json: Optional[str] = None,
    ) -> Report:
        filename = (file.filename or "").lower()
        if file.content_type not in _PDF_TYPES and not filename.endswith(".pdf"):
            logger.warning("upload.unsupported type=%s", file.content_type)
            _raise(ErrorMessage.UNSUPPORTED_FILE)

        candidates = self._parse_list(candidates_json)
        references = self._parse_list(reference_sources_json)
        thresholds = self._parse_thresholds(thresholds_json)

        try:
            data = await file.read()
        except Exception:
            logger.error("upload.read.error")
            raise
        text = extract_submission_text(data)
        if not text.strip():
            logger.warning("upload.empty_text bytes=%d", len(data))
            _raise(ErrorMessage.UNREADABLE_PDF)
        logger.info("upload.ok bytes=%d chars=%d", len(data), len(text))

        with timed(logger, "check.file", candidates=len(candidates)):
            return await self._engine.check(
                text,
                candidates,
                reference_sources=references,
                check_internet=check_internet,
                submitted_on=submitted_on,
                thresholds=thresholds,
            )

    async def compare_documents(self, req: CompareDocumentsRequest) -> DocumentComparisonReport:
        judge = self._judge_for(req.apiKey)
        with timed(
            logger, "compare", candidates=len(req.candidates), judge=judge is not None
        ):
            return await self._engine.compare_documents(
                req.text, req.candidates, thresholds=req.thresholds, judge=judge
            )

    def analyze_style(self, req: AnalyzeStyleRequest) -> AnalyzeStyleResponse:
        with timed(logger, "style.analyze", chars=len(req.text)):
            return self._engine.analyze_style(req.text, req.thresholds)

    @staticmethod
    def _judge_for(api_key: Optional[str]) -> Optional[SemanticJudge]:
        # Request key wins over the configured one; neither means embeddings only
        key = api_key or settings.ANTHROPIC_API_KEY
        if not key:
            return None
        return AnthropicSemanticJudge(api_key=key)

    @staticmethod
    def _parse_list(raw: Optional[str]) -> List[Any]:
        if not raw:
            return []
        try:
            parsed = json.loads(raw)
        except ValueError:
            logger.warning("upload.candidates.invalid_json")
            _raise(ErrorMessage.INVALID_CANDIDATES)
        if not isinstance(parsed, list):
            _raise(ErrorMessage.INVALID_CANDIDATES)
        return parsed

    @staticmethod
    def _parse_thresholds(raw: Optional[str]) -> Optional[DetectionThresholds]:
        if not raw or not raw.strip():
            return None
        try:
            return DetectionThresholds.model_validate_json(raw)
        except ValidationError as e:
            logger.warning("upload.thresholds.invalid errors=%d", e.error_count())
            _raise(ErrorMessage.INVALID_THRESHOLDS)
