# util/errors.py
from fastapi import HTTPException, status


class AppError(HTTPException):
    # Flow: raise AppError to short-circuit with a typed status & message.
    def __init__(
        self, message: str, http_status: int = status.HTTP_400_BAD_REQUEST
    ) -> None:
        super().__init__(status_code=http_status, detail=message)


class DetectionError(Exception):
    """
    Base for failures inside the detection engine.
    `code` is the reason code surfaced in report warnings.
    """

    code: str = "detection_error"

    def __init__(self, message: str, *, source_id: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.source_id = source_id


class MalformedInputError(DetectionError):
    # Empty or non-text document/candidate; the candidate is skipped.
    code = "malformed_input"


class OracleUnavailableError(DetectionError):
    # Embedding model or semantic judge absent/erroring; that comparison degrades.
    code = "judge_unavailable"
