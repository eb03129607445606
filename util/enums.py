# util/enums.py
from enum import Enum
from typing import NamedTuple
from fastapi import status


class Color(str, Enum):
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    MAGENTA = "\033[35m"
    CYAN = "\033[36m"
    BOLD = "\033[1m"

    def __str__(self):
        return self.value


class Environment(str, Enum):
    DEV = "dev"
    PROD = "prod"


class ErrorInfo(NamedTuple):
    message: str
    http_status: int


class ErrorMessage(Enum):
    UNSUPPORTED_FILE = ErrorInfo("Unsupported file type", status.HTTP_400_BAD_REQUEST)
    UNREADABLE_PDF = ErrorInfo(
        "No text could be extracted from the PDF", status.HTTP_422_UNPROCESSABLE_ENTITY
    )
    INVALID_CANDIDATES = ErrorInfo(
        "Candidates must be a JSON array", status.HTTP_400_BAD_REQUEST
    )
    INVALID_THRESHOLDS = ErrorInfo(
        "Thresholds must be a JSON object of detection settings",
        status.HTTP_422_UNPROCESSABLE_ENTITY,
    )
