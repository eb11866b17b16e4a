from enum import Enum
from typing import NamedTuple
from fastapi import status


class Color(str, Enum):
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    BLUE = "\033[34m"

    def __str__(self):
        return self.value


class Environment(str, Enum):
    DEV = "dev"
    PROD = "prod"


class RiskLevel(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class AnalysisResult(str, Enum):
    STRUCTURED = "structured"
    FALLBACK = "fallback"


class ErrorInfo(NamedTuple):
    message: str
    http_status: int


class ErrorMessage(Enum):
    CLAIM_TEXT_REQUIRED = ErrorInfo(
        "Claim text is required", status.HTTP_400_BAD_REQUEST
    )
    CLAIMS_REQUIRED = ErrorInfo(
        "At least one claim is required", status.HTTP_400_BAD_REQUEST
    )
    CLAIM_ITEM_INVALID = ErrorInfo(
        "Each claim must have non-empty text", status.HTTP_400_BAD_REQUEST
    )
    CLAIM_IDS_NOT_UNIQUE = ErrorInfo(
        "Claim ids must be unique", status.HTTP_400_BAD_REQUEST
    )
    INVALID_BODY = ErrorInfo("Invalid request body", status.HTTP_400_BAD_REQUEST)
    NOT_CONFIGURED = ErrorInfo(
        "AI service not configured", status.HTTP_500_INTERNAL_SERVER_ERROR
    )
    UPSTREAM_RATE_LIMITED = ErrorInfo(
        "Rate limit exceeded. Please try again later.",
        status.HTTP_429_TOO_MANY_REQUESTS,
    )
    UPSTREAM_CREDITS_DEPLETED = ErrorInfo(
        "AI credits depleted. Please add funds.", status.HTTP_402_PAYMENT_REQUIRED
    )
    ANALYZE_CLAIM_FAILED = ErrorInfo(
        "Failed to analyze claim", status.HTTP_500_INTERNAL_SERVER_ERROR
    )
    ANALYZE_CLAIMS_FAILED = ErrorInfo(
        "Failed to analyze claims", status.HTTP_500_INTERNAL_SERVER_ERROR
    )
    TOO_MANY_REQUESTS = ErrorInfo(
        "Too many requests. Try again later.", status.HTTP_429_TOO_MANY_REQUESTS
    )
    INTERNAL_ERROR = ErrorInfo("Internal Error", status.HTTP_500_INTERNAL_SERVER_ERROR)
