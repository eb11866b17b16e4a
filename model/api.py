from typing import Any
from pydantic import BaseModel
from model.claim import ClaimAnalysis, ReportAnalysis


# Flow: fields stay loosely typed so the service can answer with the exact
# "required" messages, and odd context values fall back instead of failing the request.
class AnalyzeClaimRequest(BaseModel):
    claimText: Any = None
    companyName: Any = None
    sector: Any = None


class AnalyzeClaimsRequest(BaseModel):
    claims: Any = None
    companyName: Any = None
    sector: Any = None


class AnalyzeClaimResponse(BaseModel):
    analysis: ClaimAnalysis


class AnalyzeClaimsResponse(BaseModel):
    analysis: ReportAnalysis


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    ok: bool
