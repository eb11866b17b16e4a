import math
from typing import Any
from pydantic import BaseModel, Field, field_validator
from util.constants import Fallback
from util.enums import RiskLevel


def _coerce_score(v: Any) -> int:
    # Models occasionally answer "8", 7.5 or "8/10"; clamp whatever we can read into [1, 10]
    if isinstance(v, str):
        v = v.split("/")[0].strip()
    try:
        f = float(v)
    except (TypeError, ValueError):
        return Fallback.SCORE
    if math.isnan(f) or math.isinf(f):
        return Fallback.SCORE
    return max(1, min(10, int(round(f))))


def _coerce_risk(v: Any) -> RiskLevel:
    if isinstance(v, RiskLevel):
        return v
    if isinstance(v, str):
        for level in RiskLevel:
            if v.strip().lower() == level.value.lower():
                return level
    return RiskLevel.MEDIUM


def _coerce_str_list(v: Any) -> list[str]:
    if v is None:
        return []
    if isinstance(v, str):
        return [v] if v.strip() else []
    if isinstance(v, (list, tuple)):
        return [x if isinstance(x, str) else str(x) for x in v if x is not None]
    return [str(v)]


def _coerce_text(v: Any) -> str:
    if v is None:
        return ""
    return v if isinstance(v, str) else str(v)


class ClaimInput(BaseModel):
    id: str
    text: str = Field(min_length=1)


class BaseClaimAnalysis(BaseModel):
    claimType: str = Fallback.CLAIM_TYPE
    specificityScore: int = Fallback.SCORE
    verifiabilityScore: int = Fallback.SCORE
    keyMetrics: list[str] = Field(default_factory=list)
    redFlags: list[str] = Field(default_factory=list)
    riskLevel: RiskLevel = RiskLevel.MEDIUM
    summary: str = ""

    @field_validator("claimType", mode="before")
    @classmethod
    def _claim_type(cls, v: Any) -> str:
        text = _coerce_text(v).strip()
        return text or Fallback.CLAIM_TYPE

    @field_validator("specificityScore", "verifiabilityScore", mode="before")
    @classmethod
    def _score(cls, v: Any) -> int:
        return _coerce_score(v)

    @field_validator("keyMetrics", "redFlags", mode="before")
    @classmethod
    def _lists(cls, v: Any) -> list[str]:
        return _coerce_str_list(v)

    @field_validator("riskLevel", mode="before")
    @classmethod
    def _risk(cls, v: Any) -> RiskLevel:
        return _coerce_risk(v)

    @field_validator("summary", mode="before")
    @classmethod
    def _summary(cls, v: Any) -> str:
        return _coerce_text(v)


class ClaimAnalysis(BaseClaimAnalysis):
    """Single-claim analysis; carries suggested verification sources."""

    verificationApproach: list[str] = Field(default_factory=list)

    @field_validator("verificationApproach", mode="before")
    @classmethod
    def _approach(cls, v: Any) -> list[str]:
        return _coerce_str_list(v)


class ReportClaimAnalysis(BaseClaimAnalysis):
    """Per-claim entry of a multi-claim report, keyed by the caller's claim id."""

    id: str

    @field_validator("id", mode="before")
    @classmethod
    def _id(cls, v: Any) -> str:
        return _coerce_text(v).strip()


class RelationshipFinding(BaseModel):
    claimIds: list[str]
    description: str = ""

    @field_validator("claimIds", mode="before")
    @classmethod
    def _ids(cls, v: Any) -> list[str]:
        return [s.strip() for s in _coerce_str_list(v)]

    @field_validator("description", mode="before")
    @classmethod
    def _description(cls, v: Any) -> str:
        return _coerce_text(v)


class ContradictionFinding(RelationshipFinding):
    severity: RiskLevel = RiskLevel.MEDIUM

    @field_validator("severity", mode="before")
    @classmethod
    def _severity(cls, v: Any) -> RiskLevel:
        return _coerce_risk(v)


class ClaimRelationships(BaseModel):
    contradictions: list[ContradictionFinding] = Field(default_factory=list)
    supporting: list[RelationshipFinding] = Field(default_factory=list)
    duplicates: list[RelationshipFinding] = Field(default_factory=list)
    inconsistencies: list[RelationshipFinding] = Field(default_factory=list)


class ReportAnalysis(BaseModel):
    claims: list[ReportClaimAnalysis]
    relationships: ClaimRelationships = Field(default_factory=ClaimRelationships)
    overallRiskLevel: RiskLevel = RiskLevel.MEDIUM
    reportSummary: str = ""

    @field_validator("overallRiskLevel", mode="before")
    @classmethod
    def _overall_risk(cls, v: Any) -> RiskLevel:
        return _coerce_risk(v)

    @field_validator("reportSummary", mode="before")
    @classmethod
    def _report_summary(cls, v: Any) -> str:
        return _coerce_text(v)
