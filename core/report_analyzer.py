from typing import Any, Optional, Sequence, Type, TypeVar
from pydantic import ValidationError
from config.settings import settings
from core.claim_analyzer import context_label
from core.entities import ChatPrompt, Structured
from core.gateway_client import GatewayClient
from core.json_extract import interpret
from model.claim import (
    ClaimInput,
    ClaimRelationships,
    ContradictionFinding,
    RelationshipFinding,
    ReportAnalysis,
    ReportClaimAnalysis,
)
from util.constants import Fallback
from util.enums import AnalysisResult, RiskLevel
import logging

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=RelationshipFinding)

REPORT_ANALYSIS_SCHEMA = """{
  "claims": [
    {
      "id": "claim_id_here",
      "claimType": "string",
      "specificityScore": number,
      "verifiabilityScore": number,
      "keyMetrics": ["string"],
      "redFlags": ["string"],
      "riskLevel": "Low" | "Medium" | "High",
      "summary": "string (1-2 sentences)"
    }
  ],
  "relationships": {
    "contradictions": [
      {
        "claimIds": ["id1", "id2"],
        "description": "Why these claims contradict",
        "severity": "High" | "Medium" | "Low"
      }
    ],
    "supporting": [
      {
        "claimIds": ["id1", "id2"],
        "description": "How these claims support each other"
      }
    ],
    "duplicates": [
      {
        "claimIds": ["id1", "id2"],
        "description": "Why these are essentially duplicates"
      }
    ],
    "inconsistencies": [
      {
        "claimIds": ["id1", "id2"],
        "description": "Timeline or scope mismatches"
      }
    ]
  },
  "overallRiskLevel": "Low" | "Medium" | "High",
  "reportSummary": "string (2-3 sentences summarizing the overall claim landscape)"
}"""


def format_claims(claims: Sequence[ClaimInput]) -> str:
    """
    One line per claim, 1-based: [Claim <n> - ID: <id>]: "<text>", separated by a blank line.
    """
    return "\n\n".join(
        f'[Claim {i} - ID: {c.id}]: "{c.text}"' for i, c in enumerate(claims, start=1)
    )


def build_prompt(
    claims: Sequence[ClaimInput], company_name: Optional[str], sector: Optional[str]
) -> ChatPrompt:
    user = (
        f"Analyze these ESG claims from {context_label(company_name, sector)}:\n\n"
        f"{format_claims(claims)}\n\n"
        f"Provide analysis in this JSON format:\n"
        f"{REPORT_ANALYSIS_SCHEMA}"
    )
    return ChatPrompt(system=settings.ANALYZE_CLAIMS_SYSTEM_PROMPT, user=user)


def fallback_claim(claim_id: str) -> ReportClaimAnalysis:
    return ReportClaimAnalysis(
        id=claim_id,
        claimType=Fallback.CLAIM_TYPE,
        specificityScore=Fallback.SCORE,
        verifiabilityScore=Fallback.SCORE,
        keyMetrics=[],
        redFlags=[Fallback.RED_FLAG],
        riskLevel=RiskLevel.MEDIUM,
        summary=Fallback.SUMMARY,
    )


def fallback_report(claims: Sequence[ClaimInput]) -> ReportAnalysis:
    return ReportAnalysis(
        claims=[fallback_claim(c.id) for c in claims],
        relationships=ClaimRelationships(),
        overallRiskLevel=RiskLevel.MEDIUM,
        reportSummary=Fallback.REPORT_SUMMARY,
    )


def _as_list(v: Any) -> list:
    return v if isinstance(v, list) else []


def _findings(items: Any, model: Type[F], known: set[str]) -> list[F]:
    """
    Keep findings that name at least two distinct request claims and nothing else.
    """
    out: list[F] = []
    for item in _as_list(items):
        if not isinstance(item, dict):
            continue
        try:
            finding = model.model_validate(item)
        except ValidationError:
            continue
        ids = finding.claimIds
        if len(set(ids)) < 2 or not set(ids) <= known:
            logger.warning("ai.analyze.claims.finding_dropped ids=%s", ids)
            continue
        out.append(finding)
    return out


def reconcile(data: dict, claims: Sequence[ClaimInput]) -> ReportAnalysis:
    """
    Align a parsed model reply with the submitted claims:
    - analyses come back in request order, one per claim id
    - ids the model skipped get a fallback entry, ids it invented are dropped
    - relationship findings may only reference submitted ids
    """
    order = [c.id for c in claims]
    known = set(order)

    by_id: dict[str, ReportClaimAnalysis] = {}
    for item in _as_list(data.get("claims")):
        if not isinstance(item, dict):
            continue
        try:
            analysis = ReportClaimAnalysis.model_validate(item)
        except ValidationError:
            continue
        if analysis.id in known and analysis.id not in by_id:
            by_id[analysis.id] = analysis

    missing = [cid for cid in order if cid not in by_id]
    if missing:
        logger.warning("ai.analyze.claims.gaps missing=%s", missing)

    rel = data.get("relationships")
    rel = rel if isinstance(rel, dict) else {}
    relationships = ClaimRelationships(
        contradictions=_findings(rel.get("contradictions"), ContradictionFinding, known),
        supporting=_findings(rel.get("supporting"), RelationshipFinding, known),
        duplicates=_findings(rel.get("duplicates"), RelationshipFinding, known),
        inconsistencies=_findings(rel.get("inconsistencies"), RelationshipFinding, known),
    )

    return ReportAnalysis(
        claims=[by_id.get(cid) or fallback_claim(cid) for cid in order],
        relationships=relationships,
        overallRiskLevel=data.get("overallRiskLevel"),
        reportSummary=data.get("reportSummary"),
    )


async def analyze_claims(
    gateway: GatewayClient,
    *,
    claims: Sequence[ClaimInput],
    company_name: Optional[str] = None,
    sector: Optional[str] = None,
) -> tuple[ReportAnalysis, AnalysisResult]:
    """
    Ask the model for per-claim analyses plus cross-claim relationships.
    Gateway failures propagate as GatewayError; unreadable replies become a fallback report.
    """
    logger.info(
        "ai.analyze.claims count=%d company=%s sector=%s",
        len(claims),
        company_name,
        sector,
    )
    content = await gateway.complete(build_prompt(claims, company_name, sector))
    logger.info("ai.analyze.claims.response length=%d", len(content or ""))

    result = interpret(content)
    if isinstance(result, Structured):
        try:
            return reconcile(result.data, claims), result.kind
        except ValidationError as e:
            logger.error("ai.analyze.claims.invalid_shape errors=%d", e.error_count())
            return fallback_report(claims), AnalysisResult.FALLBACK

    logger.error("ai.analyze.claims.parse_failed reason=%s", result.reason)
    return fallback_report(claims), result.kind
