from typing import Optional
from pydantic import ValidationError
from config.settings import settings
from core.entities import ChatPrompt, Structured, Unparsed
from core.gateway_client import GatewayClient
from core.json_extract import interpret
from model.claim import ClaimAnalysis
from util.constants import Defaults, Fallback
from util.enums import AnalysisResult, RiskLevel
from util.functions import clip_chars
import logging

logger = logging.getLogger(__name__)

CLAIM_ANALYSIS_SCHEMA = """{
  "claimType": "string",
  "specificityScore": number,
  "verifiabilityScore": number,
  "keyMetrics": ["string"],
  "redFlags": ["string"],
  "verificationApproach": ["string"],
  "riskLevel": "Low" | "Medium" | "High",
  "summary": "string (2-3 sentences)"
}"""


def context_label(company_name: Optional[str], sector: Optional[str]) -> str:
    """`<company> (<sector>)` with the Unknown defaults for blank values."""
    company = (company_name or "").strip() or Defaults.COMPANY_NAME
    sec = (sector or "").strip() or Defaults.SECTOR
    return f"{company} ({sec})"


def build_prompt(
    claim_text: str, company_name: Optional[str], sector: Optional[str]
) -> ChatPrompt:
    user = (
        f"Analyze this ESG claim from {context_label(company_name, sector)}:\n\n"
        f'"{claim_text}"\n\n'
        f"Provide your analysis in JSON format with these fields:\n"
        f"{CLAIM_ANALYSIS_SCHEMA}"
    )
    return ChatPrompt(system=settings.ANALYZE_CLAIM_SYSTEM_PROMPT, user=user)


def fallback_analysis(raw: str) -> ClaimAnalysis:
    return ClaimAnalysis(
        claimType=Fallback.CLAIM_TYPE,
        specificityScore=Fallback.SCORE,
        verifiabilityScore=Fallback.SCORE,
        keyMetrics=[],
        redFlags=[Fallback.RED_FLAG],
        verificationApproach=[Fallback.VERIFICATION_APPROACH],
        riskLevel=RiskLevel.MEDIUM,
        summary=raw or Fallback.SUMMARY,
    )


async def analyze_claim(
    gateway: GatewayClient,
    *,
    claim_text: str,
    company_name: Optional[str] = None,
    sector: Optional[str] = None,
) -> tuple[ClaimAnalysis, AnalysisResult]:
    """
    Ask the model for a single-claim analysis.
    Gateway failures propagate as GatewayError; unreadable replies become a fallback analysis.
    """
    logger.info("ai.analyze.claim company=%s sector=%s", company_name, sector)
    content = await gateway.complete(build_prompt(claim_text, company_name, sector))
    logger.info(
        "ai.analyze.claim.response preview=%r",
        clip_chars(content, settings.LOG_PREVIEW_CHARS),
    )

    result = interpret(content)
    if isinstance(result, Structured):
        try:
            return ClaimAnalysis.model_validate(result.data), result.kind
        except ValidationError as e:
            logger.error("ai.analyze.claim.invalid_shape errors=%d", e.error_count())
            result = Unparsed(reason="invalid_shape", raw=content or "")

    logger.error("ai.analyze.claim.parse_failed reason=%s", result.reason)
    return fallback_analysis(result.raw), result.kind
