from typing import Any, NoReturn
from core import claim_analyzer, report_analyzer
from core.gateway_client import GatewayClient
from model.api import AnalyzeClaimRequest, AnalyzeClaimsRequest
from model.claim import ClaimAnalysis, ClaimInput, ReportAnalysis
from util.constants import Defaults
from util.enums import AnalysisResult, ErrorMessage
from util.errors import AppError, GatewayError
from util.functions import clean_context, clean_str
import logging

logger = logging.getLogger(__name__)


class ClaimAnalysisService:
    """
    Validates analyzer requests, guards the gateway credential and maps
    upstream failures onto user-facing errors.
    """

    def __init__(self, gateway: GatewayClient) -> None:
        self._gateway = gateway

    def _require_configured(self) -> None:
        if not self._gateway.configured:
            logger.error("ai.gateway.not_configured")
            raise AppError.of(ErrorMessage.NOT_CONFIGURED)

    @staticmethod
    def _raise_upstream(err: GatewayError, generic: ErrorMessage) -> NoReturn:
        if err.status_code == ErrorMessage.UPSTREAM_RATE_LIMITED.value.http_status:
            raise AppError.of(ErrorMessage.UPSTREAM_RATE_LIMITED) from err
        if err.status_code == ErrorMessage.UPSTREAM_CREDITS_DEPLETED.value.http_status:
            raise AppError.of(ErrorMessage.UPSTREAM_CREDITS_DEPLETED) from err
        logger.error("ai.gateway.failed status=%s", err.status_code)
        raise AppError.of(generic) from err

    @staticmethod
    def parse_claims(raw: Any) -> list[ClaimInput]:
        """
        Normalize the `claims` payload into ClaimInputs.
        Missing ids become claim-<n> (1-based position).
        """
        if not isinstance(raw, list) or not raw:
            logger.warning("analyze.claims.rejected reason=no_claims")
            raise AppError.of(ErrorMessage.CLAIMS_REQUIRED)

        out: list[ClaimInput] = []
        for i, item in enumerate(raw, start=1):
            text = clean_str(item.get("text")) if isinstance(item, dict) else ""
            if not text:
                logger.warning("analyze.claims.rejected reason=empty_text index=%d", i)
                raise AppError.of(ErrorMessage.CLAIM_ITEM_INVALID)
            cid = clean_context(item.get("id"))
            out.append(ClaimInput(id=cid or f"{Defaults.CLAIM_ID_PREFIX}{i}", text=text))

        if len({c.id for c in out}) != len(out):
            logger.warning("analyze.claims.rejected reason=duplicate_ids")
            raise AppError.of(ErrorMessage.CLAIM_IDS_NOT_UNIQUE)
        return out

    async def analyze_claim(
        self, payload: AnalyzeClaimRequest
    ) -> tuple[ClaimAnalysis, AnalysisResult]:
        claim_text = clean_str(payload.claimText)
        if not claim_text:
            logger.warning("analyze.claim.rejected reason=empty_text")
            raise AppError.of(ErrorMessage.CLAIM_TEXT_REQUIRED)
        self._require_configured()

        try:
            analysis, result = await claim_analyzer.analyze_claim(
                self._gateway,
                claim_text=claim_text,
                company_name=clean_context(payload.companyName),
                sector=clean_context(payload.sector),
            )
        except GatewayError as e:
            self._raise_upstream(e, ErrorMessage.ANALYZE_CLAIM_FAILED)

        logger.info(
            "analyze.claim.ok result=%s risk=%s", result.value, analysis.riskLevel.value
        )
        return analysis, result

    async def analyze_claims(
        self, payload: AnalyzeClaimsRequest
    ) -> tuple[ReportAnalysis, AnalysisResult]:
        claims = self.parse_claims(payload.claims)
        self._require_configured()

        try:
            report, result = await report_analyzer.analyze_claims(
                self._gateway,
                claims=claims,
                company_name=clean_context(payload.companyName),
                sector=clean_context(payload.sector),
            )
        except GatewayError as e:
            self._raise_upstream(e, ErrorMessage.ANALYZE_CLAIMS_FAILED)

        logger.info(
            "analyze.claims.ok result=%s count=%d overall=%s",
            result.value,
            len(report.claims),
            report.overallRiskLevel.value,
        )
        return report, result
