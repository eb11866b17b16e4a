from typing import Optional
from fastapi import APIRouter, Depends, Response, status
from controller.controller_dependencies import (
    enforce_rate_limit,
    get_claim_analysis_service,
)
from model.api import (
    AnalyzeClaimRequest,
    AnalyzeClaimResponse,
    AnalyzeClaimsRequest,
    AnalyzeClaimsResponse,
    ErrorResponse,
)
from service.claim_analysis_service import ClaimAnalysisService
from util.constants import ANALYSIS_RESULT_HEADER, InternalURIs

analysis_router = APIRouter(dependencies=[Depends(enforce_rate_limit)])

_ERRORS = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_402_PAYMENT_REQUIRED: {"model": ErrorResponse},
    status.HTTP_429_TOO_MANY_REQUESTS: {"model": ErrorResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse},
}


@analysis_router.post(
    InternalURIs.ANALYZE_CLAIM,
    response_model=AnalyzeClaimResponse,
    status_code=status.HTTP_200_OK,
    responses=_ERRORS,
)
async def analyze_claim(
    response: Response,
    payload: Optional[AnalyzeClaimRequest] = None,
    service: ClaimAnalysisService = Depends(get_claim_analysis_service),
) -> AnalyzeClaimResponse:
    analysis, result = await service.analyze_claim(payload or AnalyzeClaimRequest())
    response.headers[ANALYSIS_RESULT_HEADER] = result.value
    return AnalyzeClaimResponse(analysis=analysis)


@analysis_router.post(
    InternalURIs.ANALYZE_CLAIMS,
    response_model=AnalyzeClaimsResponse,
    status_code=status.HTTP_200_OK,
    responses=_ERRORS,
)
async def analyze_claims(
    response: Response,
    payload: Optional[AnalyzeClaimsRequest] = None,
    service: ClaimAnalysisService = Depends(get_claim_analysis_service),
) -> AnalyzeClaimsResponse:
    report, result = await service.analyze_claims(payload or AnalyzeClaimsRequest())
    response.headers[ANALYSIS_RESULT_HEADER] = result.value
    return AnalyzeClaimsResponse(analysis=report)
