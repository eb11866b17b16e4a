import logging
from math import ceil
from fastapi import Request, Response
from fastapi_limiter.depends import RateLimiter
from config.settings import settings
from core.gateway_client import GatewayClient, GatewayConfig
from service.claim_analysis_service import ClaimAnalysisService
from util.enums import ErrorMessage
from util.errors import AppError

logger = logging.getLogger(__name__)


def get_claim_analysis_service() -> ClaimAnalysisService:
    _gateway = GatewayClient(GatewayConfig.from_settings())
    _service = ClaimAnalysisService(_gateway)
    return _service


async def _limit_exceeded(request: Request, response: Response, pexpire: int):
    retry_after = ceil(pexpire / 1000)
    logger.warning(
        "ratelimit.exceeded path=%s retry_after=%d", request.url.path, retry_after
    )
    raise AppError.of(
        ErrorMessage.TOO_MANY_REQUESTS, headers={"Retry-After": str(retry_after)}
    )


_limiter = RateLimiter(
    times=settings.RATE_LIMIT_TIMES,
    seconds=settings.RATE_LIMIT_SECONDS,
    callback=_limit_exceeded,
)


async def enforce_rate_limit(request: Request, response: Response) -> None:
    # Limiter needs Redis; skip entirely unless it was enabled (and initialized) at startup
    if not settings.RATE_LIMIT_ENABLED:
        return
    await _limiter(request, response)
