import logging
from fastapi_limiter import FastAPILimiter
import routes
from contextlib import asynccontextmanager
from util.enums import Environment, Color, ErrorMessage
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from config.settings import settings
from config.cache import close_redis, get_redis
from fastapi.responses import JSONResponse
from model.api import HealthResponse
from util.constants import InternalURIs
from util.logger import init_logger

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": settings.CORS_ALLOW_ORIGIN,
    "Access-Control-Allow-Headers": settings.CORS_ALLOW_HEADERS,
}


async def _real_ip(request: Request) -> str:
    if settings.TRUST_PROXY:
        fwd = request.headers.get("x-forwarded-for")
        if fwd:
            return fwd.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


@asynccontextmanager
async def lifespan(fastApi: FastAPI):
    init_logger()
    print(f"{Color.GREEN}Initializing...{Color.RESET}")
    if not settings.AI_GATEWAY_API_KEY:
        logger.warning("startup.ai_gateway_api_key_missing")

    if settings.RATE_LIMIT_ENABLED:
        try:
            redis = await get_redis()
            await FastAPILimiter.init(redis, identifier=_real_ip)
        except Exception as e:
            print("Failed to connect to Redis:", e)
            raise
    print(f"{Color.BLUE}Server Started{Color.RESET}")

    try:
        yield
    finally:
        if settings.RATE_LIMIT_ENABLED:
            try:
                await close_redis()
            except Exception as e:
                print("Error closing Redis:", e)

        print(f"{Color.RED}Server Shutdown{Color.RESET}")


app: FastAPI = FastAPI(lifespan=lifespan, title="ESG Claim Analyzer")


@app.middleware("http")
async def cors_middleware(request: Request, call_next):
    # Pre-flight: empty body, CORS headers only
    if request.method == "OPTIONS":
        return Response(status_code=200, headers=CORS_HEADERS)
    try:
        response = await call_next(request)
    except Exception:
        logger.exception("request.unhandled path=%s", request.url.path)
        info = ErrorMessage.INTERNAL_ERROR.value
        response = JSONResponse(
            status_code=info.http_status, content={"error": info.message}
        )
    response.headers.update(CORS_HEADERS)
    return response


@app.get(InternalURIs.HEALTHZ, response_model=HealthResponse)
async def healthz():
    return {"ok": True}


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    logger.info(
        "request.error path=%s status=%d error=%s",
        request.url.path,
        exc.status_code,
        exc.detail,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    info = ErrorMessage.INVALID_BODY.value
    logger.warning(
        "request.invalid path=%s errors=%d", request.url.path, len(exc.errors())
    )
    return JSONResponse(status_code=info.http_status, content={"error": info.message})


routes.register_routes(app)

if __name__ == "__main__":
    import uvicorn

    reload = settings.APP_ENV == Environment.DEV
    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT, reload=reload)
