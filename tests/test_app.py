"""
App-level tests: health check, error envelopes, CORS, rate-limit wiring and helpers.
"""

import logging
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from config.settings import settings
from controller import controller_dependencies
from core.gateway_client import GatewayConfig
from main import app
from util.errors import AppError
from util.functions import clip_chars
from util.timing import timed


@pytest.fixture
def plain_client():
    return TestClient(app)


# === Endpoints ===


class TestEndpoints:
    def test_healthz(self, plain_client):
        response = plain_client.get("/healthz")

        assert response.status_code == 200
        assert response.json() == {"ok": True}
        assert response.headers["Access-Control-Allow-Origin"] == "*"

    def test_unknown_route_uses_error_envelope(self, plain_client):
        response = plain_client.get("/nope")

        assert response.status_code == 404
        assert response.json() == {"error": "Not Found"}
        assert response.headers["Access-Control-Allow-Origin"] == "*"

    def test_preflight_on_any_path(self, plain_client):
        response = plain_client.options("/anything")

        assert response.status_code == 200
        assert response.content == b""
        assert response.headers["Access-Control-Allow-Headers"] == settings.CORS_ALLOW_HEADERS

    def test_unhandled_error_keeps_cors(self):
        broken = MagicMock()
        broken.analyze_claim = AsyncMock(side_effect=RuntimeError("boom"))
        app.dependency_overrides[controller_dependencies.get_claim_analysis_service] = (
            lambda: broken
        )
        try:
            response = TestClient(app).post("/api/v1/analyze-claim", json={"claimText": "x"})
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        assert response.json() == {"error": "Internal Error"}
        assert response.headers["Access-Control-Allow-Origin"] == "*"


# === Wiring ===


class TestWiring:
    def test_gateway_config_from_settings(self):
        config = GatewayConfig.from_settings()

        assert config.api_url == settings.AI_GATEWAY_URL
        assert config.model == settings.AI_GATEWAY_MODEL
        assert config.max_retries == settings.AI_GATEWAY_MAX_RETRIES

    @pytest.mark.asyncio
    async def test_rate_limit_skipped_when_disabled(self):
        limiter = AsyncMock()
        with patch.object(settings, "RATE_LIMIT_ENABLED", False), patch.object(
            controller_dependencies, "_limiter", limiter
        ):
            await controller_dependencies.enforce_rate_limit(MagicMock(), MagicMock())

        limiter.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rate_limit_applied_when_enabled(self):
        limiter = AsyncMock()
        with patch.object(settings, "RATE_LIMIT_ENABLED", True), patch.object(
            controller_dependencies, "_limiter", limiter
        ):
            await controller_dependencies.enforce_rate_limit(MagicMock(), MagicMock())

        limiter.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_limit_exceeded_raises_app_error(self):
        request = MagicMock()
        request.url.path = "/api/v1/analyze-claim"

        with pytest.raises(AppError) as exc_info:
            await controller_dependencies._limit_exceeded(request, MagicMock(), 1500)

        assert exc_info.value.status_code == 429
        assert exc_info.value.detail == "Too many requests. Try again later."
        assert exc_info.value.headers == {"Retry-After": "2"}


# === Helpers ===


class TestHelpers:
    def test_clip_chars(self):
        assert clip_chars(None) == ""
        assert clip_chars("short", 10) == "short"
        assert clip_chars("abcdef", 3) == "abc …"

    def test_timed_logs_done(self, caplog):
        log = logging.getLogger("test.timing")
        with caplog.at_level(logging.INFO, logger="test.timing"):
            with timed(log, "ai.gateway.call", model="m"):
                pass

        assert "ai.gateway.call.done" in caplog.text
        assert "model=m" in caplog.text

    def test_timed_logs_failure_and_reraises(self, caplog):
        log = logging.getLogger("test.timing")
        with caplog.at_level(logging.INFO, logger="test.timing"):
            with pytest.raises(ValueError):
                with timed(log, "ai.gateway.call"):
                    raise ValueError("x")

        assert "ai.gateway.call.failed" in caplog.text
        assert "err=ValueError" in caplog.text


# === Lifespan ===


class TestLifespan:
    def test_rate_limiter_initialized_when_enabled(self):
        import main

        redis = object()
        with patch.object(settings, "RATE_LIMIT_ENABLED", True), patch.object(
            main, "init_logger"
        ), patch.object(main, "get_redis", AsyncMock(return_value=redis)), patch.object(
            main, "close_redis", AsyncMock()
        ) as close_redis, patch.object(
            main.FastAPILimiter, "init", AsyncMock()
        ) as limiter_init:
            with TestClient(app) as client:
                assert client.get("/healthz").status_code == 200

        limiter_init.assert_awaited_once_with(redis, identifier=main._real_ip)
        close_redis.assert_awaited_once()

    def test_no_redis_when_disabled(self):
        import main

        with patch.object(settings, "RATE_LIMIT_ENABLED", False), patch.object(
            main, "init_logger"
        ), patch.object(main, "get_redis", AsyncMock()) as get_redis:
            with TestClient(app):
                pass

        get_redis.assert_not_awaited()
