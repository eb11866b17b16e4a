from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional
import asyncio
import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)
from config.settings import settings
from core.entities import ChatPrompt
from util.errors import GatewayError
import logging
from util.timing import timed

logger = logging.getLogger(__name__)


def _log_retry(state: RetryCallState) -> None:
    err = state.outcome.exception() if state.outcome else None
    logger.warning(
        "ai.gateway.retry attempt=%d err=%s wait_s=%.2f",
        state.attempt_number,
        type(err).__name__,
        state.next_action.sleep if state.next_action else 0.0,
    )


@dataclass(frozen=True)
class GatewayConfig:
    api_url: str
    model: str
    api_key: Optional[str]
    timeout: float = 60.0
    max_retries: int = 0

    @property
    def configured(self) -> bool:
        return bool(self.api_key and self.api_key.strip())

    @classmethod
    def from_settings(cls) -> "GatewayConfig":
        return cls(
            api_url=settings.AI_GATEWAY_URL,
            model=settings.AI_GATEWAY_MODEL,
            api_key=settings.AI_GATEWAY_API_KEY,
            timeout=settings.AI_GATEWAY_TIMEOUT_SECONDS,
            max_retries=settings.AI_GATEWAY_MAX_RETRIES,
        )


def _content_of(data: Dict[str, Any]) -> Optional[str]:
    """
    Pull choices[0].message.content out of a chat-completion body; None when absent.
    """
    choices = data.get("choices") if isinstance(data, dict) else None
    if not choices or not isinstance(choices, list):
        return None
    node = choices[0]
    if not isinstance(node, dict):
        return None
    message = node.get("message")
    if not isinstance(message, dict):
        return None
    content = message.get("content")
    return content if isinstance(content, str) else None


class GatewayClient:
    """
    Thin client for an OpenAI-style chat-completion endpoint.
    One call per analysis; transport errors are retried with exponential backoff only
    when max_retries > 0.
    HTTP error statuses (429, 402, ...) are never retried.
    """

    def __init__(
        self,
        config: GatewayConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._config = config
        self._transport = transport
        self._sleep = sleep

    @property
    def configured(self) -> bool:
        return self._config.configured

    @property
    def model(self) -> str:
        return self._config.model

    async def _post(self, payload: Dict[str, Any]) -> httpx.Response:
        headers = {
            "Authorization": f"Bearer {self._config.api_key}",
            "Content-Type": "application/json",
        }
        retrying = AsyncRetrying(
            reraise=True,
            stop=stop_after_attempt(self._config.max_retries + 1),
            wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
            retry=retry_if_exception_type(httpx.TransportError),
            before_sleep=_log_retry,
            sleep=self._sleep,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    async with httpx.AsyncClient(
                        timeout=self._config.timeout, transport=self._transport
                    ) as client:
                        return await client.post(
                            self._config.api_url, headers=headers, json=payload
                        )
        except httpx.TransportError as e:
            logger.warning("ai.gateway.transport_error err=%s", type(e).__name__)
            raise GatewayError(None, str(e)) from e
        raise GatewayError(None, "no attempt made")

    async def complete(self, prompt: ChatPrompt) -> Optional[str]:
        """
        Send the system/user pair and return the reply text, or None when the body has none.
        Raises GatewayError for non-2xx statuses and transport failures.
        """
        payload = {"model": self._config.model, "messages": prompt.messages()}
        with timed(logger, "ai.gateway.call", model=self._config.model):
            res = await self._post(payload)

        if res.status_code // 100 != 2:
            body = res.text
            logger.error(
                "ai.gateway.error status=%d body=%s", res.status_code, body[:500]
            )
            raise GatewayError(res.status_code, body)

        try:
            data = res.json()
        except ValueError:
            logger.warning("ai.gateway.non_json_body status=%d", res.status_code)
            data = {}
        return _content_of(data)
