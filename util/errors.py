from typing import Optional
from fastapi import HTTPException, status
from util.enums import ErrorMessage


class AppError(HTTPException):
    # Flow: raise AppError to short-circuit with a typed status & message.
    def __init__(
        self,
        message: str,
        http_status: int = status.HTTP_400_BAD_REQUEST,
        headers: Optional[dict[str, str]] = None,
    ) -> None:
        super().__init__(status_code=http_status, detail=message, headers=headers)

    @classmethod
    def of(
        cls, error: ErrorMessage, headers: Optional[dict[str, str]] = None
    ) -> "AppError":
        return cls(error.value.message, error.value.http_status, headers=headers)


class GatewayError(Exception):
    """
    Raised by the AI gateway client when the upstream call does not succeed.
    `status_code` is None for transport failures (timeouts, DNS, refused connections).
    """

    def __init__(self, status_code: Optional[int], body: str = "") -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"AI gateway error status={status_code}")
