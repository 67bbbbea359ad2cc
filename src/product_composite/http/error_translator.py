"""Translate downstream transport failures into the domain error taxonomy."""
from __future__ import annotations

import httpx

from product_composite.core.logger import get_logger
from product_composite.errors import (
    HttpErrorInfo,
    InvalidInputError,
    NotFoundError,
    UnexpectedError,
)

log = get_logger(__name__)


class ErrorTranslator:
    """
    404 -> NotFoundError, 422 -> InvalidInputError, any other status -> UnexpectedError
    (original kept as __cause__). Failures without a status code are returned unchanged.
    """

    def translate(self, exc: BaseException) -> BaseException:
        if not isinstance(exc, httpx.HTTPStatusError):
            log.warning("unexpected_error", error=repr(exc))
            return exc

        status = exc.response.status_code
        if status == 404:
            return NotFoundError(self.error_message(exc))
        if status == 422:
            return InvalidInputError(self.error_message(exc))

        log.warning(
            "unexpected_http_error",
            status=status,
            url=str(exc.request.url),
            body=exc.response.text,
        )
        translated = UnexpectedError(self.error_message(exc), status_code=status)
        translated.__cause__ = exc
        return translated

    @staticmethod
    def error_message(exc: httpx.HTTPStatusError) -> str:
        """message of the downstream's error body, or the transport failure's own text."""
        info = HttpErrorInfo.parse(exc.response.content)
        if info is not None:
            return info.message
        return str(exc)
