"""
Error Response Factory for the Scrum Poker presence service

Provides standardized handler results and maps errors to status codes.
"""

import logging
import traceback
from dataclasses import dataclass
from functools import wraps
from typing import Any, Dict, Optional

from scrumpoker.core.errors import (
    BroadcastError, DirectoryError, ErrorCode, ValidationError
)

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = 'Internal server error'


@dataclass
class HandlerResult:
    """Status code and optional body returned by every presence handler."""

    status_code: int
    body: Optional[Any] = None

    @property
    def ok(self) -> bool:
        return self.status_code == 200

    def to_ack(self) -> Dict[str, Any]:
        """Socket.IO acknowledgement shape."""
        ack = {'statusCode': self.status_code}
        if self.body is not None:
            ack['body'] = self.body
        return ack


class ErrorResponseFactory:
    """Factory responsible for creating standardized results and status mappings."""

    STATUS_BY_CODE = {
        ErrorCode.INVALID_DATA: 400,
        ErrorCode.MISSING_DATA: 400,
        ErrorCode.PLAYER_NOT_FOUND: 400,
        ErrorCode.NO_CHANNEL: 400,
        ErrorCode.CHANNEL_NOT_FOUND: 404,
        ErrorCode.STORE_ERROR: 500,
        ErrorCode.BROADCAST_FAILED: 500,
        ErrorCode.INTERNAL_ERROR: 500,
    }

    def create_message_body(self, message: str, **extra: Any) -> Dict[str, Any]:
        body = {'message': message}
        body.update(extra)
        return body

    def create_success_result(self, message: Optional[str] = None, **extra: Any) -> HandlerResult:
        """
        Create a 200 result.

        Args:
            message: Optional human-readable message; no body when omitted
            **extra: Additional body fields
        """
        if message is None and not extra:
            return HandlerResult(200)
        body = self.create_message_body(message, **extra) if message is not None else dict(extra)
        return HandlerResult(200, body)

    def create_error_result(self, code: ErrorCode, message: str) -> HandlerResult:
        return HandlerResult(self.status_for(code), self.create_message_body(message))

    def status_for(self, code: ErrorCode) -> int:
        return self.STATUS_BY_CODE.get(code, 500)

    def from_validation_error(self, error: ValidationError) -> HandlerResult:
        logger.warning(f"Rejecting request: {error.code.value} - {error.message}")
        return self.create_error_result(error.code, error.message)

    def handle_exception(self, e: Exception, context: str = "Unknown") -> tuple[ErrorCode, str]:
        """
        Handle unexpected exceptions and return appropriate error code and message.

        Args:
            e: Exception instance
            context: Context where the exception occurred

        Returns:
            Tuple of (error_code, error_message)
        """
        if isinstance(e, ValidationError):
            return e.code, e.message

        if isinstance(e, DirectoryError):
            logger.error(f"Store failure in {context}: {e}")
            return ErrorCode.STORE_ERROR, INTERNAL_ERROR_MESSAGE

        if isinstance(e, BroadcastError):
            logger.error(f"Broadcast failure in {context}: {e}")
            return ErrorCode.BROADCAST_FAILED, INTERNAL_ERROR_MESSAGE

        logger.error(f"Unexpected exception in {context}: {str(e)}")
        logger.error(f"Exception traceback: {traceback.format_exc()}")
        return ErrorCode.INTERNAL_ERROR, INTERNAL_ERROR_MESSAGE


def with_error_handling(func):
    """
    Decorator for presence handlers guaranteeing a definite HandlerResult.

    Validation errors become 4xx results; anything else becomes a 500.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        factory = ErrorResponseFactory()
        try:
            return func(*args, **kwargs)
        except ValidationError as e:
            return factory.from_validation_error(e)
        except Exception as e:
            error_code, error_message = factory.handle_exception(e, func.__name__)
            return factory.create_error_result(error_code, error_message)

    return wrapper
