"""
Core error definitions for the Scrum Poker presence service

Provides error codes and the exception taxonomy shared by the directory,
the broadcast dispatcher and the presence handlers.
"""

from enum import Enum
from typing import Dict, Optional


class ErrorCode(Enum):
    """Standardized error codes for the application."""

    # Request validation errors
    INVALID_DATA = "INVALID_DATA"
    MISSING_DATA = "MISSING_DATA"

    # Lookup errors
    PLAYER_NOT_FOUND = "PLAYER_NOT_FOUND"
    CHANNEL_NOT_FOUND = "CHANNEL_NOT_FOUND"
    NO_CHANNEL = "NO_CHANNEL"

    # System errors
    STORE_ERROR = "STORE_ERROR"
    BROADCAST_FAILED = "BROADCAST_FAILED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ValidationError(Exception):
    """Custom exception for validation errors."""

    def __init__(self, code: ErrorCode, message: str, details: Optional[Dict] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class NotFoundError(ValidationError):
    """Raised when a participant cannot be resolved by identity or channel."""

    def __init__(self, code: ErrorCode = ErrorCode.PLAYER_NOT_FOUND,
                 message: str = "Player not found", details: Optional[Dict] = None):
        super().__init__(code, message, details)


class DirectoryError(Exception):
    """Raised when the participant store fails a read or write."""

    def __init__(self, operation: str, message: str):
        self.operation = operation
        self.message = message
        super().__init__(f"{operation}: {message}")


class DeliveryError(Exception):
    """Raised by a channel transport when one delivery cannot be completed."""

    def __init__(self, channel_id: str, message: str):
        self.channel_id = channel_id
        self.message = message
        super().__init__(f"{channel_id}: {message}")


class StaleChannelError(DeliveryError):
    """The push channel is no longer connected."""

    def __init__(self, channel_id: str):
        super().__init__(channel_id, "channel is gone")


class BroadcastError(Exception):
    """
    Raised when the fan-out itself fails (workers could not be started or joined).

    Individual delivery failures never raise this; they are recorded in the
    partial report instead.
    """

    def __init__(self, message: str, report=None):
        self.message = message
        self.report = report
        super().__init__(message)
