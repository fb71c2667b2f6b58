"""
Validation Service for the Scrum Poker presence service

Provides request body validation separated from error response handling.
"""

import logging
import math
from typing import Any, Dict, Iterable, List, Optional

from scrumpoker.core.errors import ErrorCode, ValidationError
from scrumpoker.core.models import normalize_room_secret

logger = logging.getLogger(__name__)

MISSING_FIELDS_MESSAGE = 'Error! Required JSON fields missing: '

JOIN_REQUIRED_FIELDS = ('playerName', 'roomName')
VOTE_REQUIRED_FIELDS = ('playerId', 'playerName', 'roomName', 'cardValue', 'cardTitle')

# Fields whose presence is not decided by truthiness
VALUE_FIELDS = frozenset({'cardValue'})


class ValidationService:
    """Service responsible for input validation."""

    DEFAULT_MAX_FIELD_LENGTH = 100

    def __init__(self, max_field_length: Optional[int] = None):
        """Initialize ValidationService with configuration"""
        self._max_field_length = max_field_length

    @property
    def max_field_length(self) -> int:
        if self._max_field_length is not None:
            return self._max_field_length
        try:
            from config_factory import get_config
            return get_config().max_field_length
        except Exception:
            return self.DEFAULT_MAX_FIELD_LENGTH

    @staticmethod
    def is_missing(field_name: str, value: Any) -> bool:
        """
        Decide whether a body field counts as missing.

        Card values may legitimately be 0, so they are missing only when
        absent, null or an empty string. Every other field is missing when
        falsy.
        """
        if field_name in VALUE_FIELDS:
            return value is None or value == ''
        return not value

    def find_missing_fields(self, data: Any, required_fields: Iterable[str]) -> List[str]:
        """List required fields that are missing, in declaration order."""
        if not isinstance(data, dict):
            return list(required_fields)
        return [name for name in required_fields if self.is_missing(name, data.get(name))]

    def require_fields(self, data: Any, required_fields: Iterable[str]) -> Dict[str, Any]:
        """
        Validate that every required field is present.

        Returns:
            The body as a dictionary

        Raises:
            ValidationError: Listing every missing field
        """
        missing = self.find_missing_fields(data, required_fields)
        if missing:
            raise ValidationError(
                ErrorCode.MISSING_DATA,
                MISSING_FIELDS_MESSAGE + ', '.join(missing),
                {'missing_fields': missing}
            )
        return data

    def validate_text_field(self, field_name: str, value: Any) -> str:
        """Check a required text field for type and length."""
        if not isinstance(value, str):
            raise ValidationError(
                ErrorCode.INVALID_DATA,
                f'Error! Field {field_name} must be a string',
                {'field': field_name}
            )
        if len(value) > self.max_field_length:
            raise ValidationError(
                ErrorCode.INVALID_DATA,
                f'Error! Field {field_name} is too long (max {self.max_field_length} characters)',
                {'field': field_name, 'max_length': self.max_field_length}
            )
        return value

    def validate_room_secret(self, room_secret: Any) -> Optional[str]:
        room_secret = normalize_room_secret(room_secret)
        if room_secret is None:
            return None
        return self.validate_text_field('roomSecret', room_secret)

    def validate_card_value(self, card_value: Any) -> Any:
        """Card values are numbers or symbols ("?", "coffee"); booleans and containers are rejected."""
        if isinstance(card_value, bool) or not isinstance(card_value, (int, float, str)):
            raise ValidationError(
                ErrorCode.INVALID_DATA,
                'Error! Field cardValue must be a number or a string',
                {'field': 'cardValue'}
            )
        if isinstance(card_value, float) and not math.isfinite(card_value):
            raise ValidationError(
                ErrorCode.INVALID_DATA,
                'Error! Field cardValue must be a finite number',
                {'field': 'cardValue'}
            )
        if isinstance(card_value, str):
            return self.validate_text_field('cardValue', card_value)
        return card_value

    def validate_join_data(self, data: Any) -> Dict[str, Any]:
        """Validate a join request body and return its normalized fields."""
        self.require_fields(data, JOIN_REQUIRED_FIELDS)
        return {
            'player_name': self.validate_text_field('playerName', data['playerName']),
            'room_name': self.validate_text_field('roomName', data['roomName']),
            'room_secret': self.validate_room_secret(data.get('roomSecret')),
        }

    def validate_vote_data(self, data: Any) -> Dict[str, Any]:
        """Validate a vote request body and return its normalized fields."""
        self.require_fields(data, VOTE_REQUIRED_FIELDS)
        return {
            'player_id': self.validate_text_field('playerId', data['playerId']),
            'player_name': self.validate_text_field('playerName', data['playerName']),
            'room_name': self.validate_text_field('roomName', data['roomName']),
            'room_secret': self.validate_room_secret(data.get('roomSecret')),
            'card_value': self.validate_card_value(data['cardValue']),
            'card_title': self.validate_text_field('cardTitle', data['cardTitle']),
        }
