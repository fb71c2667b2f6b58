"""
Base Handler Classes

This module provides base classes for presence handlers with common patterns
for service access, participant lookup, room notification and logging.
"""

import logging
from abc import ABC
from typing import Any, Optional

from container import get_container
from scrumpoker.core.errors import ErrorCode, NotFoundError
from scrumpoker.core.models import Participant
from scrumpoker.services.broadcast_service import DispatchReport

logger = logging.getLogger(__name__)


class BaseHandler(ABC):
    """
    Abstract base class for all presence handlers.

    Provides service access through the container, participant lookups and
    standardized logging.
    """

    def __init__(self, container=None):
        self._container = container or get_container()

    @property
    def participant_directory(self):
        """Get the participant directory."""
        return self._container.get('ParticipantDirectory')

    @property
    def room_resolver(self):
        """Get the room resolver."""
        return self._container.get('RoomResolver')

    @property
    def broadcast_service(self):
        """Get the broadcast service."""
        return self._container.get('BroadcastService')

    @property
    def validation_service(self):
        """Get the validation service."""
        return self._container.get('ValidationService')

    @property
    def error_response_factory(self):
        """Get the error response factory service."""
        return self._container.get('ErrorResponseFactory')

    def require_participant(self, participant_id: str, name: str) -> Participant:
        """
        Look up a participant by record key.

        Raises:
            NotFoundError: If no such participant exists
        """
        participant = self.participant_directory.get_by_identity(participant_id, name)
        if participant is None:
            raise NotFoundError(
                ErrorCode.PLAYER_NOT_FOUND,
                f'Error! Player {name} ({participant_id}) not found'
            )
        return participant

    def require_channel_owner(self, channel_id: str) -> Participant:
        """
        Look up the participant currently bound to a channel.

        Raises:
            NotFoundError: If the channel belongs to nobody
        """
        participant = self.participant_directory.get_by_channel(channel_id)
        if participant is None:
            raise NotFoundError(ErrorCode.CHANNEL_NOT_FOUND, 'Player not found')
        return participant

    def log_handler_start(self, handler_name: str, data: Any = None) -> None:
        """Log the start of handler execution."""
        logger.info(f'{handler_name} called')
        if data:
            logger.debug(f'{handler_name} data: {data}')

    def log_handler_success(self, handler_name: str, message: Optional[str] = None) -> None:
        """Log successful handler completion."""
        log_msg = f'{handler_name} completed successfully'
        if message:
            log_msg += f' - {message}'
        logger.info(log_msg)


class RoomBroadcastMixin:
    """
    Mixin for handlers that notify the rest of a room.

    Every broadcast-triggering flow shares one skeleton: resolve the sender's
    room, exclude the sender's channel, fan out the payload.
    """

    # Type hints for expected attributes from BaseHandler
    room_resolver: Any
    broadcast_service: Any

    def notify_room(self, sender: Participant, payload: Any,
                    exclude_channel_id: Optional[str] = None) -> DispatchReport:
        """
        Deliver a payload to everyone sharing the sender's room.

        Args:
            sender: Participant that triggered the event
            payload: Message to deliver
            exclude_channel_id: Channel to skip; defaults to the sender's own channel

        Returns:
            DispatchReport of the fan-out

        Raises:
            BroadcastError: If the fan-out itself failed
        """
        if exclude_channel_id is None:
            exclude_channel_id = sender.channel_id

        roster = self.room_resolver.resolve_for(sender)
        logger.info(
            f'Notifying room {sender.room_name} of event from {sender.name} '
            f'({len(roster)} participants resolved)'
        )
        return self.broadcast_service.broadcast(roster, exclude_channel_id, payload)


class BasePresenceHandler(BaseHandler, RoomBroadcastMixin):
    """Base class for handlers that mutate presence and notify rooms."""
    pass
