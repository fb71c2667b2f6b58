"""
Channel Handler

This module handles events arriving on live push channels: the connection
handshake, new round requests, free-text messages, disconnects and any
unrouted event.
"""

import logging
from typing import Any, Optional

from scrumpoker.core.errors import BroadcastError, DirectoryError, ErrorCode, ValidationError
from scrumpoker.core.presence import PresenceAction, presence_payload
from scrumpoker.services.error_response_factory import HandlerResult, with_error_handling
from scrumpoker.services.validation_service import MISSING_FIELDS_MESSAGE
from .base_handler import BasePresenceHandler

logger = logging.getLogger(__name__)

CONNECT_REQUIRED_PARAMS = ('id', 'name')


class ChannelHandler(BasePresenceHandler):
    """Handler for channel lifecycle events and channel-originated broadcasts."""

    @with_error_handling
    def handle_connect(self, participant_id: Optional[str], name: Optional[str],
                       channel_id: str) -> HandlerResult:
        """
        Bind a new channel to a registered participant and announce it.

        Args:
            participant_id: Participant id from the connection query string
            name: Participant name from the connection query string
            channel_id: Channel id assigned by the transport
        """
        self.log_handler_start('handle_connect', {'id': participant_id, 'name': name})

        missing = self.validation_service.find_missing_fields(
            {'id': participant_id, 'name': name}, CONNECT_REQUIRED_PARAMS
        )
        if missing:
            raise ValidationError(
                ErrorCode.MISSING_DATA,
                'Error! Required query parameters missing: ' + ', '.join(missing),
                {'missing_fields': missing}
            )

        logger.info(f'Updating connection for player: {name} ({participant_id})')
        try:
            participant = self.participant_directory.get_by_identity(participant_id, name)
            if participant is None:
                raise DirectoryError('update_channel', f'no participant {name} ({participant_id})')
            participant.channel_id = channel_id
            updated = self.participant_directory.upsert(participant)
        except DirectoryError as e:
            logger.error(f'Error while connecting: {e}')
            return self.error_response_factory.create_error_result(
                ErrorCode.STORE_ERROR, 'Error updating connectionId'
            )

        if updated is not True:
            logger.error(f'Channel update for {name} ({participant_id}) returned {updated!r}')
            return HandlerResult(418, {'message': 'Unexpected result while updating connectionId'})

        # The room is read from the stored record, not from the request
        current = self.participant_directory.get_by_identity(participant_id, name)
        if current is None:
            logger.warning(f'Player {name} ({participant_id}) not visible after update, skipping join notification')
            return self.error_response_factory.create_success_result('Connection established')

        try:
            self.notify_room(current, presence_payload(PresenceAction.PLAYER_JOIN, current),
                             exclude_channel_id=channel_id)
        except BroadcastError as e:
            # The channel binding stands; only the announcement is lost
            logger.error(f'Join notification for {name} ({participant_id}) failed: {e}')

        self.log_handler_success('handle_connect', f'Player {name} bound to channel {channel_id}')
        return self.error_response_factory.create_success_result('Connection established')

    @with_error_handling
    def handle_new_round(self, channel_id: str) -> HandlerResult:
        """Ask everyone else in the sender's room to start a new round."""
        self.log_handler_start('handle_new_round')

        participant = self.participant_directory.get_by_channel(channel_id)
        if participant is None:
            logger.info(f'New round requested from unknown channel {channel_id}, ignoring')
            return HandlerResult(200)

        try:
            self.notify_room(participant, presence_payload(PresenceAction.NEW_ROUND, participant),
                             exclude_channel_id=channel_id)
        except BroadcastError as e:
            logger.error(f'New round notification from {participant.name} failed: {e}')
            return HandlerResult(500)

        self.log_handler_success('handle_new_round', f'New round requested by {participant.name}')
        return HandlerResult(200)

    @with_error_handling
    def handle_send_message(self, channel_id: str, data: Any) -> HandlerResult:
        """
        Forward a free-text message verbatim to the rest of the sender's room.

        Expected data format:
        {
            'message': <any value, forwarded as is>
        }
        """
        self.log_handler_start('handle_send_message', data)

        participant = self.participant_directory.get_by_channel(channel_id)
        if participant is None:
            logger.info(f'Message from unknown channel {channel_id}, ignoring')
            return HandlerResult(200)

        if not isinstance(data, dict) or 'message' not in data:
            raise ValidationError(
                ErrorCode.MISSING_DATA,
                MISSING_FIELDS_MESSAGE + 'message',
                {'missing_fields': ['message']}
            )

        try:
            self.notify_room(participant, data['message'], exclude_channel_id=channel_id)
        except BroadcastError as e:
            logger.error(f'Message from {participant.name} could not be broadcast: {e}')
            return HandlerResult(500)

        self.log_handler_success('handle_send_message', f'Message from {participant.name} forwarded')
        return HandlerResult(200)

    @with_error_handling
    def handle_disconnect(self, channel_id: str) -> HandlerResult:
        """Remove the channel's participant and tell the rest of the room."""
        self.log_handler_start('handle_disconnect')

        participant = self.require_channel_owner(channel_id)

        try:
            self.participant_directory.delete(participant.id, participant.name)
        except DirectoryError as e:
            logger.error(f'Error removing player {participant.name} ({participant.id}): {e}')
            return self.error_response_factory.create_error_result(
                ErrorCode.STORE_ERROR, 'Error while disconnecting player'
            )

        try:
            self.notify_room(participant, presence_payload(PresenceAction.PLAYER_DISCONNECT, participant),
                             exclude_channel_id=channel_id)
        except BroadcastError as e:
            logger.error(f'Disconnect notification for {participant.name} failed: {e}')
            return self.error_response_factory.create_error_result(
                ErrorCode.BROADCAST_FAILED, 'Error while disconnecting player'
            )

        self.log_handler_success(
            'handle_disconnect',
            f'Player {participant.name} ({participant.id}) left room {participant.room_name}'
        )
        return self.error_response_factory.create_success_result('Player disconnected')

    def handle_default(self, event_name: str, data: Any = None) -> HandlerResult:
        """Acknowledge any event without a dedicated route."""
        logger.info(f'Unrouted event {event_name} acknowledged')
        if data is not None:
            logger.debug(f'Unrouted event data: {data}')
        return HandlerResult(200, 'OK')
