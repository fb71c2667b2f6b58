"""
Player Handler

This module handles the HTTP-facing presence operations: joining a room,
submitting a vote and listing participants.
"""

import logging
from typing import Any, Optional

from scrumpoker.core.errors import BroadcastError, DirectoryError, ErrorCode, NotFoundError
from scrumpoker.core.models import Participant, Vote
from scrumpoker.core.presence import PresenceAction, presence_payload
from scrumpoker.services.error_response_factory import (
    INTERNAL_ERROR_MESSAGE, HandlerResult, with_error_handling
)
from .base_handler import BasePresenceHandler

logger = logging.getLogger(__name__)


class PlayerHandler(BasePresenceHandler):
    """Handler for participant registration, votes and roster listing."""

    @with_error_handling
    def handle_join(self, data: Any) -> HandlerResult:
        """
        Handle a participant joining a room.

        Expected data format:
        {
            'playerName': 'display name',
            'roomName': 'room name',
            'roomSecret': 'optional secret'
        }
        """
        self.log_handler_start('handle_join', data)

        fields = self.validation_service.validate_join_data(data)
        participant = Participant.create(fields['player_name'], fields['room_name'], fields['room_secret'])

        if not self.participant_directory.upsert(participant):
            raise DirectoryError('upsert', f'write of participant {participant.id} not confirmed')

        self.log_handler_success(
            'handle_join',
            f'Player {participant.name} ({participant.id}) entered room {participant.room_name}'
        )
        return self.error_response_factory.create_success_result(
            'Player entered the game!', playerId=participant.id
        )

    @with_error_handling
    def handle_vote(self, data: Any) -> HandlerResult:
        """
        Handle a vote submission and notify the voter's room.

        Expected data format:
        {
            'playerId': 'id returned by join',
            'playerName': 'display name',
            'roomName': 'room name',
            'roomSecret': 'optional secret',
            'cardValue': 5,
            'cardTitle': '5'
        }
        """
        self.log_handler_start('handle_vote', data)

        fields = self.validation_service.validate_vote_data(data)
        participant = self.require_participant(fields['player_id'], fields['player_name'])

        if not participant.has_channel:
            raise NotFoundError(
                ErrorCode.NO_CHANNEL,
                f'Error! Player {participant.name} ({participant.id}) has no live connection'
            )

        if not participant.in_room(fields['room_name'], fields['room_secret']):
            logger.warning(
                f'Vote from {participant.name} names room {fields["room_name"]}, '
                f'using registered room {participant.room_name}'
            )

        vote = Vote.cast_by(participant, fields['card_value'], fields['card_title'])
        if not self.participant_directory.append_vote(vote):
            raise DirectoryError('append_vote', f'write of vote {vote.id} not confirmed')

        payload = presence_payload(
            PresenceAction.PLAYER_VOTE, participant,
            cardValue=vote.card_value, cardTitle=vote.card_title
        )
        try:
            self.notify_room(participant, payload)
        except BroadcastError as e:
            # The vote is already stored and stays stored
            logger.error(f'Vote {vote.id} stored but room notification failed: {e}')
            return self.error_response_factory.create_error_result(
                ErrorCode.BROADCAST_FAILED, INTERNAL_ERROR_MESSAGE
            )

        self.log_handler_success('handle_vote', f'Vote {vote.id} from {participant.name} accepted')
        return self.error_response_factory.create_success_result('Vote accepted!')

    @with_error_handling
    def handle_list_participants(self, room_name: Optional[str] = None,
                                 room_secret: Optional[str] = None) -> HandlerResult:
        """
        List stored participants.

        With a room name, only that room's participants are listed, newest first.
        """
        self.log_handler_start('handle_list_participants', {'roomName': room_name})

        if room_name:
            participants = self.room_resolver.resolve_room(room_name, room_secret)
            participants.sort(key=lambda p: (p.joined_at, p.id), reverse=True)
        else:
            participants = self.participant_directory.list_all()

        return HandlerResult(200, [participant.to_dict() for participant in participants])
