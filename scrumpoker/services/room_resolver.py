"""
Room Resolver - Resolves the current roster of a room.

A room is identified by (room name, room secret). Resolution always re-reads
the participant directory.
"""

import logging
from typing import List, Optional

from scrumpoker.core.models import Participant, normalize_room_secret

logger = logging.getLogger(__name__)


class RoomResolver:
    """Resolves room identities to participant rosters."""

    def __init__(self, participant_directory):
        self.participant_directory = participant_directory

    def resolve_room(self, room_name: str, room_secret: Optional[str]) -> List[Participant]:
        """
        Get every participant currently sharing a room.

        Args:
            room_name: Exact room name
            room_secret: Room secret; None and "" both mean "no secret"

        Returns:
            List of participants, empty when nobody matches
        """
        room_secret = normalize_room_secret(room_secret)
        candidates = self.participant_directory.list_by_room(room_name, room_secret) or []

        roster = []
        seen = set()
        for participant in candidates:
            # Stores may filter loosely; only exact room identity counts.
            if not participant.in_room(room_name, room_secret) or participant.key in seen:
                continue
            seen.add(participant.key)
            roster.append(participant)

        logger.debug(f"Resolved {len(roster)} participants in room {room_name}")
        return roster

    def resolve_for(self, participant: Participant) -> List[Participant]:
        """Resolve the roster of the room the given participant belongs to."""
        return self.resolve_room(participant.room_name, participant.room_secret)
