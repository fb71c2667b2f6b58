"""
Participant Directory for the Scrum Poker presence service

Keyed record access to participants and votes. The presence handlers only
depend on the abstract contract; the in-memory implementation is the default
store wired by the container.
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple

from scrumpoker.core.errors import DirectoryError
from scrumpoker.core.models import Participant, Vote, normalize_room_secret

logger = logging.getLogger(__name__)


class ParticipantDirectory(ABC):
    """Contract for the durable participant and vote store."""

    @abstractmethod
    def get_by_identity(self, participant_id: str, name: str) -> Optional[Participant]:
        """Point lookup by record key. Returns None when absent."""

    @abstractmethod
    def get_by_channel(self, channel_id: str) -> Optional[Participant]:
        """Point lookup by live channel id. The first match wins."""

    @abstractmethod
    def list_by_room(self, room_name: str, room_secret: Optional[str]) -> List[Participant]:
        """Filtered scan by room identity. Unordered; may be empty."""

    @abstractmethod
    def list_all(self) -> List[Participant]:
        """Unfiltered scan."""

    @abstractmethod
    def upsert(self, participant: Participant) -> bool:
        """
        Insert or replace a participant record.

        Returns:
            True when the write is confirmed

        Raises:
            DirectoryError: If the store rejects the write
        """

    @abstractmethod
    def delete(self, participant_id: str, name: str) -> bool:
        """Remove a participant record. Returns False if there was nothing to remove."""

    @abstractmethod
    def append_vote(self, vote: Vote) -> bool:
        """Append a vote record."""

    @abstractmethod
    def list_votes(self, room_name: str, room_secret: Optional[str]) -> List[Vote]:
        """All votes recorded for a room."""


class InMemoryParticipantDirectory(ParticipantDirectory):
    """Process-local store holding flat documents behind a single lock."""

    def __init__(self):
        self._participants: Dict[Tuple[str, str], Dict] = {}
        self._votes: List[Dict] = []
        self._lock = threading.Lock()
        logger.info("InMemoryParticipantDirectory initialized")

    def get_by_identity(self, participant_id: str, name: str) -> Optional[Participant]:
        with self._lock:
            document = self._participants.get((participant_id, name))
            return Participant.from_dict(document) if document else None

    def get_by_channel(self, channel_id: str) -> Optional[Participant]:
        if not channel_id:
            return None

        with self._lock:
            matches = [doc for doc in self._participants.values() if doc.get('channelId') == channel_id]

        if not matches:
            logger.debug(f"No participant found for channel {channel_id}")
            return None
        if len(matches) > 1:
            logger.warning(f"Channel {channel_id} is bound to {len(matches)} participants, using the first")
        return Participant.from_dict(matches[0])

    def list_by_room(self, room_name: str, room_secret: Optional[str]) -> List[Participant]:
        room_secret = normalize_room_secret(room_secret)
        with self._lock:
            documents = [
                doc for doc in self._participants.values()
                if doc.get('roomName') == room_name and doc.get('roomSecret') == room_secret
            ]
        return [Participant.from_dict(doc) for doc in documents]

    def list_all(self) -> List[Participant]:
        with self._lock:
            documents = list(self._participants.values())
        return [Participant.from_dict(doc) for doc in documents]

    def upsert(self, participant: Participant) -> bool:
        if not participant.id or not participant.name:
            raise DirectoryError('upsert', 'participant record requires id and name')

        with self._lock:
            self._participants[participant.key] = participant.to_dict()
        logger.debug(f"Stored participant {participant.name} ({participant.id})")
        return True

    def delete(self, participant_id: str, name: str) -> bool:
        with self._lock:
            removed = self._participants.pop((participant_id, name), None)
        if removed is None:
            logger.debug(f"Nothing to delete for participant {name} ({participant_id})")
            return False
        logger.debug(f"Deleted participant {name} ({participant_id})")
        return True

    def append_vote(self, vote: Vote) -> bool:
        with self._lock:
            self._votes.append(vote.to_dict())
        logger.debug(f"Stored vote {vote.id} from {vote.participant_name} in room {vote.room_name}")
        return True

    def list_votes(self, room_name: str, room_secret: Optional[str]) -> List[Vote]:
        room_secret = normalize_room_secret(room_secret)
        with self._lock:
            documents = [
                doc for doc in self._votes
                if doc['roomName'] == room_name and doc.get('roomSecret') == room_secret
            ]
        return [Vote.from_dict(doc) for doc in documents]

    def clear(self) -> None:
        """Drop every record (useful for testing)."""
        with self._lock:
            self._participants.clear()
            self._votes.clear()
