"""
Record types for participants and votes.

Both are stored as flat key-value documents; the document keys match the
JSON field names used by the HTTP API.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple


def normalize_room_secret(room_secret: Any) -> Optional[str]:
    """Map every "no secret" spelling (missing, None, empty string) to None."""
    if room_secret is None or room_secret == '':
        return None
    return room_secret


def new_record_id() -> str:
    """Generate an opaque unique record id."""
    return str(uuid.uuid4())


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class Participant:
    """Identity record for one connected player."""

    id: str
    name: str
    room_name: str
    room_secret: Optional[str] = None
    channel_id: Optional[str] = None
    joined_at: str = field(default_factory=utc_timestamp)

    def __post_init__(self):
        self.room_secret = normalize_room_secret(self.room_secret)

    @classmethod
    def create(cls, name: str, room_name: str, room_secret: Optional[str] = None) -> 'Participant':
        """Create a freshly joined participant with a new id and no channel."""
        return cls(id=new_record_id(), name=name, room_name=room_name, room_secret=room_secret)

    @property
    def key(self) -> Tuple[str, str]:
        return (self.id, self.name)

    @property
    def room_key(self) -> Tuple[str, Optional[str]]:
        return (self.room_name, self.room_secret)

    @property
    def has_channel(self) -> bool:
        return bool(self.channel_id)

    def in_room(self, room_name: str, room_secret: Optional[str]) -> bool:
        return self.room_key == (room_name, normalize_room_secret(room_secret))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'playerName': self.name,
            'roomName': self.room_name,
            'roomSecret': self.room_secret,
            'channelId': self.channel_id,
            'joinedAt': self.joined_at,
        }

    @classmethod
    def from_dict(cls, document: Dict[str, Any]) -> 'Participant':
        return cls(
            id=document['id'],
            name=document['playerName'],
            room_name=document.get('roomName'),
            room_secret=document.get('roomSecret'),
            channel_id=document.get('channelId'),
            joined_at=document.get('joinedAt') or utc_timestamp(),
        )


@dataclass
class Vote:
    """One submitted estimate. Append-only."""

    id: str
    participant_id: str
    participant_name: str
    room_name: str
    room_secret: Optional[str]
    card_value: Any
    card_title: str
    submitted_at: str = field(default_factory=utc_timestamp)

    def __post_init__(self):
        self.room_secret = normalize_room_secret(self.room_secret)

    @classmethod
    def cast_by(cls, participant: Participant, card_value: Any, card_title: str) -> 'Vote':
        """Create a vote carrying a copy of the participant's room identity."""
        return cls(
            id=new_record_id(),
            participant_id=participant.id,
            participant_name=participant.name,
            room_name=participant.room_name,
            room_secret=participant.room_secret,
            card_value=card_value,
            card_title=card_title,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'playerId': self.participant_id,
            'playerName': self.participant_name,
            'roomName': self.room_name,
            'roomSecret': self.room_secret,
            'cardValue': self.card_value,
            'cardTitle': self.card_title,
            'submittedAt': self.submitted_at,
        }

    @classmethod
    def from_dict(cls, document: Dict[str, Any]) -> 'Vote':
        return cls(
            id=document['id'],
            participant_id=document['playerId'],
            participant_name=document['playerName'],
            room_name=document['roomName'],
            room_secret=document.get('roomSecret'),
            card_value=document['cardValue'],
            card_title=document['cardTitle'],
            submitted_at=document.get('submittedAt') or utc_timestamp(),
        )
