"""
Presence Actions

Defines the notification actions pushed to room members and the payload
shape they share.
"""

from enum import Enum
from typing import Any, Dict


class PresenceAction(Enum):
    """Presence action enumeration."""
    PLAYER_JOIN = "player-join"
    PLAYER_VOTE = "player-vote"
    NEW_ROUND = "new"
    PLAYER_DISCONNECT = "player-disconnect"


def presence_payload(action: PresenceAction, participant, **extra: Any) -> Dict[str, Any]:
    """Build a notification payload: action, sender name and id, then any extra fields."""
    payload = {
        'action': action.value,
        'name': participant.name,
        'id': participant.id,
    }
    payload.update(extra)
    return payload
