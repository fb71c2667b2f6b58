"""
Room helpers for tests.
Provides common patterns for building participants, containers and joined rooms.
"""

from typing import Optional

from container import ServiceContainer
from scrumpoker.core.models import Participant
from scrumpoker.services.participant_directory import InMemoryParticipantDirectory
from tests.helpers.socket_mocks import RecordingTransport, create_mock_socketio


def make_participant(name: str, room_name: str = 'sprint1', room_secret: Optional[str] = 'abc',
                     channel_id: Optional[str] = None, participant_id: Optional[str] = None) -> Participant:
    """Build a participant record, with a generated id unless one is given."""
    participant = Participant.create(name, room_name, room_secret)
    if participant_id is not None:
        participant.id = participant_id
    participant.channel_id = channel_id
    return participant


def build_test_container(directory=None, transport=None, config=None) -> ServiceContainer:
    """
    Build a service container wired with an in-memory directory and a recording transport.

    Args:
        directory: Participant directory to use; a fresh in-memory one by default
        transport: Channel transport to use; a RecordingTransport by default
        config: Optional container configuration values

    Returns:
        Configured ServiceContainer
    """
    container = ServiceContainer()
    container.set_external_dependency('socketio', create_mock_socketio())
    container.set_config(config or {})
    container.configure_services()
    container.set_external_dependency('ParticipantDirectory', directory or InMemoryParticipantDirectory())
    container.set_external_dependency('ChannelTransport', transport or RecordingTransport())
    return container


def seat_participant(directory, name: str, channel_id: Optional[str], room_name: str = 'sprint1',
                     room_secret: Optional[str] = 'abc') -> Participant:
    """Store a participant in the directory, as if it had joined and connected."""
    participant = make_participant(name, room_name, room_secret, channel_id)
    directory.upsert(participant)
    return participant
