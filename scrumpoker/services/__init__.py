"""
Services package for the Scrum Poker presence service

Contains the participant store, room resolution and broadcast fan-out services.
"""

from .participant_directory import ParticipantDirectory, InMemoryParticipantDirectory
from .room_resolver import RoomResolver
from .channel_transport import SocketIOChannelTransport
from .broadcast_service import BroadcastService, DispatchReport
from .validation_service import ValidationService
from .error_response_factory import ErrorResponseFactory, HandlerResult

__all__ = [
    'ParticipantDirectory',
    'InMemoryParticipantDirectory',
    'RoomResolver',
    'SocketIOChannelTransport',
    'BroadcastService',
    'DispatchReport',
    'ValidationService',
    'ErrorResponseFactory',
    'HandlerResult'
]
