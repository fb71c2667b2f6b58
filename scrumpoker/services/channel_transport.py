"""
Channel Transport - Delivers one message to one live Socket.IO connection.
"""

import logging
from typing import Any

from scrumpoker.core.errors import StaleChannelError

logger = logging.getLogger(__name__)


class SocketIOChannelTransport:
    """Push-channel transport backed by Flask-SocketIO."""

    def __init__(self, socketio, event_name: str = 'message', namespace: str = '/'):
        """Initialize the transport.

        Args:
            socketio: Flask-SocketIO instance for emitting messages
            event_name: Event name the clients listen on
            namespace: Socket.IO namespace the channels live in
        """
        self.socketio = socketio
        self.event_name = event_name
        self.namespace = namespace

    def is_connected(self, channel_id: str) -> bool:
        """Check whether the Socket.IO server still knows this channel."""
        return bool(self.socketio.server.manager.is_connected(channel_id, self.namespace))

    def post_to_channel(self, channel_id: str, payload: Any) -> None:
        """
        Send a payload to a single channel.

        Raises:
            StaleChannelError: If the channel is no longer connected
        """
        if not self.is_connected(channel_id):
            raise StaleChannelError(channel_id)

        self.socketio.emit(self.event_name, payload, to=channel_id, namespace=self.namespace)
        logger.debug(f'Posted {self.event_name} to channel {channel_id}')
