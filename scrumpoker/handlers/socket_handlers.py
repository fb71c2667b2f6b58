"""
Socket.IO event handlers for the Scrum Poker presence service.

This module binds Socket.IO events to the channel handler. The channel id of
every event is the Socket.IO session id of the emitting client.
"""

import logging
from flask import request
from flask_socketio import ConnectionRefusedError

from .channel_handler import ChannelHandler

logger = logging.getLogger(__name__)

NEW_ROUND_EVENT = 'newgame'
SEND_MESSAGE_EVENT = 'sendmessage'


def register_socket_handlers(socketio_instance, config=None):
    """Register all socket handlers with the SocketIO instance."""
    config = config or {}
    channel_handler = ChannelHandler()
    allowed_origins = {
        origin.strip()
        for origin in config.get('cors_allowed_origins', '').split(',')
        if origin.strip()
    }
    enforce_origin = config.get('environment') == 'production' and bool(allowed_origins)

    def handle_connect(auth=None):
        """Handle client connection: bind the channel to the participant in the query string."""
        origin = request.headers.get('Origin')
        if enforce_origin and origin and origin not in allowed_origins:
            logger.warning(f'Rejecting connection from disallowed Origin: {origin}')
            return False

        logger.info(f'Client connected: {request.sid} from Origin: {origin}')  # type: ignore[attr-defined]
        result = channel_handler.handle_connect(
            request.args.get('id'),
            request.args.get('name'),
            request.sid,  # type: ignore[attr-defined]
        )
        if not result.ok:
            raise ConnectionRefusedError(result.to_ack())

    def handle_disconnect(reason=None):
        """Handle client disconnection: remove the participant and notify the room."""
        logger.info(f'Client disconnected: {request.sid} ({reason})')  # type: ignore[attr-defined]
        result = channel_handler.handle_disconnect(request.sid)  # type: ignore[attr-defined]
        if not result.ok:
            logger.info(f'Disconnect of {request.sid} finished with status {result.status_code}')  # type: ignore[attr-defined]

    def handle_new_round(data=None):
        return channel_handler.handle_new_round(request.sid).to_ack()  # type: ignore[attr-defined]

    def handle_send_message(data=None):
        return channel_handler.handle_send_message(request.sid, data).to_ack()  # type: ignore[attr-defined]

    def handle_default(event_name, data=None):
        return channel_handler.handle_default(event_name, data).to_ack()

    socketio_instance.on_event('connect', handle_connect)
    socketio_instance.on_event('disconnect', handle_disconnect)
    socketio_instance.on_event(NEW_ROUND_EVENT, handle_new_round)
    socketio_instance.on_event(SEND_MESSAGE_EVENT, handle_send_message)
    socketio_instance.on_event('*', handle_default)

    logger.info("Registered socket event handlers")
    return channel_handler
