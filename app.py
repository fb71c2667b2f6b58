"""
Scrum Poker - A real-time estimation game where players vote on cards in shared rooms.
Main Flask application entry point focusing on app creation, dependency injection, and service wiring.
"""

from flask import Flask
from flask_socketio import SocketIO
import logging

from container import configure_container
from config_factory import load_config, ConfigurationFactory

# Initialize Flask app
app = Flask(__name__)

# Load and apply configuration
app_config = load_config()
config_factory = ConfigurationFactory()
app.config.update(config_factory.get_flask_config())

# Initialize Socket.IO with environment-aware CORS
# In production, restrict to explicitly allowed origins from SOCKETIO_CORS_ALLOWED_ORIGINS (comma-separated)
if app_config.is_production:
    # If none provided, default to same-origin only by providing empty list (no cross-origin)
    socketio = SocketIO(app, cors_allowed_origins=app_config.allowed_origins or [], async_mode=app_config.async_mode)
else:
    # Development/testing: permissive for local workflows
    socketio = SocketIO(app, cors_allowed_origins="*", async_mode=app_config.async_mode)

# Configure logging
logging.basicConfig(level=app_config.log_level.upper())
logger = logging.getLogger(__name__)

# Configure service container with dependencies
configure_container(socketio=socketio, config=config_factory.to_dict())

# Register REST endpoints
from scrumpoker.routes.api import create_api_blueprint
app.register_blueprint(create_api_blueprint())

# Register Socket.IO handlers
from scrumpoker.handlers.socket_handlers import register_socket_handlers
register_socket_handlers(socketio, config_factory.to_dict())

if __name__ == '__main__':
    # Run the application using configuration
    logger.info(f"Starting Scrum Poker server on {app_config.host}:{app_config.port}")
    try:
        socketio.run(app, host=app_config.host, port=app_config.port, debug=app_config.debug)
    except KeyboardInterrupt:
        logger.info("Received interrupt signal")
