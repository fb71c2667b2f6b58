"""
Global pytest configuration and fixtures.
Provides service fixtures for proper dependency injection in tests.
"""

import pytest
import os
from flask_socketio import SocketIO
from flask import Flask

# Ensure testing environment
os.environ['TESTING'] = '1'


@pytest.fixture(scope="function", autouse=True)
def reset_global_container():
    """Reset the global container and configuration before each test to ensure clean state."""
    from container import reset_container
    from config_factory import ConfigurationFactory

    reset_container()
    ConfigurationFactory().reset()

    yield

    reset_container()
    ConfigurationFactory().reset()


@pytest.fixture(scope="function")
def app_config():
    """Load a testing configuration that needs no eventlet worker."""
    from config_factory import ConfigurationFactory

    return ConfigurationFactory().load_from_dict({
        'environment': 'testing',
        'async_mode': 'threading',
    })


@pytest.fixture(scope="function")
def socketio_app(app_config):
    """Create a Flask app with Socket.IO, the container and every route registered."""
    from config_factory import ConfigurationFactory
    from container import configure_container
    from scrumpoker.routes.api import create_api_blueprint
    from scrumpoker.handlers.socket_handlers import register_socket_handlers

    test_app = Flask(__name__)
    test_app.config['TESTING'] = True
    test_socketio = SocketIO(test_app, async_mode=app_config.async_mode)

    config = ConfigurationFactory().to_dict()
    configure_container(socketio=test_socketio, config=config)
    test_app.register_blueprint(create_api_blueprint())
    register_socket_handlers(test_socketio, config)

    return test_app, test_socketio


@pytest.fixture(scope="function")
def app(socketio_app):
    """Flask app for testing."""
    return socketio_app[0]


@pytest.fixture(scope="function")
def socketio(socketio_app):
    """SocketIO instance for testing."""
    return socketio_app[1]


@pytest.fixture(scope="function")
def container(socketio_app):
    """Service container configured for the test app."""
    from container import get_container
    return get_container()


@pytest.fixture(scope="function")
def participant_directory(container):
    """Provide the ParticipantDirectory through dependency injection."""
    return container.get('ParticipantDirectory')


@pytest.fixture(scope="function")
def broadcast_service(container):
    """Provide BroadcastService through dependency injection."""
    return container.get('BroadcastService')


@pytest.fixture(scope="function")
def validation_service(container):
    """Provide ValidationService through dependency injection."""
    return container.get('ValidationService')


@pytest.fixture(scope="function")
def error_response_factory(container):
    """Provide ErrorResponseFactory through dependency injection."""
    return container.get('ErrorResponseFactory')
