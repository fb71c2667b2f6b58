"""
Service Container for the Scrum Poker presence service

Wires the presence services together. Each service is built once, on first
use, from its registered factory and the services it depends on.
"""

from typing import Any, Callable, Dict, List, Optional


class ServiceNotFoundError(Exception):
    """Raised when requested service is not registered"""
    pass


class ServiceDefinition:
    """Factory and dependency names for one service"""

    def __init__(self, factory: Callable, dependencies: Optional[List[str]] = None,
                 config: Optional[Dict[str, Any]] = None):
        self.factory = factory
        self.dependencies = dependencies or []
        self.config = config or {}

    def build(self, dependencies: List[Any]) -> Any:
        return self.factory(*dependencies, **self.config)


class ServiceContainer:
    """
    Lazily built singletons plus external dependencies.

    External dependencies (the SocketIO instance, test doubles) are placed
    directly in the instance table and take precedence over registrations.
    """

    def __init__(self):
        self._services: Dict[str, ServiceDefinition] = {}
        self._instances: Dict[str, Any] = {}
        self._config: Dict[str, Any] = {}

    def register(self, name: str, factory: Callable, dependencies: Optional[List[str]] = None,
                 config: Optional[Dict[str, Any]] = None) -> 'ServiceContainer':
        """
        Register a service.

        Args:
            name: Service name for retrieval
            factory: Callable receiving the dependencies positionally and config as keywords
            dependencies: Names of services passed to the factory
            config: Keyword arguments for the factory

        Returns:
            Self for method chaining
        """
        if name in self._services:
            raise ValueError(f"Service '{name}' is already registered")
        self._services[name] = ServiceDefinition(factory, dependencies, config)
        return self

    def configure_services(self) -> 'ServiceContainer':
        """Register the presence services and their dependencies."""
        from scrumpoker.services.participant_directory import InMemoryParticipantDirectory
        from scrumpoker.services.room_resolver import RoomResolver
        from scrumpoker.services.channel_transport import SocketIOChannelTransport
        from scrumpoker.services.broadcast_service import BroadcastService
        from scrumpoker.services.validation_service import ValidationService
        from scrumpoker.services.error_response_factory import ErrorResponseFactory

        self.register('ValidationService', ValidationService,
                      config={'max_field_length': self._config.get('max_field_length')})
        self.register('ErrorResponseFactory', ErrorResponseFactory)

        # Store and room resolution
        self.register('ParticipantDirectory', InMemoryParticipantDirectory)
        self.register('RoomResolver', RoomResolver, dependencies=['ParticipantDirectory'])

        # Fan-out; 'socketio' is an external dependency
        self.register('ChannelTransport', SocketIOChannelTransport, dependencies=['socketio'])
        self.register('BroadcastService', BroadcastService, dependencies=['ChannelTransport'])

        return self

    def set_external_dependency(self, name: str, instance: Any) -> 'ServiceContainer':
        """Provide an instance created outside the container, replacing any registration."""
        self._instances[name] = instance
        return self

    def set_config(self, config: Dict[str, Any]) -> 'ServiceContainer':
        self._config.update(config)
        return self

    def get(self, name: str) -> Any:
        """
        Get a service instance, building it and its dependencies on first use.

        Raises:
            ServiceNotFoundError: If the service is neither registered nor provided
        """
        if name in self._instances:
            return self._instances[name]

        definition = self._services.get(name)
        if definition is None:
            raise ServiceNotFoundError(f"Service '{name}' is not registered")

        instance = definition.build([self.get(dependency) for dependency in definition.dependencies])
        self._instances[name] = instance
        return instance

    def clear(self) -> 'ServiceContainer':
        """Drop every registration, instance and config value"""
        self._services.clear()
        self._instances.clear()
        self._config.clear()
        return self

    def __repr__(self) -> str:
        return f"ServiceContainer(services={len(self._services)}, instances={len(self._instances)})"


_app_container: Optional[ServiceContainer] = None


def get_container() -> ServiceContainer:
    """Get the global application service container"""
    global _app_container
    if _app_container is None:
        _app_container = ServiceContainer()
    return _app_container


def reset_container() -> None:
    """Drop the global container (useful for testing)"""
    global _app_container
    _app_container = None


def configure_container(socketio=None, config=None) -> ServiceContainer:
    """
    Configure the global container with the presence services.

    Args:
        socketio: Flask-SocketIO instance used by the channel transport
        config: Application configuration dictionary

    Returns:
        Configured service container
    """
    container = get_container()
    container.clear()

    if socketio is not None:
        container.set_external_dependency('socketio', socketio)

    if config is not None:
        container.set_config(config)

    return container.configure_services()
