"""
Configuration Factory for the Scrum Poker presence service

Loads the server, Socket.IO and request validation settings from the
environment into one validated AppConfig shared by the whole process.
"""

import os
import logging
from typing import Any, Dict, Optional
from enum import Enum
from dataclasses import dataclass, asdict

logger = logging.getLogger(__name__)

DEV_SECRET_KEY = 'dev-secret-key-change-in-production'
ASYNC_MODES = ('eventlet', 'threading')
LOG_LEVELS = ('debug', 'info', 'warning', 'error', 'critical')
TRUE_VALUES = ('true', '1', 'yes', 'on')


class Environment(Enum):
    """Deployment environments, selected by FLASK_ENV"""
    DEVELOPMENT = "development"
    PRODUCTION = "production"
    TESTING = "testing"


class ConfigError(Exception):
    """Raised for missing or invalid configuration"""
    pass


@dataclass
class AppConfig:
    """Process-wide settings, validated on construction"""

    secret_key: str = DEV_SECRET_KEY
    debug: bool = False
    flask_env: str = 'development'

    host: str = '0.0.0.0'
    port: int = 5000

    # Socket.IO
    async_mode: str = 'eventlet'
    cors_allowed_origins: str = ''  # comma-separated, enforced in production only

    # Upper bound for playerName, roomName, roomSecret and cardTitle
    max_field_length: int = 100

    # Gunicorn worker
    worker_connections: int = 1000
    timeout: int = 30
    keepalive: int = 2
    log_level: str = 'info'

    environment: Environment = Environment.DEVELOPMENT

    def __post_init__(self):
        problems = self.problems()
        if problems:
            raise ConfigError('; '.join(problems))

    def problems(self) -> list:
        """Every reason this configuration cannot be used, empty when valid."""
        found = []
        if not 1 <= self.port <= 65535:
            found.append(f"Invalid port number: {self.port}")
        if self.async_mode not in ASYNC_MODES:
            found.append(f"Invalid async_mode: {self.async_mode}")
        if not 1 <= self.max_field_length <= 10000:
            found.append(f"Invalid max_field_length: {self.max_field_length}")
        if self.worker_connections < 1:
            found.append(f"Invalid worker_connections: {self.worker_connections}")
        if self.timeout < 1:
            found.append(f"Invalid timeout: {self.timeout}")
        if self.log_level.lower() not in LOG_LEVELS:
            found.append(f"Invalid log_level: {self.log_level}")
        if self.is_production and self.secret_key == DEV_SECRET_KEY:
            found.append("Production environment requires a secure SECRET_KEY")
        return found

    @property
    def is_development(self) -> bool:
        return self.environment == Environment.DEVELOPMENT

    @property
    def is_production(self) -> bool:
        return self.environment == Environment.PRODUCTION

    @property
    def is_testing(self) -> bool:
        return self.environment == Environment.TESTING

    @property
    def allowed_origins(self) -> list:
        return [origin.strip() for origin in self.cors_allowed_origins.split(',') if origin.strip()]


def _env_str(key: str, default: str) -> str:
    return os.environ.get(key, default)


def _env_int(key: str, default: int) -> int:
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Invalid integer value for {key}: {value}, using default: {default}")
        return default


def _env_bool(key: str, default: bool) -> bool:
    value = os.environ.get(key)
    if value is None:
        return default
    return value.lower() in TRUE_VALUES


class ConfigurationFactory:
    """
    Singleton holder of the loaded AppConfig.

    The configuration is loaded once at startup, from the environment or
    (in tests) from a dictionary.
    """

    _instance: Optional['ConfigurationFactory'] = None
    _config: Optional[AppConfig] = None

    def __new__(cls) -> 'ConfigurationFactory':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def load_from_environment(self) -> AppConfig:
        """
        Build the configuration from environment variables.

        FLASK_ENV selects the environment ('development', 'testing', anything
        else is production) and the DEBUG default that goes with it.
        """
        flask_env = _env_str('FLASK_ENV', 'development')
        try:
            environment = Environment(flask_env)
        except ValueError:
            environment = Environment.PRODUCTION

        self._config = AppConfig(
            secret_key=_env_str('SECRET_KEY', DEV_SECRET_KEY),
            debug=_env_bool('DEBUG', environment != Environment.PRODUCTION),
            flask_env=flask_env,
            host=_env_str('HOST', '0.0.0.0'),
            port=_env_int('PORT', 5000),
            async_mode=_env_str('SOCKETIO_ASYNC_MODE', 'eventlet'),
            cors_allowed_origins=_env_str('SOCKETIO_CORS_ALLOWED_ORIGINS', ''),
            max_field_length=_env_int('MAX_FIELD_LENGTH', 100),
            worker_connections=_env_int('WORKER_CONNECTIONS', 1000),
            timeout=_env_int('TIMEOUT', 30),
            keepalive=_env_int('KEEPALIVE', 2),
            log_level=_env_str('LOG_LEVEL', 'info'),
            environment=environment,
        )
        logger.info(f"Configuration loaded for environment: {environment.value}")
        return self._config

    def load_from_dict(self, config_dict: Dict[str, Any]) -> AppConfig:
        """Build the configuration from a dictionary (useful for testing)."""
        values = dict(config_dict)
        if isinstance(values.get('environment'), str):
            values['environment'] = Environment(values['environment'])

        self._config = AppConfig(**values)
        return self._config

    def get_config(self) -> AppConfig:
        """
        Get the loaded configuration.

        Raises:
            ConfigError: If nothing has been loaded yet
        """
        if self._config is None:
            raise ConfigError("Configuration not loaded. Call load_from_environment() or load_from_dict() first.")
        return self._config

    def reset(self) -> 'ConfigurationFactory':
        """Forget the loaded configuration (useful for testing)"""
        self._config = None
        return self

    def to_dict(self) -> Dict[str, Any]:
        """Plain dictionary of the loaded configuration, environment as its string value"""
        config = self.get_config()
        values = asdict(config)
        values['environment'] = config.environment.value
        return values

    def get_flask_config(self) -> Dict[str, Any]:
        """Settings for Flask's app.config.update()"""
        config = self.get_config()
        return {
            'SECRET_KEY': config.secret_key,
            'DEBUG': config.debug,
            'ENV': config.flask_env,
            'MAX_FIELD_LENGTH': config.max_field_length,
        }


def get_config() -> AppConfig:
    """Get the global application configuration"""
    return ConfigurationFactory().get_config()


def load_config() -> AppConfig:
    """Load the global application configuration from the environment"""
    return ConfigurationFactory().load_from_environment()
