"""
Configuration for the SES mailer.

DEFAULT_ENDPOINT is a plain constant handed to SESClient at construction time.
Settings.from_env() reads the process environment once; nothing here is
mutated after import.
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = 'https://email.us-east-1.amazonaws.com'

# Transport timeouts (seconds); no retries are ever attempted
DEFAULT_CONNECT_TIMEOUT = 10.0
DEFAULT_READ_TIMEOUT = 60.0
DEFAULT_LOG_LEVEL = 'INFO'


@dataclass(frozen=True)
class Settings:
    """
    Client settings resolved from the environment.

    Attributes:
        endpoint: SES API base URL
        key: Access key id (None means ambient AWS credential resolution)
        secret: Secret access key
        connect_timeout: Seconds to establish a connection
        read_timeout: Seconds to wait for the response
        log_level: Logging level name
    """
    endpoint: str = DEFAULT_ENDPOINT
    key: Optional[str] = None
    secret: Optional[str] = None
    connect_timeout: float = DEFAULT_CONNECT_TIMEOUT
    read_timeout: float = DEFAULT_READ_TIMEOUT
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'Settings':
        """
        Read settings from environment variables.

        Variables: SES_ENDPOINT, SES_ACCESS_KEY_ID, SES_SECRET_ACCESS_KEY,
        SES_CONNECT_TIMEOUT, SES_READ_TIMEOUT, LOG_LEVEL.

        Raises:
            ConfigurationError: If a timeout is not a positive number
        """
        env = os.environ if environ is None else environ

        settings = cls(
            endpoint=env.get('SES_ENDPOINT') or DEFAULT_ENDPOINT,
            key=env.get('SES_ACCESS_KEY_ID') or None,
            secret=env.get('SES_SECRET_ACCESS_KEY') or None,
            connect_timeout=_read_timeout(env, 'SES_CONNECT_TIMEOUT', DEFAULT_CONNECT_TIMEOUT),
            read_timeout=_read_timeout(env, 'SES_READ_TIMEOUT', DEFAULT_READ_TIMEOUT),
            log_level=(env.get('LOG_LEVEL') or DEFAULT_LOG_LEVEL).upper(),
        )
        logger.debug(
            f"Settings loaded: endpoint={settings.endpoint}, "
            f"credentials={'explicit' if settings.key and settings.secret else 'ambient'}, "
            f"connect_timeout={settings.connect_timeout}s, read_timeout={settings.read_timeout}s"
        )
        return settings


def _read_timeout(env: Mapping[str, str], name: str, default: float) -> float:
    raw = env.get(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number of seconds, got: '{raw}'")
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got: {value}")
    return value
