"""
Async client for sending email through the Amazon SES query API.

Builds SendEmail/SendRawEmail parameter maps, signs them with AWS SigV4 and
posts them over httpx.
"""

from .client import SESClient, create_client
from .config import DEFAULT_ENDPOINT, Settings
from .domain.email_request import EmailRequest
from .domain.models import Action, EmailIntent, MessageTag
from .exceptions import (
    ConfigurationError,
    SESMailerError,
    ServiceError,
    TransportError,
    ValidationError,
)

__version__ = '0.1.0'

__all__ = [
    'Action',
    'ConfigurationError',
    'DEFAULT_ENDPOINT',
    'EmailIntent',
    'EmailRequest',
    'MessageTag',
    'SESClient',
    'SESMailerError',
    'ServiceError',
    'Settings',
    'TransportError',
    'ValidationError',
    'create_client',
]
