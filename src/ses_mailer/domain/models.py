"""
Data models for the SES send pipeline.

These type-safe data structures define clear contracts between the request
builder, the signer and the transport.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Union

from ..exceptions import ValidationError


class Action(str, Enum):
    """SES query API actions supported by the client."""

    SEND_MESSAGE = 'SendEmail'
    SEND_RAW_MESSAGE = 'SendRawEmail'


@dataclass(frozen=True)
class MessageTag:
    """
    Name/value pair attached to a send for event publishing.

    Attributes:
        name: Tag name
        value: Tag value (always stored as a string)
    """
    name: str
    value: str

    @classmethod
    def coerce(cls, tag: Any) -> 'MessageTag':
        """
        Build a MessageTag from a MessageTag, a mapping or a (name, value) pair.

        Raises:
            ValidationError: If the tag is missing its name or value
        """
        if isinstance(tag, MessageTag):
            return tag
        if isinstance(tag, Mapping) and 'name' in tag and 'value' in tag:
            return cls(name=str(tag['name']), value=str(tag['value']))
        if isinstance(tag, (tuple, list)) and len(tag) == 2:
            return cls(name=str(tag[0]), value=str(tag[1]))
        raise ValidationError(
            f"Message tag must have a name and a value. Got: {tag!r}"
        )


Recipients = Union[None, str, Iterable[str]]


def normalize_recipients(value: Recipients) -> Tuple[str, ...]:
    """
    Lift a recipient field into an ordered tuple.

    None and '' become an empty tuple, a single address becomes a
    one-element tuple, any other iterable keeps its order.
    """
    if not value:
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(value)


@dataclass(frozen=True)
class EmailIntent:
    """
    Fully resolved description of one email send.

    Built fresh for every call from per-call options merged over client
    defaults, and never mutated afterwards.

    Attributes:
        action: SES action to perform
        from_address: Source address (required for every action)
        to: Ordered To addresses
        cc: Ordered Cc addresses
        bcc: Ordered Bcc addresses
        reply_to: Ordered Reply-To addresses
        subject: Subject line (SendEmail only)
        html_body: Message body, always sent as the Html part (SendEmail only)
        alt_text: Plain text alternative (SendEmail only)
        raw_message: Complete MIME message (SendRawEmail only)
        configuration_set: SES configuration set name for event publishing
        message_tags: Ordered message tags
        key: AWS access key id (None means ambient credentials)
        secret: AWS secret access key
        endpoint: SES API base URL
    """
    endpoint: str
    action: Action = Action.SEND_MESSAGE
    from_address: Optional[str] = None
    to: Tuple[str, ...] = ()
    cc: Tuple[str, ...] = ()
    bcc: Tuple[str, ...] = ()
    reply_to: Tuple[str, ...] = ()
    subject: Optional[str] = None
    html_body: Optional[str] = None
    alt_text: Optional[str] = None
    raw_message: Optional[Union[str, bytes]] = None
    configuration_set: Optional[str] = None
    message_tags: Tuple[MessageTag, ...] = ()
    key: Optional[str] = None
    secret: Optional[str] = None

    def __post_init__(self):
        # Frozen dataclass: normalization goes through object.__setattr__
        object.__setattr__(self, 'action', Action(self.action))
        for name in ('to', 'cc', 'bcc', 'reply_to'):
            object.__setattr__(self, name, normalize_recipients(getattr(self, name)))
        tags = tuple(MessageTag.coerce(t) for t in (self.message_tags or ()))
        object.__setattr__(self, 'message_tags', tags)


@dataclass
class HttpRequest:
    """
    HTTP request handed to the signer and then to the transport.

    Attributes:
        method: HTTP method (always POST for SES sends)
        url: Absolute endpoint URL
        headers: Request headers (signature headers are added by the signer)
        body: URL-form-encoded parameter map
    """
    method: str
    url: str
    body: str
    headers: Dict[str, str] = field(default_factory=dict)


@dataclass
class HttpResponse:
    """
    Status code and raw body of a response received from SES.

    Attributes:
        status_code: HTTP status code
        body: Raw response body as text
    """
    status_code: int
    body: str

    @property
    def ok(self) -> bool:
        """Status codes in [200, 400) count as success."""
        return 200 <= self.status_code < 400
