"""
SES client facade.

Usage:
    import asyncio
    from ses_mailer import create_client

    client = create_client(key='AKID', secret='SECRET')
    message_response = asyncio.run(client.send_message(
        from_address='sender@example.com',
        to=['a@example.com', 'b@example.com'],
        subject='greetings',
        html_body='<p>your message goes here</p>',
        alt_text='your message goes here',
    ))

Each send runs: merge options -> build EmailRequest -> validate ->
form-encode -> sign -> post -> map response. The client only holds read-only
defaults, so concurrent sends on one instance are independent.
"""

import logging
from typing import Iterable, Optional, Protocol, Union

from botocore.credentials import Credentials

from .config import DEFAULT_ENDPOINT, Settings
from .domain.email_request import EmailRequest
from .domain.models import Action, EmailIntent, HttpRequest, HttpResponse, Recipients
from .exceptions import ServiceError, ValidationError
from .integrations.signing import SigV4Signer, credentials_from_keys
from .integrations.transport import HttpxTransport

logger = logging.getLogger(__name__)

FORM_CONTENT_TYPE = 'application/x-www-form-urlencoded; charset=utf-8'


class Signer(Protocol):
    """Anything that can attach a signature to an HttpRequest."""

    def sign(
        self, request: HttpRequest, credentials: Optional[Credentials]
    ) -> HttpRequest:
        ...


class Transport(Protocol):
    """Anything that can post a signed HttpRequest."""

    async def post(self, request: HttpRequest) -> HttpResponse:
        ...


class SESClient:
    """
    Sends email through the SES query API.

    Per-call key/secret/endpoint override the client defaults field by field.
    """

    def __init__(
        self,
        key: Optional[str] = None,
        secret: Optional[str] = None,
        endpoint: Optional[str] = None,
        signer: Optional[Signer] = None,
        transport: Optional[Transport] = None,
    ):
        """
        Args:
            key: Default AWS access key id
            secret: Default AWS secret access key
            endpoint: Default SES endpoint (DEFAULT_ENDPOINT when None)
            signer: Signing capability (SigV4Signer by default)
            transport: HTTP transport (HttpxTransport by default)
        """
        self.key = key
        self.secret = secret
        self.endpoint = endpoint or DEFAULT_ENDPOINT
        self.signer = signer or SigV4Signer()
        self.transport = transport or HttpxTransport()

    async def send_message(
        self,
        *,
        from_address: Optional[str] = None,
        to: Recipients = None,
        cc: Recipients = None,
        bcc: Recipients = None,
        reply_to: Recipients = None,
        subject: Optional[str] = None,
        html_body: Optional[str] = None,
        alt_text: Optional[str] = None,
        configuration_set: Optional[str] = None,
        message_tags: Optional[Iterable] = None,
        key: Optional[str] = None,
        secret: Optional[str] = None,
        endpoint: Optional[str] = None,
    ) -> str:
        """
        Send a formatted email (SES SendEmail).

        The body is always sent as the Html part; alt_text becomes the Text part.

        Returns:
            str: Raw SES response body

        Raises:
            ValidationError: If required fields are missing or a tag is malformed (no request is made)
            ServiceError: If SES answered with a status outside [200, 400)
            TransportError: If no response was received
        """
        intent = EmailIntent(
            action=Action.SEND_MESSAGE,
            from_address=from_address,
            to=to,
            cc=cc,
            bcc=bcc,
            reply_to=reply_to,
            subject=subject,
            html_body=html_body,
            alt_text=alt_text,
            configuration_set=configuration_set,
            message_tags=message_tags or (),
            **self._resolve_connection(key, secret, endpoint),
        )
        return await self.send(EmailRequest(intent))

    async def send_raw_message(
        self,
        *,
        from_address: Optional[str] = None,
        raw_message: Optional[Union[str, bytes]] = None,
        to: Recipients = None,
        cc: Recipients = None,
        bcc: Recipients = None,
        configuration_set: Optional[str] = None,
        message_tags: Optional[Iterable] = None,
        key: Optional[str] = None,
        secret: Optional[str] = None,
        endpoint: Optional[str] = None,
    ) -> str:
        """
        Send a complete MIME message (SES SendRawEmail).

        Recipients given here are added as Destinations on top of the
        message's own headers.

        Returns:
            str: Raw SES response body

        Raises:
            ValidationError: If from_address or raw_message is missing or a tag is malformed
            ServiceError: If SES answered with a status outside [200, 400)
            TransportError: If no response was received
        """
        intent = EmailIntent(
            action=Action.SEND_RAW_MESSAGE,
            from_address=from_address,
            raw_message=raw_message,
            to=to,
            cc=cc,
            bcc=bcc,
            configuration_set=configuration_set,
            message_tags=message_tags or (),
            **self._resolve_connection(key, secret, endpoint),
        )
        return await self.send(EmailRequest(intent))

    async def send(self, request: EmailRequest) -> str:
        """
        Drive a prepared EmailRequest through validate, sign, post and response mapping.

        Args:
            request: Request model built from a resolved intent

        Returns:
            str: Raw SES response body
        """
        invalid = request.validate()
        if invalid:
            raise ValidationError(invalid)

        intent = request.intent
        headers = {'Content-Type': FORM_CONTENT_TYPE}
        headers.update(request.headers())

        unsigned = HttpRequest(
            method='POST',
            url=intent.endpoint,
            body=request.encode_body(),
            headers=headers,
        )
        credentials = credentials_from_keys(intent.key, intent.secret)
        signed = self.signer.sign(unsigned, credentials)

        logger.debug(f"Posting {request!r}")
        response = await self.transport.post(signed)

        if not response.ok:
            raise ServiceError(response.status_code, response.body)

        logger.info(
            f"SES {intent.action.value} succeeded: status={response.status_code}, "
            f"response_length={len(response.body)}"
        )
        return response.body

    def _resolve_connection(
        self, key: Optional[str], secret: Optional[str], endpoint: Optional[str]
    ) -> dict:
        # Per-call values win over client defaults, field by field
        return {
            'key': key or self.key,
            'secret': secret or self.secret,
            'endpoint': endpoint or self.endpoint,
        }


def create_client(
    key: Optional[str] = None,
    secret: Optional[str] = None,
    endpoint: Optional[str] = None,
    settings: Optional[Settings] = None,
    signer: Optional[Signer] = None,
    transport: Optional[Transport] = None,
) -> SESClient:
    """
    Create an SESClient.

    Explicit arguments win over settings; settings win over DEFAULT_ENDPOINT.
    When settings are given and no transport is passed, an HttpxTransport is
    built with the configured timeouts.

    Args:
        key: AWS access key id
        secret: AWS secret access key
        endpoint: SES endpoint URL
        settings: Settings, e.g. from Settings.from_env()
        signer: Signing capability
        transport: HTTP transport

    Returns:
        SESClient: Configured client
    """
    if settings is not None:
        key = key or settings.key
        secret = secret or settings.secret
        endpoint = endpoint or settings.endpoint
        if transport is None:
            transport = HttpxTransport(
                connect_timeout=settings.connect_timeout,
                read_timeout=settings.read_timeout,
            )

    return SESClient(
        key=key,
        secret=secret,
        endpoint=endpoint,
        signer=signer,
        transport=transport,
    )
