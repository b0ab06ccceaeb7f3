"""
AWS Signature Version 4 signing for SES requests.

Usage:
    from ses_mailer.integrations.signing import SigV4Signer

    signer = SigV4Signer()
    signed = signer.sign(request, Credentials('AKID', 'SECRET'))
    print(signed.headers['Authorization'])

The canonical-request algorithm itself is botocore's SigV4Auth; this module
only adapts our HttpRequest to botocore's AWSRequest and back.
"""

import logging
import re
from dataclasses import replace
from typing import Optional
from urllib.parse import urlparse

import boto3
from botocore.auth import SigV4Auth
from botocore.awsrequest import AWSRequest
from botocore.credentials import Credentials

from ..domain.models import HttpRequest

logger = logging.getLogger(__name__)

SERVICE_NAME = 'ses'
DEFAULT_REGION = 'us-east-1'
_UNRESOLVED = object()

# email.us-west-2.amazonaws.com, email-fips.us-gov-west-1.amazonaws.com
_REGION_PATTERN = re.compile(r'^email(?:-fips)?\.([a-z0-9-]+)\.amazonaws\.com(?:\.cn)?$')


def region_from_endpoint(endpoint: str) -> str:
    """
    Derive the signing region from an SES endpoint URL.

    Args:
        endpoint: SES API base URL

    Returns:
        str: Region name, DEFAULT_REGION when the host is not a regional SES host

    Example:
        >>> region_from_endpoint('https://email.eu-west-1.amazonaws.com')
        'eu-west-1'
    """
    host = (urlparse(endpoint).hostname or '').lower()
    match = _REGION_PATTERN.match(host)
    return match.group(1) if match else DEFAULT_REGION


def credentials_from_keys(key: Optional[str], secret: Optional[str]) -> Optional[Credentials]:
    """Build static credentials, or None unless both key and secret are set."""
    if key and secret:
        return Credentials(access_key=key, secret_key=secret)
    return None


class SigV4Signer:
    """
    Signs SES requests with AWS Signature Version 4.

    When no credentials are passed, the standard boto3 credential chain
    (environment, shared config, container/instance role) is consulted
    once and the result is reused for every later request.
    """

    def __init__(self, region: Optional[str] = None, session: Optional[boto3.Session] = None):
        """
        Args:
            region: Signing region; derived from each request URL when None
            session: boto3 session used for ambient credential resolution
        """
        self.region = region
        self._session = session
        self._ambient_credentials = _UNRESOLVED

    def sign(self, request: HttpRequest, credentials: Optional[Credentials]) -> HttpRequest:
        """
        Return a copy of request with SigV4 headers attached.

        Args:
            request: Unsigned request
            credentials: Static credentials, or None for ambient resolution

        Returns:
            HttpRequest: New request carrying X-Amz-Date and Authorization
                (plus X-Amz-Security-Token for temporary credentials).
                The unsigned request is returned unchanged when no
                credentials can be resolved at all.
        """
        if credentials is None:
            credentials = self._resolve_ambient_credentials()
            if credentials is None:
                logger.warning("No AWS credentials resolved; sending request unsigned")
                return replace(request, headers=dict(request.headers))

        region = self.region or region_from_endpoint(request.url)

        aws_request = AWSRequest(
            method=request.method,
            url=request.url,
            data=request.body.encode('utf-8'),
            headers=dict(request.headers),
        )
        SigV4Auth(credentials, SERVICE_NAME, region).add_auth(aws_request)

        logger.debug(f"Signed {request.method} {request.url}: service={SERVICE_NAME}, region={region}")
        return replace(request, headers=dict(aws_request.headers.items()))

    def _resolve_ambient_credentials(self) -> Optional[Credentials]:
        # The chain is walked once per signer; refreshable credentials renew themselves
        if self._ambient_credentials is _UNRESOLVED:
            session = self._session or boto3.Session()
            self._ambient_credentials = session.get_credentials()
        return self._ambient_credentials
