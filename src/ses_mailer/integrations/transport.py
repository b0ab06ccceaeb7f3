"""
HTTP transport for signed SES requests.

The default transport opens an httpx.AsyncClient per send with strict
timeouts and never retries. Anything that prevents a response from arriving
is raised as TransportError; any response, whatever its status, is returned.
"""

import logging
from typing import Optional

import httpx

from ..config import DEFAULT_CONNECT_TIMEOUT, DEFAULT_READ_TIMEOUT
from ..domain.models import HttpRequest, HttpResponse
from ..exceptions import TransportError

logger = logging.getLogger(__name__)


class HttpxTransport:
    """Posts signed requests with httpx."""

    def __init__(
        self,
        connect_timeout: float = DEFAULT_CONNECT_TIMEOUT,
        read_timeout: float = DEFAULT_READ_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            connect_timeout: Seconds to establish a connection
            read_timeout: Seconds to wait while reading the response
            transport: Optional low-level httpx transport (e.g. httpx.MockTransport)
        """
        self.timeout = httpx.Timeout(read_timeout, connect=connect_timeout)
        self._transport = transport

    async def post(self, request: HttpRequest) -> HttpResponse:
        """
        Send a signed request and return its status and body.

        Args:
            request: Signed request

        Returns:
            HttpResponse: Status code and raw body text

        Raises:
            TransportError: If no response was received
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.request(
                    request.method,
                    request.url,
                    content=request.body.encode('utf-8'),
                    headers=request.headers,
                )
        except httpx.HTTPError as e:
            logger.error(f"SES request failed before a response: url={request.url}, error={e!r}")
            raise TransportError(f"Request to {request.url} failed: {e}", cause=e) from e

        return HttpResponse(status_code=response.status_code, body=response.text)
