"""
Pytest configuration and fixtures for all tests.
"""

import asyncio
import os
import sys

import pytest

# Add src to Python path before any imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../src'))

# Set up test environment variables before importing any modules
os.environ.setdefault('SES_ENDPOINT', 'https://email.us-east-1.amazonaws.com')
os.environ.setdefault('LOG_LEVEL', 'INFO')

from ses_mailer.domain.models import HttpResponse  # noqa: E402


class RecordingTransport:
    """Transport double that records posted requests and returns a canned response."""

    def __init__(self, status_code=200, body='OK'):
        self.response = HttpResponse(status_code=status_code, body=body)
        self.requests = []

    async def post(self, request):
        self.requests.append(request)
        return self.response


@pytest.fixture
def recording_transport():
    """Transport answering 200 OK."""
    return RecordingTransport()


@pytest.fixture
def run():
    """Run a coroutine to completion."""
    return asyncio.run
