"""
Tests for SigV4 request signing.
"""

import asyncio
from unittest.mock import Mock, patch

import pytest
from botocore.credentials import Credentials

from conftest import RecordingTransport
from ses_mailer.client import SESClient
from ses_mailer.domain.models import HttpRequest
from ses_mailer.integrations.signing import (
    DEFAULT_REGION,
    SigV4Signer,
    credentials_from_keys,
    region_from_endpoint,
)


def make_request(url='https://email.us-east-1.amazonaws.com'):
    """Unsigned form POST like the client builds."""
    return HttpRequest(
        method='POST',
        url=url,
        body='Action=SendEmail&Source=a%40x.com',
        headers={'Content-Type': 'application/x-www-form-urlencoded; charset=utf-8'},
    )


class TestRegionFromEndpoint:
    """Test region derivation from endpoint hosts."""

    @pytest.mark.parametrize('endpoint,region', [
        ('https://email.us-east-1.amazonaws.com', 'us-east-1'),
        ('https://email.eu-west-1.amazonaws.com', 'eu-west-1'),
        ('https://email.ap-southeast-2.amazonaws.com/', 'ap-southeast-2'),
        ('https://email-fips.us-gov-west-1.amazonaws.com', 'us-gov-west-1'),
    ])
    def test_regional_hosts(self, endpoint, region):
        """Test regional SES hosts yield their region."""
        assert region_from_endpoint(endpoint) == region

    @pytest.mark.parametrize('endpoint', [
        'http://localhost:4566',
        'https://ses.internal.example.com',
        '',
    ])
    def test_other_hosts_fall_back(self, endpoint):
        """Test non-SES hosts fall back to the default region."""
        assert region_from_endpoint(endpoint) == DEFAULT_REGION


class TestCredentialsFromKeys:
    """Test static credential construction."""

    def test_both_present(self):
        """Test key and secret build Credentials."""
        creds = credentials_from_keys('AKID', 'SECRET')
        assert creds.access_key == 'AKID'
        assert creds.secret_key == 'SECRET'

    @pytest.mark.parametrize('key,secret', [(None, None), ('AKID', None), (None, 'SECRET'), ('', 'SECRET')])
    def test_partial_pair_is_none(self, key, secret):
        """Test a partial pair means no credentials."""
        assert credentials_from_keys(key, secret) is None


class TestSigV4Signer:
    """Test signing with botocore SigV4Auth."""

    def test_sign_adds_authorization(self):
        """Test Authorization and X-Amz-Date are attached for ses in the endpoint region."""
        signer = SigV4Signer()

        signed = signer.sign(
            make_request('https://email.eu-west-1.amazonaws.com'),
            Credentials('AKIDEXAMPLE', 'SECRET'),
        )

        auth = signed.headers['Authorization']
        assert auth.startswith('AWS4-HMAC-SHA256 Credential=AKIDEXAMPLE/')
        assert '/eu-west-1/ses/aws4_request' in auth
        assert 'SignedHeaders=' in auth
        assert 'Signature=' in auth
        assert 'X-Amz-Date' in signed.headers

    def test_sign_keeps_request_fields(self):
        """Test method, url, body and existing headers survive signing."""
        request = make_request()

        signed = SigV4Signer().sign(request, Credentials('AKID', 'SECRET'))

        assert signed.method == request.method
        assert signed.url == request.url
        assert signed.body == request.body
        assert signed.headers['Content-Type'] == request.headers['Content-Type']
        assert 'Authorization' not in request.headers

    def test_explicit_region_wins(self):
        """Test a configured region overrides the endpoint host."""
        signed = SigV4Signer(region='us-west-2').sign(make_request(), Credentials('AKID', 'SECRET'))
        assert '/us-west-2/ses/aws4_request' in signed.headers['Authorization']

    def test_session_token_header(self):
        """Test temporary credentials add X-Amz-Security-Token."""
        signed = SigV4Signer().sign(make_request(), Credentials('AKID', 'SECRET', token='TOKEN'))
        assert signed.headers['X-Amz-Security-Token'] == 'TOKEN'

    def test_ambient_credentials_used(self):
        """Test the boto3 session chain is consulted when no credentials are given."""
        session = Mock()
        session.get_credentials.return_value = Credentials('AMBIENTKEY', 'AMBIENTSECRET')

        signed = SigV4Signer(session=session).sign(make_request(), None)

        session.get_credentials.assert_called_once()
        assert 'Credential=AMBIENTKEY/' in signed.headers['Authorization']

    def test_explicit_credentials_skip_ambient(self):
        """Test the session is not consulted when credentials are given."""
        session = Mock()

        SigV4Signer(session=session).sign(make_request(), Credentials('AKID', 'SECRET'))

        session.get_credentials.assert_not_called()

    def test_unsigned_when_nothing_resolves(self):
        """Test the request goes out unsigned when no credentials exist anywhere."""
        session = Mock()
        session.get_credentials.return_value = None
        request = make_request()

        signed = SigV4Signer(session=session).sign(request, None)

        assert 'Authorization' not in signed.headers
        assert signed.headers == request.headers
        assert signed.body == request.body


class TestAmbientCredentialCaching:
    """Test the ambient credential chain is walked only once per signer."""

    @patch('ses_mailer.integrations.signing.boto3.Session')
    def test_one_session_for_many_sends(self, mock_session_cls):
        """Test several sends without keys build a single boto3 session."""
        mock_session_cls.return_value.get_credentials.return_value = Credentials('AMBIENTKEY', 'AMBIENTSECRET')
        transport = RecordingTransport()
        client = SESClient(transport=transport)

        async def send_all():
            for i in range(3):
                await client.send_message(from_address='a@x.com', to=f'u{i}@x.com', subject='hi')

        asyncio.run(send_all())

        assert mock_session_cls.call_count == 1
        assert mock_session_cls.return_value.get_credentials.call_count == 1
        assert len(transport.requests) == 3
        for request in transport.requests:
            assert 'Credential=AMBIENTKEY/' in request.headers['Authorization']

    def test_missing_credentials_not_retried(self):
        """Test an empty chain is remembered and requests keep going out unsigned."""
        session = Mock()
        session.get_credentials.return_value = None
        signer = SigV4Signer(session=session)

        first = signer.sign(make_request(), None)
        second = signer.sign(make_request(), None)

        session.get_credentials.assert_called_once()
        assert 'Authorization' not in first.headers
        assert 'Authorization' not in second.headers
