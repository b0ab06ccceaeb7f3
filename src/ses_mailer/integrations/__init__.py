"""
Integrations with the outside world: request signing and HTTP transport.

Both are injectable into SESClient; the defaults here use botocore and httpx.
"""
