"""
Domain layer for building SES send requests.

This layer contains:
- Data models (intent, tags, HTTP request/response)
- Request model (validation and parameter serialization)
"""
