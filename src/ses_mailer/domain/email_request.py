"""
SES request model - validation and serialization of one send.

This module turns an EmailIntent into the flat parameter map understood by
the SES query API:
1. Validate the intent (first failing rule wins)
2. Emit Action, AWSAccessKeyId and Source
3. Emit recipients and reply-to addresses with 1-based member indices
4. Emit configuration set and message tags
5. Emit the message body (SendEmail) or the base64 raw message (SendRawEmail)

Nothing here touches the network.
"""

import base64
from typing import Dict, Optional
from urllib.parse import urlencode

from .models import Action, EmailIntent

CHARSET = 'UTF-8'


class EmailRequest:
    """
    Request model for a single SES send.

    Wraps a resolved EmailIntent and exposes validation, the parameter map,
    its form-encoded body and any extra transport headers.
    """

    def __init__(self, intent: EmailIntent):
        self.intent = intent

    def validate(self) -> Optional[str]:
        """
        Check required fields for the intent's action.

        Rules are evaluated in a fixed order and only the first failure is
        reported: recipients, then subject (SendEmail only), then From
        (every action), then the raw payload (SendRawEmail only). A raw send
        missing both From and its payload reports From.

        Returns:
            Description of the first violated rule, or None if valid
        """
        intent = self.intent

        if intent.action is Action.SEND_MESSAGE:
            if not intent.to and not intent.cc and not intent.bcc:
                return 'To, Cc or Bcc is required'
            if not intent.subject:
                return 'Subject is required'

        if not intent.from_address:
            return 'From is required'

        if intent.action is Action.SEND_RAW_MESSAGE:
            if not intent.raw_message:
                return 'Raw message is required'

        return None

    def to_parameters(self) -> Dict[str, str]:
        """
        Serialize the intent into the SES parameter map.

        Insertion order is deterministic, so the same intent always encodes
        to the same body.

        Returns:
            Dict of SES parameter name -> string value
        """
        intent = self.intent
        data = {
            'Action': intent.action.value,
            'AWSAccessKeyId': intent.key or '',
            'Source': intent.from_address or '',
        }

        self._add_members(data, 'Destination.ToAddresses', intent.to)
        self._add_members(data, 'Destination.CcAddresses', intent.cc)
        self._add_members(data, 'Destination.BccAddresses', intent.bcc)
        self._add_members(data, 'ReplyToAddresses', intent.reply_to)

        self._add_event_publishing(data)

        if intent.action is Action.SEND_MESSAGE:
            self._add_message(data)
        elif intent.action is Action.SEND_RAW_MESSAGE:
            data['RawMessage.Data'] = self._encode_raw_message()

        return data

    def encode_body(self) -> str:
        """Form-encode the parameter map as an application/x-www-form-urlencoded body."""
        return urlencode(self.to_parameters())

    def headers(self) -> Dict[str, str]:
        """
        Extra transport headers for this request.

        No custom headers by default; subclasses may add their own.
        """
        return {}

    @staticmethod
    def _add_members(data: Dict[str, str], prefix: str, values) -> None:
        for i, value in enumerate(values, start=1):
            data[f'{prefix}.member.{i}'] = value

    def _add_event_publishing(self, data: Dict[str, str]) -> None:
        # Tag indices restart at 1, independent of the address lists
        if self.intent.configuration_set:
            data['ConfigurationSetName'] = self.intent.configuration_set
        for i, tag in enumerate(self.intent.message_tags, start=1):
            data[f'Tags.member.{i}.Name'] = tag.name
            data[f'Tags.member.{i}.Value'] = tag.value

    def _add_message(self, data: Dict[str, str]) -> None:
        intent = self.intent
        if intent.subject:
            data['Message.Subject.Data'] = intent.subject
            data['Message.Subject.Charset'] = CHARSET
        if intent.html_body:
            data['Message.Body.Html.Data'] = intent.html_body
            data['Message.Body.Html.Charset'] = CHARSET
        if intent.alt_text:
            data['Message.Body.Text.Data'] = intent.alt_text
            data['Message.Body.Text.Charset'] = CHARSET

    def _encode_raw_message(self) -> str:
        raw = self.intent.raw_message or b''
        if isinstance(raw, str):
            raw = raw.encode('utf-8')
        return base64.b64encode(raw).decode('ascii')

    def __repr__(self) -> str:
        """Human-readable representation for logging (no message content)."""
        return (
            f"EmailRequest(action={self.intent.action.value}, "
            f"endpoint={self.intent.endpoint}, "
            f"recipients={len(self.intent.to) + len(self.intent.cc) + len(self.intent.bcc)})"
        )
