"""
AWS Lambda handler that sends one email through SES.

Expected event format:
{
    "action": "SendEmail",             # or "SendRawEmail"
    "from": "sender@example.com",
    "to": ["a@example.com"],           # string or list, also cc/bcc/replyTo
    "subject": "greetings",
    "message": "<p>hello</p>",         # or htmlBody
    "altText": "hello",
    "rawMessage": "From: ...",         # SendRawEmail only
    "configurationSet": "tracking",
    "messageTags": [{"name": "campaign", "value": "launch"}]
}
"""

import asyncio
import json
import logging
from typing import Any, Dict

from ses_mailer.client import create_client
from ses_mailer.config import Settings
from ses_mailer.domain.models import Action
from ses_mailer.exceptions import ServiceError, TransportError, ValidationError

# Configure logging
settings = Settings.from_env()
logger = logging.getLogger()
logger.setLevel(settings.log_level)

# Initialize client once at module level (reused across invocations)
ses_client = create_client(settings=settings)


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Send the email described by the event.

    Args:
        event: Send options (see module docstring)
        context: Lambda context

    Returns:
        Dict with statusCode and JSON body: 200 with the SES response,
        400 for validation errors, 502 when SES failed or was unreachable
    """
    action = event.get('action', Action.SEND_MESSAGE.value)
    logger.info(f"Received {action} request: request_id={getattr(context, 'aws_request_id', 'UNKNOWN')}")

    try:
        if action == Action.SEND_MESSAGE.value:
            ses_response = asyncio.run(ses_client.send_message(
                from_address=event.get('from'),
                to=event.get('to'),
                cc=event.get('cc'),
                bcc=event.get('bcc'),
                reply_to=event.get('replyTo'),
                subject=event.get('subject'),
                html_body=event.get('message', event.get('htmlBody')),
                alt_text=event.get('altText'),
                configuration_set=event.get('configurationSet'),
                message_tags=event.get('messageTags'),
            ))
        elif action == Action.SEND_RAW_MESSAGE.value:
            ses_response = asyncio.run(ses_client.send_raw_message(
                from_address=event.get('from'),
                raw_message=event.get('rawMessage'),
                to=event.get('to'),
                cc=event.get('cc'),
                bcc=event.get('bcc'),
                configuration_set=event.get('configurationSet'),
                message_tags=event.get('messageTags'),
            ))
        else:
            raise ValidationError(f"Unsupported action: {action}")

    except ValidationError as ve:
        logger.error(f"Validation error: {ve.description}")
        return {
            'statusCode': 400,
            'body': json.dumps({'error': ve.description})
        }

    except ServiceError as se:
        logger.error(f"SES rejected {action}: status={se.status_code}, body={se.body[:200]}")
        return {
            'statusCode': 502,
            'body': json.dumps({
                'error': str(se),
                'sesStatusCode': se.status_code,
                'sesResponse': se.body
            })
        }

    except TransportError as te:
        logger.error(f"SES unreachable for {action}: {te}")
        return {
            'statusCode': 502,
            'body': json.dumps({'error': str(te)})
        }

    logger.info(f"Successfully sent {action}")
    return {
        'statusCode': 200,
        'headers': {'Content-Type': 'application/json'},
        'body': json.dumps({'response': ses_response})
    }
