from .sms import (
    EncodeLocationResponse,
    SmsType,
    SmsWebhookRequest,
    SmsWebhookResponse,
)

__all__ = [
    "EncodeLocationResponse",
    "SmsType",
    "SmsWebhookRequest",
    "SmsWebhookResponse",
]
