"""
Outbound relays for accepted inquiries.

 - MailingListRelay: Mailchimp member upsert plus note
 - WebhookRelay: JSON POST to an operator-configured URL
"""

from .interface import InquiryRelay
from .mailing_list import MailingListRelay, subscriber_hash
from .webhook import WebhookRelay

__all__ = ["InquiryRelay", "MailingListRelay", "WebhookRelay", "subscriber_hash"]
