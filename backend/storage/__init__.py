"""
Storage layer for accepted inquiries.

 - InquiryStore: interface the request pipeline depends on
 - InquiryLog: JSON-array file implementation
"""

from .interface import InquiryStore
from .inquiry_log import InquiryLog

__all__ = ["InquiryStore", "InquiryLog"]
