"""
Relay interface for forwarding accepted inquiries to external services.
"""

from typing import Protocol
from abc import abstractmethod

from core.validation import ValidatedInquiry


class InquiryRelay(Protocol):
    """An outbound destination for accepted inquiries."""

    name: str

    @property
    @abstractmethod
    def configured(self) -> bool:
        """Whether the relay has everything it needs to run."""
        ...

    @abstractmethod
    async def relay(self, inquiry: ValidatedInquiry) -> None:
        """
        Forward one inquiry.

        Raises:
            RelayError: If the destination rejected the inquiry or was unreachable
        """
        ...
