"""
Inquiry store interface.

Defines the contract for durable inquiry storage so the request pipeline
does not depend on a particular file format.
"""

from typing import Protocol, Any, Dict, List
from abc import abstractmethod


class InquiryStore(Protocol):
    """
    Append-only store of accepted inquiry records.

    Implementations own their storage exclusively; nothing else reads or
    writes it.
    """

    @abstractmethod
    async def append(self, record: Dict[str, Any]) -> None:
        """
        Append one record after all previously stored records.

        Raises:
            PersistenceError: If the record could not be stored
        """
        ...

    @abstractmethod
    async def read_all(self) -> List[Dict[str, Any]]:
        """
        Return every stored record in append order.

        A missing or unreadable store reads as empty.
        """
        ...

    @abstractmethod
    async def count(self) -> int:
        """Number of stored records."""
        ...
