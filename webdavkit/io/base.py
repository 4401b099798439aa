"""
Abstract I/O protocol definition.

This module defines the interface that all I/O implementations must follow.
"""

from typing import Dict, Protocol, runtime_checkable

from webdavkit.protocol.types import DAVRequest, DAVResponse


@runtime_checkable
class SyncIOProtocol(Protocol):
    """
    Protocol defining the synchronous I/O interface.

    Implementations must provide a way to execute DAVRequest objects
    and return DAVResponse objects synchronously.
    """

    def execute(self, request: DAVRequest) -> DAVResponse:
        """
        Execute a request and return the response.

        Args:
            request: The DAVRequest to execute

        Returns:
            DAVResponse with status, headers, and body

        Raises:
            TransportError: If no response could be obtained
        """
        ...

    def close(self) -> None:
        """Close any resources (e.g., HTTP session)."""
        ...


@runtime_checkable
class AsyncIOProtocol(Protocol):
    """
    Protocol defining the asynchronous I/O interface.

    Implementations must provide a way to execute DAVRequest objects
    and return DAVResponse objects asynchronously.
    """

    async def execute(self, request: DAVRequest) -> DAVResponse:
        """
        Execute a request and return the response.

        Args:
            request: The DAVRequest to execute

        Returns:
            DAVResponse with status, headers, and body

        Raises:
            TransportError: If no response could be obtained
        """
        ...

    async def close(self) -> None:
        """Close any resources (e.g., HTTP session)."""
        ...


def loggable_headers(headers: Dict[str, str]) -> Dict[str, str]:
    """Copy of headers that is safe to put into a debug log"""
    return {
        name: "<redacted>" if name.lower() == "authorization" else value
        for name, value in headers.items()
    }
