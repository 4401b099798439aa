"""
Synchronous I/O implementation using the requests library.
"""

import logging
from typing import Optional, Union

import requests

from webdavkit.lib import error
from webdavkit.protocol.types import DAVRequest, DAVResponse

from .base import loggable_headers

log = logging.getLogger("webdavkit")


class SyncIO:
    """
    Synchronous I/O shell using the requests library.

    This is a thin wrapper that executes DAVRequest objects via HTTP
    and returns DAVResponse objects.

    Example:
        io = SyncIO()
        request = protocol.list_request("/documents/", depth=1)
        response = io.execute(request)
        entries = protocol.parse_listing(response, "/documents/")
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = 30.0,
        verify: Union[bool, str] = True,
    ):
        """
        Initialize the sync I/O handler.

        Args:
            session: Existing requests Session to use (creates new if None)
            timeout: Request timeout in seconds
            verify: Verify SSL certificates (or path to a CA bundle)
        """
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.timeout = timeout
        self.verify = verify

    def execute(self, request: DAVRequest) -> DAVResponse:
        """
        Execute a DAVRequest and return DAVResponse.

        Args:
            request: The request to execute

        Returns:
            DAVResponse with status, headers, and body

        Raises:
            TransportError: If the request could not be sent or the
                response could not be read
        """
        log.debug(
            f"sending request - method={request.method.value}, url={request.url}, "
            f"headers={loggable_headers(request.headers)}"
        )
        try:
            response = self.session.request(
                method=request.method.value,
                url=request.url,
                headers=request.headers,
                data=request.body,
                timeout=self.timeout,
                verify=self.verify,
            )
            body = response.content
        except requests.RequestException as err:
            raise error.TransportError(
                url=request.url, reason=str(err), operation=request.method.value
            ) from err
        log.debug(f"server responded with {response.status_code} {response.reason}")

        return DAVResponse(
            status=response.status_code,
            headers=dict(response.headers),
            body=body,
            status_text=response.reason or "",
        )

    def close(self) -> None:
        """Close the session if we created it."""
        if self._owns_session and self.session:
            self.session.close()

    def __enter__(self) -> "SyncIO":
        """Context manager entry."""
        return self

    def __exit__(self, *args) -> None:
        """Context manager exit."""
        self.close()
