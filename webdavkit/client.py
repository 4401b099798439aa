"""
High-level WebDAV clients using the Sans-I/O protocol layer.

This module provides AsyncWebDAVClient and WebDAVClient.  Both offer the
same operations, one request per operation, no retries.  The async
client is the primary one; every operation suspends the calling task
while the request is in flight.
"""

import sys
from datetime import datetime
from typing import Any, List, Mapping, Optional, Union

from webdavkit import __version__
from webdavkit.io import AsyncIO, SyncIO
from webdavkit.io.base import AsyncIOProtocol, SyncIOProtocol
from webdavkit.lib import error
from webdavkit.protocol import (
    ClientConfig,
    DAVRequest,
    DAVResponse,
    QuotaInfo,
    ResourceStat,
    WebDAVProtocol,
)
from webdavkit.protocol.operations import merge_headers

if sys.version_info < (3, 11):
    from typing_extensions import Self
else:
    from typing import Self


def _build_protocol(
    url: str,
    username: Optional[str],
    password: Optional[str],
    headers: Optional[Mapping[str, str]],
    huge_tree: bool,
) -> WebDAVProtocol:
    headers = merge_headers({"User-Agent": f"webdavkit/{__version__}"}, headers)
    config = ClientConfig.build(url, username=username, password=password, headers=headers)
    return WebDAVProtocol(config, huge_tree=huge_tree)


class AsyncWebDAVClient:
    """
    Asynchronous WebDAV client.

    Example:
        async with AsyncWebDAVClient(
            url="https://dav.example.com/remote.php/dav/files/user/",
            username="user",
            password="pass",
        ) as client:
            for entry in await client.list_directory("/Documents"):
                print(f"{entry.path}: {entry.size}")
    """

    def __init__(
        self,
        url: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = 30.0,
        ssl_verify_cert: bool = True,
        io: Optional[AsyncIOProtocol] = None,
        huge_tree: bool = False,
    ):
        """
        Initialize the client.

        Args:
            url: Base URL of the WebDAV tree
            username: Username for basic authentication
            password: Password for basic authentication
            headers: Extra headers to send with every request
            timeout: Request timeout in seconds
            ssl_verify_cert: Verify SSL certificates
            io: Transport to use instead of a fresh AsyncIO
            huge_tree: Allow parsing very large XML responses
        """
        self.protocol = _build_protocol(url, username, password, headers, huge_tree)
        self.io = io or AsyncIO(timeout=timeout, verify_ssl=ssl_verify_cert)

    @property
    def url(self) -> str:
        return self.protocol.config.base_url

    async def close(self) -> None:
        """Close the HTTP session."""
        await self.io.close()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *args) -> None:
        await self.close()

    async def _execute(self, request: DAVRequest) -> DAVResponse:
        """Execute a request and return the response."""
        return await self.io.execute(request)

    # High-level operations

    async def list_directory(
        self, path: str = "/", depth: Union[int, str] = 1
    ) -> List[ResourceStat]:
        """
        List a collection.

        Args:
            path: Collection to list
            depth: 1 for the direct children, "infinity" for everything below

        Returns:
            List of ResourceStat, the collection itself not included
        """
        request = self.protocol.list_request(path, depth)
        response = await self._execute(request)
        self.protocol.check_response(response, request, "list directory")
        return self.protocol.parse_listing(response, path)

    async def stat(self, path: str) -> ResourceStat:
        """
        Properties of a single resource.

        Raises:
            NotFoundError: If the server does not know the resource
        """
        request = self.protocol.stat_request(path)
        response = await self._execute(request)
        self.protocol.check_response(response, request, "stat")
        return self.protocol.parse_stat(response, request, path)

    async def exists(self, path: str) -> bool:
        try:
            await self.stat(path)
        except error.NotFoundError:
            return False
        return True

    async def read_file(self, path: str) -> bytes:
        request = self.protocol.get_request(path)
        response = await self._execute(request)
        self.protocol.check_response(response, request, "read file")
        return response.body

    async def read_text(self, path: str, encoding: str = "utf-8") -> str:
        data = await self.read_file(path)
        return data.decode(encoding)

    async def write_file(
        self,
        path: str,
        data: Any,
        headers: Optional[Mapping[str, str]] = None,
    ) -> None:
        """
        Create or replace a file.

        Args:
            path: Where to put the file
            data: bytes or a binary file-like object, sent as it is.
                Text must be encoded by the caller
            headers: Extra headers for this request, i.e. Content-Type
        """
        request = self.protocol.put_request(path, data, headers)
        response = await self._execute(request)
        self.protocol.check_response(response, request, "write file")

    async def create_directory(self, path: str) -> None:
        request = self.protocol.mkcol_request(path)
        response = await self._execute(request)
        self.protocol.check_response(response, request, "create directory")

    async def delete(self, path: str) -> None:
        """Delete a resource.  Deleting something that is not there is fine."""
        request = self.protocol.delete_request(path)
        response = await self._execute(request)
        self.protocol.check_response(response, request, "delete", accept=[404])

    async def move(self, source: str, destination: str, overwrite: bool = False) -> None:
        request = self.protocol.move_request(source, destination, overwrite)
        response = await self._execute(request)
        self.protocol.check_response(response, request, "move")

    async def copy(self, source: str, destination: str, overwrite: bool = False) -> None:
        request = self.protocol.copy_request(source, destination, overwrite)
        response = await self._execute(request)
        self.protocol.check_response(response, request, "copy")

    async def get_quota(self, path: str = "/") -> Optional[QuotaInfo]:
        """
        Used and available bytes (RFC 4331).

        Returns:
            QuotaInfo, or None if the server does not report both values
        """
        request = self.protocol.quota_request(path)
        response = await self._execute(request)
        self.protocol.check_response(response, request, "get quota")
        return self.protocol.parse_quota(response)

    async def search(
        self,
        path: str = "/",
        query: Optional[str] = None,
        content_type: Optional[str] = None,
        modified_after: Optional[datetime] = None,
        modified_before: Optional[datetime] = None,
    ) -> List[ResourceStat]:
        """
        Search below path (RFC 5323 basicsearch).  All criteria are
        optional and are combined with "and".

        Args:
            path: Collection to search in
            query: Substring of the display name
            content_type: Exact content type
            modified_after: Lower bound on the last modification time
            modified_before: Upper bound on the last modification time

        Returns:
            List of ResourceStat for the matching resources
        """
        request = self.protocol.search_request(
            path,
            query=query,
            content_type=content_type,
            modified_after=modified_after,
            modified_before=modified_before,
        )
        response = await self._execute(request)
        self.protocol.check_response(response, request, "search")
        return self.protocol.parse_stats(response)


class WebDAVClient:
    """
    Synchronous WebDAV client.

    This is the blocking version of AsyncWebDAVClient.

    Example:
        with WebDAVClient(
            url="https://dav.example.com/remote.php/dav/files/user/",
            username="user",
            password="pass",
        ) as client:
            client.write_file("/notes.txt", b"hello")
            print(client.read_text("/notes.txt"))
    """

    def __init__(
        self,
        url: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
        headers: Optional[Mapping[str, str]] = None,
        timeout: Optional[float] = 30.0,
        ssl_verify_cert: Union[bool, str] = True,
        io: Optional[SyncIOProtocol] = None,
        huge_tree: bool = False,
    ):
        """
        Initialize the client.

        Args:
            url: Base URL of the WebDAV tree
            username: Username for basic authentication
            password: Password for basic authentication
            headers: Extra headers to send with every request
            timeout: Request timeout in seconds
            ssl_verify_cert: Verify SSL certificates (or path to a CA bundle)
            io: Transport to use instead of a fresh SyncIO
            huge_tree: Allow parsing very large XML responses
        """
        self.protocol = _build_protocol(url, username, password, headers, huge_tree)
        self.io = io or SyncIO(timeout=timeout, verify=ssl_verify_cert)

    @property
    def url(self) -> str:
        return self.protocol.config.base_url

    def close(self) -> None:
        """Close the HTTP session."""
        self.io.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *args) -> None:
        self.close()

    def _execute(self, request: DAVRequest) -> DAVResponse:
        """Execute a request and return the response."""
        return self.io.execute(request)

    # High-level operations

    def list_directory(
        self, path: str = "/", depth: Union[int, str] = 1
    ) -> List[ResourceStat]:
        request = self.protocol.list_request(path, depth)
        response = self._execute(request)
        self.protocol.check_response(response, request, "list directory")
        return self.protocol.parse_listing(response, path)

    def stat(self, path: str) -> ResourceStat:
        request = self.protocol.stat_request(path)
        response = self._execute(request)
        self.protocol.check_response(response, request, "stat")
        return self.protocol.parse_stat(response, request, path)

    def exists(self, path: str) -> bool:
        try:
            self.stat(path)
        except error.NotFoundError:
            return False
        return True

    def read_file(self, path: str) -> bytes:
        request = self.protocol.get_request(path)
        response = self._execute(request)
        self.protocol.check_response(response, request, "read file")
        return response.body

    def read_text(self, path: str, encoding: str = "utf-8") -> str:
        return self.read_file(path).decode(encoding)

    def write_file(
        self,
        path: str,
        data: Any,
        headers: Optional[Mapping[str, str]] = None,
    ) -> None:
        """data must be bytes or a binary file-like object, encode text first"""
        request = self.protocol.put_request(path, data, headers)
        response = self._execute(request)
        self.protocol.check_response(response, request, "write file")

    def create_directory(self, path: str) -> None:
        request = self.protocol.mkcol_request(path)
        response = self._execute(request)
        self.protocol.check_response(response, request, "create directory")

    def delete(self, path: str) -> None:
        request = self.protocol.delete_request(path)
        response = self._execute(request)
        self.protocol.check_response(response, request, "delete", accept=[404])

    def move(self, source: str, destination: str, overwrite: bool = False) -> None:
        request = self.protocol.move_request(source, destination, overwrite)
        response = self._execute(request)
        self.protocol.check_response(response, request, "move")

    def copy(self, source: str, destination: str, overwrite: bool = False) -> None:
        request = self.protocol.copy_request(source, destination, overwrite)
        response = self._execute(request)
        self.protocol.check_response(response, request, "copy")

    def get_quota(self, path: str = "/") -> Optional[QuotaInfo]:
        request = self.protocol.quota_request(path)
        response = self._execute(request)
        self.protocol.check_response(response, request, "get quota")
        return self.protocol.parse_quota(response)

    def search(
        self,
        path: str = "/",
        query: Optional[str] = None,
        content_type: Optional[str] = None,
        modified_after: Optional[datetime] = None,
        modified_before: Optional[datetime] = None,
    ) -> List[ResourceStat]:
        request = self.protocol.search_request(
            path,
            query=query,
            content_type=content_type,
            modified_after=modified_after,
            modified_before=modified_before,
        )
        response = self._execute(request)
        self.protocol.check_response(response, request, "search")
        return self.protocol.parse_stats(response)


def create_client(url: str, **kwargs: Any) -> WebDAVClient:
    """Shortcut for WebDAVClient(url, ...)"""
    return WebDAVClient(url, **kwargs)


def create_async_client(url: str, **kwargs: Any) -> AsyncWebDAVClient:
    """Shortcut for AsyncWebDAVClient(url, ...)"""
    return AsyncWebDAVClient(url, **kwargs)
