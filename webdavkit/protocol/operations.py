"""
WebDAV protocol operations combining request building and response parsing.

This class provides a high-level interface to WebDAV operations while
remaining completely I/O-free.
"""

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from webdavkit.lib import error
from webdavkit.lib.url import PathResolver

from .types import (
    ClientConfig,
    DAVMethod,
    DAVRequest,
    DAVResponse,
    QuotaInfo,
    ResourceStat,
)
from .xml_builders import build_propfind_body, build_quota_body, build_search_body
from .xml_parsers import parse_multistatus, parse_quota

log = logging.getLogger(__name__)

XML_CONTENT_TYPE = "application/xml; charset=utf-8"


def depth_header(depth: Union[int, str, None]) -> str:
    """
    Value for the Depth header.  Non-negative integers (or strings of ASCII
    digits) are passed on, "infinity" is accepted in any letter case.
    Everything else falls back to "infinity", with a warning.
    """
    if isinstance(depth, int) and not isinstance(depth, bool) and depth >= 0:
        return str(depth)
    if isinstance(depth, str):
        if depth.isascii() and depth.isdigit():
            return depth
        if depth.lower() == "infinity":
            return "infinity"
    error.weirdness(f"unrecognized depth {depth!r}, using infinity")
    return "infinity"


def merge_headers(*layers: Optional[Mapping[str, str]]) -> Dict[str, str]:
    """
    Merge header mappings, later layers win.  Header names are compared
    case-insensitively, the spelling of the winning layer is kept.
    """
    merged: Dict[str, str] = {}
    for layer in layers:
        for name, value in (layer or {}).items():
            for existing in [k for k in merged if k.lower() == name.lower()]:
                del merged[existing]
            merged[name] = value
    return merged


class WebDAVProtocol:
    """
    Sans-I/O WebDAV protocol handler.

    Builds requests and parses responses without doing any I/O.
    All HTTP communication is delegated to an external I/O implementation.

    Example:
        protocol = WebDAVProtocol(ClientConfig.build("https://dav.example.com/"))

        # Build request
        request = protocol.list_request("/documents/", depth=1)

        # Execute with your I/O (not shown)
        response = io.execute(request)

        # Parse response
        protocol.check_response(response, request, "list directory")
        entries = protocol.parse_listing(response, "/documents/")
    """

    def __init__(self, config: ClientConfig, huge_tree: bool = False):
        self.config = config
        self.resolver = PathResolver(config.base_url)
        self.huge_tree = huge_tree

    def _headers(self, extra: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        """
        Headers for one request.  Headers given for this request beat the
        configured custom headers, and the Authorization header computed
        from username and password is only used if neither of those has
        one.
        """
        headers = merge_headers(self.config.headers, extra)
        if self.config.auth_header and not any(
            name.lower() == "authorization" for name in headers
        ):
            headers["Authorization"] = self.config.auth_header
        return headers

    def _request(
        self,
        method: DAVMethod,
        path: str,
        headers: Optional[Mapping[str, str]] = None,
        body: Any = None,
    ) -> DAVRequest:
        return DAVRequest(
            method=method,
            url=self.resolver.request_url(path),
            headers=self._headers(headers),
            body=body,
        )

    # =========================================================================
    # Request builders
    # =========================================================================

    def list_request(self, path: str, depth: Union[int, str] = 1) -> DAVRequest:
        return self._request(
            DAVMethod.PROPFIND,
            path,
            {"Content-Type": XML_CONTENT_TYPE, "Depth": depth_header(depth)},
            build_propfind_body(),
        )

    def stat_request(self, path: str) -> DAVRequest:
        return self.list_request(path, depth=0)

    def quota_request(self, path: str = "/") -> DAVRequest:
        return self._request(
            DAVMethod.PROPFIND,
            path,
            {"Content-Type": XML_CONTENT_TYPE, "Depth": "0"},
            build_quota_body(),
        )

    def get_request(self, path: str) -> DAVRequest:
        return self._request(DAVMethod.GET, path)

    def put_request(
        self,
        path: str,
        data: Any,
        headers: Optional[Mapping[str, str]] = None,
    ) -> DAVRequest:
        """
        Build a PUT request.  data is passed on as it is - no encoding,
        no newline conversion, no chunking.
        """
        return self._request(DAVMethod.PUT, path, headers, data)

    def mkcol_request(self, path: str) -> DAVRequest:
        return self._request(DAVMethod.MKCOL, path)

    def delete_request(self, path: str) -> DAVRequest:
        return self._request(DAVMethod.DELETE, path)

    def _transfer_request(
        self, method: DAVMethod, source: str, destination: str, overwrite: bool
    ) -> DAVRequest:
        return self._request(
            method,
            source,
            {
                "Destination": self.resolver.request_url(destination),
                "Overwrite": "T" if overwrite else "F",
            },
        )

    def move_request(
        self, source: str, destination: str, overwrite: bool = False
    ) -> DAVRequest:
        return self._transfer_request(DAVMethod.MOVE, source, destination, overwrite)

    def copy_request(
        self, source: str, destination: str, overwrite: bool = False
    ) -> DAVRequest:
        return self._transfer_request(DAVMethod.COPY, source, destination, overwrite)

    def search_request(
        self,
        path: str,
        query: Optional[str] = None,
        content_type: Optional[str] = None,
        modified_after: Optional[datetime] = None,
        modified_before: Optional[datetime] = None,
    ) -> DAVRequest:
        """
        Build an RFC 5323 SEARCH request covering everything below path.

        Args:
            path: Collection to search in
            query: Substring of the display name
            content_type: Exact content type
            modified_after: Lower bound on the last modification time
            modified_before: Upper bound on the last modification time

        Returns:
            DAVRequest ready for execution
        """
        scope = self.resolver.canonicalize(path)
        if scope != "/":
            scope += "/"
        body = build_search_body(
            scope,
            query=query,
            content_type=content_type,
            modified_after=modified_after,
            modified_before=modified_before,
        )
        return self._request(
            DAVMethod.SEARCH, path, {"Content-Type": XML_CONTENT_TYPE}, body
        )

    # =========================================================================
    # Response parsers
    # =========================================================================

    def check_response(
        self,
        response: DAVResponse,
        request: DAVRequest,
        operation: str,
        accept: Iterable[int] = (),
    ) -> None:
        """
        Raise the appropriate ResponseError unless the response status is
        a success (2xx) or one of the statuses in accept.
        """
        if response.ok or response.status in accept:
            return
        raise error.response_error(
            request.method.value,
            request.url,
            response.status,
            response.reason,
            operation=operation,
        )

    def parse_stats(self, response: DAVResponse) -> List[ResourceStat]:
        return parse_multistatus(response.body, self.resolver, huge_tree=self.huge_tree)

    def parse_listing(self, response: DAVResponse, path: str) -> List[ResourceStat]:
        """The entries of a listing, without the listed collection itself"""
        target = self.resolver.canonicalize(path)
        return [stat for stat in self.parse_stats(response) if stat.path != target]

    def parse_stat(
        self, response: DAVResponse, request: DAVRequest, path: str
    ) -> ResourceStat:
        stats = self.parse_stats(response)
        target = self.resolver.canonicalize(path)
        for stat in stats:
            if stat.path == target:
                return stat
        if stats:
            log.debug(
                f"no entry for {target} in the response, using {stats[0].path} instead"
            )
            return stats[0]
        raise error.NotFoundError(
            url=request.url,
            reason="no such resource in the response",
            operation="stat",
        )

    def parse_quota(self, response: DAVResponse) -> Optional[QuotaInfo]:
        return parse_quota(response.body, huge_tree=self.huge_tree)
