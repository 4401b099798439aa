#!/usr/bin/env python
import logging
import os
from collections import defaultdict
from typing import Dict
from typing import Optional
from typing import Type

from webdavkit import __version__

## one of DEBUG, DEVELOPMENT, PRODUCTION
debugmode = os.environ.get("PYTHON_WEBDAV_DEBUGMODE")
if not debugmode:
    if "dev" in __version__:
        debugmode = "DEVELOPMENT"
    else:
        debugmode = "PRODUCTION"

log = logging.getLogger("webdavkit")
if debugmode.startswith("DEBUG"):
    log.setLevel(logging.DEBUG)
else:
    log.setLevel(logging.WARNING)


def weirdness(*reasons) -> None:
    from webdavkit.lib.debug import xmlstring

    reason = " : ".join([xmlstring(x) for x in reasons])
    log.warning(f"Deviation from expectations found: {reason}")


class DAVError(Exception):
    url: Optional[str] = None
    reason: str = "no reason"
    operation: Optional[str] = None
    status: Optional[int] = None

    def __init__(
        self,
        url: Optional[str] = None,
        reason: Optional[str] = None,
        operation: Optional[str] = None,
        status: Optional[int] = None,
    ) -> None:
        if url:
            self.url = url
        if reason:
            self.reason = reason
        if operation:
            self.operation = operation
        if status is not None:
            self.status = status
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.status is not None:
            reason = "%s %s" % (self.status, self.reason)
        else:
            reason = self.reason
        return "%s: %s failed at '%s', reason %s" % (
            self.__class__.__name__,
            self.operation or "request",
            self.url,
            reason,
        )


class TransportError(DAVError):
    """
    The HTTP request could not be completed at all (connection refused,
    DNS failure, TLS problems, timeouts ...).  Never retried.
    """

    pass


class ResponseError(DAVError):
    """
    The server answered with a status code the operation does not
    accept.  The status and reason properties carry what the server
    sent.
    """

    pass


class NotFoundError(ResponseError):
    pass


class PropfindError(ResponseError):
    pass


class GetError(ResponseError):
    pass


class PutError(ResponseError):
    pass


class MkcolError(ResponseError):
    pass


class DeleteError(ResponseError):
    pass


class MoveError(ResponseError):
    pass


class CopyError(ResponseError):
    pass


class SearchError(ResponseError):
    pass


exception_by_method: Dict[str, Type[ResponseError]] = defaultdict(
    lambda: ResponseError
)
for method in (
    "propfind",
    "get",
    "put",
    "mkcol",
    "delete",
    "move",
    "copy",
    "search",
):
    exception_by_method[method] = locals()[method[0].upper() + method[1:] + "Error"]


def response_error(
    method: str,
    url: str,
    status: int,
    reason: str = "",
    operation: Optional[str] = None,
) -> ResponseError:
    """Pick the exception class for a failed request.  A 404 is always a
    NotFoundError, everything else is looked up by method"""
    if status == 404:
        cls = NotFoundError
    else:
        cls = exception_by_method[method.lower()]
    return cls(
        url=url,
        reason=reason,
        operation=operation or method.upper(),
        status=status,
    )
