#!/usr/bin/env python
import logging

__version__ = "1.0.0"

from .client import AsyncWebDAVClient
from .client import WebDAVClient
from .client import create_async_client
from .client import create_client
from .protocol.types import QuotaInfo
from .protocol.types import ResourceKind
from .protocol.types import ResourceStat

# Silence notification of no default logging handler
log = logging.getLogger("webdavkit")


class NullHandler(logging.Handler):
    def emit(self, record) -> None:
        pass


log.addHandler(NullHandler())

__all__ = [
    "__version__",
    "AsyncWebDAVClient",
    "WebDAVClient",
    "create_async_client",
    "create_client",
    "QuotaInfo",
    "ResourceKind",
    "ResourceStat",
]
