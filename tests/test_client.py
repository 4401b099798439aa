#!/usr/bin/env python
# -*- encoding: utf-8 -*-
"""
Unit tests for the high-level clients.

Rule: None of the tests in this file should initiate any internet
communication. The transport is replaced with mocks returning canned
DAVResponse objects.
"""
import asyncio
from datetime import datetime
from datetime import timezone
from unittest.mock import AsyncMock
from unittest.mock import Mock

import pytest
from lxml import etree

from webdavkit import __version__
from webdavkit import AsyncWebDAVClient
from webdavkit import QuotaInfo
from webdavkit import ResourceKind
from webdavkit import WebDAVClient
from webdavkit import create_async_client
from webdavkit import create_client
from webdavkit.io import AsyncIO
from webdavkit.io import SyncIO
from webdavkit.lib import error
from webdavkit.protocol import DAVMethod
from webdavkit.protocol import DAVResponse

BASE_URL = "https://example.com/dav"

LISTING_XML = b"""<?xml version="1.0" encoding="utf-8" ?>
<d:multistatus xmlns:d="DAV:">
  <d:response>
    <d:href>/dav/folder/</d:href>
    <d:propstat>
      <d:prop><d:resourcetype><d:collection/></d:resourcetype></d:prop>
      <d:status>HTTP/1.1 200 OK</d:status>
    </d:propstat>
  </d:response>
  <d:response>
    <d:href>/dav/folder/document.txt</d:href>
    <d:propstat>
      <d:prop>
        <d:resourcetype/>
        <d:getlastmodified>Tue, 21 May 2024 11:20:30 GMT</d:getlastmodified>
        <d:getcontentlength>1234</d:getcontentlength>
        <d:getcontenttype>text/plain</d:getcontenttype>
        <d:getetag>"abc"</d:getetag>
      </d:prop>
      <d:status>HTTP/1.1 200 OK</d:status>
    </d:propstat>
  </d:response>
  <d:response>
    <d:href>/dav/folder/photos/</d:href>
    <d:propstat>
      <d:prop><d:resourcetype><d:collection/></d:resourcetype></d:prop>
      <d:status>HTTP/1.1 200 OK</d:status>
    </d:propstat>
  </d:response>
</d:multistatus>
"""

STAT_XML = b"""<?xml version="1.0" encoding="utf-8" ?>
<d:multistatus xmlns:d="DAV:">
  <d:response>
    <d:href>/dav/folder/readme.md</d:href>
    <d:propstat>
      <d:prop>
        <d:resourcetype/>
        <d:getcontentlength>512</d:getcontentlength>
        <d:getcontenttype>text/markdown</d:getcontenttype>
      </d:prop>
      <d:status>HTTP/1.1 200 OK</d:status>
    </d:propstat>
  </d:response>
</d:multistatus>
"""

QUOTA_XML = b"""<?xml version="1.0" encoding="utf-8" ?>
<d:multistatus xmlns:d="DAV:">
  <d:response>
    <d:href>/dav/</d:href>
    <d:propstat>
      <d:prop>
        <d:quota-used-bytes>2048</d:quota-used-bytes>
        <d:quota-available-bytes>8192</d:quota-available-bytes>
      </d:prop>
      <d:status>HTTP/1.1 200 OK</d:status>
    </d:propstat>
  </d:response>
</d:multistatus>
"""

SEARCH_XML = b"""<?xml version="1.0" encoding="utf-8" ?>
<d:multistatus xmlns:d="DAV:">
  <d:response>
    <d:href>/dav/docs/2024/report.pdf</d:href>
    <d:propstat>
      <d:prop>
        <d:getcontentlength>99</d:getcontentlength>
        <d:getcontenttype>application/pdf</d:getcontenttype>
      </d:prop>
      <d:status>HTTP/1.1 200 OK</d:status>
    </d:propstat>
  </d:response>
</d:multistatus>
"""


def response(status=200, body=b"", reason=""):
    return DAVResponse(status=status, headers={}, body=body, status_text=reason)


def make_async_client(*responses, **kwargs):
    io = Mock()
    io.execute = AsyncMock(side_effect=list(responses))
    io.close = AsyncMock()
    return AsyncWebDAVClient(
        BASE_URL, username="user", password="pass", io=io, **kwargs
    )


def make_sync_client(*responses, **kwargs):
    io = Mock()
    io.execute = Mock(side_effect=list(responses))
    return WebDAVClient(BASE_URL, username="user", password="pass", io=io, **kwargs)


def sent(client, index=0):
    """The DAVRequest passed to the transport"""
    return client.io.execute.call_args_list[index][0][0]


class TestClientConstruction:
    def test_defaults(self):
        client = AsyncWebDAVClient(BASE_URL)
        assert client.url == "https://example.com/dav/"
        assert isinstance(client.io, AsyncIO)
        assert client.protocol.config.auth_header is None

    def test_sync_defaults(self):
        client = WebDAVClient(BASE_URL, timeout=5, ssl_verify_cert=False)
        assert isinstance(client.io, SyncIO)
        assert client.io.timeout == 5
        assert client.io.verify is False
        client.close()

    def test_missing_url(self):
        with pytest.raises(ValueError):
            AsyncWebDAVClient("")
        with pytest.raises(ValueError):
            WebDAVClient("not a url")

    def test_factories(self):
        assert isinstance(create_client(BASE_URL), WebDAVClient)
        assert isinstance(create_async_client(BASE_URL), AsyncWebDAVClient)

    def test_user_agent(self):
        client = make_sync_client(response(200, b"x"))
        client.read_file("a.txt")
        assert sent(client).headers["User-Agent"] == f"webdavkit/{__version__}"

        client = WebDAVClient(
            BASE_URL, headers={"user-agent": "my-app/2.0"}, io=Mock()
        )
        client.io.execute = Mock(return_value=response(200))
        client.read_file("a.txt")
        headers = sent(client).headers
        assert headers["user-agent"] == "my-app/2.0"
        assert "User-Agent" not in headers


class TestAsyncWebDAVClient:
    @pytest.mark.asyncio
    async def test_list_directory(self):
        client = make_async_client(response(207, LISTING_XML))
        entries = await client.list_directory("/folder/")

        assert len(entries) == 2
        document, photos = entries
        assert document.path == "/folder/document.txt"
        assert document.basename == "document.txt"
        assert document.size == 1234
        assert document.mime_type == "text/plain"
        assert document.etag == '"abc"'
        assert document.kind == ResourceKind.FILE
        assert photos.path == "/folder/photos"
        assert photos.kind == ResourceKind.DIRECTORY

        request = sent(client)
        assert request.method == DAVMethod.PROPFIND
        assert request.url == "https://example.com/dav/folder/"
        assert request.headers["Depth"] == "1"
        assert request.headers["Authorization"] == "Basic dXNlcjpwYXNz"
        tree = etree.fromstring(request.body)
        assert tree.find("{DAV:}prop/{DAV:}getcontentlength") is not None

    @pytest.mark.asyncio
    async def test_list_directory_infinity(self):
        client = make_async_client(response(207, LISTING_XML))
        await client.list_directory("folder", depth="infinity")
        assert sent(client).headers["Depth"] == "infinity"

    @pytest.mark.asyncio
    async def test_list_directory_error(self):
        client = make_async_client(response(403, reason="Forbidden"))
        with pytest.raises(error.PropfindError) as excinfo:
            await client.list_directory("/secret/")
        assert excinfo.value.status == 403
        assert excinfo.value.operation == "list directory"
        assert "403" in str(excinfo.value)

    @pytest.mark.asyncio
    async def test_stat(self):
        client = make_async_client(response(207, STAT_XML))
        stat = await client.stat("folder/readme.md")
        assert stat.path == "/folder/readme.md"
        assert stat.size == 512
        assert stat.mime_type == "text/markdown"
        assert sent(client).headers["Depth"] == "0"

    @pytest.mark.asyncio
    async def test_stat_not_found(self):
        client = make_async_client(response(404))
        with pytest.raises(error.NotFoundError):
            await client.stat("missing.txt")

    @pytest.mark.asyncio
    async def test_exists(self):
        client = make_async_client(response(207, STAT_XML), response(404))
        assert await client.exists("folder/readme.md") is True
        assert await client.exists("missing.txt") is False

    @pytest.mark.asyncio
    async def test_exists_propagates_other_errors(self):
        client = make_async_client(response(500))
        with pytest.raises(error.ResponseError) as excinfo:
            await client.exists("broken.txt")
        assert not isinstance(excinfo.value, error.NotFoundError)
        assert "500" in str(excinfo.value)

    @pytest.mark.asyncio
    async def test_read_file(self):
        data = b"\x00\x01binary\r\n"
        client = make_async_client(response(200, data))
        assert await client.read_file("blob.bin") == data
        request = sent(client)
        assert request.method == DAVMethod.GET
        assert request.url == "https://example.com/dav/blob.bin"

    @pytest.mark.asyncio
    async def test_read_text(self):
        client = make_async_client(response(200, "grüße".encode("utf-8")))
        assert await client.read_text("greeting.txt") == "grüße"

    @pytest.mark.asyncio
    async def test_read_file_not_found(self):
        client = make_async_client(response(404))
        with pytest.raises(error.NotFoundError) as excinfo:
            await client.read_file("gone.txt")
        assert excinfo.value.operation == "read file"

    @pytest.mark.asyncio
    async def test_write_file(self):
        client = make_async_client(response(201))
        data = b"line1\nline2"
        await client.write_file(
            "notes.txt", data, headers={"Content-Type": "text/plain"}
        )
        request = sent(client)
        assert request.method == DAVMethod.PUT
        assert request.body is data
        assert request.headers["Content-Type"] == "text/plain"

    @pytest.mark.asyncio
    async def test_write_file_error(self):
        client = make_async_client(response(507, reason="Insufficient Storage"))
        with pytest.raises(error.PutError):
            await client.write_file("big.iso", b"...")

    @pytest.mark.asyncio
    async def test_create_directory(self):
        client = make_async_client(response(201), response(405))
        await client.create_directory("new/")
        assert sent(client).method == DAVMethod.MKCOL
        with pytest.raises(error.MkcolError) as excinfo:
            await client.create_directory("new/")
        assert excinfo.value.status == 405

    @pytest.mark.asyncio
    async def test_delete(self):
        client = make_async_client(response(204))
        await client.delete("old.txt")
        assert sent(client).method == DAVMethod.DELETE

    @pytest.mark.asyncio
    async def test_delete_missing_is_fine(self):
        client = make_async_client(response(404))
        await client.delete("never-existed.txt")
        assert client.io.execute.call_count == 1

    @pytest.mark.asyncio
    async def test_delete_error(self):
        client = make_async_client(response(423, reason="Locked"))
        with pytest.raises(error.DeleteError):
            await client.delete("locked.txt")

    @pytest.mark.asyncio
    async def test_move(self):
        client = make_async_client(response(201))
        await client.move("old.txt", "archive/new.txt", True)
        request = sent(client)
        assert request.method == DAVMethod.MOVE
        assert request.url == "https://example.com/dav/old.txt"
        assert request.headers["Destination"] == "https://example.com/dav/archive/new.txt"
        assert request.headers["Overwrite"] == "T"

    @pytest.mark.asyncio
    async def test_copy(self):
        client = make_async_client(response(204), response(412))
        await client.copy("a.txt", "b.txt")
        request = sent(client)
        assert request.method == DAVMethod.COPY
        assert request.headers["Overwrite"] == "F"
        with pytest.raises(error.CopyError) as excinfo:
            await client.copy("a.txt", "b.txt")
        assert excinfo.value.status == 412

    @pytest.mark.asyncio
    async def test_get_quota(self):
        client = make_async_client(response(207, QUOTA_XML))
        assert await client.get_quota() == QuotaInfo(used=2048, available=8192)
        request = sent(client)
        assert request.url == "https://example.com/dav/"
        assert request.headers["Depth"] == "0"

    @pytest.mark.asyncio
    async def test_get_quota_unsupported(self):
        client = make_async_client(response(207, LISTING_XML))
        assert await client.get_quota() is None

    @pytest.mark.asyncio
    async def test_search(self):
        client = make_async_client(response(207, SEARCH_XML))
        results = await client.search(
            "/docs",
            query="report",
            content_type="application/pdf",
            modified_after=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )
        assert [r.path for r in results] == ["/docs/2024/report.pdf"]
        assert results[0].size == 99

        request = sent(client)
        assert request.method == DAVMethod.SEARCH
        tree = etree.fromstring(request.body)
        where = tree.find("{DAV:}basicsearch/{DAV:}where/{DAV:}and")
        assert [child.tag for child in where] == ["{DAV:}like", "{DAV:}eq", "{DAV:}gt"]

    @pytest.mark.asyncio
    async def test_search_error(self):
        client = make_async_client(response(501))
        with pytest.raises(error.SearchError):
            await client.search(query="x")

    @pytest.mark.asyncio
    async def test_transport_error_propagates(self):
        client = make_async_client(
            error.TransportError(url=BASE_URL, reason="connection refused")
        )
        with pytest.raises(error.TransportError):
            await client.read_file("a.txt")

    @pytest.mark.asyncio
    async def test_concurrent_operations(self):
        """Independent operations may run concurrently on one client"""
        client = make_async_client(response(200, b"one"), response(200, b"two"))
        results = await asyncio.gather(
            client.read_file("one.txt"), client.read_file("two.txt")
        )
        assert sorted(results) == [b"one", b"two"]

    @pytest.mark.asyncio
    async def test_context_manager(self):
        client = make_async_client()
        async with client as entered:
            assert entered is client
        client.io.close.assert_awaited_once()


class TestWebDAVClient:
    def test_list_directory(self):
        client = make_sync_client(response(207, LISTING_XML))
        entries = client.list_directory("/folder/")
        assert [e.path for e in entries] == ["/folder/document.txt", "/folder/photos"]
        assert sent(client).url == "https://example.com/dav/folder/"

    def test_stat_and_exists(self):
        client = make_sync_client(response(207, STAT_XML), response(404))
        assert client.stat("folder/readme.md").size == 512
        assert client.exists("missing") is False

    def test_exists_server_error(self):
        client = make_sync_client(response(500))
        with pytest.raises(error.ResponseError):
            client.exists("x")

    def test_read_write(self):
        client = make_sync_client(response(201), response(200, b"hello"))
        client.write_file("hello.txt", b"hello")
        assert client.read_text("hello.txt") == "hello"
        assert sent(client, 0).method == DAVMethod.PUT
        assert sent(client, 1).method == DAVMethod.GET

    def test_directory_operations(self):
        client = make_sync_client(
            response(201), response(201), response(204), response(404)
        )
        client.create_directory("a")
        client.move("a", "b", overwrite=True)
        client.copy("b", "c")
        client.delete("c")
        assert [sent(client, i).method for i in range(4)] == [
            DAVMethod.MKCOL,
            DAVMethod.MOVE,
            DAVMethod.COPY,
            DAVMethod.DELETE,
        ]

    def test_move_error(self):
        client = make_sync_client(response(409, reason="Conflict"))
        with pytest.raises(error.MoveError) as excinfo:
            client.move("a", "missing/parent/b")
        assert excinfo.value.reason == "Conflict"

    def test_quota_and_search(self):
        client = make_sync_client(response(207, QUOTA_XML), response(207, SEARCH_XML))
        assert client.get_quota().available == 8192
        assert len(client.search("/docs", query="report")) == 1

    def test_get_quota_error(self):
        client = make_sync_client(response(401))
        with pytest.raises(error.PropfindError) as excinfo:
            client.get_quota()
        assert excinfo.value.operation == "get quota"

    def test_context_manager(self):
        client = make_sync_client()
        with client as entered:
            assert entered is client
        client.io.close.assert_called_once()
