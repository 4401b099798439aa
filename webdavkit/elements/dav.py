#!/usr/bin/env python
from typing import ClassVar

from .base import BaseElement
from .base import ValuedBaseElement
from webdavkit.lib.namespace import ns


# Operations
class Propfind(BaseElement):
    tag: ClassVar[str] = ns("D", "propfind")


class SearchRequest(BaseElement):
    tag: ClassVar[str] = ns("D", "searchrequest")


class BasicSearch(BaseElement):
    tag: ClassVar[str] = ns("D", "basicsearch")


# Search grammar (RFC 5323)
class Select(BaseElement):
    tag: ClassVar[str] = ns("D", "select")


class From(BaseElement):
    tag: ClassVar[str] = ns("D", "from")


class Scope(BaseElement):
    tag: ClassVar[str] = ns("D", "scope")


class Depth(ValuedBaseElement):
    tag: ClassVar[str] = ns("D", "depth")


class Where(BaseElement):
    tag: ClassVar[str] = ns("D", "where")


class And(BaseElement):
    tag: ClassVar[str] = ns("D", "and")


class Like(BaseElement):
    tag: ClassVar[str] = ns("D", "like")


class Eq(BaseElement):
    tag: ClassVar[str] = ns("D", "eq")


class Gt(BaseElement):
    tag: ClassVar[str] = ns("D", "gt")


class Lt(BaseElement):
    tag: ClassVar[str] = ns("D", "lt")


class Literal(ValuedBaseElement):
    tag: ClassVar[str] = ns("D", "literal")


# Components / Data
class Prop(BaseElement):
    tag: ClassVar[str] = ns("D", "prop")


class Href(ValuedBaseElement):
    tag: ClassVar[str] = ns("D", "href")


# Properties
class ResourceType(BaseElement):
    tag: ClassVar[str] = ns("D", "resourcetype")


class DisplayName(ValuedBaseElement):
    tag: ClassVar[str] = ns("D", "displayname")


class GetEtag(ValuedBaseElement):
    tag: ClassVar[str] = ns("D", "getetag")


class GetLastModified(ValuedBaseElement):
    tag: ClassVar[str] = ns("D", "getlastmodified")


class GetContentLength(ValuedBaseElement):
    tag: ClassVar[str] = ns("D", "getcontentlength")


class GetContentType(ValuedBaseElement):
    tag: ClassVar[str] = ns("D", "getcontenttype")


# RFC 4331
class QuotaAvailableBytes(ValuedBaseElement):
    tag: ClassVar[str] = ns("D", "quota-available-bytes")


class QuotaUsedBytes(ValuedBaseElement):
    tag: ClassVar[str] = ns("D", "quota-used-bytes")
