"""
Pure functions for parsing WebDAV XML responses.

All functions in this module are pure - they take XML bytes in and return
structured data out, with no side effects or I/O.

Servers are inconsistent about namespace prefixes, and some even forget
to declare them.  Elements are therefore matched on their local name
only, i.e. ``{DAV:}href``, ``d:href`` and ``href`` are all the same
thing to the functions here.
"""

import logging
import re
from typing import Iterator, Optional

from lxml import etree
from lxml.etree import _Element

from webdavkit.lib import error
from webdavkit.lib.url import PathResolver, basename

from .types import QuotaInfo, ResourceKind, ResourceStat

log = logging.getLogger(__name__)

_LEADING_DIGITS = re.compile(r"\s*(\d+)")


def parse_multistatus(
    body: bytes,
    resolver: PathResolver,
    huge_tree: bool = False,
) -> list[ResourceStat]:
    """
    Parse a 207 Multi-Status response body into resource records.

    Responses without an href, and responses without any successful
    property set, are skipped.  A body that cannot be parsed at all
    yields an empty list.

    Args:
        body: Raw XML response bytes
        resolver: Used to turn hrefs into canonical paths
        huge_tree: Allow parsing very large XML documents

    Returns:
        List of ResourceStat, in document order
    """
    tree = _parse_xml(body, huge_tree=huge_tree)
    if tree is None:
        return []

    stats: list[ResourceStat] = []
    for response in _iter_local(tree, "response"):
        href = _text(_child(response, "href"))
        if not href:
            error.weirdness("response without href", response)
            continue

        prop = _successful_prop(_children(response, "propstat"))
        if prop is None:
            log.debug(f"no successful propstat for {href}, skipping it")
            continue

        stats.append(_prop_to_stat(href, prop, resolver))

    return stats


def parse_quota(body: bytes, huge_tree: bool = False) -> Optional[QuotaInfo]:
    """
    Parse the response to a quota PROPFIND.

    Returns:
        QuotaInfo from the first successful property set holding both
        quota-used-bytes and quota-available-bytes, else None
    """
    tree = _parse_xml(body, huge_tree=huge_tree)
    if tree is None:
        return None

    for propstat in _iter_local(tree, "propstat"):
        if not _is_successful(propstat):
            continue
        prop = _child(propstat, "prop")
        if prop is None or len(prop) == 0:
            continue
        available = _text(_child(prop, "quota-available-bytes"))
        used = _text(_child(prop, "quota-used-bytes"))
        if not available or not used:
            continue
        return QuotaInfo(used=parse_size(used), available=parse_size(available))

    return None


def parse_size(value: Optional[str]) -> int:
    """
    Leading decimal digits of value as an int.  Anything else, including
    negative numbers, gives 0.
    """
    if not value:
        return 0
    match = _LEADING_DIGITS.match(value)
    if not match:
        return 0
    return int(match.group(1))


# Helper functions


def _parse_xml(body: bytes, huge_tree: bool = False) -> Optional[_Element]:
    if isinstance(body, str):
        body = body.encode("utf-8")
    if not body or not body.strip():
        return None
    try:
        return etree.fromstring(
            body,
            etree.XMLParser(
                remove_blank_text=True, huge_tree=huge_tree, resolve_entities=False
            ),
        )
    except etree.XMLSyntaxError as err:
        ## Undeclared namespace prefixes end up here.  Such documents are
        ## still usable, so give it a second try in recovery mode
        error.weirdness(f"invalid XML in multistatus response: {err}")
    try:
        return etree.fromstring(
            body,
            etree.XMLParser(
                recover=True,
                remove_blank_text=True,
                huge_tree=huge_tree,
                resolve_entities=False,
            ),
        )
    except etree.XMLSyntaxError:
        log.info("giving up on unparseable multistatus response", exc_info=True)
        return None


def _localname(elem: _Element) -> str:
    tag = elem.tag
    if not isinstance(tag, str):
        ## comments and processing instructions
        return ""
    tag = tag.rsplit("}", 1)[-1]
    return tag.rsplit(":", 1)[-1].lower()


def _iter_local(tree: _Element, name: str) -> Iterator[_Element]:
    for elem in tree.iter():
        if _localname(elem) == name:
            yield elem


def _children(parent: _Element, name: str) -> list[_Element]:
    return [elem for elem in parent if _localname(elem) == name]


def _child(parent: Optional[_Element], name: str) -> Optional[_Element]:
    if parent is None:
        return None
    for elem in parent:
        if _localname(elem) == name:
            return elem
    return None


def _text(elem: Optional[_Element]) -> str:
    if elem is None:
        return ""
    return "".join(elem.itertext()).strip()


def _is_successful(propstat: _Element) -> bool:
    """A propstat without status counts as successful"""
    status = _child(propstat, "status")
    if status is None:
        return True
    text = _text(status)
    return not text or " 200 " in text


def _successful_prop(propstats: list[_Element]) -> Optional[_Element]:
    """The prop element of the first successful, non-empty propstat"""
    for propstat in propstats:
        if not _is_successful(propstat):
            continue
        prop = _child(propstat, "prop")
        if prop is not None and len(prop) > 0:
            return prop
    return None


def _prop_to_stat(href: str, prop: _Element, resolver: PathResolver) -> ResourceStat:
    resourcetype = _child(prop, "resourcetype")
    is_collection = resourcetype is not None and any(
        True for _ in _iter_local(resourcetype, "collection")
    )

    path = resolver.canonicalize(href)
    return ResourceStat(
        path=path,
        basename=basename(path),
        last_modified=_text(_child(prop, "getlastmodified")),
        size=parse_size(_text(_child(prop, "getcontentlength"))),
        kind=ResourceKind.DIRECTORY if is_collection else ResourceKind.FILE,
        etag=_text(_child(prop, "getetag")) or None,
        mime_type=_text(_child(prop, "getcontenttype")) or None,
    )
