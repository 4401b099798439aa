"""
Pure functions for building WebDAV XML request bodies.

All functions in this module are pure - they take data in and return XML out,
with no side effects or I/O.
"""
from datetime import datetime
from datetime import timezone
from typing import List
from typing import Optional

from lxml import etree

from webdavkit.elements import dav
from webdavkit.elements.base import BaseElement


def _stat_props() -> List[BaseElement]:
    """The properties making up a ResourceStat"""
    return [
        dav.ResourceType(),
        dav.GetLastModified(),
        dav.GetContentLength(),
        dav.GetEtag(),
        dav.GetContentType(),
    ]


def _tostring(root: BaseElement) -> bytes:
    return etree.tostring(root.xmlelement(), encoding="utf-8", xml_declaration=True)


def build_propfind_body() -> bytes:
    """
    Build the PROPFIND request body used for listings and stat.

    Returns:
        UTF-8 encoded XML bytes
    """
    return _tostring(dav.Propfind() + (dav.Prop() + _stat_props()))


def build_quota_body() -> bytes:
    """
    Build a PROPFIND request body asking for the RFC 4331 quota properties.

    Returns:
        UTF-8 encoded XML bytes
    """
    prop = dav.Prop() + [dav.QuotaAvailableBytes(), dav.QuotaUsedBytes()]
    return _tostring(dav.Propfind() + prop)


def format_search_date(value: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision, i.e. 2024-05-21T10:20:30.000Z.
    Naive datetimes are taken to be UTC already."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + "%03dZ" % (value.microsecond // 1000)


def build_search_body(
    scope: str,
    query: Optional[str] = None,
    content_type: Optional[str] = None,
    modified_after: Optional[datetime] = None,
    modified_before: Optional[datetime] = None,
) -> bytes:
    """
    Build an RFC 5323 basicsearch request body.

    Args:
        scope: href of the collection to search below (depth infinity)
        query: Substring to look for in the display name
        content_type: Exact content type to match
        modified_after: Only resources modified after this moment
        modified_before: Only resources modified before this moment

    Returns:
        UTF-8 encoded XML bytes

    Raises:
        ValueError: If a criterion holds characters XML cannot carry,
            i.e. control characters
    """
    clauses: List[BaseElement] = []
    if query:
        clauses.append(
            dav.Like()
            + [dav.Prop() + dav.DisplayName(), dav.Literal("%" + query + "%")]
        )
    if content_type:
        clauses.append(
            dav.Eq() + [dav.Prop() + dav.GetContentType(), dav.Literal(content_type)]
        )
    if modified_after:
        clauses.append(
            dav.Gt()
            + [
                dav.Prop() + dav.GetLastModified(),
                dav.Literal(format_search_date(modified_after)),
            ]
        )
    if modified_before:
        clauses.append(
            dav.Lt()
            + [
                dav.Prop() + dav.GetLastModified(),
                dav.Literal(format_search_date(modified_before)),
            ]
        )

    basicsearch = dav.BasicSearch() + [
        dav.Select() + (dav.Prop() + _stat_props()),
        dav.From() + (dav.Scope() + [dav.Href(scope), dav.Depth("infinity")]),
    ]
    ## where takes exactly one search expression
    if len(clauses) == 1:
        basicsearch += dav.Where() + clauses[0]
    elif clauses:
        basicsearch += dav.Where() + (dav.And() + clauses)

    try:
        return _tostring(dav.SearchRequest() + basicsearch)
    except ValueError as err:
        raise ValueError(f"search criteria not usable in a SEARCH body: {err}") from err
