"""Projection of raw Metricool payloads into the caller-facing tool schemas.

The upstream schema is not versioned by us, so every payload is treated as a
loose document: fields that are missing upstream are left out of the projected
record instead of failing. Only a top-level shape that cannot be projected at
all (an object where a list is expected, and so on) is reported, as a
MetricoolResponseError.

Changing any projection here changes the public output of a tool.
"""

from __future__ import annotations

import math
from typing import Any, Iterable, Mapping

from .errors import MetricoolResponseError

# (output field, upstream field)
BRAND_FIELDS = (("id", "id"), ("title", "title"), ("timezone", "timezone"))
POST_FIELDS = (
    ("title", "title"),
    ("url", "postUrl"),
    ("publishedAt", "date"),
    ("totalShares", "totalShares"),
    ("pageViews", "pageViews"),
)
REPORT_FIELDS = (
    ("from", "from"),
    ("to", "to"),
    ("createdAt", "creationDate"),
    ("reportType", "reportType"),
    ("status", "status"),
    ("downloadUrl", "reportFile"),
)


def pick(document: Mapping[str, Any], fields: Iterable[tuple[str, str]]) -> dict[str, Any]:
    """Copy the listed upstream fields under their output names, skipping absent ones."""
    return {out: document[src] for out, src in fields if src in document}


def to_number(value: Any) -> int | float | None:
    """Coerce a timeline value to a number.

    Missing and blank values count as 0; anything else that is not numeric
    (or not finite) becomes None.
    """
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        number = value
    else:
        text = str(value).strip()
        if not text:
            return 0
        try:
            number = float(text)
        except ValueError:
            return None
    if isinstance(number, float):
        if not math.isfinite(number):
            return None
        if number.is_integer():
            return int(number)
    return number


def _expect_list(payload: Any, what: str) -> list[Any]:
    if payload is None:
        return []
    if not isinstance(payload, list):
        raise MetricoolResponseError(
            f"expected a list of {what}, got {type(payload).__name__}"
        )
    return payload


def _expect_object(payload: Any, what: str) -> dict[str, Any]:
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise MetricoolResponseError(
            f"expected an object for {what}, got {type(payload).__name__}"
        )
    return payload


def shape_brands(payload: Any) -> list[dict[str, Any]]:
    brands = []
    for blog in _expect_list(payload, "brands"):
        if not isinstance(blog, dict):
            continue
        brand = pick(blog, BRAND_FIELDS)
        label = blog.get("label") or blog.get("title")
        if label is not None:
            brand["label"] = label
        brands.append(
            {key: brand[key] for key in ("id", "label", "title", "timezone") if key in brand}
        )
    return brands


def shape_timeline(payload: Any) -> list[dict[str, Any]]:
    """``[["20240101", "5"], ...]`` -> ``[{"date": "20240101", "value": 5}, ...]``."""
    points = []
    for entry in _expect_list(payload, "timeline points"):
        if not isinstance(entry, (list, tuple)) or len(entry) < 2:
            continue
        points.append({"date": str(entry[0]), "value": to_number(entry[1])})
    return points


def shape_values(payload: Any) -> dict[str, Any]:
    return _expect_object(payload, "category values")


def shape_posts(payload: Any) -> list[dict[str, Any]]:
    return [
        pick(post, POST_FIELDS)
        for post in _expect_list(payload, "posts")
        if isinstance(post, dict)
    ]


def shape_reports(payload: Any) -> list[dict[str, Any]]:
    envelope = _expect_object(payload, "report history")
    return [
        pick(item, REPORT_FIELDS)
        for item in _expect_list(envelope.get("data"), "reports")
        if isinstance(item, dict)
    ]


def shape_report_status(payload: Any) -> dict[str, Any]:
    """The job status document under ``data``, unchanged (empty when absent)."""
    envelope = _expect_object(payload, "report status")
    return dict(_expect_object(envelope.get("data"), "report status data"))
