"""Report tools: report history and single report job status.

Both endpoints are brand-scoped in the path, so a brand id must be resolvable
from the call arguments or the configured default.
"""

from __future__ import annotations

from typing import Any

from ..catalog import LIST_REPORTS, REPORT_STATUS
from ..client import MetricoolClient, quote_segment
from ..dispatcher import tool_handler
from ..shaping import shape_report_status, shape_reports
from .arguments import require_blog_id, required_str


@tool_handler(LIST_REPORTS)
async def list_reports(client: MetricoolClient, arguments: dict[str, Any]) -> list[dict[str, Any]]:
    blog_id = require_blog_id(client, arguments, "reports")
    response = await client.get(
        f"/v2/brands/{quote_segment(blog_id)}/reports",
        blog_id=blog_id,
    )
    return shape_reports(response)


@tool_handler(REPORT_STATUS)
async def report_status(client: MetricoolClient, arguments: dict[str, Any]) -> dict[str, Any]:
    # jobId is validated first so a missing job id is reported even without a brand.
    job_id = required_str(arguments, "jobId")
    blog_id = require_blog_id(client, arguments, "report status")
    response = await client.get(
        f"/v2/brands/{quote_segment(blog_id)}/reports/{quote_segment(job_id)}",
        blog_id=blog_id,
    )
    return shape_report_status(response)
