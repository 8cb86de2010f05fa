"""Render trend payloads and summaries as JSON, Markdown or styled HTML."""

from __future__ import annotations

import re

import markdown
from pydantic import BaseModel

from growthlens.models import MetricsSummary, TrendsPayload

_HTML_TEMPLATE = """\
<!DOCTYPE html>
<html lang="en">
<head><meta charset="utf-8"><title>{title}</title></head>
<body style="margin:0; padding:0; background-color:#f6f6f6;">
<div style="max-width:760px; margin:24px auto; background:#ffffff;
            border-radius:8px; border:1px solid #e0e0e0; padding:32px 28px;
            font-family:-apple-system,BlinkMacSystemFont,'Segoe UI',Roboto,
            Helvetica,Arial,sans-serif; font-size:15px; line-height:1.6;
            color:#1a1a1a;">
{body}
</div>
</body>
</html>
"""

# Inline styles injected after the markdown→HTML conversion
_STYLE_OVERRIDES = {
    "h1": (
        "font-size:22px; font-weight:700; margin:0 0 8px 0; "
        "color:#111; border-bottom:2px solid #0d6efd; padding-bottom:8px;"
    ),
    "h2": "font-size:18px; font-weight:600; margin:24px 0 8px 0; color:#222;",
    "table": "border-collapse:collapse; width:100%; margin:12px 0;",
    "th": "text-align:left; padding:6px 8px; border-bottom:2px solid #ddd;",
    "td": "padding:6px 8px; border-bottom:1px solid #eee;",
    "ul": "padding-left:20px; margin:8px 0;",
    "li": "margin-bottom:6px;",
    "p": "margin:8px 0;",
    "strong": "color:#111;",
}

_ARROWS = {"up": "▲", "down": "▼", "stable": "▬"}


def to_json(model: BaseModel, indent: int | None = 2) -> str:
    """Serialise an output model using its wire (alias) field names."""
    return model.model_dump_json(by_alias=True, indent=indent)


def _signed(value: float) -> str:
    return f"{value:+.2f}%"


def trends_markdown(payload: TrendsPayload) -> str:
    """Markdown report: summary bullets followed by one table row per period."""
    s = payload.summary
    lines = [
        f"# {payload.period.capitalize()} trends — {payload.platform}",
        "",
    ]
    if not payload.data:
        lines.append("_No metrics recorded for this selection._")
        return "\n".join(lines) + "\n"

    lines += [
        f"- **Average followers:** {s.avg_followers:,}",
        f"- **Average engagement:** {s.avg_engagement:.2f}%",
        f"- **Latest change:** {_signed(s.total_growth)}",
        f"- **Best period:** {s.best_period}",
        f"- **Lowest period:** {s.lowest_period}",
        "",
        "| Period | Followers | Engagement | Reach | Impressions "
        "| Likes | Comments | Shares | Change |",
        "|---|---|---|---|---|---|---|---|---|",
    ]
    for b in payload.data:
        lines.append(
            f"| {b.period_key} | {b.followers:,} | {b.engagement_rate:.2f}% "
            f"| {b.reach:,} | {b.impressions:,} | {b.likes:,} | {b.comments:,} "
            f"| {b.shares:,} | {_signed(b.change_percent)} |"
        )
    return "\n".join(lines) + "\n"


def summary_markdown(summary: MetricsSummary) -> str:
    trend = summary.growth_trend
    lines = [
        "# Metrics summary",
        "",
        f"- **Total followers:** {summary.total_followers:,}",
        f"- **Average engagement:** {summary.average_engagement:.2f}%",
        f"- **Total reach:** {summary.total_reach:,}",
        f"- **Total impressions:** {summary.total_impressions:,}",
        f"- **Growth:** {_ARROWS[trend.direction]} {trend.direction} "
        f"({_signed(trend.percentage)})",
    ]
    if summary.total_followers_by_platform:
        lines += ["", "## Followers by platform", ""]
        for platform, followers in sorted(summary.total_followers_by_platform.items()):
            lines.append(f"- {platform}: {followers:,}")
    return "\n".join(lines) + "\n"


def markdown_to_html(md_text: str, title: str = "growthlens report") -> str:
    """Convert Markdown to a standalone HTML page with inline styles."""
    html = markdown.markdown(md_text, extensions=["tables"], output_format="html")
    for tag, style in _STYLE_OVERRIDES.items():
        html = re.sub(rf"<{tag}(?=[\s>])", f'<{tag} style="{style}"', html)
    return _HTML_TEMPLATE.format(title=title, body=html)
