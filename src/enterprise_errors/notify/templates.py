from datetime import UTC, datetime
from html import escape
from typing import Any

from enterprise_errors.core.encoding import to_json
from enterprise_errors.core.error import StructuredError
from enterprise_errors.core.fields import read_field

_CELL = "border:1px solid #ccc; padding:8px;"
_LABEL_CELL = "border:1px solid #ccc; padding:8px; width:180px;"
_TABLE = "border-collapse:collapse; width:100%; table-layout:fixed;"
_BLOCK = (
    "border:1px solid #ccc; padding:5px; background:#fafafa; font-size:12px; "
    "font-family:Consolas, monospace; word-wrap:break-word; white-space:pre-wrap;"
)


def _text(value: Any) -> str:
    return escape("" if value is None else str(value))


def _rows(pairs: list[tuple[str, Any]]) -> str:
    rows = []
    for i, (label, value) in enumerate(pairs):
        label_style = _LABEL_CELL if i == 0 else _CELL
        rows.append(
            f'<tr><td style="{label_style}"><strong>{label}</strong></td>'
            f'<td style="{_CELL} overflow-wrap:break-word;">{_text(value)}</td></tr>'
        )
    return "\n".join(rows)


def _block(title: str, content: str) -> str:
    return f'<h3 style="margin-top:20px;">{title}</h3>\n<div style="{_BLOCK}">{escape(content)}</div>'


def build_error_email_body(
    env: str,
    error: StructuredError,
    internal: dict[str, Any] | None = None,
    *,
    now: datetime | None = None,
) -> str:
    """Render an HTML alert for ``error`` with inline styles only.

    Mail clients strip stylesheets, so every element carries its own style
    attribute. All interpolated values are HTML-escaped.
    """
    meta = internal if internal is not None else error.internal
    timestamp = (now or datetime.now(UTC)).isoformat()

    summary = _rows(
        [
            ("Message", error.message),
            ("Status", error.status),
            ("Error Code", error.code),
            ("Target", error.target),
            ("Module", error.module),
        ]
    )
    request_meta = _rows(
        [
            ("URL", meta.get("url")),
            ("Method", meta.get("method")),
            ("Event", meta.get("event")),
            ("User", read_field(meta.get("user"), "id")),
        ]
    )
    details = [d.model_dump() for d in error.details or []]

    return f"""<div style="font-family:Arial; padding:16px; border:1px solid #e0e0e0; border-radius:6px;">
<p style="margin-top:16px; font-size:16px;">Timestamp: <strong>{_text(timestamp)}</strong></p>
<h2 style="color:#b00020; margin-bottom:6px;">Exception Alert</h2>
<p>An exception occurred in the <strong>{_text(env)}</strong> environment.</p>
<h3 style="margin-top:20px;">Error Summary</h3>
<table style="{_TABLE} font-size:14px;">
{summary}
</table>
<h3 style="margin-top:20px;">Request Metadata</h3>
<table style="{_TABLE} font-size:12px;">
{request_meta}
</table>
{_block("Error Details", to_json(details, indent=2))}
{_block("Internal Metadata", to_json(meta, indent=2))}
{_block("Stack Trace", error.stack or "")}
</div>"""
