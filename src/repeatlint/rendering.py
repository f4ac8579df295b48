from __future__ import annotations

import html
import re
from typing import List, Sequence

from .models import Span

BODY_OPEN = '<div class="novel-body">'
BODY_CLOSE = "</div>"

# Escaped text never contains "<", so every tag in the markup is ours.
MARKER_RE = re.compile(r"</?(?:span|div)\b[^>]*>")

PAGE_TEMPLATE = """<!DOCTYPE html>
<html lang="ja">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>{title}</title>
    <style>
        body {{
            color: #ddd;
            background-color: #333;
            font-size: 16px;
            line-height: 28px;
            max-width: 584px; /* 16px * 35 + 12px * 2 */
            margin-left: auto;
            margin-right: auto;
        }}
        .novel-body {{
            white-space: pre-wrap;
            line-break: strict;
            padding-left: 12px;
            padding-right: 12px;
            font-family: '游明朝', YuMincho, 'Hiragino Mincho ProN', 'HG明朝B', serif;
        }}
        .{highlight_class} {{
            background-color: #933;
        }}
        .{highlight_class}[data-severity="info"] {{
            background-color: #554;
        }}
        .{highlight_class}[data-severity="error"] {{
            background-color: #b22;
        }}
    </style>
</head>
<body>
{body}
</body>
</html>
"""


def escape_text(value: str) -> str:
    """Escape markup-significant characters; whitespace is left untouched."""
    return html.escape(value, quote=True)


def render(text: str, spans: Sequence[Span], highlight_class: str = "alert") -> str:
    """
    Render ``text`` as escaped HTML with each span wrapped in a marker.

    ``spans`` must be sorted, disjoint and inside the text (the output of
    :func:`repeatlint.merging.merge`); anything else raises ValueError.
    """
    parts: List[str] = []
    cursor = 0
    for span in spans:
        if span.start_char < cursor or span.end_char <= span.start_char:
            raise ValueError(
                f"Spans must be sorted and disjoint; got [{span.start_char}, "
                f"{span.end_char}) after offset {cursor}."
            )
        if span.end_char > len(text):
            raise ValueError(
                f"Span [{span.start_char}, {span.end_char}) exceeds text length {len(text)}."
            )
        parts.append(escape_text(text[cursor : span.start_char]))
        parts.append(_open_marker(span, highlight_class))
        parts.append(escape_text(text[span.start_char : span.end_char]))
        parts.append("</span>")
        cursor = span.end_char
    parts.append(escape_text(text[cursor:]))
    return "".join(parts)


def strip_markers(markup: str) -> str:
    """Remove highlight markers and undo escaping, recovering the input text."""
    return html.unescape(MARKER_RE.sub("", markup))


def wrap_body(markup: str) -> str:
    return f"{BODY_OPEN}{markup}{BODY_CLOSE}"


def render_page(
    markup: str, title: str = "repeatlint", highlight_class: str = "alert"
) -> str:
    """Embed a rendered fragment in a standalone HTML page."""
    return PAGE_TEMPLATE.format(
        title=escape_text(title),
        highlight_class=highlight_class,
        body=wrap_body(markup),
    )


def _open_marker(span: Span, highlight_class: str) -> str:
    names = [category.value for category in span.sorted_categories()]
    classes = " ".join([highlight_class, *names]) if highlight_class else " ".join(names)
    return (
        f'<span class="{escape_text(classes)}" '
        f'data-severity="{span.severity.label}" '
        f'title="{escape_text(", ".join(names))}">'
    )
