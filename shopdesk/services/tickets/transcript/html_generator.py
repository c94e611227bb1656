"""
Ticket HTML Transcript Generator
================================

Renders a static HTML transcript from collected messages.

DESIGN:
    The output depends only on its inputs: timestamps are converted to
    America/New_York and no generation time is embedded, so rendering the
    same messages twice yields identical bytes.

Author: حَـــــنَّـــــا
"""

import html as html_lib
import io
from datetime import datetime, timezone
from typing import Sequence

import discord

from shopdesk.core.config import NY_TZ
from shopdesk.core.logger import logger
from ..models import TranscriptDocument, TranscriptMessage


# =============================================================================
# CSS Styles
# =============================================================================

TRANSCRIPT_CSS = '''
body {
    font-family: 'Inter', -apple-system, BlinkMacSystemFont, 'Segoe UI', sans-serif;
    background: #0a0a0a;
    color: #e4e4e7;
    margin: 0;
    padding: 24px;
}
h1 {
    font-size: 20px;
    border-bottom: 1px solid #27272a;
    padding-bottom: 12px;
}
.msg {
    padding: 10px 0;
    border-bottom: 1px solid #18181b;
}
.auth {
    font-weight: 600;
    color: #e6b84a;
}
.time {
    font-size: 12px;
    color: #71717a;
}
.content {
    margin-top: 4px;
    white-space: pre-wrap;
    word-wrap: break-word;
}
.attachments a {
    display: block;
    color: #60a5fa;
    font-size: 13px;
}
'''

TIMESTAMP_FORMAT = "%b %d, %Y %I:%M %p %Z"


# =============================================================================
# HTML Generation
# =============================================================================

def transcript_filename(channel_name: str) -> str:
    """File name used for every copy of a transcript."""
    return f"transcript-{channel_name}.html"


def format_timestamp(value: datetime) -> str:
    """Render a message time in Eastern time. Naive values are taken as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(NY_TZ).strftime(TIMESTAMP_FORMAT)


def _render_attachments(attachments: Sequence[str]) -> str:
    if not attachments:
        return ""
    links = "".join(
        f'<a href="{html_lib.escape(url, quote=True)}">{html_lib.escape(url)}</a>'
        for url in attachments
    )
    return f'<div class="attachments">{links}</div>'


def _render_message(message: TranscriptMessage) -> str:
    return (
        '<div class="msg">'
        f'<div class="auth">{html_lib.escape(message.author_tag)}</div>'
        f'<div class="time">{format_timestamp(message.created_at)}</div>'
        f'<div class="content">{html_lib.escape(message.content)}</div>'
        f'{_render_attachments(message.attachments)}'
        '</div>'
    )


def generate_html_transcript(channel_name: str, messages: Sequence[TranscriptMessage]) -> str:
    """
    Build the transcript HTML.

    Args:
        channel_name: Ticket channel name, shown in the header.
        messages: Messages in chronological order.

    Returns:
        HTML string of the transcript.
    """
    title = html_lib.escape(f"Transcript of #{channel_name}")
    body = "\n".join(_render_message(m) for m in messages)

    return f'''<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<title>{title}</title>
<style>{TRANSCRIPT_CSS}</style>
</head>
<body>
<h1>{title}</h1>
{body}
</body>
</html>
'''


def render_transcript(channel_name: str, messages: Sequence[TranscriptMessage]) -> TranscriptDocument:
    """Render messages into a UTF-8 transcript document."""
    data = generate_html_transcript(channel_name, messages).encode("utf-8")

    logger.debug("HTML Transcript Generated", [
        ("Channel", channel_name),
        ("Messages", str(len(messages))),
        ("Size", f"{len(data) / 1024:.1f} KB"),
    ])

    return TranscriptDocument(filename=transcript_filename(channel_name), data=data)


def create_transcript_file(document: TranscriptDocument) -> discord.File:
    """Create a fresh Discord file object for one upload."""
    return discord.File(io.BytesIO(document.data), filename=document.filename)


__all__ = [
    "TRANSCRIPT_CSS",
    "transcript_filename",
    "format_timestamp",
    "generate_html_transcript",
    "render_transcript",
    "create_transcript_file",
]
