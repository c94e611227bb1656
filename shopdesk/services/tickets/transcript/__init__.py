"""
Ticket Transcript Package
=========================

History collection and HTML rendering for closed tickets.

Author: حَـــــنَّـــــا
"""

from .collectors import fetch_all_messages
from .html_generator import (
    generate_html_transcript,
    render_transcript,
    create_transcript_file,
    format_timestamp,
    transcript_filename,
)

__all__ = [
    "fetch_all_messages",
    "generate_html_transcript",
    "render_transcript",
    "create_transcript_file",
    "format_timestamp",
    "transcript_filename",
]
