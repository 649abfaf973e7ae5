"""
HTML rendering of verification log entries for the front end.

File names and error messages come straight from uploads, so every
user-supplied field is escaped before it reaches the page.
"""

import html

from fintrust.models.record import VerificationEvent


OK_CSS_CLASS = "ok-box"
ERROR_CSS_CLASS = "err-box"


def event_html(event: VerificationEvent) -> str:
    """Render one log entry as a styled, escaped HTML block."""
    if event.ok:
        detail = f"OK, signature {(event.signature or '')[:12]}..."
        css = OK_CSS_CLASS
    else:
        detail = f"ERR {event.error or 'signature mismatch'}"
        css = ERROR_CSS_CLASS

    return (
        f'<div class="{css}">'
        f"<strong>{html.escape(event.file)}</strong> · "
        f"{event.time.strftime('%d %b %Y %H:%M:%S')}<br/>"
        f"{html.escape(detail)}"
        f"</div>"
    )
