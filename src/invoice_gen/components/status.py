from dash import html
from dash_iconify import DashIconify

from invoice_gen.models.common import StatusMessage

_ICONS = {
    "success": "lucide:circle-check",
    "warning": "lucide:triangle-alert",
    "error": "lucide:circle-x",
}


def build_status(message: StatusMessage | None) -> html.Div | None:
    """Return the alert banner for a status message, or None to clear it."""
    if message is None:
        return None
    return html.Div(
        className=f"alert alert-{message.level}",
        role="alert",
        children=[
            DashIconify(icon=_ICONS.get(message.level, _ICONS["success"]), className="alert-icon"),
            html.Span(message.text),
        ],
    )
