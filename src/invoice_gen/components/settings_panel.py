from dash import dcc, html
from dash_iconify import DashIconify

from invoice_gen import config

"""Company settings and spreadsheet sync panel."""


def _text_field(label: str, field_id: str, input_type: str = "text") -> html.Label:
    return html.Label(
        className="field",
        children=[
            html.Span(label, className="field-label"),
            dcc.Input(id=field_id, type=input_type, value=""),
        ],
    )


def build_logo_preview(logo: str) -> list:
    """Return the logo thumbnail, or a placeholder when no logo is set."""
    if not logo:
        return [html.Span("No logo", className="muted")]
    return [html.Img(src=logo, className="logo-preview", alt="Logo")]


def build_settings_panel() -> html.Div:
    """Return the settings form. Values are loaded when the tab opens."""
    limit_mb = config.LOGO_MAX_BYTES / (1024 * 1024)
    return html.Div(
        className="stack",
        children=[
            html.Div(
                className="card",
                children=[
                    html.H2("Company Information"),
                    html.Div(
                        className="form-grid",
                        children=[
                            _text_field("Company Name", "company-name"),
                            _text_field("Address", "company-address"),
                            _text_field("Phone", "company-phone", "tel"),
                            _text_field("Email", "company-email", "email"),
                        ],
                    ),
                    html.Div(
                        className="logo-field",
                        children=[
                            html.Span("Logo", className="field-label"),
                            html.Div(id="logo-preview", className="logo-slot"),
                            dcc.Upload(
                                id="logo-upload",
                                accept="image/*",
                                className="upload",
                                children=html.Span(
                                    f"Drop an image or click to upload ({limit_mb:g}MB max)"
                                ),
                            ),
                            html.Button(
                                id="logo-remove-btn",
                                className="button secondary",
                                children="Remove logo",
                            ),
                        ],
                    ),
                    html.H3("Bank Account"),
                    html.Div(
                        className="form-grid",
                        children=[
                            _text_field("Bank Name", "bank-name"),
                            _text_field("Branch", "bank-branch"),
                            _text_field("Account Number", "bank-account-number"),
                            _text_field("Account Name", "bank-account-name"),
                        ],
                    ),
                ],
            ),
            html.Div(
                className="card",
                children=[
                    html.H2("Spreadsheet Sync"),
                    html.P(
                        "Saved invoices are sent to this web app URL. Leave empty to keep "
                        "data on this machine only.",
                        className="muted",
                    ),
                    _text_field("Web App URL", "sink-url", "url"),
                    html.Button(
                        id="sync-settings-btn",
                        className="button secondary gap",
                        style={"display": "none"},
                        children=[DashIconify(icon="lucide:cloud-upload"), "Sync All Invoices"],
                    ),
                ],
            ),
            html.Div(
                className="form-actions",
                children=[
                    html.Button(
                        id="save-settings-btn",
                        className="button primary gap",
                        children=[DashIconify(icon="lucide:save"), "Save Settings"],
                    ),
                    dcc.ConfirmDialogProvider(
                        id="clear-data-confirm",
                        message="Delete every invoice and the company information?",
                        children=html.Button(
                            className="button danger gap",
                            children=[DashIconify(icon="lucide:trash-2"), "Clear All Data"],
                        ),
                    ),
                ],
            ),
        ],
    )
