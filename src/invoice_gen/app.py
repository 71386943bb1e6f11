from __future__ import annotations

from pathlib import Path
from typing import Any

from dash import ALL, Dash, Input, Output, State, ctx, dcc, no_update
from dash.exceptions import PreventUpdate

from invoice_gen import config
from invoice_gen.components import (
    build_invoice_results,
    build_item_row,
    build_item_rows,
    build_logo_preview,
    build_status,
    build_totals,
)
from invoice_gen.errors import InvoiceError, NotFoundError, StorageError, ValidationError
from invoice_gen.export import (
    backup_to_json,
    export_filename,
    parse_backup,
    to_csv,
    to_tabular,
    to_xlsx,
)
from invoice_gen.forms import (
    collect_items,
    company_from_form,
    decode_upload,
    draft_from_form,
    form_values,
    live_totals,
    next_row_index,
)
from invoice_gen.layout import SECTIONS, build_layout
from invoice_gen.lib import logs
from invoice_gen.models import (
    AppState,
    StatusMessage,
    new_draft,
    parse_logo_upload,
    validate_invoice,
)
from invoice_gen.printable import to_preview_markup, to_printable_markup
from invoice_gen.services import get_invoice_service
from invoice_gen.utils import calculate_due_date, format_currency, parse_lenient

"""Dash application entry point."""

LOG = logs.logger(__file__)

_service = get_invoice_service()
_assets_path = Path(__file__).resolve().parent / "assets"

app = Dash(__name__, title=config.APP_TITLE, assets_folder=str(_assets_path))
app.layout = lambda: build_layout(sync_visible=_service.sink_configured)

_FORM_FIELDS = [
    Output("invoice-number", "value", allow_duplicate=True),
    Output("invoice-date", "value", allow_duplicate=True),
    Output("due-date", "value", allow_duplicate=True),
    Output("customer-name", "value", allow_duplicate=True),
    Output("customer-address", "value", allow_duplicate=True),
    Output("customer-phone", "value", allow_duplicate=True),
    Output("tax-rate", "value", allow_duplicate=True),
    Output("items-container", "children", allow_duplicate=True),
    Output("form-title", "children", allow_duplicate=True),
    Output("invoice-state", "data", allow_duplicate=True),
]

_FORM_STATES = [
    State("invoice-number", "value"),
    State("invoice-date", "value"),
    State("due-date", "value"),
    State("customer-name", "value"),
    State("customer-address", "value"),
    State("customer-phone", "value"),
    State("tax-rate", "value"),
    State({"type": "item-description", "index": ALL}, "value"),
    State({"type": "item-quantity", "index": ALL}, "value"),
    State({"type": "item-price", "index": ALL}, "value"),
]

_STATUS = Output("status-store", "data", allow_duplicate=True)
_SECTION = Output("active-section", "data", allow_duplicate=True)
_VERSION = Output("data-version", "data", allow_duplicate=True)


def _form_outputs(draft: dict, title: str, state: AppState) -> list:
    """Return values for _FORM_FIELDS."""
    *fields, items = form_values(draft)
    return [*fields, build_item_rows(items), title, state.to_dict()]


def _unchanged_form() -> list:
    return [no_update] * len(_FORM_FIELDS)


def _form_draft(form: tuple) -> dict:
    """Build a draft from the values of _FORM_STATES."""
    *fields, descriptions, quantities, prices = form
    return draft_from_form(*fields, collect_items(descriptions, quantities, prices))


def _status(message: StatusMessage) -> dict:
    return message.to_dict()


def _mutation_status(text: str) -> dict:
    """Report a successful local write, warning when the sink forward failed."""
    outcome = _service.last_sink_outcome
    if outcome is not None and not outcome.ok:
        return _status(
            StatusMessage.warning(f"{text}, but the spreadsheet was not updated: {outcome.error}")
        )
    return _status(StatusMessage.success(text))


def _clicked() -> bool:
    """True when the triggering input carries a real click, not a re-render."""
    return bool(ctx.triggered and ctx.triggered[0].get("value"))


def _bump(version: int | None) -> int:
    return (version or 0) + 1


@app.callback(
    _SECTION,
    Input("nav-home", "n_clicks"),
    Input("nav-create", "n_clicks"),
    Input("nav-settings", "n_clicks"),
    prevent_initial_call=True,
)
def navigate(*_clicks: int | None) -> str:
    """Switch sections from the navigation bar."""
    return ctx.triggered_id.removeprefix("nav-")


@app.callback(
    [Output(f"{section}-section", "className") for section in SECTIONS]
    + [Output(f"nav-{section}", "className") for section in SECTIONS],
    Input("active-section", "data"),
)
def show_section(active: str | None) -> list[str]:
    active = active if active in SECTIONS else "home"
    sections = ["section active" if s == active else "section" for s in SECTIONS]
    links = ["nav-link active" if s == active else "nav-link" for s in SECTIONS]
    return sections + links


@app.callback(
    Output("results-container", "children"),
    Input("search-query", "value"),
    Input("data-version", "data"),
    Input("active-section", "data"),
)
def refresh_invoice_list(query: str | None, _version: int, _section: str) -> object:
    """Filter invoices whenever the query or the stored data changes."""
    invoices = _service.search_invoices(query)
    return build_invoice_results(invoices, query)


@app.callback(
    Output("sync-home-btn", "style"),
    Input("data-version", "data"),
    Input("active-section", "data"),
)
def show_home_sync(_version: int, _section: str) -> dict:
    return {} if _service.sink_configured else {"display": "none"}


@app.callback(Output("sync-settings-btn", "style"), Input("sink-url", "value"))
def show_settings_sync(url: str | None) -> dict:
    return {} if (url or "").strip() else {"display": "none"}


@app.callback(Output("status-banner", "children"), Input("status-store", "data"))
def render_status(data: dict | None) -> object:
    return build_status(StatusMessage.from_dict(data))


@app.callback(
    *_FORM_FIELDS,
    _SECTION,
    Output("loaded-date", "data", allow_duplicate=True),
    _STATUS,
    Input("create-new-btn", "n_clicks"),
    Input("cancel-btn", "n_clicks"),
    State("invoice-state", "data"),
    prevent_initial_call=True,
)
def reset_invoice_form(_new: int | None, _cancel: int | None, state_data: dict | None) -> list:
    """
    Reset the form to a blank draft with a freshly allocated number.

    The number is allocated here, so it is consumed even when the draft is
    never saved.
    """
    try:
        number = _service.next_invoice_number()
    except InvoiceError as exc:
        LOG.error("reset_invoice_form - failed: %s", exc)
        message = StatusMessage.error(f"A new invoice number could not be issued: {exc}")
        return [*_unchanged_form(), no_update, no_update, _status(message)]
    draft = new_draft(number).to_dict()
    state = AppState.from_dict(state_data).reset_form()
    section = "create" if ctx.triggered_id == "create-new-btn" else "home"
    LOG.info("reset_invoice_form - number:%s section:%s", number, section)
    return [*_form_outputs(draft, "New Invoice", state), section, None, no_update]


@app.callback(
    *_FORM_FIELDS,
    _SECTION,
    Output("loaded-date", "data", allow_duplicate=True),
    _STATUS,
    Input({"type": "edit-invoice", "index": ALL}, "n_clicks"),
    State("invoice-state", "data"),
    prevent_initial_call=True,
)
def open_invoice_for_edit(_clicks: list, state_data: dict | None) -> list:
    """Load a stored invoice into the form in edit mode."""
    if not _clicked():
        raise PreventUpdate
    number = ctx.triggered_id["index"]
    try:
        record = _service.require_invoice(number)
    except NotFoundError as exc:
        return [*_unchanged_form(), no_update, no_update, _status(StatusMessage.error(str(exc)))]

    state = AppState.from_dict(state_data).start_edit(number)
    LOG.info("open_invoice_for_edit - number:%s", number)
    return [
        *_form_outputs(record.to_dict(), f"Edit Invoice {number}", state),
        "create",
        record.date,
        None,
    ]


@app.callback(
    Output("due-date", "value", allow_duplicate=True),
    Output("loaded-date", "data", allow_duplicate=True),
    Input("invoice-date", "value"),
    State("loaded-date", "data"),
    prevent_initial_call=True,
)
def update_due_date(invoice_date: str | None, loaded_date: str | None) -> tuple:
    """Recompute the due date when the user changes the issue date."""
    if loaded_date is not None and invoice_date == loaded_date:
        # The date was set by loading a record; keep its stored due date.
        return no_update, None
    due = calculate_due_date(invoice_date or "")
    return (due if due else no_update), None


@app.callback(
    Output("items-container", "children", allow_duplicate=True),
    _STATUS,
    Input("add-item-btn", "n_clicks"),
    Input({"type": "remove-item", "index": ALL}, "n_clicks"),
    State({"type": "item-row", "index": ALL}, "id"),
    State({"type": "item-description", "index": ALL}, "value"),
    State({"type": "item-quantity", "index": ALL}, "value"),
    State({"type": "item-price", "index": ALL}, "value"),
    prevent_initial_call=True,
)
def edit_item_rows(
    _add: int | None,
    _remove: list,
    row_ids: list[dict],
    descriptions: list,
    quantities: list,
    prices: list,
) -> tuple:
    """Add a blank row or remove the clicked one, keeping at least one."""
    if not _clicked():
        raise PreventUpdate
    indexes = [row_id["index"] for row_id in row_ids]
    rows = list(zip(indexes, collect_items(descriptions, quantities, prices)))
    if ctx.triggered_id == "add-item-btn":
        rows.append((next_row_index(row_ids), None))
    else:
        if len(rows) <= 1:
            return no_update, _status(StatusMessage.warning("At least one item is required"))
        removed = ctx.triggered_id["index"]
        rows = [(index, item) for index, item in rows if index != removed]
    return [build_item_row(index, item) for index, item in rows], no_update


@app.callback(
    Output({"type": "item-amount", "index": ALL}, "children"),
    Output("totals-container", "children"),
    Input({"type": "item-quantity", "index": ALL}, "value"),
    Input({"type": "item-price", "index": ALL}, "value"),
    Input("tax-rate", "value"),
)
def update_totals(quantities: list, prices: list, tax_rate: Any) -> tuple:
    """Keep row amounts and totals in step with the inputs."""
    amounts, totals = live_totals(quantities, prices, tax_rate)
    return [format_currency(amount) for amount in amounts], build_totals(
        totals, parse_lenient(tax_rate)
    )


@app.callback(
    *_FORM_FIELDS,
    _SECTION,
    _VERSION,
    _STATUS,
    Input("save-btn", "n_clicks"),
    *_FORM_STATES,
    State("invoice-state", "data"),
    State("data-version", "data"),
    prevent_initial_call=True,
)
def save_invoice(_clicks: int | None, *args: Any) -> list:
    """Validate and persist the form, then return home with a fresh form."""
    *form, state_data, version = args
    state = AppState.from_dict(state_data)
    try:
        saved = _service.save_invoice(_form_draft(tuple(form)))
    except ValidationError as exc:
        return [*_unchanged_form(), no_update, no_update, _status(StatusMessage.error(str(exc)))]
    except StorageError as exc:
        LOG.error("save_invoice - failed: %s", exc)
        message = StatusMessage.error(f"The invoice could not be saved: {exc}")
        return [*_unchanged_form(), no_update, no_update, _status(message)]

    verb = "updated" if state.edit_mode else "saved"
    status = _mutation_status(f"Invoice {saved.invoice_number} {verb}")
    try:
        draft = new_draft(_service.next_invoice_number()).to_dict()
    except InvoiceError as exc:
        LOG.error("save_invoice - numbering failed: %s", exc)
        message = StatusMessage.warning(
            f"Invoice {saved.invoice_number} {verb}, but no new number could be issued: {exc}"
        )
        return [*_unchanged_form(), "home", _bump(version), _status(message)]
    return [
        *_form_outputs(draft, "New Invoice", state.reset_form()),
        "home",
        _bump(version),
        status,
    ]


@app.callback(
    _VERSION,
    _STATUS,
    Input({"type": "delete-invoice", "index": ALL}, "submit_n_clicks"),
    State("data-version", "data"),
    prevent_initial_call=True,
)
def delete_invoice(_clicks: list, version: int | None) -> tuple:
    """Delete the confirmed invoice."""
    if not _clicked():
        raise PreventUpdate
    number = ctx.triggered_id["index"]
    try:
        removed = _service.delete_invoice(number)
    except StorageError as exc:
        return no_update, _status(StatusMessage.error(f"The invoice could not be deleted: {exc}"))
    if not removed:
        return _bump(version), _status(StatusMessage.warning(f"Invoice {number} was not found"))
    return _bump(version), _mutation_status(f"Invoice {number} deleted")


@app.callback(
    Output("preview-frame", "srcDoc"),
    Output("preview-modal", "className", allow_duplicate=True),
    Output("preview-draft", "data"),
    _STATUS,
    Input("preview-btn", "n_clicks"),
    *_FORM_STATES,
    prevent_initial_call=True,
)
def show_preview(_clicks: int | None, *form: Any) -> tuple:
    """Render the current form in the preview dialog."""
    draft = _form_draft(form)
    try:
        record = validate_invoice(draft)
    except ValidationError as exc:
        return no_update, no_update, no_update, _status(StatusMessage.error(str(exc)))
    company = _service.load_company_info()
    document = (
        '<!DOCTYPE html><html><head><meta charset="UTF-8">'
        f'<link rel="stylesheet" href="{app.get_asset_url("preview.css")}">'
        f"</head><body>{to_preview_markup(record, company)}</body></html>"
    )
    return document, "modal", draft, no_update


@app.callback(
    Output("preview-modal", "className", allow_duplicate=True),
    Input("preview-close-btn", "n_clicks"),
    prevent_initial_call=True,
)
def close_preview(_clicks: int | None) -> str:
    return "modal hidden"


@app.callback(
    Output("print-document", "data"),
    _STATUS,
    Input({"type": "print-invoice", "index": ALL}, "n_clicks"),
    Input("preview-print-btn", "n_clicks"),
    State("preview-draft", "data"),
    prevent_initial_call=True,
)
def print_invoice(_cards: list, _preview: int | None, preview_draft: dict | None) -> tuple:
    """Prepare the printable document for a stored invoice or the previewed draft."""
    if not _clicked():
        raise PreventUpdate
    try:
        if ctx.triggered_id == "preview-print-btn":
            record = validate_invoice(preview_draft or {})
        else:
            record = _service.require_invoice(ctx.triggered_id["index"])
    except InvoiceError as exc:
        return no_update, _status(StatusMessage.error(str(exc)))
    markup = to_printable_markup(record, _service.load_company_info())
    LOG.info("print_invoice - number:%s", record.invoice_number)
    return {"html": markup, "number": record.invoice_number}, no_update


# Opens the printable document in a new window; its own script starts printing.
app.clientside_callback(
    """
    function (doc) {
        if (!doc || !doc.html) {
            return window.dash_clientside.no_update;
        }
        var win = window.open('', '_blank');
        if (!win) {
            return 'Allow pop-ups for this page to print invoices.';
        }
        win.document.open();
        win.document.write(doc.html);
        win.document.close();
        return '';
    }
    """,
    Output("print-status", "children"),
    Input("print-document", "data"),
)


@app.callback(
    Output("download-file", "data"),
    _STATUS,
    Input("export-excel-btn", "n_clicks"),
    Input("export-csv-btn", "n_clicks"),
    Input("export-backup-btn", "n_clicks"),
    prevent_initial_call=True,
)
def export_invoices(*_clicks: int | None) -> tuple:
    """Download the invoice list as Excel or CSV, or everything as a JSON backup."""
    trigger = ctx.triggered_id
    if trigger == "export-backup-btn":
        content = backup_to_json(_service.export_all_data())
        return dcc.send_string(content, export_filename("invoice_backup", "json")), no_update

    invoices = _service.list_invoices()
    if not invoices:
        return no_update, _status(StatusMessage.warning("There are no invoices to export"))
    tabular = to_tabular(invoices)
    LOG.info("export_invoices - kind:%s count:%s", trigger, len(invoices))
    if trigger == "export-excel-btn":
        return dcc.send_bytes(to_xlsx(tabular), export_filename("invoices", "xlsx")), no_update
    csv_text = to_csv(tabular.invoice_sheet)
    return dcc.send_string(csv_text, export_filename("invoices", "csv")), no_update


@app.callback(
    _VERSION,
    _STATUS,
    Output("backup-upload", "contents"),
    Input("backup-upload", "contents"),
    State("data-version", "data"),
    prevent_initial_call=True,
)
def restore_backup(contents: str | None, version: int | None) -> tuple:
    """Replace local data with an uploaded backup file."""
    if not contents:
        raise PreventUpdate
    try:
        data = parse_backup(decode_upload(contents))
    except ValidationError as exc:
        return no_update, _status(StatusMessage.error(str(exc))), None
    if not _service.import_all_data(data):
        return no_update, _status(StatusMessage.error("The backup could not be restored")), None
    return _bump(version), _status(StatusMessage.success("Backup restored")), None


@app.callback(
    Output("company-name", "value"),
    Output("company-address", "value"),
    Output("company-phone", "value"),
    Output("company-email", "value"),
    Output("bank-name", "value"),
    Output("bank-branch", "value"),
    Output("bank-account-number", "value"),
    Output("bank-account-name", "value"),
    Output("logo-store", "data", allow_duplicate=True),
    Output("sink-url", "value"),
    Input("active-section", "data"),
    Input("data-version", "data"),
    prevent_initial_call=True,
)
def load_settings(active: str | None, _version: int) -> tuple:
    """Fill the settings form from storage whenever it is shown."""
    if active != "settings":
        raise PreventUpdate
    info = _service.load_company_info()
    return (
        info.name,
        info.address,
        info.phone,
        info.email,
        info.bank.name,
        info.bank.branch,
        info.bank.account_number,
        info.bank.account_name,
        info.logo,
        _service.get_sink_url(),
    )


@app.callback(
    Output("logo-store", "data", allow_duplicate=True),
    Output("logo-upload", "contents"),
    _STATUS,
    Input("logo-upload", "contents"),
    Input("logo-remove-btn", "n_clicks"),
    prevent_initial_call=True,
)
def change_logo(contents: str | None, _remove: int | None) -> tuple:
    """Stage an uploaded logo, or clear it. Saved with the settings."""
    if ctx.triggered_id == "logo-remove-btn":
        return "", None, no_update
    if not contents:
        raise PreventUpdate
    try:
        return parse_logo_upload(contents), None, no_update
    except ValidationError as exc:
        return no_update, None, _status(StatusMessage.error(str(exc)))


@app.callback(Output("logo-preview", "children"), Input("logo-store", "data"))
def render_logo(logo: str | None) -> list:
    return build_logo_preview(logo or "")


@app.callback(
    _VERSION,
    _STATUS,
    Input("save-settings-btn", "n_clicks"),
    State("company-name", "value"),
    State("company-address", "value"),
    State("company-phone", "value"),
    State("company-email", "value"),
    State("logo-store", "data"),
    State("bank-name", "value"),
    State("bank-branch", "value"),
    State("bank-account-number", "value"),
    State("bank-account-name", "value"),
    State("sink-url", "value"),
    State("data-version", "data"),
    prevent_initial_call=True,
)
def save_settings(_clicks: int | None, *args: Any) -> tuple:
    """Persist the sink URL first so the company info forward uses it."""
    *company_fields, sink_url, version = args
    try:
        _service.set_sink_url(sink_url or "")
        _service.save_company_info(company_from_form(*company_fields))
    except InvoiceError as exc:
        LOG.error("save_settings - failed: %s", exc)
        return no_update, _status(StatusMessage.error(f"Settings could not be saved: {exc}"))
    return _bump(version), _mutation_status("Settings saved")


@app.callback(
    _STATUS,
    Input("sync-home-btn", "n_clicks"),
    Input("sync-settings-btn", "n_clicks"),
    prevent_initial_call=True,
)
def sync_to_spreadsheet(*_clicks: int | None) -> dict:
    """Send the company info and every invoice to the configured sink."""
    if not _service.sink_configured:
        return _status(
            StatusMessage.warning("No spreadsheet URL is set. Enter one under Settings.")
        )
    report = _service.sync_all()
    if report.failure:
        failed = ", ".join(report.failed_numbers)
        return _status(StatusMessage.warning(f"{report.summary()} ({failed})"))
    if report.skipped:
        return _status(StatusMessage.warning(report.summary()))
    return _status(StatusMessage.success(report.summary()))


@app.callback(
    _VERSION,
    _STATUS,
    Input("clear-data-confirm", "submit_n_clicks"),
    State("data-version", "data"),
    prevent_initial_call=True,
)
def clear_all_data(_clicks: int | None, version: int | None) -> tuple:
    try:
        _service.clear_all_data()
    except InvoiceError as exc:
        LOG.error("clear_all_data - failed: %s", exc)
        return _bump(version), _status(StatusMessage.error(f"Data could not be cleared: {exc}"))
    return _bump(version), _status(StatusMessage.success("All invoices and company data cleared"))


def main() -> None:
    """Entrypoint used via `invoice-gen`."""
    app.run(debug=config.APP_DEBUG, host="0.0.0.0", port=config.APP_PORT)


if __name__ == "__main__":
    main()
