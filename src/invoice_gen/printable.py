"""
Printable invoice documents.

to_printable_markup() returns a standalone A4 HTML page that the browser
prints (or saves as PDF). to_preview_markup() returns the fragment shown in
the on-screen preview. Both are pure functions of (record, company info);
every user-entered value is HTML-escaped.
"""

from html import escape
from typing import List

from invoice_gen import config
from invoice_gen.models.company import CompanyInfo
from invoice_gen.models.invoice import InvoiceRecord
from invoice_gen.utils import format_amount, format_currency

_PRINT_CSS = """
@page { size: A4; margin: 20mm; }
body { font-family: 'Hiragino Sans', 'Meiryo', 'Helvetica Neue', sans-serif;
       font-size: 12px; line-height: 1.6; color: #333; margin: 0; padding: 20px; }
.invoice-container { max-width: 800px; margin: 0 auto; }
.header { margin-bottom: 30px; }
.header img { max-width: 150px; max-height: 60px; margin-bottom: 10px; }
.company-info { font-size: 11px; line-height: 1.5; }
.company-info strong { font-size: 13px; }
h1 { text-align: center; font-size: 28px; margin: 30px 0; padding-bottom: 10px;
     border-bottom: 3px solid #333; }
.info-section { display: flex; justify-content: space-between; margin-bottom: 30px; }
.info-box { width: 48%; background-color: #f5f5f5; padding: 15px; border-radius: 5px; }
.info-box h3 { margin: 0 0 10px 0; font-size: 14px; border-bottom: 2px solid #666;
               padding-bottom: 5px; }
.info-right { text-align: right; }
.info-right div { margin-bottom: 8px; }
table { width: 100%; border-collapse: collapse; margin-bottom: 20px; }
thead { background-color: #333; color: white; }
th, td { padding: 12px; border: 1px solid #333; text-align: left; }
tbody td { border-color: #ddd; }
.text-center { text-align: center; }
.text-right { text-align: right; }
.totals-section { margin-left: auto; width: 300px; margin-top: 20px; }
.totals-table td { padding: 8px; border: 1px solid #ddd; }
.total-row { background-color: #333; color: white; font-weight: bold; font-size: 16px; }
.bank-info { margin-top: 40px; padding: 15px; background-color: #f9f9f9;
             border-left: 4px solid #333; }
.bank-info h3 { margin: 0 0 10px 0; font-size: 14px; }
@media print { body { padding: 0; } .no-print { display: none; } }
"""

# Waits for the logo (bounded by a timeout) before opening the print dialog.
_PRINT_SCRIPT = """
window.addEventListener('load', function () {
  var img = document.querySelector('.header img');
  var printed = false;
  function go() { if (!printed) { printed = true; window.print(); } }
  if (!img || img.complete) { go(); return; }
  img.addEventListener('load', go);
  img.addEventListener('error', go);
  setTimeout(go, %d);
});
"""


def _company_header(company: CompanyInfo) -> List[str]:
    parts = ['<div class="header">']
    if company.logo:
        parts.append(f'<img src="{escape(company.logo)}" alt="Logo">')
    parts.append('<div class="company-info">')
    parts.append(f"<strong>{escape(company.name)}</strong><br>")
    if company.address:
        parts.append(f"{escape(company.address)}<br>")
    if company.phone:
        parts.append(f"TEL: {escape(company.phone)}<br>")
    if company.email:
        parts.append(f"Email: {escape(company.email)}")
    parts.append("</div></div>")
    return parts


def _items_table(record: InvoiceRecord, css_class: str) -> List[str]:
    parts = [
        f'<table class="{css_class}">',
        "<thead><tr><th>Item</th><th>Quantity</th><th>Unit Price</th>"
        "<th>Amount</th></tr></thead>",
        "<tbody>",
    ]
    for item in record.items:
        parts.append(
            "<tr>"
            f"<td>{escape(item.description)}</td>"
            f'<td class="text-center">{format_amount(item.quantity)}</td>'
            f'<td class="text-right">{escape(format_currency(item.unit_price))}</td>'
            f'<td class="text-right"><strong>{escape(format_currency(item.amount))}</strong></td>'
            "</tr>"
        )
    parts.append("</tbody></table>")
    return parts


def _totals_rows(record: InvoiceRecord, total_class: str) -> List[str]:
    return [
        f'<tr><td>Subtotal</td><td class="text-right">'
        f"{escape(format_currency(record.subtotal))}</td></tr>",
        f"<tr><td>Tax ({format_amount(record.tax_rate)}%)</td>"
        f'<td class="text-right">{escape(format_currency(record.tax))}</td></tr>',
        f'<tr class="{total_class}"><td>Total</td><td class="text-right">'
        f"{escape(format_currency(record.total))}</td></tr>",
    ]


def _bank_lines(company: CompanyInfo) -> List[str]:
    bank = company.bank
    return [
        f"Bank: {escape(bank.name)}",
        f"Branch: {escape(bank.branch)}",
        f"Account Number: {escape(bank.account_number)}",
        f"Account Name: {escape(bank.account_name)}",
    ]


def invoice_body_markup(record: InvoiceRecord, company: CompanyInfo) -> str:
    """Return the invoice content block shared by the print page."""
    customer = record.customer
    parts = ['<div class="invoice-container">']
    parts.extend(_company_header(company))
    parts.append("<h1>INVOICE</h1>")

    parts.append('<div class="info-section">')
    parts.append('<div class="info-box"><h3>Bill To</h3>')
    parts.append(f"<strong>{escape(customer.name)}</strong><br>")
    if customer.address:
        parts.append(f'<span style="font-size: 11px;">{escape(customer.address)}</span><br>')
    if customer.phone:
        parts.append(f'<span style="font-size: 11px;">TEL: {escape(customer.phone)}</span>')
    parts.append("</div>")
    parts.append('<div class="info-box info-right">')
    parts.append(f"<div><strong>Invoice No:</strong> {escape(record.invoice_number)}</div>")
    parts.append(f"<div><strong>Issue Date:</strong> {escape(record.date)}</div>")
    parts.append(f"<div><strong>Due Date:</strong> {escape(record.due_date)}</div>")
    parts.append("</div></div>")

    parts.extend(_items_table(record, "items-table"))

    parts.append('<div class="totals-section"><table class="totals-table">')
    parts.extend(_totals_rows(record, "total-row"))
    parts.append("</table></div>")

    if company.has_bank:
        parts.append('<div class="bank-info"><h3>Payment Details</h3>')
        parts.extend(f"<div>{line}</div>" for line in _bank_lines(company))
        parts.append("</div>")

    parts.append("</div>")
    return "".join(parts)


def to_printable_markup(
    record: InvoiceRecord,
    company: CompanyInfo,
    auto_print: bool = True,
) -> str:
    """
    Return a complete HTML document for printing one invoice.

    Args:
        record: The invoice to print.
        company: Issuer details for the header and bank block.
        auto_print: Open the print dialog once the logo has loaded, or
                    after LOGO_LOAD_TIMEOUT_MS, whichever comes first.
    """
    title = escape(f"Invoice_{record.invoice_number}_{record.customer.name}")
    script = ""
    if auto_print:
        script = f"<script>{_PRINT_SCRIPT % config.LOGO_LOAD_TIMEOUT_MS}</script>"
    return (
        "<!DOCTYPE html>"
        '<html lang="en"><head><meta charset="UTF-8">'
        '<meta name="viewport" content="width=device-width, initial-scale=1.0">'
        f"<title>{title}</title><style>{_PRINT_CSS}</style>{script}</head>"
        f"<body>{invoice_body_markup(record, company)}"
        '<div class="no-print" style="text-align: center; margin-top: 30px;">'
        '<button onclick="window.print()">Save as PDF</button> '
        '<button onclick="window.close()">Close</button>'
        "</div></body></html>"
    )


def to_preview_markup(record: InvoiceRecord, company: CompanyInfo) -> str:
    """Return the HTML fragment shown in the preview dialog."""
    customer = record.customer
    parts = ['<div class="preview-invoice"><div class="preview-header">']
    parts.append('<div class="preview-company-info">')
    if company.logo:
        parts.append(f'<img src="{escape(company.logo)}" alt="Logo" class="preview-logo">')
    parts.append(f"<h3>{escape(company.name)}</h3>")
    if company.address:
        parts.append(f"<p>{escape(company.address)}</p>")
    if company.phone:
        parts.append(f"<p>TEL: {escape(company.phone)}</p>")
    if company.email:
        parts.append(f"<p>Email: {escape(company.email)}</p>")
    parts.append("</div></div>")

    parts.append('<h1 class="preview-title">INVOICE</h1>')
    parts.append('<div class="preview-section">')
    parts.append(f"<p><strong>Invoice No:</strong> {escape(record.invoice_number)}</p>")
    parts.append(f"<p><strong>Issue Date:</strong> {escape(record.date)}</p>")
    parts.append(f"<p><strong>Due Date:</strong> {escape(record.due_date)}</p>")
    parts.append("</div>")

    parts.append('<div class="preview-section"><h3>Bill To</h3>')
    parts.append(f"<p><strong>{escape(customer.name)}</strong></p>")
    if customer.address:
        parts.append(f"<p>{escape(customer.address)}</p>")
    if customer.phone:
        parts.append(f"<p>TEL: {escape(customer.phone)}</p>")
    parts.append("</div>")

    parts.extend(_items_table(record, "preview-table"))
    parts.append('<div class="preview-totals"><table class="preview-table">')
    parts.extend(_totals_rows(record, "preview-total-row"))
    parts.append("</table></div>")

    if company.has_bank:
        parts.append('<div class="preview-section"><h3>Payment Details</h3>')
        parts.extend(f"<p>{line}</p>" for line in _bank_lines(company))
        parts.append("</div>")

    parts.append("</div>")
    return "".join(parts)
