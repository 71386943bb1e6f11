"""
Company settings model.

Only one CompanyInfo exists at a time. It is created lazily with empty
fields on first read and replaced wholesale on save.
"""

import base64
import binascii
from dataclasses import dataclass, field
from typing import Any, Mapping

from invoice_gen import config
from invoice_gen.errors import ValidationError


@dataclass(slots=True)
class BankAccount:
    """Transfer destination printed on invoices."""

    name: str = ""
    branch: str = ""
    account_number: str = ""
    account_name: str = ""

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "branch": self.branch,
            "accountNumber": self.account_number,
            "accountName": self.account_name,
        }


@dataclass(slots=True)
class CompanyInfo:
    """
    Issuer details shown in the invoice header.

    Attributes:
        logo: data: URL of the uploaded logo image, or "" for none.
    """

    name: str = ""
    address: str = ""
    phone: str = ""
    email: str = ""
    logo: str = ""
    bank: BankAccount = field(default_factory=BankAccount)

    @property
    def has_bank(self) -> bool:
        """Bank details are only printed once a bank name is set."""
        return bool(self.bank.name)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "address": self.address,
            "phone": self.phone,
            "email": self.email,
            "logo": self.logo,
            "bank": self.bank.to_dict(),
        }


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def is_company_payload(payload: Any) -> bool:
    """Return True when a backup's companyInfo has the stored nested shape."""
    if not isinstance(payload, Mapping):
        return False
    bank = payload.get("bank")
    return bank is None or isinstance(bank, Mapping)


def deserialize_company_info(payload: Mapping[str, Any] | None) -> CompanyInfo:
    """Convert a stored dictionary into CompanyInfo, defaulting missing fields."""
    if not payload or not isinstance(payload, Mapping):
        return CompanyInfo()
    bank = payload.get("bank")
    if not isinstance(bank, Mapping):
        bank = {}
    return CompanyInfo(
        name=_text(payload.get("name")),
        address=_text(payload.get("address")),
        phone=_text(payload.get("phone")),
        email=_text(payload.get("email")),
        logo=_text(payload.get("logo")),
        bank=BankAccount(
            name=_text(bank.get("name")),
            branch=_text(bank.get("branch")),
            account_number=_text(bank.get("accountNumber")),
            account_name=_text(bank.get("accountName")),
        ),
    )


def parse_logo_upload(contents: str, max_bytes: int = config.LOGO_MAX_BYTES) -> str:
    """
    Validate an uploaded logo and return it as a data: URL.

    Args:
        contents: The "data:<mime>;base64,<payload>" string from the upload.
        max_bytes: Largest accepted decoded image size.

    Raises:
        ValidationError: If the upload is not an image or is too large.
    """
    header, _, payload = (contents or "").partition(",")
    if not header.startswith("data:image/") or not header.endswith(";base64"):
        raise ValidationError(["Please choose an image file"])
    try:
        size = len(base64.b64decode(payload, validate=True))
    except (binascii.Error, ValueError) as exc:
        raise ValidationError(["The uploaded image could not be read"]) from exc
    if size > max_bytes:
        limit_mb = max_bytes / (1024 * 1024)
        raise ValidationError([f"Logo must be {limit_mb:g}MB or smaller"])
    return contents
