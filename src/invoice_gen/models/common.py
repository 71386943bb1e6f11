"""
Common state models for the invoice generator UI.

This module defines shared state objects that are serialized to dcc.Store
for client-side persistence:

- Application state (search query, edit mode)
- Status messages shown after user actions

All models include to_dict/from_dict methods for JSON serialization
required by Dash's dcc.Store component.
"""

from dataclasses import dataclass, field


@dataclass
class AppState:
    """
    Unified UI state stored in dcc.Store.

    Attributes:
        query: Current search query string.
        edit_mode: True while an existing invoice is open in the form.
        editing_number: Invoice number being edited (edit mode only).
    """

    query: str = ""
    edit_mode: bool = False
    editing_number: str = ""

    def start_edit(self, invoice_number: str) -> "AppState":
        return AppState(query=self.query, edit_mode=True, editing_number=invoice_number)

    def reset_form(self) -> "AppState":
        return AppState(query=self.query)

    def to_dict(self) -> dict:
        """Serialize state to JSON-compatible dictionary."""
        return {
            "query": self.query,
            "edit_mode": self.edit_mode,
            "editing_number": self.editing_number,
        }

    @classmethod
    def from_dict(cls, data: dict | None) -> "AppState":
        """Deserialize dictionary to AppState."""
        if not data:
            return cls()
        return cls(
            query=data.get("query", ""),
            edit_mode=data.get("edit_mode", False),
            editing_number=data.get("editing_number", ""),
        )


@dataclass
class StatusMessage:
    """
    Feedback shown to the user after an action.

    level is one of "success", "warning" or "error".
    """

    text: str = ""
    level: str = field(default="success")

    @classmethod
    def success(cls, text: str) -> "StatusMessage":
        return cls(text=text, level="success")

    @classmethod
    def warning(cls, text: str) -> "StatusMessage":
        return cls(text=text, level="warning")

    @classmethod
    def error(cls, text: str) -> "StatusMessage":
        return cls(text=text, level="error")

    def to_dict(self) -> dict:
        return {"text": self.text, "level": self.level}

    @classmethod
    def from_dict(cls, data: dict | None) -> "StatusMessage | None":
        if not data or not data.get("text"):
            return None
        return cls(text=data["text"], level=data.get("level", "success"))
