"""Form-layer presence checks for the customer submission form."""

from __future__ import annotations

from typing import Any

REQUIRED_FIELDS: dict[str, str] = {
    "customer_name": "Customer name",
    "phone_number": "Phone number",
    "email": "Email",
    "issue_description": "Issue description",
}


def validate_submission(fields: dict[str, Any]) -> list[str]:
    """Return labels of required fields that are missing or blank."""
    missing = []
    for key, label in REQUIRED_FIELDS.items():
        value = fields.get(key)
        if value is None or not str(value).strip():
            missing.append(label)
    return missing
