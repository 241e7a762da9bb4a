"""Workspace settings modal for admins."""

from __future__ import annotations

from typing import Any

from officebot.domain.exceptions import SettingsValidationError
from officebot.domain.models import WorkspaceSettings
from officebot.slack.action_ids import SETTINGS_CALLBACK_ID
from officebot.slack.blocks import option, plain_text
from officebot.slack.slack_types import ModalView

OFFICE_NAME_BLOCK = "office_name"
OFFICE_ADDRESS_BLOCK = "office_address"
CATEGORIES_BLOCK = "categories"

OFFICE_NAME_ACTION = "office_name_input"
OFFICE_ADDRESS_ACTION = "office_address_input"
CATEGORIES_ACTION = "categories_input"

MAX_OFFICE_NAME_LENGTH = 150


def _text_input(
    block_id: str, action_id: str, label: str, initial_value: str, optional: bool = False
) -> dict[str, Any]:
    element: dict[str, Any] = {"type": "plain_text_input", "action_id": action_id}
    if initial_value:
        element["initial_value"] = initial_value
    return {
        "type": "input",
        "block_id": block_id,
        "optional": optional,
        "label": plain_text(label),
        "element": element,
    }


def build_settings_modal(settings: WorkspaceSettings) -> ModalView:
    """Modal pre-filled with the current office details and enabled categories."""
    options = [option(c.label, c.id) for c in settings.categories]
    initial_options = [option(c.label, c.id) for c in settings.categories if c.is_enabled]

    checkboxes: dict[str, Any] = {
        "type": "checkboxes",
        "action_id": CATEGORIES_ACTION,
        "options": options,
    }
    if initial_options:
        checkboxes["initial_options"] = initial_options

    return {
        "type": "modal",
        "callback_id": SETTINGS_CALLBACK_ID,
        "title": plain_text("Workspace Settings"),
        "submit": plain_text("Save"),
        "close": plain_text("Cancel"),
        "blocks": [
            _text_input(
                OFFICE_NAME_BLOCK, OFFICE_NAME_ACTION, "Office name", settings.office_name
            ),
            _text_input(
                OFFICE_ADDRESS_BLOCK,
                OFFICE_ADDRESS_ACTION,
                "Office address",
                settings.office_address,
                optional=True,
            ),
            {
                "type": "input",
                "block_id": CATEGORIES_BLOCK,
                "label": plain_text("Attendance categories"),
                "element": checkboxes,
            },
        ],
    }


def parse_settings_submission(
    state_values: dict[str, Any], current: WorkspaceSettings
) -> WorkspaceSettings:
    """Apply a submitted settings modal to ``current``.

    Args:
        state_values: ``view.state.values`` from the view_submission payload
        current: Settings the modal was opened with

    Returns:
        New settings; category order and emoji are kept from ``current``

    Raises:
        SettingsValidationError: With per-block errors for the modal
    """
    name = (
        state_values.get(OFFICE_NAME_BLOCK, {}).get(OFFICE_NAME_ACTION, {}).get("value") or ""
    ).strip()
    address = (
        state_values.get(OFFICE_ADDRESS_BLOCK, {}).get(OFFICE_ADDRESS_ACTION, {}).get("value")
        or ""
    ).strip()
    selected = {
        opt["value"]
        for opt in state_values.get(CATEGORIES_BLOCK, {})
        .get(CATEGORIES_ACTION, {})
        .get("selected_options")
        or []
    }

    errors: dict[str, str] = {}
    if not name:
        errors[OFFICE_NAME_BLOCK] = "Office name is required"
    elif len(name) > MAX_OFFICE_NAME_LENGTH:
        errors[OFFICE_NAME_BLOCK] = (
            f"Office name must be at most {MAX_OFFICE_NAME_LENGTH} characters"
        )
    if not selected & {c.id for c in current.categories}:
        errors[CATEGORIES_BLOCK] = "Select at least one category"
    if errors:
        raise SettingsValidationError("Invalid workspace settings", errors)

    categories = [
        c.model_copy(update={"is_enabled": c.id in selected}) for c in current.categories
    ]
    return current.model_copy(
        update={"office_name": name, "office_address": address, "categories": categories}
    )
