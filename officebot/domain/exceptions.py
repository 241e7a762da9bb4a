"""Custom exception hierarchy for officebot errors.

Specific exception types let the Slack listeners tell user mistakes apart
from collaborator failures and respond accordingly.
"""


class OfficeBotError(Exception):
    """Base exception for all officebot errors."""


class ScheduleNotFoundError(OfficeBotError):
    """No schedule exists for the requested workspace.

    Raised by the store when a channel command asks for a workspace that has
    never been set up.
    """


class InvalidActionError(OfficeBotError):
    """An interactive payload could not be applied.

    Raised when:
    - An option value or action id does not follow the expected encoding
    - The payload names an unknown week, day or category
    """


class SettingsValidationError(OfficeBotError):
    """Submitted workspace settings failed validation.

    Carries a mapping of modal block id to error text so the modal can show
    inline errors.
    """

    def __init__(self, message: str, errors: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or {}
