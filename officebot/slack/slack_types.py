"""TypedDict definitions for Slack Block Kit structures.

Gives the block builders typed return values instead of bare dicts.
"""

from typing import Any, Literal, TypedDict, Union


class _TextObjectRequired(TypedDict):
    type: Literal["plain_text", "mrkdwn"]
    text: str


class TextObject(_TextObjectRequired, total=False):
    """Text composition object.

    Attributes:
        type: "plain_text" or "mrkdwn"
        text: The text content
        emoji: Whether emoji shortcodes are rendered (plain_text only)
    """

    emoji: bool


class OptionObject(TypedDict):
    """Option for selects and checkbox groups.

    Attributes:
        text: Label shown to the user
        value: Opaque value sent back in interaction payloads
    """

    text: TextObject
    value: str


class _StaticSelectRequired(TypedDict):
    type: Literal["static_select"]
    placeholder: TextObject
    options: list[OptionObject]
    action_id: str


class StaticSelectElement(_StaticSelectRequired, total=False):
    """Static select menu element."""

    initial_option: OptionObject


class ButtonElement(TypedDict):
    """Button element."""

    type: Literal["button"]
    text: TextObject
    action_id: str


class DividerBlock(TypedDict):
    """Horizontal rule."""

    type: Literal["divider"]


class HeaderBlock(TypedDict):
    """Large bold plain-text header."""

    type: Literal["header"]
    text: TextObject


class ContextBlock(TypedDict):
    """Small, muted line of text elements."""

    type: Literal["context"]
    elements: list[TextObject]


class _SectionBlockRequired(TypedDict):
    type: Literal["section"]
    text: TextObject


class SectionBlock(_SectionBlockRequired, total=False):
    """Text section with an optional interactive accessory."""

    accessory: Union[StaticSelectElement, ButtonElement]


Block = Union[DividerBlock, HeaderBlock, ContextBlock, SectionBlock, dict[str, Any]]


class HomeView(TypedDict):
    """View published to a user's home tab."""

    type: Literal["home"]
    blocks: list[Block]


class _ModalViewRequired(TypedDict):
    type: Literal["modal"]
    callback_id: str
    title: TextObject
    blocks: list[Block]


class ModalView(_ModalViewRequired, total=False):
    """Modal dialog view."""

    submit: TextObject
    close: TextObject
    private_metadata: str
