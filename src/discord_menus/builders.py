"""Fluent builders for button and select menu components."""

import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import IntEnum
from typing import Any

from discord_menus.errors import IncompleteComponentError, ValidationError

MAX_LABEL_LENGTH = 80
MAX_CUSTOM_ID_LENGTH = 100
MAX_MENU_OPTIONS = 25


class ComponentType(IntEnum):
    """Discord message component types."""

    ACTION_ROW = 1
    BUTTON = 2
    SELECT_MENU = 3


class ButtonStyle(IntEnum):
    """Button styles, by colour name with Discord's names as aliases."""

    BLURPLE = 1
    GREY = 2
    GREEN = 3
    RED = 4
    URL = 5

    PRIMARY = 1
    SECONDARY = 2
    SUCCESS = 3
    DANGER = 4
    LINK = 5

    @classmethod
    def resolve(cls, style: "ButtonStyle | int | str | None") -> "ButtonStyle":
        """Resolve a style name or numeric code.

        An empty value resolves to BLURPLE.

        Raises:
            ValidationError: If the style is unknown
        """
        if not style:
            return cls.BLURPLE
        if isinstance(style, str):
            try:
                return cls[style.upper()]
            except KeyError:
                raise ValidationError("INVALID_STYLE", style) from None
        if isinstance(style, int) and not isinstance(style, bool):
            try:
                return cls(style)
            except ValueError:
                raise ValidationError("INVALID_STYLE", str(style)) from None
        raise ValidationError("INVALID_STYLE", repr(style))


# Best-effort match for a single emoji grapheme: base pictograph, optional
# variation selector or skin tone, optionally joined by ZWJ.
_EMOJI_BASE = (
    "(?:"
    "[\U0001F1E6-\U0001F1FF]{2}"
    "|[#*0-9]\ufe0f?\u20e3"
    "|[\U0001F000-\U0001FAFF]"
    "|[\u2600-\u27bf]"
    "|[\u2190-\u21ff]"
    "|[\u2300-\u23ff]"
    "|[\u2b00-\u2bff]"
    "|[\u25aa-\u25fe]"
    "|[\u00a9\u00ae\u203c\u2049\u2122\u2139\u24c2\u2934\u2935\u3030\u303d\u3297\u3299]"
    ")"
)
_EMOJI_MODIFIERS = "(?:\ufe0f|[\U0001F3FB-\U0001F3FF]|[\U000E0020-\U000E007F])*"
_EMOJI_RE = re.compile(
    f"{_EMOJI_BASE}{_EMOJI_MODIFIERS}(?:\u200d{_EMOJI_BASE}{_EMOJI_MODIFIERS})*"
)
_CUSTOM_EMOJI_RE = re.compile(r"<(?P<animated>a?):(?P<name>\w{2,32}):(?P<id>\d{15,25})>")

_URL_RE = re.compile(
    r"^(https?://)?"
    r"((([a-z\d]([a-z\d-]*[a-z\d])*)\.)+[a-z]{2,}|"
    r"((\d{1,3}\.){3}\d{1,3}))"
    r"(:\d+)?(/[-a-z\d%_.~+]*)*"
    r"(\?[;&a-z\d%_.~+=-]*)?"
    r"(#[-a-z\d_]*)?$",
    re.IGNORECASE,
)


def is_emoji(value: str) -> bool:
    """Check whether a string is a single unicode emoji."""
    return bool(_EMOJI_RE.fullmatch(value))


def is_url(value: str) -> bool:
    """Check whether a string looks like an http(s) URL. The scheme is optional."""
    return bool(_URL_RE.match(value))


@dataclass(frozen=True)
class Emoji:
    """Partial emoji attached to a button or menu option."""

    name: str
    id: str | None = None
    animated: bool = False

    @classmethod
    def parse(cls, value: "Emoji | str | dict[str, Any]") -> "Emoji":
        """Build an Emoji from a unicode emoji, ``<:name:id>`` or a dict.

        Raises:
            ValidationError: If the value is not a recognised emoji
        """
        if isinstance(value, Emoji):
            return value
        if isinstance(value, dict):
            if not value.get("name"):
                raise ValidationError("INVALID_EMOJI", repr(value))
            return cls(
                name=value["name"],
                id=value.get("id"),
                animated=bool(value.get("animated", False)),
            )
        if isinstance(value, str) and value:
            if custom := _CUSTOM_EMOJI_RE.fullmatch(value):
                return cls(
                    name=custom.group("name"),
                    id=custom.group("id"),
                    animated=bool(custom.group("animated")),
                )
            if is_emoji(value):
                return cls(name=value)
        raise ValidationError("INVALID_EMOJI", repr(value))

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name}
        if self.id is not None:
            data["id"] = self.id
        if self.animated:
            data["animated"] = True
        return data


class ButtonBuilder:
    """Builder for a single button component.

    Every setter validates immediately and returns the builder so calls can
    be chained::

        ButtonBuilder().set_style("GREEN").set_label("Yes").set_id("confirm")
    """

    def __init__(self) -> None:
        self.type = ComponentType.BUTTON
        self.style = ButtonStyle.BLURPLE
        self.label: str | None = None
        self.emoji: Emoji | None = None
        self.custom_id: str | None = None
        self.url: str | None = None
        self.disabled = False

    def set_label(self, label: str) -> "ButtonBuilder":
        """Set the label (1-80 characters)."""
        if not label or not isinstance(label, str) or len(label) > MAX_LABEL_LENGTH:
            raise ValidationError("INVALID_LABEL")
        self.label = label
        return self

    def set_style(self, style: ButtonStyle | int | str | None = None) -> "ButtonBuilder":
        """Set the style by name (``"GREEN"``) or code (``3``). Defaults to BLURPLE.

        A disabled button cannot become a URL button, and a button carrying a
        URL cannot leave the URL style.
        """
        resolved = ButtonStyle.resolve(style)
        if resolved is ButtonStyle.URL and self.disabled:
            raise ValidationError("BAD_BUTTON_STYLE", "URL buttons cannot be disabled")
        if resolved is not ButtonStyle.URL and self.url is not None:
            raise ValidationError("BAD_BUTTON_STYLE", "only URL buttons carry a URL")
        self.style = resolved
        return self

    def set_emoji(self, emoji: Emoji | str | dict[str, Any]) -> "ButtonBuilder":
        """Set the emoji shown before the label."""
        self.emoji = Emoji.parse(emoji)
        return self

    def set_id(self, custom_id: str) -> "ButtonBuilder":
        """Set the custom ID (1-100 characters) echoed back on click."""
        if (
            not custom_id
            or not isinstance(custom_id, str)
            or len(custom_id) > MAX_CUSTOM_ID_LENGTH
        ):
            raise ValidationError("INVALID_ID")
        self.custom_id = custom_id
        return self

    def set_url(self, url: str) -> "ButtonBuilder":
        """Set the link target. Only URL-style buttons may carry one."""
        if self.style is not ButtonStyle.URL:
            raise ValidationError("BAD_BUTTON_STYLE")
        if not url or not isinstance(url, str) or not is_url(url):
            raise ValidationError("INVALID_URL", repr(url))
        self.url = url
        return self

    def set_disabled(self, state: bool | None = None) -> "ButtonBuilder":
        """Disable (or re-enable with ``False``) the button.

        URL buttons are never disabled.
        """
        if self.style is ButtonStyle.URL:
            raise ValidationError("BAD_BUTTON_STYLE")
        self.disabled = True if state is None else bool(state)
        return self

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the button JSON shape.

        Raises:
            IncompleteComponentError: If no custom ID has been set, or a URL
                button has no URL
        """
        if not self.custom_id:
            raise IncompleteComponentError("INCOMPLETE_COMPONENT", "button custom ID not set")
        if self.style is ButtonStyle.URL and self.url is None:
            raise IncompleteComponentError("INCOMPLETE_COMPONENT", "URL button has no URL")

        data: dict[str, Any] = {
            "type": int(self.type),
            "style": int(self.style),
            "custom_id": self.custom_id,
            "disable": self.disabled,
        }
        if self.label is not None:
            data["label"] = self.label
        if self.emoji is not None:
            data["emoji"] = self.emoji.to_dict()
        if self.url is not None:
            data["url"] = self.url
        return data


@dataclass(frozen=True)
class MenuOption:
    """A single entry of a select menu."""

    label: str
    value: str
    description: str | None = None
    emoji: Emoji | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"label": self.label, "value": self.value}
        if self.description is not None:
            data["description"] = self.description
        if self.emoji is not None:
            data["emoji"] = self.emoji.to_dict()
        return data


class MenuBuilder:
    """Builder for a select menu component.

    Options keep their insertion order, which is the order Discord displays
    them in.
    """

    def __init__(self) -> None:
        self.type = ComponentType.SELECT_MENU
        self.custom_id: str | None = None
        self.options: list[MenuOption] = []
        self.placeholder: str | None = None
        self.min_values: int | None = None
        self.max_values: int | None = None

    def add_option(
        self,
        label: str,
        value: str,
        description: str | None = None,
        emoji: Emoji | str | dict[str, Any] | None = None,
    ) -> "MenuBuilder":
        """Append an option.

        Args:
            label: Text shown to the user
            value: Value reported back in the interaction's ``values``
            description: Optional secondary text
            emoji: Optional emoji (unicode, ``<:name:id>``, dict or Emoji)
        """
        if not label or not isinstance(label, str):
            raise ValidationError("INVALID_LABEL")
        if not value or not isinstance(value, str):
            raise ValidationError("INVALID_LABEL_OPTIONS", "option value must be a string")
        if description is not None and not isinstance(description, str):
            raise ValidationError("INVALID_LABEL_OPTIONS", "description must be a string")
        if len(self.options) >= MAX_MENU_OPTIONS:
            raise ValidationError("TOO_MANY_OPTIONS", f"at most {MAX_MENU_OPTIONS} options")

        self.options.append(
            MenuOption(
                label=label,
                value=value,
                description=description,
                emoji=Emoji.parse(emoji) if emoji is not None else None,
            )
        )
        return self

    def set_custom_id(self, custom_id: str) -> "MenuBuilder":
        """Set the custom ID. Spaces are not allowed."""
        if (
            not custom_id
            or not isinstance(custom_id, str)
            or " " in custom_id
            or len(custom_id) > MAX_CUSTOM_ID_LENGTH
        ):
            raise ValidationError("INVALID_CUSTOM_ID")
        self.custom_id = custom_id
        return self

    def set_placeholder(self, placeholder: str) -> "MenuBuilder":
        """Set the text shown while nothing is selected."""
        if not placeholder or not isinstance(placeholder, str):
            raise ValidationError("INVALID_PLACE_HOLDER")
        self.placeholder = placeholder
        return self

    def set_min_values(self, value: int) -> "MenuBuilder":
        """Set the minimum number of selectable options (0-25)."""
        if not _is_count(value) or not 0 <= value <= MAX_MENU_OPTIONS:
            raise ValidationError("INVALID_MIN_VALUE")
        self.min_values = value
        return self

    def set_max_values(self, value: int) -> "MenuBuilder":
        """Set the maximum number of selectable options (1-25)."""
        if not _is_count(value) or not 1 <= value <= MAX_MENU_OPTIONS:
            raise ValidationError("INVALID_MAX_VALUE")
        self.max_values = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the select menu JSON shape.

        ``max_values`` defaults to the option count at call time, so options
        added after ``set_*`` calls are still selectable.

        Raises:
            IncompleteComponentError: If the custom ID or options are missing
        """
        if not self.custom_id or not self.options:
            raise IncompleteComponentError("INVALID_MENU", "custom ID and options are required")

        data: dict[str, Any] = {
            "type": int(self.type),
            "custom_id": self.custom_id,
            "options": [option.to_dict() for option in self.options],
        }
        if self.placeholder is not None:
            data["placeholder"] = self.placeholder
        data["min_values"] = 1 if self.min_values is None else self.min_values
        data["max_values"] = len(self.options) if self.max_values is None else self.max_values
        return data


def action_row(components: Iterable[ButtonBuilder | MenuBuilder]) -> dict[str, Any]:
    """Wrap serialized components in a single action row."""
    return {
        "type": int(ComponentType.ACTION_ROW),
        "components": [component.to_dict() for component in components],
    }


def _is_count(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
