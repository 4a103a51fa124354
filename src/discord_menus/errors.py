"""Exceptions raised by discord-menus."""


class DiscordMenusError(Exception):
    """Base exception for discord-menus errors."""

    pass


class ValidationError(DiscordMenusError, ValueError):
    """An argument failed validation.

    Args:
        code: Symbolic error code (e.g. ``INVALID_LABEL``)
        detail: Optional human readable detail appended to the message
    """

    def __init__(self, code: str, detail: str | None = None):
        message = f"{code}: {detail}" if detail else code
        super().__init__(message)
        self.code = code
        self.detail = detail


class IncompleteComponentError(ValidationError):
    """A component was serialized before its required fields were set."""

    pass


class InvalidContentError(ValidationError):
    """Rich content could not be serialized."""

    pass


class InvalidPayloadError(DiscordMenusError):
    """A raw gateway payload is missing required data."""

    def __init__(self, code: str = "INVALID_MENU_DATA"):
        super().__init__(code)
        self.code = code


class InvalidClientError(DiscordMenusError, TypeError):
    """The dispatcher was created without a usable gateway client."""

    def __init__(self, code: str = "INVALID_DISCORD_CLIENT"):
        super().__init__(code)
        self.code = code
