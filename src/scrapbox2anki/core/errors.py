"""Exceptions raised by scrapbox2anki."""


class Scrapbox2AnkiError(Exception):
    """Base class for recoverable errors about user content or page access."""

    @property
    def name(self) -> str:
        return type(self).__name__

    @property
    def message(self) -> str:
        return str(self)


class PageNotFoundError(Scrapbox2AnkiError):
    def __init__(self, project: str, title: str):
        super().__init__(f"/{project}/{title} is not found.")
        self.project = project
        self.title = title


class PageFormatError(Scrapbox2AnkiError):
    """A stored page dump does not have the page shape."""


class ConfigError(Scrapbox2AnkiError):
    """Deck or note type settings could not be read from a page."""


class ConfigNotFoundError(ConfigError):
    """The page is empty or carries no settings block."""


class ConfigSyntaxError(ConfigError):
    """The settings block is not valid JSON."""


class ConfigValidationError(ConfigError):
    """The settings parse but a member is missing or has the wrong type."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field


class DeckNotFoundError(ConfigNotFoundError):
    pass


class DeckSyntaxError(ConfigSyntaxError):
    pass


class InvalidDeckError(ConfigValidationError):
    pass


class NoteTypeNotFoundError(ConfigNotFoundError):
    pass


class NoteTypeSyntaxError(ConfigSyntaxError):
    pass


class InvalidNoteTypeError(ConfigValidationError):
    pass


class TokenizerContractError(RuntimeError):
    """The tokenizer declared a code block it cannot produce. Not recoverable."""
