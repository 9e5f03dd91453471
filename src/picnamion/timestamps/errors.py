"""Errors raised while reconciling capture timestamps."""


class PicnamionError(Exception):
    """Base exception for timestamp reconciliation."""


class ConfigurationDefect(PicnamionError):
    """Raised when static tables disagree with what the extractor produced.

    These are not specific to one file, so batch processing stops.
    """


class UnknownTagError(ConfigurationDefect):
    """Raised when a metadata tag is missing from the scoring table."""

    def __init__(self, tag: str) -> None:
        super().__init__(f"Tag {tag!r} is not in the scoring table.")
        self.tag = tag


class PatternContractError(ConfigurationDefect):
    """Raised when a filename pattern matched without its required groups."""


class ConflictingOffsetError(ConfigurationDefect):
    """Raised when offset-bearing tags in one file disagree."""


class TimestampParseError(PicnamionError):
    """Raised when timestamp text or a pattern capture cannot be parsed."""


class MissingTimestampError(PicnamionError):
    """Raised when a file carries no metadata or filesystem timestamp at all."""


class ExtractionError(PicnamionError):
    """Raised when the metadata extractor fails for a file."""
