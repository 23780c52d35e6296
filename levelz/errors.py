"""Exceptions raised while parsing LevelZ documents.

MalformedPointError and MissingHeaderError are siblings: both derive
directly from ParseError, so catch ParseError to handle either.
"""


class ParseError(ValueError):
    """A LevelZ document (or one of its tokens) is malformed."""


class MalformedPointError(ParseError):
    """A coordinate or point expression failed structural or numeric validation."""


class MissingHeaderError(ParseError):
    """A required header is absent from the header section."""

    def __init__(self, message, header=None):
        super().__init__(message)
        self.header = header
