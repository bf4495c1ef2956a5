"""Error types shared by the origins figure converter."""

from __future__ import annotations


class FigureError(Exception):
    pass


class UsageError(FigureError):
    """No figure string was supplied on the command line."""


class FigureValidationError(FigureError, ValueError):
    """The figure string is not 25 ASCII digits."""


class FigureDataError(FigureError, ValueError):
    """Figure data or a color map did not have the expected structure."""


class FigureLookupError(FigureError, LookupError):
    """A part set id, color index or legacy color has no entry."""
