"""Exceptions raised by the conversion pipeline."""

from __future__ import annotations


class ConversionError(Exception):
    """Base class for failures that abort a conversion."""


class ParseError(ConversionError):
    """The input could not be turned into an HTML tree (empty or unparseable)."""


class InvalidConfiguration(ConversionError, ValueError):
    """An option value was not recognised; raised before any processing."""
