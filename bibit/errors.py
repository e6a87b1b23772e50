from __future__ import annotations


class BibitError(Exception):
    """Base class for all errors raised by the biclustering engine."""


class InvalidInputError(BibitError, ValueError):
    """
    Input rejected before any encoding or search starts.

    Raised for non-binary matrices, empty matrices, bwl < 2 and
    non-positive or empty parameter ranges.
    """


class SearchCancelled(BibitError):
    """A search stopped because its cancellation token fired."""
