# errors.py
from __future__ import annotations


class EnigmaError(ValueError):
    """Base class for every failure raised by the machine model."""


class InvalidConfiguration(EnigmaError):
    """Bad alphabet, wiring, rotor selection, settings or config source."""


class InvalidSymbol(EnigmaError):
    """A symbol (or index) that is not part of the configured alphabet."""


__all__ = ["EnigmaError", "InvalidConfiguration", "InvalidSymbol"]
