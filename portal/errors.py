"""
portal/errors.py
----------------
Error kinds raised by the engines.

Empty results are never errors; these cover inputs the engines cannot give a
meaningful answer for.  The presentation layer catches ``PortalError`` and
decides how to render it.
"""


class PortalError(Exception):
    """Base class for every engine error."""


class InvalidArgumentError(PortalError, ValueError):
    """An input is out of range or malformed (negative years, min > max, ...)."""


class ArithmeticUndefinedError(PortalError, ArithmeticError):
    """A result is mathematically undefined (e.g. Sharpe with zero volatility)."""
