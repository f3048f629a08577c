"""Exception classes for divisor arithmetic.

Each class derives from the builtin a caller would naturally catch, so
``except ZeroDivisionError`` or ``except ValueError`` keeps working. The
subclasses only discriminate failures raised by this codebase.

Every one of them is fatal for the run that raised it: no partial result is
produced and nothing is retried internally.
"""

from typing import Any, Optional


class Undefined(ZeroDivisionError):
    """A field inversion hit the zero element.

    Raised for degenerate geometry (identical points, a zero chord, a vertical
    line vanishing at a domain point). ``site`` names the pending inversion
    that carried the zero operand, when known.
    """

    def __init__(self, message: str, site: Optional[Any] = None) -> None:
        super().__init__(message)
        self.site = site


class DegreeOverflow(ValueError):
    """The evaluation domain is too small for the final degree bound."""


class CapabilityError(TypeError):
    """The configured point format cannot produce coordinates for a point."""


class SiteMismatch(RuntimeError):
    """Pass 2 consumed inversion sites in a different order than pass 1."""
