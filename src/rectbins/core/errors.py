"""Exception hierarchy shared by the geometric model and the search algorithms."""


class PackingError(Exception):
    """Base class for all rectbins errors."""


class PreconditionError(PackingError, ValueError):
    """Input or configuration that no algorithm is allowed to repair.

    Raised for rectangles that do not fit the bin, an overlap neighborhood
    used without a penalty factor, invalid tolerances or schedules.
    """


class InvariantViolation(PackingError, RuntimeError):
    """Internal state broke a packing invariant (a bug, not bad input)."""
