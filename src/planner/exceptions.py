"""Planner exception hierarchy.

Only the persistence layer and the edit surface raise. The normalizer and
the ordering engine are total and never raise past their boundary.
"""


class PlannerError(Exception):
    """Base class for planner errors."""

    pass


class PersistenceError(PlannerError):
    """The backing document store could not be read or written."""

    pass


class ValidationError(PlannerError):
    """User input rejected before any state change."""

    pass
