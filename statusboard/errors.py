"""Exception hierarchy for the availability engine and its boundaries.

The pure core (classifier, intersector) only ever raises ``InvalidRequest``
and its subclass ``InvalidTimeFormat``, and only while checking its
arguments. ``StoreError`` belongs to the persistence collaborator and is
caught at the service boundary, where the degraded-mode policy decides
whether it reaches the caller.
"""


class StatusboardError(Exception):
    """Base class for all errors raised by this package."""

    kind = "StatusboardError"


class InvalidRequest(StatusboardError, ValueError):
    """A request violated the contract of the operation it was sent to."""

    kind = "InvalidRequest"


class InvalidTimeFormat(InvalidRequest):
    """A time of day was not a zero-padded 24h ``HH:MM`` string."""

    kind = "InvalidTimeFormat"


class StoreError(StatusboardError):
    """The persistence collaborator failed to read or write a record."""

    kind = "StoreError"


class BookingConflict(StoreError):
    """The store refused a booking that overlaps an existing meeting."""

    kind = "BookingConflict"
