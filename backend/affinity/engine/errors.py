"""Errors raised by the affinity engine.

Encoding and catalog errors are programming errors and are never retried.
StoreUnavailable is transient and may be retried at the service boundary;
any other StoreError is reported without a retry.
"""


class AffinityError(Exception):
    """Base class for all engine errors."""


class InvalidLevel(AffinityError):
    """A selection level outside [0, 1] reached the encoder."""

    def __init__(self, interest_id: int, level: float):
        self.interest_id = interest_id
        self.level = level
        super().__init__(f"Interest {interest_id} has level {level!r}, expected a value in [0, 1]")


class UnknownInterest(AffinityError):
    """An interest id has no catalog position."""

    def __init__(self, interest_id: int):
        self.interest_id = interest_id
        super().__init__(f"Interest {interest_id} is not in the catalog")


class StoreError(AffinityError):
    """The vector store's backing medium failed a read or write."""


class StoreUnavailable(StoreError):
    """The vector store's backing medium could not be reached."""


class PersonNotFound(AffinityError):
    """No live person has this id."""

    def __init__(self, person_id: int):
        self.person_id = person_id
        super().__init__(f"Person {person_id} not found")
