"""Domain error taxonomy for SmartSpend.

Validation and not-found errors are raised synchronously to the caller.
Persistence errors are raised from explicit flushes and from the relational
backend; the snapshot write-behind path logs them instead (see
``storage.snapshot_backend``).
"""


class SmartSpendError(Exception):
    """Base class for all SmartSpend errors."""


class ValidationError(SmartSpendError):
    """Bad input: non-positive amount, malformed field, or unknown category."""


class NotFoundError(SmartSpendError):
    """An operation targeted an id that does not exist."""

    def __init__(self, kind: str, entity_id: int):
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind} {entity_id} not found")


class ProtectedEntityError(SmartSpendError):
    """Attempt to delete a default category."""

    def __init__(self, kind: str, entity_id: int):
        self.kind = kind
        self.entity_id = entity_id
        super().__init__(f"{kind} {entity_id} is a default and cannot be deleted")


class PersistenceError(SmartSpendError):
    """Durable backend unavailable or a write failed."""
