"""Exceptions raised by the intake flow SDK.

Configuration and misuse errors subclass ``ValueError`` so that callers
(and the HTTP shell's global handlers) can treat them like any other bad
input.  ``PersistenceError`` is distinct: it signals that the external
collaborator failed and the same ``advance()`` may be retried.
"""


class CatalogError(ValueError):
    """The screen catalog violates a structural invariant."""


class FlowStateError(ValueError):
    """The requested operation is not valid in the flow's current state."""


class FlowLockedError(FlowStateError):
    """The flow is waiting on the persistence collaborator."""


class PersistenceError(RuntimeError):
    """Saving the profile or the completion marker failed."""
