"""
Application-layer exceptions.

These exceptions are raised by services and repositories and translated
to HTTP responses at the router boundary.
"""


class NotFoundError(Exception):
    """Raised when a record does not exist or is not owned by the caller.

    Ownership violations are reported as not-found so a caller cannot
    distinguish "does not exist" from "belongs to someone else".
    """

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} {identifier} not found")


class InvalidInputError(Exception):
    """Raised when a request fails validation before any write happens."""

    pass


class PlanPersistenceError(Exception):
    """Error during an atomic plan operation.

    Raised when creating, replacing, or activating a plan fails in the
    store. The store guarantees nothing was partially written.
    """

    pass
