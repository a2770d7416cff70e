"""
Domain exceptions - Semantic error types for the account workflows.

These exceptions never cross the AccountService boundary: the service
converts them into result codes. ConfigurationError is the exception,
raised while wiring components at startup.
"""


class IdentityError(Exception):
    """Base class for account identity domain errors."""

    pass


class BackendError(IdentityError):
    """A collaborator (repository, mail transport) failed."""

    pass


class ConfigurationError(IdentityError):
    """Required configuration is missing or invalid."""

    pass


class InvalidTransition(IdentityError):
    """Requested account status transition is not allowed."""

    def __init__(self, current: str, target: str) -> None:
        super().__init__(f"Cannot move account from {current} to {target}")
        self.current = current
        self.target = target
