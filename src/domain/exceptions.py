"""Base exception classes for the balloting domain layer."""


class GovernanceError(Exception):
    """Base exception for all domain errors.

    All domain-specific exceptions MUST inherit from this class, usually
    through one of the category bases in ``src.domain.errors``:

    - ValidationError: malformed input (date ordering, missing fields)
    - ConflictError: uniqueness or version conflicts
    - StateError: operation invalid for the current lifecycle state
    - NotFoundError: unknown identifier
    - PolicyError: quorum or threshold policy cannot be satisfied
    """

    def __init__(self, message: str = "") -> None:
        """Initialize the exception with an optional message.

        Args:
            message: Human-readable error description.
        """
        super().__init__(message)
