"""Domain exceptions for the user tags service.

This module defines the error kinds raised by the domain services.
Absence of a target record (get, update, delete) is not an error and is
reported as ``None`` by the services; the exceptions below signal rule
violations detected while performing an operation.
"""


class DomainError(Exception):
    """Base exception for all domain rule violations."""

    pass


class DuplicateNameError(DomainError):
    """Exception raised when a tag name is already used by another tag."""

    pass


class DuplicateIdentityError(DomainError):
    """Exception raised when a user name or email is already in use."""

    pass


class WeakPasswordError(DomainError):
    """Exception raised when a password does not meet the minimum length."""

    pass


class NotFoundError(DomainError):
    """Exception raised when a record required by an operation does not exist."""

    pass


class TagNotFoundError(NotFoundError):
    """Exception raised when a referenced tag does not exist."""

    def __init__(self, message: str, tag_id: object = None):
        super().__init__(message)
        self.tag_id = tag_id


class UserNotFoundError(NotFoundError):
    """Exception raised when a referenced user does not exist."""

    pass


class InvalidTagIdError(DomainError):
    """Exception raised when a tag identifier is not a well-formed UUID.

    Attributes:
        tag_id: The offending identifier as received from the caller.
    """

    def __init__(self, message: str, tag_id: object = None):
        super().__init__(message)
        self.tag_id = tag_id


class HiddenUserError(DomainError):
    """Exception raised when a hidden user attempts to log in."""

    pass


class InvalidCredentialsError(DomainError):
    """Exception raised when a login password does not match."""

    pass
