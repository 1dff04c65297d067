"""
Application-layer exceptions.

These exceptions are raised by services and translated to HTTP responses
by the routers. Infrastructure errors (Supabase/PostgREST) are not wrapped
and propagate to the caller as internal errors.
"""


class EnrollmentError(Exception):
    """Base class for enrollment and delivery errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(EnrollmentError):
    """Referenced enrollment, template or element does not exist in scope."""

    pass


class ForbiddenError(EnrollmentError):
    """Acting user is neither the owning coach nor an admin."""

    pass


class ConflictError(EnrollmentError):
    """Invalid lifecycle transition or duplicate enrollment."""

    pass


class InvalidStatusError(EnrollmentError):
    """Requested status is not a known enrollment state."""

    pass


class ElementMaterializationError(Exception):
    """A collaborator store failed to create an artifact for an element.

    Raised by materializers; the delivery executor records it per element
    and keeps delivering the remaining elements of the day.
    """

    def __init__(self, message: str, element_id: str):
        super().__init__(message)
        self.element_id = element_id
