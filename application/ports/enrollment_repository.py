"""
Enrollment repository port (interface).

This Protocol defines the contract for enrollment persistence operations.
Infrastructure implementations (e.g., Supabase) must satisfy this interface.
"""

from typing import Dict, List, Optional, Protocol


class EnrollmentRepository(Protocol):
    """
    Repository interface for program enrollments.

    All methods work with dictionaries for flexibility.
    Services convert rows to domain models.
    """

    def get_by_id(self, enrollment_id: str) -> Optional[Dict]:
        """
        Get an enrollment by its ID.

        Args:
            enrollment_id: The enrollment's ID

        Returns:
            Enrollment dictionary if found, None otherwise
        """
        ...

    def find(self, template_id: str, client_id: str) -> Optional[Dict]:
        """
        Find the enrollment of a client in a template, if any.

        Args:
            template_id: The program template ID
            client_id: The client ID

        Returns:
            Enrollment dictionary if found, None otherwise
        """
        ...

    def list_by_status(self, status: str) -> List[Dict]:
        """
        List all enrollments in a lifecycle status.

        Args:
            status: Enrollment status value (e.g. "active")

        Returns:
            List of enrollment dictionaries
        """
        ...

    def list_for_client(self, client_id: str, coach_id: Optional[str] = None) -> List[Dict]:
        """
        List a client's enrollments, newest first.

        Args:
            client_id: The client ID
            coach_id: Restrict to enrollments owned by this coach (None = any coach)

        Returns:
            List of enrollment dictionaries
        """
        ...

    def list_for_template(self, template_id: str) -> List[Dict]:
        """
        List all enrollments in a template, newest first.

        Args:
            template_id: The program template ID

        Returns:
            List of enrollment dictionaries
        """
        ...

    def create(self, data: Dict) -> Dict:
        """
        Create a new enrollment.

        Args:
            data: Enrollment data dictionary

        Returns:
            Created enrollment dictionary with generated ID
        """
        ...

    def update(self, enrollment_id: str, data: Dict) -> Dict:
        """
        Update an enrollment.

        Args:
            enrollment_id: The enrollment's ID
            data: Fields to update

        Returns:
            Updated enrollment dictionary
        """
        ...

    def advance_cursor(
        self,
        enrollment_id: str,
        expected_day: int,
        new_day: int,
    ) -> Optional[Dict]:
        """
        Conditionally advance the delivery cursor (compare-and-swap).

        The update only applies when the stored last_delivered_day still
        equals expected_day and the enrollment is still active. Two
        concurrent delivery passes for the same day therefore cannot both
        claim it.

        Args:
            enrollment_id: The enrollment's ID
            expected_day: Cursor value read before delivery
            new_day: Program day being delivered

        Returns:
            Updated enrollment dictionary, or None if the cursor moved
            (or the enrollment left the active state) in the meantime
        """
        ...

    def append_completed_element(self, enrollment_id: str, element_id: str) -> Optional[Dict]:
        """
        Atomically add an element to completed_elements.

        The append happens in the database, so concurrent calls for the
        same enrollment never overwrite each other. Appending an element
        that is already present leaves the array unchanged.

        Args:
            enrollment_id: The enrollment's ID
            element_id: The completed template element's ID

        Returns:
            Updated enrollment dictionary, or None if the enrollment is missing
        """
        ...
