"""
Program template repository port (interface).

Templates and their elements are read-only to the delivery pipeline;
coaches create them once and duplicate them to make variations.
"""

from typing import Dict, List, Optional, Protocol


class TemplateRepository(Protocol):
    """
    Repository interface for program templates and template elements.
    """

    def get_by_id(self, template_id: str) -> Optional[Dict]:
        """
        Get a template by its ID (without elements).

        Args:
            template_id: The template's ID

        Returns:
            Template dictionary if found, None otherwise
        """
        ...

    def list_by_coach(self, coach_id: str, limit: int = 50, offset: int = 0) -> List[Dict]:
        """
        List a coach's templates, newest first.

        Args:
            coach_id: The coach's user ID
            limit: Maximum number of templates
            offset: Number of templates to skip

        Returns:
            List of template dictionaries
        """
        ...

    def create(self, data: Dict, elements: List[Dict]) -> Dict:
        """
        Create a template together with its elements.

        Args:
            data: Template data dictionary
            elements: Element dictionaries (kind, title, week, day,
                      scheduled_time, payload)

        Returns:
            Created template dictionary with generated ID
        """
        ...

    def get_elements(self, template_id: str) -> List[Dict]:
        """
        Get all elements of a template ordered by week, then day.

        Args:
            template_id: The template's ID

        Returns:
            List of element dictionaries
        """
        ...

    def get_elements_for_day(self, template_id: str, week: int, day: int) -> List[Dict]:
        """
        Get the elements scheduled on one (week, day) slot.

        Ordered by kind, then scheduled time.

        Args:
            template_id: The template's ID
            week: 1-based week number
            day: 1-based day within the week

        Returns:
            List of element dictionaries
        """
        ...

    def get_element(self, template_id: str, element_id: str) -> Optional[Dict]:
        """
        Get an element only if it belongs to the given template.

        Args:
            template_id: The template's ID
            element_id: The element's ID

        Returns:
            Element dictionary if it belongs to the template, None otherwise
        """
        ...

    def count_elements(self, template_id: str) -> int:
        """
        Count the elements of a template.

        Args:
            template_id: The template's ID

        Returns:
            Number of elements
        """
        ...
