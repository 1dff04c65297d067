"""
Task store port (interface).
"""

from typing import Dict, Protocol


class TaskStore(Protocol):
    """Interface for creating client tasks."""

    def create_task(self, data: Dict) -> Dict:
        """
        Create a task record.

        Args:
            data: Task data (title, description, task_type, coach_id,
                  client_id, status, ...)

        Returns:
            Created task dictionary (includes "id")
        """
        ...
