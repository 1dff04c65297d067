"""
Resource sharing store port (interface).

Files themselves live in object storage; this store only records that a
resource link has been shared with a client.
"""

from typing import Dict, Protocol


class ResourceStore(Protocol):
    """Interface for sharing resource links with clients."""

    def share_resource(self, data: Dict) -> Dict:
        """
        Share a resource link with a client.

        Args:
            data: Share data (title, url, coach_id, client_id, ...)

        Returns:
            Created share dictionary (includes "id")
        """
        ...
