"""
Supabase implementation of ResourceStore.

Queries against the shared_resources table. The file itself stays in
object storage; only the link is recorded.
"""

from typing import Dict

from supabase import Client


class SupabaseResourceStore:
    """Supabase-backed resource sharing store."""

    def __init__(self, client: Client):
        self._client = client

    def share_resource(self, data: Dict) -> Dict:
        response = self._client.table("shared_resources").insert(data).execute()
        return response.data[0]
