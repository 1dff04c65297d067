"""
Supabase implementation of TaskStore.

Queries against the tasks table.
"""

from typing import Dict

from supabase import Client


class SupabaseTaskStore:
    """Supabase-backed task store."""

    def __init__(self, client: Client):
        self._client = client

    def create_task(self, data: Dict) -> Dict:
        response = self._client.table("tasks").insert(data).execute()
        return response.data[0]
