"""
Supabase implementation of TemplateRepository.

Queries against:
- program_templates: Template metadata (coach, name, duration)
- program_template_elements: Content scheduled at (week, day) offsets
"""

import json
import logging
from typing import Dict, List, Optional

from supabase import Client

logger = logging.getLogger(__name__)

TEMPLATES = "program_templates"
ELEMENTS = "program_template_elements"


class SupabaseTemplateRepository:
    """
    Supabase-backed program template repository implementation.
    """

    def __init__(self, client: Client):
        """
        Initialize repository with Supabase client.

        Args:
            client: Authenticated Supabase client
        """
        self._client = client

    def get_by_id(self, template_id: str) -> Optional[Dict]:
        response = (
            self._client.table(TEMPLATES)
            .select("*")
            .eq("id", template_id)
            .limit(1)
            .execute()
        )
        return response.data[0] if response.data else None

    def list_by_coach(self, coach_id: str, limit: int = 50, offset: int = 0) -> List[Dict]:
        response = (
            self._client.table(TEMPLATES)
            .select("*")
            .eq("coach_id", coach_id)
            .order("created_at", desc=True)
            .range(offset, offset + limit - 1)
            .execute()
        )
        return response.data

    def create(self, data: Dict, elements: List[Dict]) -> Dict:
        """
        Create a template and its elements.

        PostgREST has no multi-table transaction, so if the element insert
        fails the template row is deleted again before re-raising.
        """
        response = self._client.table(TEMPLATES).insert(data).execute()
        template = response.data[0]

        if elements:
            rows = [
                {
                    "program_template_id": template["id"],
                    "kind": element["kind"],
                    "title": element.get("title") or "Untitled Element",
                    "week": element.get("week") or 1,
                    "day": element.get("day") or 1,
                    "scheduled_time": element.get("scheduled_time") or "09:00:00",
                    "payload": element.get("payload") or {},
                }
                for element in elements
            ]
            try:
                self._client.table(ELEMENTS).insert(rows).execute()
            except Exception:
                logger.error(f"Element insert failed, removing template {template['id']}")
                self._client.table(TEMPLATES).delete().eq("id", template["id"]).execute()
                raise

        return template

    def get_elements(self, template_id: str) -> List[Dict]:
        response = (
            self._client.table(ELEMENTS)
            .select("*")
            .eq("program_template_id", template_id)
            .order("week")
            .order("day")
            .order("scheduled_time")
            .execute()
        )
        return [self._decode(row) for row in response.data]

    def get_elements_for_day(self, template_id: str, week: int, day: int) -> List[Dict]:
        response = (
            self._client.table(ELEMENTS)
            .select("*")
            .eq("program_template_id", template_id)
            .eq("week", week)
            .eq("day", day)
            .order("kind")
            .order("scheduled_time")
            .execute()
        )
        return [self._decode(row) for row in response.data]

    def get_element(self, template_id: str, element_id: str) -> Optional[Dict]:
        response = (
            self._client.table(ELEMENTS)
            .select("*")
            .eq("program_template_id", template_id)
            .eq("id", element_id)
            .limit(1)
            .execute()
        )
        return self._decode(response.data[0]) if response.data else None

    def count_elements(self, template_id: str) -> int:
        response = (
            self._client.table(ELEMENTS)
            .select("id", count="exact")
            .eq("program_template_id", template_id)
            .execute()
        )
        return response.count or 0

    @staticmethod
    def _decode(row: Dict) -> Dict:
        # Older rows stored the JSONB payload as a string
        payload = row.get("payload")
        if isinstance(payload, str):
            try:
                row = {**row, "payload": json.loads(payload)}
            except ValueError:
                logger.warning(f"Unparsable payload on element {row.get('id')}")
                row = {**row, "payload": {}}
        return row
