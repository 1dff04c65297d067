"""
Supabase implementation of EnrollmentRepository.

Queries against the program_enrollments table.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

from supabase import Client

logger = logging.getLogger(__name__)

TABLE = "program_enrollments"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class SupabaseEnrollmentRepository:
    """
    Supabase-backed enrollment repository implementation.

    Enrollment columns: id, program_template_id, client_id, coach_id,
    status, start_date, last_delivered_day, completed_elements (text[]),
    created_at, updated_at.
    """

    def __init__(self, client: Client):
        """
        Initialize repository with Supabase client.

        Args:
            client: Authenticated Supabase client
        """
        self._client = client

    def get_by_id(self, enrollment_id: str) -> Optional[Dict]:
        response = (
            self._client.table(TABLE)
            .select("*")
            .eq("id", enrollment_id)
            .limit(1)
            .execute()
        )
        return response.data[0] if response.data else None

    def find(self, template_id: str, client_id: str) -> Optional[Dict]:
        response = (
            self._client.table(TABLE)
            .select("*")
            .eq("program_template_id", template_id)
            .eq("client_id", client_id)
            .limit(1)
            .execute()
        )
        return response.data[0] if response.data else None

    def list_by_status(self, status: str) -> List[Dict]:
        response = (
            self._client.table(TABLE)
            .select("*")
            .eq("status", status)
            .order("created_at")
            .execute()
        )
        return response.data

    def list_for_client(self, client_id: str, coach_id: Optional[str] = None) -> List[Dict]:
        query = self._client.table(TABLE).select("*").eq("client_id", client_id)
        if coach_id is not None:
            query = query.eq("coach_id", coach_id)
        response = query.order("created_at", desc=True).execute()
        return response.data

    def list_for_template(self, template_id: str) -> List[Dict]:
        response = (
            self._client.table(TABLE)
            .select("*")
            .eq("program_template_id", template_id)
            .order("created_at", desc=True)
            .execute()
        )
        return response.data

    def create(self, data: Dict) -> Dict:
        response = self._client.table(TABLE).insert(data).execute()
        return response.data[0]

    def update(self, enrollment_id: str, data: Dict) -> Dict:
        response = (
            self._client.table(TABLE)
            .update({**data, "updated_at": _now_iso()})
            .eq("id", enrollment_id)
            .execute()
        )
        return response.data[0]

    def advance_cursor(
        self,
        enrollment_id: str,
        expected_day: int,
        new_day: int,
    ) -> Optional[Dict]:
        """
        Conditionally advance last_delivered_day.

        PostgREST applies the filters and the update in a single UPDATE
        statement, so the row only changes if nobody advanced it since it
        was read.
        """
        response = (
            self._client.table(TABLE)
            .update({"last_delivered_day": new_day, "updated_at": _now_iso()})
            .eq("id", enrollment_id)
            .eq("status", "active")
            .eq("last_delivered_day", expected_day)
            .execute()
        )
        if not response.data:
            logger.info(
                f"Cursor for enrollment {enrollment_id} moved past {expected_day}; not advancing"
            )
            return None
        return response.data[0]

    def append_completed_element(self, enrollment_id: str, element_id: str) -> Optional[Dict]:
        """
        Append to completed_elements through a database function.

        Requires this function in the database:

            CREATE OR REPLACE FUNCTION append_enrollment_completed_element(
                p_enrollment_id uuid, p_element_id text
            ) RETURNS SETOF program_enrollments AS $$
                UPDATE program_enrollments
                SET completed_elements = CASE
                        WHEN p_element_id = ANY(completed_elements) THEN completed_elements
                        ELSE array_append(coalesce(completed_elements, '{}'), p_element_id)
                    END,
                    updated_at = now()
                WHERE id = p_enrollment_id
                RETURNING *;
            $$ LANGUAGE sql;
        """
        response = self._client.rpc(
            "append_enrollment_completed_element",
            {"p_enrollment_id": enrollment_id, "p_element_id": element_id},
        ).execute()
        if not response.data:
            return None
        return response.data[0]
