"""
Supabase implementation of MessageStore.

Queries against:
- clients: Maps a client record to its user account
- conversations / conversation_participants: Personal coach/client chats
- messages: Chat messages
"""

import logging
from typing import Dict

from supabase import Client

from application.exceptions import NotFoundError

logger = logging.getLogger(__name__)


class SupabaseMessageStore:
    """
    Supabase-backed chat message store.

    Only covers what program delivery needs: finding (or opening) the
    personal conversation between a coach and a client and posting into it.
    Real-time fan-out to connected clients is handled by the chat service.
    """

    def __init__(self, client: Client):
        self._client = client

    def get_or_create_conversation(self, coach_id: str, client_id: str) -> str:
        client_user_id = self._client_user_id(client_id)

        coach_rows = (
            self._client.table("conversation_participants")
            .select("conversation_id")
            .eq("user_id", coach_id)
            .execute()
        ).data
        coach_conversations = [row["conversation_id"] for row in coach_rows]

        if coach_conversations:
            shared = (
                self._client.table("conversations")
                .select("id, conversation_participants!inner(user_id)")
                .eq("type", "personal")
                .in_("id", coach_conversations)
                .eq("conversation_participants.user_id", client_user_id)
                .limit(1)
                .execute()
            ).data
            if shared:
                return shared[0]["id"]

        conversation = (
            self._client.table("conversations")
            .insert({"type": "personal", "created_by": coach_id})
            .execute()
        ).data[0]
        self._client.table("conversation_participants").insert(
            [
                {"conversation_id": conversation["id"], "user_id": coach_id},
                {"conversation_id": conversation["id"], "user_id": client_user_id},
            ]
        ).execute()
        logger.info(f"Opened personal conversation {conversation['id']} for coach {coach_id}")
        return conversation["id"]

    def send_message(
        self,
        conversation_id: str,
        sender_id: str,
        content: str,
        message_type: str = "text",
    ) -> Dict:
        response = (
            self._client.table("messages")
            .insert(
                {
                    "conversation_id": conversation_id,
                    "sender_id": sender_id,
                    "content": content,
                    "type": message_type,
                }
            )
            .execute()
        )
        return response.data[0]

    def _client_user_id(self, client_id: str) -> str:
        rows = (
            self._client.table("clients")
            .select("user_id")
            .eq("id", client_id)
            .limit(1)
            .execute()
        ).data
        if not rows:
            raise NotFoundError(f"Client {client_id} not found")
        return rows[0]["user_id"]
