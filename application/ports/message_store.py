"""
Message store port (interface).

The chat system is an external collaborator; program delivery only needs
to find the coach/client conversation and post a message into it.
"""

from typing import Dict, Protocol


class MessageStore(Protocol):
    """Interface for posting chat messages."""

    def get_or_create_conversation(self, coach_id: str, client_id: str) -> str:
        """
        Get the personal conversation between a coach and a client.

        Creates the conversation when it does not exist yet.

        Args:
            coach_id: The coach's user ID
            client_id: The client record ID

        Returns:
            Conversation ID
        """
        ...

    def send_message(
        self,
        conversation_id: str,
        sender_id: str,
        content: str,
        message_type: str = "text",
    ) -> Dict:
        """
        Post a message into a conversation.

        Args:
            conversation_id: Target conversation
            sender_id: User ID of the sender
            content: Message body
            message_type: Message type (default "text")

        Returns:
            Created message dictionary (includes "id")
        """
        ...
