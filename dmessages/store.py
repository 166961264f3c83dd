import logging
from typing import List, Optional

from django.db import DatabaseError
from django.db.models import Q

from .exceptions import StoreError, ValidationError
from .models import Message, build_conversation_id

logger = logging.getLogger(__name__)


class MessageStore:
    """
    Persistence and retrieval of Message records.

    Append-only: no update or delete operations are exposed.
    """

    @staticmethod
    def append(sender_id: str, receiver_id: str, message: str, listing_id: Optional[str] = None) -> Message:
        """
        Persist a new message and return the stored record.

        The conversation id is computed here, once, from the two participants.
        """
        if not sender_id or not str(sender_id).strip():
            raise ValidationError("senderId is required")
        if not receiver_id or not str(receiver_id).strip():
            raise ValidationError("receiverId is required")
        if not message:
            raise ValidationError("message cannot be empty")

        try:
            return Message.objects.create(
                conversation_id=build_conversation_id(sender_id, receiver_id),
                sender_id=str(sender_id),
                receiver_id=str(receiver_id),
                listing_id=str(listing_id) if listing_id else None,
                message=message,
            )
        except DatabaseError as e:
            logger.exception("Failed to save message from %s to %s", sender_id, receiver_id)
            raise StoreError(f"Failed to save message: {e}") from e

    @staticmethod
    def find_conversation(user_a: str, user_b: str) -> List[Message]:
        """
        Messages exchanged between two users in either direction, oldest first.
        """
        try:
            return list(
                Message.objects.filter(
                    Q(sender_id=user_a, receiver_id=user_b) | Q(sender_id=user_b, receiver_id=user_a)
                ).order_by('created_at', 'id')
            )
        except DatabaseError as e:
            logger.exception("Failed to fetch conversation between %s and %s", user_a, user_b)
            raise StoreError(f"Failed to fetch conversation: {e}") from e

    @staticmethod
    def find_all_for_user(user_id: str) -> List[Message]:
        """
        Every message the user sent or received, newest first.
        """
        try:
            return list(
                Message.objects.filter(
                    Q(sender_id=user_id) | Q(receiver_id=user_id)
                ).order_by('-created_at', '-id')
            )
        except DatabaseError as e:
            logger.exception("Failed to fetch messages for %s", user_id)
            raise StoreError(f"Failed to fetch messages: {e}") from e
