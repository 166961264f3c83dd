import html
import logging
from typing import Dict, List, Optional, Tuple

import bleach
from asgiref.sync import async_to_sync
from channels.db import database_sync_to_async
from django.conf import settings
from django.db import DatabaseError

from conversations.index import build_conversation_index, counterpart_ids
from conversations.serializers import ConversationSummarySerializer
from listings.models import Listing
from users.models import User
from users.profiles import get_public_profiles
from websocket_chat.services import DeliveryChannel
from .exceptions import NotFoundError, StoreError, ValidationError
from .serializers import MessageSerializer
from .store import MessageStore

logger = logging.getLogger(__name__)


MAX_ID_LENGTH = 100


def _clean_id(value, field) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field} is required")
    value = str(value).strip()
    if len(value) > MAX_ID_LENGTH:
        raise ValidationError(f"{field} cannot exceed {MAX_ID_LENGTH} characters")
    return value


def sanitize_message(content: str) -> str:
    """Strip all markup from a message body, keeping plain text as typed."""
    # bleach escapes the text it keeps
    return html.unescape(bleach.clean(content, tags=[], attributes={}, strip=True)).strip()


class MessagingService:
    """
    Single entry point for sending and reading direct messages.

    The HTTP views and the websocket consumer both go through
    ``send_message``/``asend_message``, so validation, persistence and
    real-time delivery are identical whichever transport the sender uses.
    """

    def __init__(self, delivery: Optional[DeliveryChannel] = None, store=MessageStore):
        self.delivery = delivery or DeliveryChannel()
        self.store = store

    def validate(self, sender_id, receiver_id, message, listing_id=None) -> Tuple[str, str, str, Optional[str]]:
        sender_id = _clean_id(sender_id, "senderId")
        receiver_id = _clean_id(receiver_id, "receiverId")

        if message is None:
            raise ValidationError("message is required")
        if not isinstance(message, str):
            raise ValidationError("message must be a string")
        text = sanitize_message(message)
        if not text:
            raise ValidationError("message cannot be empty")
        max_length = getattr(settings, 'MESSAGE_MAX_LENGTH', 5000)
        if len(text) > max_length:
            raise ValidationError(f"message cannot exceed {max_length} characters")

        listing_id = str(listing_id).strip() if listing_id not in (None, "") else None
        if listing_id and len(listing_id) > MAX_ID_LENGTH:
            raise ValidationError(f"listingId cannot exceed {MAX_ID_LENGTH} characters")
        return sender_id, receiver_id, text, listing_id or None

    def _require_user(self, user_id):
        if not User.objects.filter(user_id=user_id).exists():
            raise NotFoundError(f"user {user_id} does not exist")

    def _require_listing(self, listing_id):
        if not listing_id.isdigit() or not Listing.objects.filter(pk=int(listing_id)).exists():
            raise NotFoundError(f"listing {listing_id} does not exist")

    def _check_references(self, receiver_id, listing_id):
        """Log dangling references; the message is stored either way."""
        try:
            self._require_user(receiver_id)
            if listing_id:
                self._require_listing(listing_id)
        except NotFoundError as e:
            logger.warning("Storing message with a dangling reference: %s", e)
        except DatabaseError as e:
            raise StoreError(f"Failed to check message references: {e}") from e

    def _profiles(self, user_ids) -> Dict[str, Dict]:
        try:
            return get_public_profiles(user_ids)
        except DatabaseError as e:
            logger.exception("Failed to resolve user profiles")
            raise StoreError(f"Failed to resolve user profiles: {e}") from e

    def create_message(self, sender_id, receiver_id, message, listing_id=None) -> Dict:
        """Validate and persist a message; returns its serialized form."""
        sender_id, receiver_id, text, listing_id = self.validate(sender_id, receiver_id, message, listing_id)
        self._check_references(receiver_id, listing_id)

        record = self.store.append(sender_id, receiver_id, text, listing_id)
        logger.info("Message %s stored in conversation %s", record.id, record.conversation_id)

        profiles = self._profiles([record.sender_id, record.receiver_id])
        return dict(MessageSerializer(record, context={'profiles': profiles}).data)

    def send_message(self, sender_id, receiver_id, message, listing_id=None) -> Dict:
        """Synchronous send used by the HTTP views."""
        payload = self.create_message(sender_id, receiver_id, message, listing_id)
        try:
            async_to_sync(self.delivery.deliver)(payload)
        except Exception:
            # Already persisted; the receiver sees it on the next fetch
            logger.exception("Real-time delivery failed for message %s", payload['id'])
        return payload

    async def asend_message(self, sender_id, receiver_id, message, listing_id=None) -> Dict:
        """Awaitable send used by the websocket consumer."""
        payload = await database_sync_to_async(self.create_message)(sender_id, receiver_id, message, listing_id)
        try:
            await self.delivery.deliver(payload)
        except Exception:
            logger.exception("Real-time delivery failed for message %s", payload['id'])
        return payload

    def get_conversation(self, user_id, other_user_id) -> List[Dict]:
        """Messages between the two users, oldest first, with profiles attached."""
        user_id = _clean_id(user_id, "userId")
        other_user_id = _clean_id(other_user_id, "otherUserId")

        messages = self.store.find_conversation(user_id, other_user_id)
        profiles = self._profiles([user_id, other_user_id])
        return MessageSerializer(messages, many=True, context={'profiles': profiles}).data

    def list_conversations(self, user_id) -> List[Dict]:
        """One summary per counterpart, most recently active first."""
        user_id = _clean_id(user_id, "userId")

        messages = self.store.find_all_for_user(user_id)
        profiles = self._profiles(counterpart_ids(user_id, messages))
        summaries = build_conversation_index(user_id, messages, profiles)
        return ConversationSummarySerializer(summaries, many=True).data
