from datetime import datetime, timedelta, timezone as dt_timezone

from django.test import SimpleTestCase

from conversations.index import build_conversation_index, counterpart_ids
from conversations.serializers import ConversationSummarySerializer
from dmessages.models import Message, build_conversation_id


def make_message(sender_id, receiver_id, text, minutes, listing_id=None):
    """Unsaved message with a fixed timestamp."""
    message = Message(
        conversation_id=build_conversation_id(sender_id, receiver_id),
        sender_id=sender_id,
        receiver_id=receiver_id,
        listing_id=listing_id,
        message=text,
    )
    message.created_at = datetime(2024, 3, 1, 9, 0, tzinfo=dt_timezone.utc) + timedelta(minutes=minutes)
    return message


class ConversationIndexTest(SimpleTestCase):
    def setUp(self):
        self.profiles = {
            "buyer-1": {"id": "buyer-1", "username": "Asha", "email": "asha@example.com"},
            "buyer-2": {"id": "buyer-2", "username": "Vikram", "email": None},
        }
        # newest first, as the store returns them
        self.messages = [
            make_message("farmer-1", "buyer-1", "see you at the mandi", 30, listing_id="4"),
            make_message("buyer-2", "farmer-1", "is it organic?", 20),
            make_message("buyer-1", "farmer-1", "I'll take 10 quintal", 10, listing_id="4"),
            make_message("buyer-2", "farmer-1", "hello", 0),
        ]

    def test_one_entry_per_counterpart(self):
        index = build_conversation_index("farmer-1", self.messages, self.profiles)

        self.assertEqual([entry["user_id"] for entry in index], ["buyer-1", "buyer-2"])

    def test_latest_message_wins(self):
        index = build_conversation_index("farmer-1", self.messages, self.profiles)

        self.assertEqual(index[0]["last_message"], "see you at the mandi")
        self.assertEqual(index[0]["listing_id"], "4")
        self.assertEqual(index[1]["last_message"], "is it organic?")
        self.assertEqual(index[1]["last_message_time"], self.messages[1].created_at)
        self.assertIsNone(index[1]["listing_id"])

    def test_profiles_attached(self):
        index = build_conversation_index("farmer-1", self.messages, self.profiles)

        self.assertEqual(index[0]["username"], "Asha")
        self.assertEqual(index[0]["email"], "asha@example.com")
        self.assertEqual(index[0]["conversation_id"], "buyer-1_farmer-1")

    def test_missing_profile_yields_nulls(self):
        index = build_conversation_index("farmer-1", self.messages, {})

        self.assertEqual(index[0]["user_id"], "buyer-1")
        self.assertIsNone(index[0]["username"])
        self.assertIsNone(index[0]["email"])

    def test_view_from_the_other_side(self):
        index = build_conversation_index("buyer-2", self.messages[1::2], self.profiles)

        self.assertEqual(len(index), 1)
        self.assertEqual(index[0]["user_id"], "farmer-1")

    def test_empty(self):
        self.assertEqual(build_conversation_index("farmer-1", [], self.profiles), [])
        self.assertEqual(counterpart_ids("farmer-1", []), set())

    def test_counterpart_ids(self):
        self.assertEqual(counterpart_ids("farmer-1", self.messages), {"buyer-1", "buyer-2"})

    def test_serialized_shape(self):
        index = build_conversation_index("farmer-1", self.messages, self.profiles)

        data = ConversationSummarySerializer(index, many=True).data

        self.assertEqual(set(data[0].keys()), {
            "conversationId", "userId", "username", "email",
            "lastMessage", "lastMessageTime", "listingId",
        })
        self.assertEqual(data[0]["lastMessage"], "see you at the mandi")
        self.assertEqual(data[1]["listingId"], None)
