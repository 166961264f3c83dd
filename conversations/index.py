"""
Conversation index: one summary per counterpart, most recently active first.

The index is derived from the message store on every read; nothing here is
persisted.
"""

from typing import Dict, Iterable, List

from users.profiles import missing_profile


def build_conversation_index(user_id: str, messages: Iterable, profiles: Dict[str, Dict]) -> List[Dict]:
    """
    Group ``messages`` by counterpart of ``user_id``.

    ``messages`` must be ordered newest first, so the first message seen for a
    counterpart is the most recent one; later messages for the same
    counterpart are ignored. Dicts keep insertion order, which makes the
    result most-recently-active first.
    """
    user_id = str(user_id)
    conversations = {}

    for message in messages:
        other_id = message.counterpart_of(user_id)
        if other_id in conversations:
            continue

        profile = profiles.get(other_id) or missing_profile(other_id)
        conversations[other_id] = {
            'conversation_id': message.conversation_id,
            'user_id': other_id,
            'username': profile['username'],
            'email': profile['email'],
            'last_message': message.message,
            'last_message_time': message.created_at,
            'listing_id': message.listing_id,
        }

    return list(conversations.values())


def counterpart_ids(user_id: str, messages: Iterable) -> set:
    """Ids of everyone ``user_id`` has exchanged a message with."""
    return {message.counterpart_of(user_id) for message in messages}
