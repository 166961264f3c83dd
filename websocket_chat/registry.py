import logging
from typing import Dict, FrozenSet, List, Set

from django.apps import apps

logger = logging.getLogger(__name__)


class ConnectionRegistry:
    """
    Process-wide map from user id to the channel names of its open sockets.

    A user may hold several connections (one per tab); each connection only
    ever adds or removes its own entry. Entries that drop to zero connections
    are kept, so rejoining simply refills them.
    """

    def __init__(self):
        self._connections: Dict[str, Set[str]] = {}

    def register(self, user_id: str, channel_name: str) -> int:
        channels = self._connections.setdefault(str(user_id), set())
        channels.add(channel_name)
        logger.debug("Registered %s for user %s (%d open)", channel_name, user_id, len(channels))
        return len(channels)

    def unregister(self, user_id: str, channel_name: str) -> int:
        channels = self._connections.get(str(user_id))
        if channels is None:
            return 0
        channels.discard(channel_name)
        logger.debug("Unregistered %s for user %s (%d open)", channel_name, user_id, len(channels))
        return len(channels)

    def connections_for(self, user_id: str) -> FrozenSet[str]:
        return frozenset(self._connections.get(str(user_id), ()))

    def is_online(self, user_id: str) -> bool:
        return bool(self._connections.get(str(user_id)))

    def online_users(self) -> List[str]:
        return [user_id for user_id, channels in self._connections.items() if channels]

    def has_entry(self, user_id: str) -> bool:
        return str(user_id) in self._connections

    def clear(self):
        self._connections.clear()


def get_connection_registry() -> ConnectionRegistry:
    """The registry owned by the websocket_chat app config."""
    return apps.get_app_config('websocket_chat').registry
