import hashlib
import logging
import re
from typing import Dict

from channels.layers import get_channel_layer

logger = logging.getLogger(__name__)

# Channel layers accept ASCII alphanumerics, hyphens, underscores and periods
_GROUP_SAFE_ID = re.compile(r'^[A-Za-z0-9_.-]{1,90}$')

RECEIVE_MESSAGE = 'receive_message'
MESSAGE_SENT = 'message_sent'


def user_group_name(user_id) -> str:
    """Channel layer group that every socket joined as ``user_id`` belongs to."""
    user_id = str(user_id)
    if _GROUP_SAFE_ID.match(user_id):
        return f"user_{user_id}"
    digest = hashlib.sha256(user_id.encode('utf-8')).hexdigest()
    return f"user_h{digest[:48]}"


class DeliveryChannel:
    """
    Per-user broadcast over the channel layer.

    Delivery is best effort: users without an open socket simply miss the
    event and see the message on their next fetch.
    """

    def __init__(self, channel_layer=None):
        self._channel_layer = channel_layer

    @property
    def channel_layer(self):
        if self._channel_layer is None:
            self._channel_layer = get_channel_layer()
        return self._channel_layer

    async def subscribe(self, user_id, channel_name):
        await self.channel_layer.group_add(user_group_name(user_id), channel_name)

    async def unsubscribe(self, user_id, channel_name):
        await self.channel_layer.group_discard(user_group_name(user_id), channel_name)

    async def deliver(self, message: Dict):
        """
        Push a persisted message to the receiver's sockets as
        ``receive_message`` and to the sender's sockets as ``message_sent``.
        """
        layer = self.channel_layer
        if layer is None:
            logger.warning("No channel layer configured; message %s not pushed", message.get('id'))
            return

        await layer.group_send(
            user_group_name(message['receiverId']),
            {'type': RECEIVE_MESSAGE, 'message': message},
        )
        await layer.group_send(
            user_group_name(message['senderId']),
            {'type': MESSAGE_SENT, 'message': message},
        )
