import json
import logging
import time

from channels.generic.websocket import AsyncWebsocketConsumer
from django.conf import settings

from dmessages.exceptions import MessagingError
from dmessages.services import MessagingService
from .registry import get_connection_registry
from .services import DeliveryChannel

logger = logging.getLogger(__name__)


class ChatConsumer(AsyncWebsocketConsumer):
    """
    WebSocket consumer for direct messages.

    Each socket joins the channel of one user; everything pushed to that user
    (``receive_message`` for incoming messages, ``message_sent`` for copies of
    their own) reaches every socket joined as them.

    Frames are JSON objects ``{"type": <event>, "data": <payload>}`` in both
    directions.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = None
        self.authenticated_user_id = None
        self.connected_at = None
        self.delivery = DeliveryChannel()
        self.messaging = MessagingService(delivery=self.delivery)
        self.handlers = {
            'join': self.handle_join,
            'leave': self.handle_leave,
            'send_message': self.handle_send_message,
            'heartbeat': self.handle_heartbeat,
        }

    async def connect(self):
        """Accept the socket; token authentication is optional unless required by settings"""
        self.authenticated_user_id = self.scope.get('user_id')
        if settings.WEBSOCKET_REQUIRE_AUTH and not self.authenticated_user_id:
            await self.close(code=4001)
            return

        self.connected_at = time.monotonic()
        await self.accept()

    async def disconnect(self, code):
        """Leave the user channel; the registry keeps the (possibly empty) entry"""
        await self.leave_user_channel()

    async def receive(self, text_data=None, bytes_data=None):
        """Dispatch an incoming frame to its event handler"""
        if self.expired():
            await self.send_error("Connection expired")
            await self.close(code=4008)
            return

        if text_data is None:
            await self.send_error("Binary frames are not supported")
            return

        max_size = self.scope.get('max_message_size', settings.WEBSOCKET_MAX_MESSAGE_SIZE)
        if len(text_data) > max_size:
            await self.send_error("Message too large")
            return

        try:
            data = json.loads(text_data)
        except json.JSONDecodeError:
            await self.send_error("Invalid JSON format")
            return

        if not isinstance(data, dict):
            await self.send_error("Invalid event format")
            return

        handler = self.handlers.get(data.get('type'))
        if handler is None:
            await self.send_error("Unknown event type")
            return

        try:
            await handler(data.get('data'))
        except Exception as e:
            logger.exception("Unhandled error in %s handler", data.get('type'))
            await self.send_error(f"Internal server error: {e}")

    def expired(self):
        """Sockets older than the configured connection timeout must reconnect"""
        timeout = self.scope.get('connection_timeout', settings.WEBSOCKET_CONNECTION_TIMEOUT)
        return self.connected_at is not None and time.monotonic() - self.connected_at >= timeout

    async def handle_join(self, payload):
        """Subscribe this socket to a user's channel"""
        if isinstance(payload, dict):
            payload = payload.get('userId')
        user_id = str(payload).strip() if payload is not None else ''

        if not user_id:
            await self.send_error("userId required")
            return

        if self.authenticated_user_id and user_id != str(self.authenticated_user_id):
            await self.send_error("Cannot join another user's channel")
            return

        if self.user_id != user_id:
            await self.leave_user_channel()
            await self.delivery.subscribe(user_id, self.channel_name)
            get_connection_registry().register(user_id, self.channel_name)
            self.user_id = user_id

        await self.send_event('joined', {'userId': user_id})

    async def handle_leave(self, payload):
        user_id = self.user_id
        await self.leave_user_channel()
        await self.send_event('left', {'userId': user_id})

    async def handle_send_message(self, payload):
        """Persist a message and push it to both participants"""
        if not isinstance(payload, dict):
            await self.send_error("Message payload must be an object")
            return

        sender_id = payload.get('senderId') or self.authenticated_user_id or self.user_id
        if self.authenticated_user_id and str(sender_id) != str(self.authenticated_user_id):
            await self.send_error("senderId does not match the authenticated user")
            return

        try:
            await self.messaging.asend_message(
                sender_id,
                payload.get('receiverId'),
                payload.get('message'),
                payload.get('listingId'),
            )
        except MessagingError as e:
            await self.send_error(str(e))

    async def handle_heartbeat(self, payload):
        await self.send_event('heartbeat_response', {'timestamp': time.time()})

    async def receive_message(self, event):
        """Channel layer event: a message addressed to this user"""
        await self.send_event('receive_message', event['message'])

    async def message_sent(self, event):
        """Channel layer event: a message this user sent, possibly from another socket"""
        await self.send_event('message_sent', event['message'])

    async def leave_user_channel(self):
        if self.user_id is None:
            return
        await self.delivery.unsubscribe(self.user_id, self.channel_name)
        get_connection_registry().unregister(self.user_id, self.channel_name)
        logger.debug("Socket %s left channel of %s", self.channel_name, self.user_id)
        self.user_id = None

    async def send_event(self, event_type, data):
        await self.send(text_data=json.dumps({
            'type': event_type,
            'data': data,
        }))

    async def send_error(self, message):
        """Send ``message_error`` to this socket only"""
        await self.send_event('message_error', {'error': message})
