import logging
import time
from urllib.parse import parse_qs

from channels.middleware import BaseMiddleware
from django.conf import settings
from django.core.cache import cache

from kisansetu.jwt_utils import get_user_id_from_token

logger = logging.getLogger(__name__)


class WebSocketAuthMiddleware(BaseMiddleware):
    """
    Middleware for WebSocket authentication and connection rate limiting.

    A ``token`` query parameter is validated when present and its subject is
    put in ``scope['user_id']``. Anonymous sockets are allowed unless
    ``WEBSOCKET_REQUIRE_AUTH`` is set.
    """

    async def __call__(self, scope, receive, send):
        scope = dict(scope)
        query_string = scope.get('query_string', b'').decode()
        query_params = parse_qs(query_string)
        token = query_params.get('token', [None])[0]

        user_id = None
        if token:
            user_id = get_user_id_from_token(token)
            if not user_id:
                await send({
                    'type': 'websocket.close',
                    'code': 4001,
                    'reason': 'Invalid authentication token'
                })
                return
        elif settings.WEBSOCKET_REQUIRE_AUTH:
            await send({
                'type': 'websocket.close',
                'code': 4001,
                'reason': 'Authentication token required'
            })
            return

        if not await self.check_rate_limit(self.rate_limit_key(scope, user_id)):
            await send({
                'type': 'websocket.close',
                'code': 4029,
                'reason': 'Rate limit exceeded'
            })
            return

        scope['user_id'] = user_id
        scope['authenticated'] = user_id is not None

        return await super().__call__(scope, receive, send)

    def rate_limit_key(self, scope, user_id):
        if user_id:
            return f"websocket_rate_limit:user:{user_id}"
        client = scope.get('client') or ['unknown']
        return f"websocket_rate_limit:addr:{client[0]}"

    async def check_rate_limit(self, cache_key):
        """Check if the caller has exceeded the per-minute connection limit"""
        current_time = int(time.time())

        rate_data = await cache.aget(cache_key) or {'count': 0, 'window_start': current_time}

        # Reset window if needed
        if current_time - rate_data['window_start'] >= 60:
            rate_data = {'count': 0, 'window_start': current_time}

        if rate_data['count'] >= settings.WEBSOCKET_RATE_LIMIT:
            logger.warning("WebSocket rate limit exceeded for %s", cache_key)
            return False

        rate_data['count'] += 1
        await cache.aset(cache_key, rate_data, 60)

        return True


class WebSocketSecurityMiddleware(BaseMiddleware):
    """
    Puts the configured WebSocket limits in the scope for consumers
    """

    async def __call__(self, scope, receive, send):
        scope = dict(scope)
        scope['max_message_size'] = settings.WEBSOCKET_MAX_MESSAGE_SIZE
        scope['connection_timeout'] = settings.WEBSOCKET_CONNECTION_TIMEOUT

        return await super().__call__(scope, receive, send)
