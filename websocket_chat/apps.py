from django.apps import AppConfig


class WebsocketChatConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "websocket_chat"
    verbose_name = "Real-time chat"

    def ready(self):
        from .registry import ConnectionRegistry

        # One registry per process, owned by the app config
        self.registry = ConnectionRegistry()
