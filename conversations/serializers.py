from rest_framework import serializers


class ConversationSummarySerializer(serializers.Serializer):
    """Wire shape of an entry produced by ``build_conversation_index``."""
    conversationId = serializers.CharField(source='conversation_id')
    userId = serializers.CharField(source='user_id')
    username = serializers.CharField(allow_null=True)
    email = serializers.CharField(allow_null=True)
    lastMessage = serializers.CharField(source='last_message')
    lastMessageTime = serializers.DateTimeField(source='last_message_time')
    listingId = serializers.CharField(source='listing_id', allow_null=True)
