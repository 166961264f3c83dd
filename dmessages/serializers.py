from rest_framework import serializers

from users.profiles import missing_profile
from .models import Message


class MessageSerializer(serializers.ModelSerializer):
    """
    Wire shape of a stored message with both participants' public profiles.

    Profiles are resolved by the caller and passed in ``context['profiles']``
    so a whole conversation costs one user lookup.
    """
    conversationId = serializers.CharField(source='conversation_id', read_only=True)
    senderId = serializers.CharField(source='sender_id', read_only=True)
    receiverId = serializers.CharField(source='receiver_id', read_only=True)
    listingId = serializers.CharField(source='listing_id', read_only=True, allow_null=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    sender = serializers.SerializerMethodField()
    receiver = serializers.SerializerMethodField()

    class Meta:
        model = Message
        fields = [
            'id', 'conversationId', 'senderId', 'receiverId', 'listingId',
            'message', 'createdAt', 'sender', 'receiver',
        ]
        read_only_fields = ['id', 'message']

    def _profile(self, user_id):
        profiles = self.context.get('profiles') or {}
        return profiles.get(user_id) or missing_profile(user_id)

    def get_sender(self, obj):
        return self._profile(obj.sender_id)

    def get_receiver(self, obj):
        return self._profile(obj.receiver_id)
