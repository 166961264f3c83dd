from django.contrib import admin

from .models import Message


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    list_display = ('id', 'conversation_id', 'sender_id', 'receiver_id', 'listing_id', 'created_at')
    search_fields = ('conversation_id', 'sender_id', 'receiver_id', 'message')
    readonly_fields = ('conversation_id', 'created_at')
