from django.urls import path
from .views import ConversationListView, ConversationView, SendMessageView

urlpatterns = [
    path('conversation/<str:other_user_id>', ConversationView.as_view(), name='conversation'),
    path('conversations', ConversationListView.as_view(), name='conversation-list'),
    path('send', SendMessageView.as_view(), name='send-message'),
]
