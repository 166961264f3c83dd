import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from .exceptions import StoreError, ValidationError
from .services import MessagingService

logger = logging.getLogger(__name__)


def error_response(message, error, status_code):
    return Response({
        'success': False,
        'message': message,
        'error': str(error),
    }, status=status_code)


class ConversationView(APIView):
    """Messages between the caller and another user, oldest first"""

    def get(self, request, other_user_id):
        try:
            messages = MessagingService().get_conversation(request.user_id, other_user_id)
        except ValidationError as e:
            return error_response('Invalid conversation request', e, status.HTTP_400_BAD_REQUEST)
        except StoreError as e:
            logger.error("Error fetching conversation: %s", e)
            return error_response('Error fetching conversation', e, status.HTTP_500_INTERNAL_SERVER_ERROR)

        return Response({
            'success': True,
            'messages': messages,
        })


class ConversationListView(APIView):
    """One entry per counterpart, most recently active first"""

    def get(self, request):
        try:
            conversations = MessagingService().list_conversations(request.user_id)
        except StoreError as e:
            logger.error("Error fetching conversations: %s", e)
            return error_response('Error fetching conversations', e, status.HTTP_500_INTERNAL_SERVER_ERROR)

        return Response({
            'success': True,
            'conversations': conversations,
        })


class SendMessageView(APIView):
    """
    HTTP fallback for clients without an open socket.

    Goes through the same service call as the socket path, so connected
    participants are still notified in real time.
    """

    def post(self, request):
        data = request.data
        try:
            message = MessagingService().send_message(
                sender_id=request.user_id,
                receiver_id=data.get('receiverId'),
                message=data.get('message'),
                listing_id=data.get('listingId'),
            )
        except ValidationError as e:
            return error_response('Invalid message', e, status.HTTP_400_BAD_REQUEST)
        except StoreError as e:
            logger.error("Error sending message: %s", e)
            return error_response('Error sending message', e, status.HTTP_500_INTERNAL_SERVER_ERROR)

        return Response({
            'success': True,
            'message': message,
        }, status=status.HTTP_201_CREATED)
