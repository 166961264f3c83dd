from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from .models import User
from .serializers import UserSerializer


class CurrentUserView(APIView):
    """Return the profile of the authenticated caller."""

    def get(self, request):
        try:
            user = User.objects.get(user_id=request.user_id)
        except User.DoesNotExist:
            return Response({
                'success': False,
                'message': 'User not found',
            }, status=status.HTTP_404_NOT_FOUND)

        return Response({
            'success': True,
            'user': UserSerializer(user).data,
        })
