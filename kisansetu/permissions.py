from rest_framework.permissions import BasePermission, SAFE_METHODS


class IsAuthenticatedUser(BasePermission):
    """Allows access only to requests carrying a valid bearer token."""

    def has_permission(self, request, view):
        return bool(request.user and getattr(request, "user_id", None))


class IsAuthenticatedOrReadOnly(BasePermission):
    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return True
        return bool(request.user and getattr(request, "user_id", None))

