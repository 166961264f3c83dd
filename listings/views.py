import logging

from django.db import DatabaseError
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from kisansetu.permissions import IsAuthenticatedOrReadOnly
from .models import Listing
from .serializers import ListingSerializer, serialize_listings

logger = logging.getLogger(__name__)

REQUIRED_FIELDS_MESSAGE = "Missing required fields: commodity, quantity, expectedPrice, location"


def error_response(message, error, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR):
    return Response({
        "success": False,
        "message": message,
        "error": str(error),
    }, status=status_code)


class ListingCreateView(APIView):
    """Create a new listing owned by the authenticated farmer"""

    def post(self, request):
        serializer = ListingSerializer(data=request.data)
        if not serializer.is_valid():
            missing = {"commodity", "quantity", "expectedPrice", "location"} & set(serializer.errors)
            return Response({
                "success": False,
                "message": REQUIRED_FIELDS_MESSAGE if missing else "Invalid listing data",
                "errors": serializer.errors,
            }, status=status.HTTP_400_BAD_REQUEST)

        try:
            listing = serializer.save(farmer_id=request.user_id)
            data = ListingSerializer(listing).data
        except DatabaseError as e:
            logger.exception("Error creating listing for %s", request.user_id)
            return error_response("Error creating listing", e)
        logger.info("Listing %s created by %s", listing.id, request.user_id)

        return Response({
            "success": True,
            "message": "Listing created successfully",
            "listing": data,
        }, status=status.HTTP_201_CREATED)


class MyListingsView(APIView):
    """All listings of the authenticated farmer, newest first"""

    def get(self, request):
        try:
            data = serialize_listings(
                Listing.objects.filter(farmer_id=request.user_id).order_by("-created_at", "-id")
            )
        except DatabaseError as e:
            logger.exception("Error fetching listings of %s", request.user_id)
            return error_response("Error fetching listings", e)

        return Response({
            "success": True,
            "listings": data,
            "count": len(data),
        })


class AllListingsView(APIView):
    """Public marketplace feed, newest first"""
    permission_classes = [AllowAny]

    def get(self, request):
        try:
            data = serialize_listings(Listing.objects.all().order_by("-created_at", "-id"))
        except DatabaseError as e:
            logger.exception("Error fetching listings")
            return error_response("Error fetching listings", e)

        return Response({
            "success": True,
            "listings": data,
            "count": len(data),
        })


class ListingDetailView(APIView):
    """
    Retrieve (public), update or delete (owner only) a listing
    """
    permission_classes = [IsAuthenticatedOrReadOnly]

    def get_listing(self, pk):
        try:
            return Listing.objects.get(pk=pk)
        except Listing.DoesNotExist:
            return None

    def not_found(self):
        return Response({
            "success": False,
            "message": "Listing not found",
        }, status=status.HTTP_404_NOT_FOUND)

    def get(self, request, pk):
        try:
            listing = self.get_listing(pk)
            if listing is None:
                return self.not_found()
            data = ListingSerializer(listing).data
        except DatabaseError as e:
            logger.exception("Error fetching listing %s", pk)
            return error_response("Error fetching listing", e)

        return Response({
            "success": True,
            "listing": data,
        })

    def put(self, request, pk):
        try:
            listing = self.get_listing(pk)
            if listing is None:
                return self.not_found()

            if not listing.is_owned_by(request.user_id):
                return Response({
                    "success": False,
                    "message": "Not authorized to update this listing",
                }, status=status.HTTP_403_FORBIDDEN)

            # Only the fields present in the body are changed
            serializer = ListingSerializer(listing, data=request.data, partial=True)
            if not serializer.is_valid():
                return Response({
                    "success": False,
                    "message": "Invalid listing data",
                    "errors": serializer.errors,
                }, status=status.HTTP_400_BAD_REQUEST)
            listing = serializer.save()
            data = ListingSerializer(listing).data
        except DatabaseError as e:
            logger.exception("Error updating listing %s", pk)
            return error_response("Error updating listing", e)

        return Response({
            "success": True,
            "message": "Listing updated successfully",
            "listing": data,
        })

    def delete(self, request, pk):
        try:
            listing = self.get_listing(pk)
            if listing is None:
                return self.not_found()

            if not listing.is_owned_by(request.user_id):
                return Response({
                    "success": False,
                    "message": "Not authorized to delete this listing",
                }, status=status.HTTP_403_FORBIDDEN)

            listing.delete()
        except DatabaseError as e:
            logger.exception("Error deleting listing %s", pk)
            return error_response("Error deleting listing", e)
        logger.info("Listing %s deleted by %s", pk, request.user_id)

        return Response({
            "success": True,
            "message": "Listing deleted successfully",
        })
