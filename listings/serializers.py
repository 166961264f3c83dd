from rest_framework import serializers

from users.profiles import get_public_profiles, missing_profile
from .models import Listing


class ListingSerializer(serializers.ModelSerializer):
    farmerId = serializers.CharField(source="farmer_id", read_only=True)
    farmer = serializers.SerializerMethodField()
    commodity = serializers.CharField(max_length=120)
    variety = serializers.CharField(max_length=120, required=False, allow_blank=True)
    quantity = serializers.FloatField()
    unit = serializers.ChoiceField(choices=Listing.UNIT_CHOICES, required=False)
    expectedPrice = serializers.FloatField(source="expected_price")
    description = serializers.CharField(required=False, allow_blank=True)
    location = serializers.CharField(max_length=255)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Listing
        fields = [
            "id",
            "farmerId",
            "farmer",
            "commodity",
            "variety",
            "quantity",
            "unit",
            "expectedPrice",
            "description",
            "location",
            "createdAt",
            "updatedAt",
        ]

    def get_farmer(self, obj):
        """
        Public profile of the listing's owner.

        List views resolve every owner up front and pass them in
        ``context["profiles"]``; single-object views fall back to a lookup.
        """
        profiles = self.context.get("profiles")
        if profiles is None:
            profiles = get_public_profiles([obj.farmer_id])
        return profiles.get(obj.farmer_id, missing_profile(obj.farmer_id))

    def validate_quantity(self, value):
        if value <= 0:
            raise serializers.ValidationError("Quantity must be greater than zero.")
        return value

    def validate_expectedPrice(self, value):
        if value <= 0:
            raise serializers.ValidationError("Expected price must be greater than zero.")
        return value


def serialize_listings(listings):
    """Serialize a list of listings, resolving owner profiles in one query."""
    listings = list(listings)
    profiles = get_public_profiles(listing.farmer_id for listing in listings)
    return ListingSerializer(listings, many=True, context={"profiles": profiles}).data
