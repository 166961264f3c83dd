from unittest.mock import patch

from django.db import DatabaseError
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from kisansetu.jwt_utils import generate_test_token
from listings.models import Listing
from users.models import User


class ListingViewsTest(TestCase):
    def setUp(self):
        """Two farmers, one with an existing listing."""
        self.client = APIClient()
        self.farmer_id = "farmer-1"
        self.other_farmer_id = "farmer-2"
        User.objects.create(user_id=self.farmer_id, user_name="Ramesh", email="ramesh@example.com")

        self.listing = Listing.objects.create(
            farmer_id=self.farmer_id,
            commodity="Wheat",
            variety="Sharbati",
            quantity=20,
            unit="quintal",
            expected_price=2400,
            location="Sehore",
        )
        self.valid_payload = {
            "commodity": "Onion",
            "quantity": "150",
            "expectedPrice": "18.5",
            "location": "Nashik",
        }

    def authenticate(self, user_id):
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {generate_test_token(user_id)}")

    def test_create_listing(self):
        self.authenticate(self.farmer_id)

        response = self.client.post(reverse("listing-create"), self.valid_payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data["success"])
        listing = response.data["listing"]
        self.assertEqual(listing["farmerId"], self.farmer_id)
        self.assertEqual(listing["commodity"], "Onion")
        self.assertEqual(listing["quantity"], 150.0)
        self.assertEqual(listing["expectedPrice"], 18.5)
        self.assertEqual(listing["unit"], "kg")
        self.assertEqual(listing["variety"], "")
        self.assertEqual(listing["farmer"]["username"], "Ramesh")

    def test_create_listing_missing_fields(self):
        self.authenticate(self.farmer_id)

        response = self.client.post(reverse("listing-create"), {"commodity": "Onion"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(response.data["success"])
        self.assertIn("Missing required fields", response.data["message"])
        self.assertEqual(Listing.objects.count(), 1)

    def test_create_listing_rejects_unknown_unit(self):
        self.authenticate(self.farmer_id)
        payload = dict(self.valid_payload, unit="bushel")

        response = self.client.post(reverse("listing-create"), payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_create_listing_requires_authentication(self):
        response = self.client.post(reverse("listing-create"), self.valid_payload, format="json")
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_my_listings_only_returns_own(self):
        Listing.objects.create(
            farmer_id=self.other_farmer_id, commodity="Rice", quantity=5,
            expected_price=3000, location="Raipur",
        )
        self.authenticate(self.farmer_id)

        response = self.client.get(reverse("my-listings"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["count"], 1)
        self.assertEqual(response.data["listings"][0]["commodity"], "Wheat")

    def test_all_listings_is_public_and_newest_first(self):
        newer = Listing.objects.create(
            farmer_id=self.other_farmer_id, commodity="Rice", quantity=5,
            expected_price=3000, location="Raipur",
        )

        response = self.client.get(reverse("listing-list"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["count"], 2)
        self.assertEqual(response.data["listings"][0]["id"], newer.id)
        # Owner without a user record still serializes
        self.assertIsNone(response.data["listings"][0]["farmer"]["username"])
        self.assertEqual(response.data["listings"][1]["farmer"]["username"], "Ramesh")

    def test_get_listing_detail(self):
        response = self.client.get(reverse("listing-detail", args=[self.listing.id]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["listing"]["variety"], "Sharbati")

    def test_get_missing_listing(self):
        response = self.client.get(reverse("listing-detail", args=[9999]))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["message"], "Listing not found")

    def test_owner_can_partially_update(self):
        self.authenticate(self.farmer_id)

        response = self.client.put(
            reverse("listing-detail", args=[self.listing.id]),
            {"expectedPrice": 2550, "description": "Cleaned and graded"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.listing.refresh_from_db()
        self.assertEqual(self.listing.expected_price, 2550)
        self.assertEqual(self.listing.description, "Cleaned and graded")
        self.assertEqual(self.listing.commodity, "Wheat")

    def test_non_owner_cannot_update(self):
        self.authenticate(self.other_farmer_id)

        response = self.client.put(
            reverse("listing-detail", args=[self.listing.id]),
            {"expectedPrice": 1},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.listing.refresh_from_db()
        self.assertEqual(self.listing.expected_price, 2400)

    def test_owner_can_delete(self):
        self.authenticate(self.farmer_id)

        response = self.client.delete(reverse("listing-detail", args=[self.listing.id]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Listing.objects.filter(id=self.listing.id).exists())

    def test_non_owner_cannot_delete(self):
        self.authenticate(self.other_farmer_id)

        response = self.client.delete(reverse("listing-detail", args=[self.listing.id]))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertTrue(Listing.objects.filter(id=self.listing.id).exists())

    def test_anonymous_delete_is_rejected(self):
        response = self.client.delete(reverse("listing-detail", args=[self.listing.id]))
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def assert_store_error(self, response, message):
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertFalse(response.data["success"])
        self.assertEqual(response.data["message"], message)
        self.assertEqual(response.data["error"], "database unavailable")

    def test_create_listing_store_failure(self):
        self.authenticate(self.farmer_id)

        with patch.object(Listing.objects, "create", side_effect=DatabaseError("database unavailable")):
            response = self.client.post(reverse("listing-create"), self.valid_payload, format="json")

        self.assert_store_error(response, "Error creating listing")

    def test_listing_feeds_store_failure(self):
        self.authenticate(self.farmer_id)

        with patch.object(Listing.objects, "all", side_effect=DatabaseError("database unavailable")):
            response = self.client.get(reverse("listing-list"))
        self.assert_store_error(response, "Error fetching listings")

        with patch.object(Listing.objects, "filter", side_effect=DatabaseError("database unavailable")):
            response = self.client.get(reverse("my-listings"))
        self.assert_store_error(response, "Error fetching listings")

    def test_get_listing_store_failure(self):
        with patch.object(Listing.objects, "get", side_effect=DatabaseError("database unavailable")):
            response = self.client.get(reverse("listing-detail", args=[self.listing.id]))

        self.assert_store_error(response, "Error fetching listing")

    def test_update_listing_store_failure(self):
        self.authenticate(self.farmer_id)

        with patch.object(Listing, "save", side_effect=DatabaseError("database unavailable")):
            response = self.client.put(
                reverse("listing-detail", args=[self.listing.id]),
                {"expectedPrice": 2550},
                format="json",
            )

        self.assert_store_error(response, "Error updating listing")
        self.listing.refresh_from_db()
        self.assertEqual(self.listing.expected_price, 2400)

    def test_delete_listing_store_failure(self):
        self.authenticate(self.farmer_id)

        with patch.object(Listing, "delete", side_effect=DatabaseError("database unavailable")):
            response = self.client.delete(reverse("listing-detail", args=[self.listing.id]))

        self.assert_store_error(response, "Error deleting listing")
        self.assertTrue(Listing.objects.filter(id=self.listing.id).exists())
