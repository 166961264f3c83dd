from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from kisansetu.jwt_utils import generate_test_token
from .models import User
from .profiles import get_public_profiles


class CurrentUserViewTest(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = User.objects.create(
            user_id="farmer-1",
            user_name="Ramesh",
            email="ramesh@example.com",
        )
        self.url = reverse("current-user")

    def test_me_returns_profile(self):
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {generate_test_token('farmer-1')}")

        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data["success"])
        self.assertEqual(response.data["user"]["id"], "farmer-1")
        self.assertEqual(response.data["user"]["username"], "Ramesh")
        self.assertEqual(response.data["user"]["email"], "ramesh@example.com")

    def test_me_requires_authentication(self):
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_me_rejects_invalid_token(self):
        self.client.credentials(HTTP_AUTHORIZATION="Bearer not-a-jwt")
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_me_unknown_user(self):
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {generate_test_token('ghost')}")
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertFalse(response.data["success"])

    def test_token_with_id_claim(self):
        """Tokens from the auth service carry the user id in ``id``."""
        token = generate_test_token(None, id="farmer-1")
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)


class PublicProfilesTest(TestCase):
    def test_resolves_known_and_missing_users(self):
        User.objects.create(user_id="buyer-1", user_name="Asha", email="asha@example.com")

        profiles = get_public_profiles(["buyer-1", "missing", None])

        self.assertEqual(profiles["buyer-1"], {"id": "buyer-1", "username": "Asha", "email": "asha@example.com"})
        self.assertEqual(profiles["missing"], {"id": "missing", "username": None, "email": None})
        self.assertEqual(len(profiles), 2)

    def test_empty_input(self):
        self.assertEqual(get_public_profiles([]), {})
