from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient
from django.contrib.auth import get_user_model
from profiles.models import Profile, Visibility

User = get_user_model()

class AccountsTestCase(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.token_url = reverse("token_obtain_pair")
        self.token_refresh_url = reverse("token_refresh")
        self.current_user_url = reverse("current_user")

    def create_user(self, email="testuser@example.com", profile_name="testuser", password="StrongPassword123!", **kwargs):
        return User.objects.create_user(email=email, password=password, profile_name=profile_name, **kwargs)

    def test_create_user_creates_public_profile(self):
        """A new user gets a public profile carrying its profile name."""
        user = self.create_user()
        self.assertEqual(user.profile.profile_name, "testuser")
        self.assertEqual(user.profile.visibility, Visibility.PUBLIC)
        self.assertEqual(user.profile_name, "testuser")

    def test_create_user_with_private_visibility(self):
        user = self.create_user(visibility=Visibility.PRIVATE)
        self.assertTrue(user.profile.is_private)

    def test_create_user_requires_email_and_profile_name(self):
        with self.assertRaises(ValueError):
            User.objects.create_user(email="", profile_name="nobody", password="pass")
        with self.assertRaises(ValueError):
            User.objects.create_user(email="someone@example.com", profile_name="", password="pass")
        self.assertFalse(Profile.objects.exists())

    def test_create_superuser_defaults_profile_name(self):
        admin = User.objects.create_superuser(email="admin@example.com", password="StrongPassword123!")
        self.assertTrue(admin.is_staff)
        self.assertTrue(admin.is_superuser)
        self.assertEqual(admin.profile.profile_name, "admin")

    def test_obtain_token_and_fetch_current_user(self):
        """Test JWT login followed by an authenticated request."""
        self.create_user()
        response = self.client.post(self.token_url, {"email": "testuser@example.com", "password": "StrongPassword123!"})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn("access", response.data)
        self.assertIn("refresh", response.data)

        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.data['access']}")
        response = self.client.get(self.current_user_url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["profile_name"], "testuser")
        self.assertEqual(response.data["visibility"], Visibility.PUBLIC)

    def test_token_refresh(self):
        self.create_user()
        tokens = self.client.post(self.token_url, {"email": "testuser@example.com", "password": "StrongPassword123!"}).data
        response = self.client.post(self.token_refresh_url, {"refresh": tokens["refresh"]})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn("access", response.data)

    def test_wrong_password_rejected(self):
        self.create_user()
        response = self.client.post(self.token_url, {"email": "testuser@example.com", "password": "wrong"})
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(response.data["type"], "error")

    def test_current_user_requires_authentication(self):
        response = self.client.get(self.current_user_url)
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
