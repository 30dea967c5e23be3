from decimal import Decimal

from django.contrib.auth import get_user_model
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase, APIClient
from rest_framework.authtoken.models import Token

from profiles.models import Profile

User = get_user_model()


def token_client(user):
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION="Token " + Token.objects.create(user=user).key)
    return client


class ProfilePatchTests(APITestCase):
    def setUp(self):
        self.user_a = User.objects.create_user(username="owner", email="owner@mail.de", password="Pass123!")
        self.user_b = User.objects.create_user(username="other", email="other@mail.de", password="Pass123!")
        self.profile_a = Profile.objects.create(user=self.user_a, type="tailor")
        self.profile_b = Profile.objects.create(user=self.user_b, type="customer")

        self.client_owner = token_client(self.user_a)
        self.client_other = token_client(self.user_b)
        self.client_anon = APIClient()

        self.url_owner = reverse("profile", kwargs={"pk": self.user_a.id})
        self.url_other = reverse("profile", kwargs={"pk": self.user_b.id})

    def test_owner_can_patch_profile(self):
        payload = {
            "first_name": "Mira",
            "last_name": "Schneider",
            "shop_name": "Nadelwerk",
            "location": "Leipzig",
            "tel": "987654321",
            "description": "Brautmode und Änderungen",
            "working_hours": "10-18",
            "file": "https://img.example.com/mira.jpg",
            "email": "mira@nadelwerk.de",
        }
        resp = self.client_owner.patch(self.url_owner, payload, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)

        data = resp.data
        for key, value in payload.items():
            self.assertEqual(data[key], value)
        self.assertEqual(data["username"], "owner")
        self.assertEqual(data["type"], "tailor")

        # DB tatsächlich aktualisiert?
        self.user_a.refresh_from_db()
        self.profile_a.refresh_from_db()
        self.assertEqual(self.user_a.email, "mira@nadelwerk.de")
        self.assertEqual(self.profile_a.shop_name, "Nadelwerk")

    def test_type_and_reputation_are_read_only(self):
        payload = {"type": "customer", "rating": "5.00", "completed_orders": 99, "location": "Dresden"}
        resp = self.client_owner.patch(self.url_owner, payload, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)

        self.profile_a.refresh_from_db()
        self.assertEqual(self.profile_a.type, "tailor")
        self.assertEqual(self.profile_a.rating, Decimal("0"))
        self.assertEqual(self.profile_a.completed_orders, 0)
        self.assertEqual(self.profile_a.location, "Dresden")

    def test_forbidden_when_patching_foreign_profile(self):
        resp = self.client_owner.patch(self.url_other, {"location": "Hamburg"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_unauthenticated_gets_401(self):
        resp = self.client_anon.patch(self.url_owner, {"location": "Köln"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_null_values_are_coalesced_to_empty_strings_in_response(self):
        fields = ["first_name", "last_name", "location", "tel", "description", "working_hours", "shop_name"]
        resp = self.client_owner.patch(self.url_owner, {f: None for f in fields}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        for f in fields:
            self.assertEqual(resp.data.get(f), "")

    def test_invalid_email_returns_400(self):
        resp = self.client_owner.patch(self.url_owner, {"email": "not-an-email"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("email", str(resp.data))

    def test_put_is_not_allowed(self):
        resp = self.client_owner.put(self.url_owner, {"location": "Bonn"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_405_METHOD_NOT_ALLOWED)


class ProfilePatchOwnershipTests(APITestCase):
    def setUp(self):
        self.user_a = User.objects.create_user(username="owner_a", email="a@mail.de", password="Pass123!")
        Profile.objects.create(user=self.user_a, type="customer")
        self.client_owner_a = token_client(self.user_a)

        self.user_b = User.objects.create_user(username="user_b", email="b@mail.de", password="Pass123!")
        Profile.objects.create(user=self.user_b, type="tailor")

        self.admin_user = User.objects.create_superuser(username="admin_user", email="admin@mail.de", password="Pass123!")
        self.admin_client = token_client(self.admin_user)

    def test_owner_patch_creates_profile_if_missing(self):
        user = User.objects.create_user(username="owner_c", email="c@mail.de", password="Pass123!")
        url = reverse("profile", kwargs={"pk": user.id})

        resp = token_client(user).patch(url, {"location": "Berlin", "first_name": "Max"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        prof = Profile.objects.get(user=user)
        self.assertEqual(prof.location, "Berlin")
        self.assertEqual(prof.type, "")

    def test_admin_cannot_patch_foreign_profile(self):
        url = reverse("profile", kwargs={"pk": self.user_b.id})
        resp = self.admin_client.patch(url, {"location": "Hamburg"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_non_owner_never_learns_existence(self):
        url = reverse("profile", kwargs={"pk": 999999})
        resp = self.client_owner_a.patch(url, {"location": "Bremen"}, format="json")
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)
