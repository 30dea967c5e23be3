from decimal import Decimal

from django.contrib.auth import get_user_model
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase, APIClient
from rest_framework.authtoken.models import Token
from profiles.models import Profile, TailorBadge

User = get_user_model()


class TailorProfileListTests(APITestCase):
    def setUp(self):
        # Tailor mit guter Bewertung und Badge
        self.top_tailor = User.objects.create_user(
            username="atelier", email="atelier@mail.de", password="Pass123!"
        )
        self.top_profile = Profile.objects.create(
            user=self.top_tailor,
            type="tailor",
            shop_name="Atelier Nord",
            location="Hamburg",
            working_hours="9-17",
            rating=Decimal("4.80"),
            completed_orders=60,
            total_orders=62,
        )
        TailorBadge.objects.create(
            profile=self.top_profile, badge_type="Master Tailor", name="Master Tailor"
        )

        # zweiter Tailor ohne Bewertungen
        self.new_tailor = User.objects.create_user(
            username="newbie", email="newbie@mail.de", password="Pass123!"
        )
        Profile.objects.create(user=self.new_tailor, type="tailor")

        # deaktivierter Tailor (darf nicht erscheinen)
        self.inactive = User.objects.create_user(
            username="gone", email="gone@mail.de", password="Pass123!", is_active=False
        )
        Profile.objects.create(user=self.inactive, type="tailor")

        # Customer
        self.user_customer = User.objects.create_user(
            username="cust", email="cust@mail.de", password="Pass123!"
        )
        Profile.objects.create(user=self.user_customer, type="customer")

        self.client_auth = APIClient()
        self.client_auth.credentials(
            HTTP_AUTHORIZATION="Token " + Token.objects.create(user=self.user_customer).key
        )
        self.client_anon = APIClient()

        self.url = reverse("tailor-profiles")

    def test_lists_active_tailors_best_rated_first(self):
        resp = self.client_auth.get(self.url)
        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual([p["username"] for p in resp.data], ["atelier", "newbie"])
        for profile in resp.data:
            self.assertEqual(profile["type"], "tailor")

    def test_reputation_and_badges_in_list(self):
        resp = self.client_auth.get(self.url)
        top = resp.data[0]
        self.assertEqual(top["shop_name"], "Atelier Nord")
        self.assertEqual(top["rating"], "4.80")
        self.assertEqual(top["completed_orders"], 60)
        self.assertEqual(top["badges"], ["Master Tailor"])
        self.assertEqual(resp.data[1]["badges"], [])

    def test_unauthenticated_gets_401(self):
        resp = self.client_anon.get(self.url)
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)
