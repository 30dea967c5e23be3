from decimal import Decimal

from django.contrib.auth import get_user_model
from django.urls import reverse
from rest_framework import status
from rest_framework.authtoken.models import Token
from rest_framework.test import APITestCase

from profiles.models import Profile
from orders.services import lifecycle

User = get_user_model()


def create_profile_with_type(user, t: str):
    p = Profile.objects.create(user=user)
    p.type = t
    p.save(update_fields=["type"])
    return p


class OrderRevisionApiTests(APITestCase):
    def setUp(self):
        self.tailor = User.objects.create_user("tailor", "tailor@example.com", "pass1234")
        create_profile_with_type(self.tailor, "tailor")
        self.tailor_token = Token.objects.create(user=self.tailor)

        self.cust = User.objects.create_user("cust", "cust@example.com", "pass1234")
        create_profile_with_type(self.cust, "customer")
        self.cust_token = Token.objects.create(user=self.cust)

        self.order = lifecycle.create_order(
            customer=self.cust,
            tailor_id=self.tailor.id,
            service_type="basic",
            garment_type="blazer",
            base_price=Decimal("4000.00"),
            quantity=2,
        )
        self.url = reverse("order-revisions", args=[self.order.id])

    def auth(self, token):
        self.client.credentials(HTTP_AUTHORIZATION=f"Token {token.key}")

    def action(self, number, name, token, payload=None):
        self.auth(token)
        url = reverse("order-revision-action", args=[self.order.id, number, name])
        return self.client.post(url, payload or {}, format="json")

    def test_full_revision_cycle(self):
        # Customer fordert eine Änderung an
        self.auth(self.cust_token)
        res = self.client.post(self.url, {"description": "Ärmel kürzen"}, format="json")
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(res.data["status"], "revision_requested")
        self.assertEqual(res.data["revisions"][0]["revision_number"], 1)
        self.assertEqual(res.data["revisions"][0]["status"], "pending")

        res = self.action(1, "approve", self.tailor_token, {"notes": "ok"})
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["status"], "in_progress")

        self.action(1, "start", self.tailor_token)
        res = self.action(1, "complete", self.tailor_token, {"images": ["https://img.example.com/a.jpg"]})
        self.assertEqual(res.data["status"], "quality_check")
        self.assertEqual(res.data["revisions"][0]["images"], ["https://img.example.com/a.jpg"])

        # Customer lehnt ab -> neue Revision 2
        res = self.action(1, "customer-reject", self.cust_token, {"reason": "stitching uneven"})
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["status"], "revision_requested")
        self.assertEqual(res.data["current_revision"], 2)
        second = res.data["revisions"][1]
        self.assertEqual(second["revision_number"], 2)
        self.assertEqual(second["spawned_from"], 1)
        self.assertEqual(second["description"], "stitching uneven")

        self.action(2, "approve", self.tailor_token)
        self.action(2, "start", self.tailor_token)
        self.action(2, "complete", self.tailor_token)
        res = self.action(2, "customer-approve", self.cust_token)
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["status"], "completed")
        self.assertTrue(res.data["quality_check"]["passed"])
        self.assertEqual(res.data["quality_check"]["checked_by"], self.cust.id)

        profile = Profile.objects.get(user=self.tailor)
        self.assertEqual(profile.completed_orders, 1)

    def test_double_reject_409(self):
        self.auth(self.cust_token)
        self.client.post(self.url, {"description": "x"}, format="json")
        res = self.action(1, "reject", self.tailor_token, {"reason": "nicht machbar"})
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        res = self.action(1, "reject", self.tailor_token, {"reason": "nochmal"})
        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)

    def test_wrong_state_400(self):
        self.auth(self.cust_token)
        self.client.post(self.url, {"description": "x"}, format="json")
        res = self.action(1, "complete", self.tailor_token)
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_customer_cannot_approve_403(self):
        self.auth(self.cust_token)
        self.client.post(self.url, {"description": "x"}, format="json")
        res = self.action(1, "approve", self.cust_token)
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_tailor_cannot_request_revision_403(self):
        self.auth(self.tailor_token)
        res = self.client.post(self.url, {"description": "x"}, format="json")
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_unknown_revision_404(self):
        res = self.action(5, "approve", self.tailor_token)
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)

    def test_unknown_action_404(self):
        self.auth(self.cust_token)
        self.client.post(self.url, {"description": "x"}, format="json")
        res = self.action(1, "archive", self.tailor_token)
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)

    def test_list_revisions(self):
        self.auth(self.cust_token)
        self.client.post(self.url, {"description": "eins"}, format="json")
        self.client.post(self.url, {"description": "zwei"}, format="json")
        self.auth(self.tailor_token)
        res = self.client.get(self.url)
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual([r["revision_number"] for r in res.data], [1, 2])

    def test_revision_on_completed_order_400(self):
        lifecycle.update_order_status(order_id=self.order.id, actor=self.cust, status="completed")
        self.auth(self.cust_token)
        res = self.client.post(self.url, {"description": "doch enger"}, format="json")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        res = self.client.get(reverse("order-detail", args=[self.order.id]))
        self.assertEqual(res.data["status"], "completed")
        self.assertEqual(res.data["revisions"], [])
