from decimal import Decimal

from django.contrib.auth import get_user_model
from django.urls import reverse
from rest_framework import status
from rest_framework.authtoken.models import Token
from rest_framework.test import APITestCase

from profiles.models import Profile
from orders.models import Order, OrderDispute
from orders.services import lifecycle

User = get_user_model()


def create_profile_with_type(user, t: str):
    p = Profile.objects.create(user=user)
    p.type = t
    p.save(update_fields=["type"])
    return p


class OrderDisputeTests(APITestCase):
    def setUp(self):
        self.tailor = User.objects.create_user("tailor", "tailor@example.com", "pass1234")
        create_profile_with_type(self.tailor, "tailor")
        self.tailor_token = Token.objects.create(user=self.tailor)

        self.cust = User.objects.create_user("cust", "cust@example.com", "pass1234")
        create_profile_with_type(self.cust, "customer")
        self.cust_token = Token.objects.create(user=self.cust)

        self.stranger = User.objects.create_user("stranger", "stranger@example.com", "pass1234")
        create_profile_with_type(self.stranger, "customer")
        self.stranger_token = Token.objects.create(user=self.stranger)

        # Admin ohne Beteiligung am Auftrag
        self.admin = User.objects.create_user("admin", "admin@example.com", "pass1234", is_staff=True)
        self.admin_token = Token.objects.create(user=self.admin)

        self.order = lifecycle.create_order(
            customer=self.cust,
            tailor_id=self.tailor.id,
            service_type="basic",
            garment_type="shirt",
            base_price=Decimal("60.00"),
        )
        self.url = reverse("order-disputes", args=[self.order.id])

    def auth(self, token):
        self.client.credentials(HTTP_AUTHORIZATION=f"Token {token.key}")

    def resolve_url(self, dispute_id):
        return reverse("order-dispute-resolve", args=[self.order.id, dispute_id])

    def raise_as_customer(self):
        self.auth(self.cust_token)
        payload = {"reason": "quality_issue", "description": "Naht ist offen"}
        return self.client.post(self.url, payload, format="json").data["id"]

    def test_customer_raises_dispute_201(self):
        self.auth(self.cust_token)
        payload = {
            "reason": "damage",
            "description": "Fleck am Kragen",
            "attachments": ["https://img.example.com/fleck.jpg"],
        }
        res = self.client.post(self.url, payload, format="json")
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(res.data["raised_by"], self.cust.id)
        self.assertEqual(res.data["status"], "open")
        self.assertEqual(res.data["attachments"], ["https://img.example.com/fleck.jpg"])
        # Auftragsstatus bleibt unverändert
        self.assertEqual(Order.objects.get(pk=self.order.pk).status, "pending")

    def test_tailor_can_raise_dispute(self):
        self.auth(self.tailor_token)
        res = self.client.post(self.url, {"reason": "other", "description": "Keine Rückmeldung"}, format="json")
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)

    def test_missing_description_400(self):
        self.auth(self.cust_token)
        res = self.client.post(self.url, {"reason": "quality_issue"}, format="json")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unknown_reason_400(self):
        self.auth(self.cust_token)
        res = self.client.post(self.url, {"reason": "bored", "description": "x"}, format="json")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_stranger_cannot_raise_403(self):
        self.auth(self.stranger_token)
        res = self.client.post(self.url, {"reason": "other", "description": "x"}, format="json")
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_dispute_on_completed_order(self):
        lifecycle.update_order_status(order_id=self.order.id, actor=self.cust, status="completed")
        dispute_id = self.raise_as_customer()
        self.assertTrue(OrderDispute.objects.filter(pk=dispute_id).exists())

    def test_opposite_party_resolves(self):
        dispute_id = self.raise_as_customer()
        self.auth(self.tailor_token)
        res = self.client.post(
            self.resolve_url(dispute_id),
            {"status": "resolved", "resolution": "Naht wird kostenlos nachgenäht"},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["status"], "resolved")
        self.assertEqual(res.data["resolved_by"], self.tailor.id)
        self.assertEqual(res.data["resolution"], "Naht wird kostenlos nachgenäht")
        self.assertIsNotNone(res.data["resolved_at"])

    def test_raiser_cannot_resolve_own_dispute_403(self):
        dispute_id = self.raise_as_customer()
        res = self.client.post(self.resolve_url(dispute_id), {"status": "resolved"}, format="json")
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(OrderDispute.objects.get(pk=dispute_id).status, "open")

    def test_stranger_cannot_resolve_403(self):
        dispute_id = self.raise_as_customer()
        self.auth(self.stranger_token)
        res = self.client.post(self.resolve_url(dispute_id), {"status": "rejected"}, format="json")
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_admin_resolves(self):
        dispute_id = self.raise_as_customer()
        self.auth(self.admin_token)
        res = self.client.post(self.resolve_url(dispute_id), {"status": "rejected"}, format="json")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["status"], "rejected")
        self.assertEqual(res.data["resolved_by"], self.admin.id)

    def test_invalid_resolve_status_400(self):
        dispute_id = self.raise_as_customer()
        self.auth(self.tailor_token)
        res = self.client.post(self.resolve_url(dispute_id), {"status": "under_review"}, format="json")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unknown_dispute_404(self):
        self.auth(self.tailor_token)
        res = self.client.post(self.resolve_url(999999), {"status": "resolved"}, format="json")
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)

    def test_second_resolution_409(self):
        dispute_id = self.raise_as_customer()
        self.auth(self.tailor_token)
        self.client.post(self.resolve_url(dispute_id), {"status": "resolved"}, format="json")
        res = self.client.post(self.resolve_url(dispute_id), {"status": "rejected"}, format="json")
        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(OrderDispute.objects.get(pk=dispute_id).status, "resolved")

    def test_list_and_detail_show_disputes(self):
        first = self.raise_as_customer()
        second = self.raise_as_customer()
        self.auth(self.tailor_token)
        res = self.client.get(self.url)
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual([d["id"] for d in res.data], [first, second])

        res = self.client.get(reverse("order-detail", args=[self.order.id]))
        self.assertEqual(len(res.data["disputes"]), 2)

    def test_stranger_cannot_list_403(self):
        self.raise_as_customer()
        self.auth(self.stranger_token)
        res = self.client.get(self.url)
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)
