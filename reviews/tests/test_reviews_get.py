from decimal import Decimal

from django.contrib.auth import get_user_model
from django.urls import reverse
from rest_framework import status
from rest_framework.authtoken.models import Token
from rest_framework.test import APITestCase

from orders.services import lifecycle
from profiles.models import Profile
from reviews.models import Review

User = get_user_model()


def make_user(username, ptype):
    u = User.objects.create_user(username, f"{username}@ex.com", "pass1234")
    Profile.objects.create(user=u, type=ptype)
    tok = Token.objects.create(user=u)
    return u, tok


class TailorAndOrderReviewTests(APITestCase):
    def setUp(self):
        self.tailor, self.tailor_tok = make_user("tailor1", "tailor")
        self.cust, self.cust_tok = make_user("cust1", "customer")
        self.other, self.other_tok = make_user("cust2", "customer")

        order = lifecycle.create_order(
            customer=self.cust,
            tailor_id=self.tailor.id,
            service_type="basic",
            garment_type="dress",
            base_price=Decimal("150.00"),
        )
        self.order = lifecycle.update_order_status(order_id=order.id, actor=self.cust, status="completed")

        self.order_review = Review.objects.create(tailor=self.tailor, customer=self.cust, order=self.order, rating=5)
        self.plain_review = Review.objects.create(tailor=self.tailor, customer=self.other, rating=3)

    def auth(self, tok):
        self.client.credentials(HTTP_AUTHORIZATION=f"Token {tok.key}")

    def test_tailor_reviews_newest_first(self):
        self.auth(self.other_tok)
        res = self.client.get(reverse("tailor-reviews", args=[self.tailor.id]))
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual([r["id"] for r in res.data], [self.plain_review.id, self.order_review.id])

    def test_tailor_reviews_unknown_tailor_404(self):
        self.auth(self.other_tok)
        res = self.client.get(reverse("tailor-reviews", args=[self.cust.id]))
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)

    def test_order_review_for_both_parties(self):
        url = reverse("order-review", args=[self.order.id])
        for tok in (self.cust_tok, self.tailor_tok):
            self.auth(tok)
            res = self.client.get(url)
            self.assertEqual(res.status_code, status.HTTP_200_OK)
            self.assertEqual(res.data["id"], self.order_review.id)

    def test_order_review_stranger_403(self):
        self.auth(self.other_tok)
        res = self.client.get(reverse("order-review", args=[self.order.id]))
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_order_without_review_404(self):
        self.auth(self.cust_tok)
        res = self.client.get(reverse("order-review", args=[999999]))
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)

    def test_requires_auth_401(self):
        res = self.client.get(reverse("tailor-reviews", args=[self.tailor.id]))
        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)
