from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase

from orders.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from orders.models import Order, OrderRevision
from orders.services import lifecycle, revisions
from profiles.models import Profile

User = get_user_model()

RS = OrderRevision.Status


def create_user_with_type(username, t: str):
    user = User.objects.create_user(username, f"{username}@example.com", "pass1234")
    Profile.objects.create(user=user, type=t)
    return user


class RevisionWorkflowTests(TestCase):
    def setUp(self):
        self.customer = create_user_with_type("cust", Profile.TYPE_CUSTOMER)
        self.tailor = create_user_with_type("tailor", Profile.TYPE_TAILOR)
        self.order = lifecycle.create_order(
            customer=self.customer,
            tailor_id=self.tailor.id,
            service_type="basic",
            garment_type="dress",
            base_price=Decimal("4000"),
            quantity=2,
        )

    # --- helpers ---
    def order_status(self):
        return Order.objects.get(pk=self.order.pk).status

    def revision(self, number):
        return OrderRevision.objects.get(order=self.order, revision_number=number)

    def request_revision(self, description="take in the waist"):
        return revisions.add_revision(order_id=self.order.id, actor=self.customer, description=description)

    def produce(self, number):
        """Tailor approves, starts and completes revision ``number``."""
        kwargs = {"order_id": self.order.id, "revision_number": number, "actor": self.tailor}
        revisions.approve_revision(**kwargs)
        revisions.start_revision(**kwargs)
        return revisions.complete_revision(**kwargs, images=["https://img.example.com/after.jpg"])

    # --- scenarios ---
    def test_customer_adds_revision(self):
        revision = self.request_revision()
        self.assertEqual(revision.revision_number, 1)
        self.assertEqual(revision.status, RS.PENDING)
        self.assertEqual(revision.requested_by, OrderRevision.RequestedBy.CUSTOMER)
        self.assertEqual(self.order_status(), Order.Status.REVISION_REQUESTED)

    def test_tailor_cannot_add_revision(self):
        with self.assertRaises(AuthorizationError):
            revisions.add_revision(order_id=self.order.id, actor=self.tailor, description="x")

    def test_approve_start_complete_moves_order_to_quality_check(self):
        self.request_revision()
        kwargs = {"order_id": self.order.id, "revision_number": 1, "actor": self.tailor}

        revisions.approve_revision(**kwargs, notes="will do")
        self.assertEqual(self.revision(1).status, RS.APPROVED)
        self.assertEqual(self.order_status(), Order.Status.IN_PROGRESS)

        revisions.start_revision(**kwargs)
        self.assertEqual(self.revision(1).status, RS.IN_PROGRESS)
        self.assertEqual(self.order_status(), Order.Status.IN_PROGRESS)

        revisions.complete_revision(**kwargs, images=["https://img.example.com/1.jpg"])
        self.assertEqual(self.revision(1).status, RS.COMPLETED)
        self.assertEqual(self.revision(1).images, ["https://img.example.com/1.jpg"])
        self.assertEqual(self.order_status(), Order.Status.QUALITY_CHECK)

    def test_customer_rejection_spawns_new_revision(self):
        self.request_revision()
        self.produce(1)

        spawned = revisions.customer_reject_revision(
            order_id=self.order.id, revision_number=1, actor=self.customer, reason="stitching uneven"
        )
        self.assertEqual(self.revision(1).status, RS.CUSTOMER_REJECTED)
        self.assertEqual(self.revision(1).customer_rejection_reason, "stitching uneven")
        self.assertEqual(spawned.revision_number, 2)
        self.assertEqual(spawned.status, RS.PENDING)
        self.assertEqual(spawned.description, "stitching uneven")
        self.assertEqual(spawned.spawned_from, self.revision(1))
        self.assertEqual(self.order_status(), Order.Status.REVISION_REQUESTED)

    def test_customer_rejection_without_reason_uses_default_description(self):
        self.request_revision()
        self.produce(1)
        spawned = revisions.customer_reject_revision(
            order_id=self.order.id, revision_number=1, actor=self.customer
        )
        self.assertEqual(spawned.description, "Previous revision was not satisfactory")

    def test_approved_replacement_completes_order_and_books_reputation(self):
        self.request_revision()
        self.produce(1)
        revisions.customer_reject_revision(
            order_id=self.order.id, revision_number=1, actor=self.customer, reason="stitching uneven"
        )
        self.produce(2)
        self.assertEqual(self.order_status(), Order.Status.QUALITY_CHECK)

        revisions.customer_approve_revision(order_id=self.order.id, revision_number=2, actor=self.customer)

        order = Order.objects.get(pk=self.order.pk)
        self.assertEqual(order.status, Order.Status.COMPLETED)
        self.assertTrue(order.quality_check_passed)
        self.assertEqual(order.quality_checked_by, self.customer)
        self.assertIsNotNone(order.actual_completion_date)

        profile = Profile.objects.get(user=self.tailor)
        self.assertEqual(profile.completed_orders, 1)
        self.assertEqual(profile.completion_rate, Decimal("100.00"))

    def test_approval_outside_quality_check_does_not_complete(self):
        self.request_revision("first")
        self.request_revision("second")
        self.produce(1)
        # revision 2 is still pending, so the order never reached quality_check
        self.assertEqual(self.order_status(), Order.Status.IN_PROGRESS)

        revisions.customer_approve_revision(order_id=self.order.id, revision_number=1, actor=self.customer)
        self.assertEqual(self.order_status(), Order.Status.IN_PROGRESS)
        self.assertEqual(Profile.objects.get(user=self.tailor).completed_orders, 0)

    def test_reject_reverts_to_in_progress_when_nothing_pending(self):
        self.request_revision()
        revisions.reject_revision(
            order_id=self.order.id, revision_number=1, actor=self.tailor, reason="out of scope"
        )
        self.assertEqual(self.revision(1).status, RS.REJECTED)
        self.assertEqual(self.revision(1).rejection_reason, "out of scope")
        self.assertEqual(self.order_status(), Order.Status.IN_PROGRESS)

    def test_reject_keeps_revision_requested_while_another_is_pending(self):
        self.request_revision("first")
        self.request_revision("second")
        revisions.reject_revision(order_id=self.order.id, revision_number=1, actor=self.tailor)
        self.assertEqual(self.order_status(), Order.Status.REVISION_REQUESTED)

    # --- properties ---
    def test_second_reject_is_conflict_and_changes_nothing(self):
        self.request_revision()
        revisions.reject_revision(order_id=self.order.id, revision_number=1, actor=self.tailor, reason="no")
        before = self.revision(1)
        status_before = self.order_status()

        with self.assertRaises(ConflictError):
            revisions.reject_revision(order_id=self.order.id, revision_number=1, actor=self.tailor, reason="again")

        after = self.revision(1)
        self.assertEqual(after.status, RS.REJECTED)
        self.assertEqual(after.rejection_reason, "no")
        self.assertEqual(after.rejected_at, before.rejected_at)
        self.assertEqual(self.order_status(), status_before)

    def test_double_approval_is_conflict(self):
        self.request_revision()
        revisions.approve_revision(order_id=self.order.id, revision_number=1, actor=self.tailor)
        with self.assertRaises(ConflictError):
            revisions.approve_revision(order_id=self.order.id, revision_number=1, actor=self.tailor)

    def test_wrong_source_state_is_validation_error(self):
        self.request_revision()
        with self.assertRaises(ValidationError):
            revisions.start_revision(order_id=self.order.id, revision_number=1, actor=self.tailor)
        with self.assertRaises(ValidationError):
            revisions.customer_approve_revision(order_id=self.order.id, revision_number=1, actor=self.customer)

    def test_revision_numbers_strictly_increase(self):
        self.request_revision()
        self.produce(1)
        revisions.customer_reject_revision(order_id=self.order.id, revision_number=1, actor=self.customer)
        self.request_revision("another change")

        numbers = list(self.order.revisions.order_by("id").values_list("revision_number", flat=True))
        self.assertEqual(numbers, [1, 2, 3])
        self.assertEqual(Order.objects.get(pk=self.order.pk).current_revision, 3)

    def test_tailor_operations_refuse_customer_and_vice_versa(self):
        self.request_revision()
        kwargs = {"order_id": self.order.id, "revision_number": 1}
        for operation in (revisions.approve_revision, revisions.reject_revision, revisions.start_revision):
            with self.assertRaises(AuthorizationError):
                operation(**kwargs, actor=self.customer)

        self.produce(1)
        for operation in (revisions.customer_approve_revision, revisions.customer_reject_revision):
            with self.assertRaises(AuthorizationError):
                operation(**kwargs, actor=self.tailor)

    def test_unknown_revision(self):
        with self.assertRaises(NotFoundError):
            revisions.approve_revision(order_id=self.order.id, revision_number=7, actor=self.tailor)

    def test_completion_only_after_all_revisions_resolved(self):
        self.request_revision()
        self.produce(1)
        self.request_revision("one more thing")

        with self.assertRaises(ValidationError):
            lifecycle.update_order_status(order_id=self.order.id, actor=self.customer, status="completed")

        revisions.reject_revision(order_id=self.order.id, revision_number=2, actor=self.tailor)
        revisions.customer_approve_revision(order_id=self.order.id, revision_number=1, actor=self.customer)
        order = lifecycle.update_order_status(order_id=self.order.id, actor=self.customer, status="completed")
        self.assertEqual(order.status, Order.Status.COMPLETED)
