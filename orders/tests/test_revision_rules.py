from types import SimpleNamespace

from django.test import SimpleTestCase

from orders.exceptions import ConflictError, ValidationError
from orders.services.revision_lifecycle import (
    all_production_done,
    all_resolved,
    can_transition,
    unresolved,
    validate_transition,
)


def rev(status, number=1):
    return SimpleNamespace(status=status, revision_number=number)


class RevisionTransitionTableTests(SimpleTestCase):
    def test_allowed_edges(self):
        allowed = [
            ("pending", "approved"),
            ("pending", "rejected"),
            ("approved", "in_progress"),
            ("in_progress", "completed"),
            ("completed", "customer_approved"),
            ("completed", "customer_rejected"),
        ]
        for source, target in allowed:
            self.assertTrue(can_transition(from_status=source, to_status=target), (source, target))

    def test_closed_states_never_move(self):
        for source in ("rejected", "customer_approved", "customer_rejected"):
            for target in ("pending", "approved", "in_progress", "completed", "customer_approved"):
                self.assertFalse(can_transition(from_status=source, to_status=target))

    def test_skipping_steps_is_not_allowed(self):
        self.assertFalse(can_transition(from_status="pending", to_status="in_progress"))
        self.assertFalse(can_transition(from_status="approved", to_status="completed"))
        self.assertFalse(can_transition(from_status="in_progress", to_status="customer_approved"))

    def test_same_status_is_conflict(self):
        with self.assertRaises(ConflictError):
            validate_transition(revision=rev("rejected"), target_status="rejected")
        with self.assertRaises(ConflictError):
            validate_transition(revision=rev("approved"), target_status="approved")

    def test_wrong_source_is_validation_error(self):
        with self.assertRaises(ValidationError) as ctx:
            validate_transition(revision=rev("pending", 3), target_status="completed")
        self.assertIn("in progress", ctx.exception.detail)
        self.assertIn("Revision 3", ctx.exception.detail)

    def test_legal_transition_passes(self):
        self.assertIsNone(validate_transition(revision=rev("completed"), target_status="customer_rejected"))


class RevisionAggregateTests(SimpleTestCase):
    def test_production_done_counts_closed_revisions(self):
        self.assertTrue(all_production_done([rev("customer_rejected"), rev("completed")]))
        self.assertTrue(all_production_done([rev("rejected"), rev("customer_approved")]))
        self.assertFalse(all_production_done([rev("completed"), rev("pending")]))
        self.assertFalse(all_production_done([rev("in_progress")]))

    def test_resolved(self):
        self.assertTrue(all_resolved([]))
        self.assertTrue(all_resolved([rev("rejected"), rev("customer_approved"), rev("customer_rejected")]))
        self.assertFalse(all_resolved([rev("customer_approved"), rev("completed")]))

    def test_unresolved_lists_blockers(self):
        blockers = unresolved([rev("rejected", 1), rev("completed", 2), rev("approved", 3)])
        self.assertEqual([r.revision_number for r in blockers], [2, 3])
