"""Orders API views.

Thin HTTP layer over ``orders.services``: each view validates its payload
with a serializer, calls one service operation with the authenticated user as
actor and answers with the resulting order (or the message, dispute or
alteration row). Workflow errors are mapped onto ``{"detail": ...}``
responses with the status code they carry.
"""

from rest_framework import generics, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from orders.exceptions import OrderWorkflowError
from orders.services import alterations, disputes, lifecycle, messages, revisions
from .permissions import IsCustomerUser
from .serializers import (
    AlterationCreateSerializer,
    AlterationStatusSerializer,
    ConsultationRescheduleSerializer,
    ConsultationScheduleSerializer,
    ConsultationStatusSerializer,
    DeliveryUpdateSerializer,
    DisputeCreateSerializer,
    DisputeResolveSerializer,
    FabricSerializer,
    MessageCreateSerializer,
    OrderAlterationSerializer,
    OrderCreateSerializer,
    OrderDetailSerializer,
    OrderDisputeSerializer,
    OrderListSerializer,
    OrderMessageSerializer,
    OrderPricingPatchSerializer,
    OrderRevisionSerializer,
    OrderStatusSerializer,
    RevisionActionSerializer,
    RevisionCreateSerializer,
)


# ----------------------------- helpers (module-level) -----------------------------

def _error_response(exc: OrderWorkflowError):
    return Response({"detail": exc.detail}, status=exc.status_code)


def _run(operation, **kwargs):
    """Run a service operation; return (result, None) or (None, Response)."""
    try:
        return operation(**kwargs), None
    except OrderWorkflowError as exc:
        return None, _error_response(exc)


def _validate_patch_only(data: dict, allowed: set):
    """Reject unknown keys in a PATCH body; return a 400 Response or None."""
    extra = set(data.keys()) - allowed
    if extra:
        return Response(
            {"detail": f"Only {', '.join(sorted(allowed))} may be updated. "
                       f"Invalid fields: {', '.join(sorted(extra))}."},
            status=status.HTTP_400_BAD_REQUEST,
        )
    return None


def _order_response(request, order_id, status_code=status.HTTP_200_OK):
    """Reload the order with its relations and serialize it for the caller."""
    order, err = _run(lifecycle.get_order_for_actor, order_id=order_id, actor=request.user)
    if err:
        return err
    serializer = OrderDetailSerializer(order, context={"request": request})
    return Response(serializer.data, status=status_code)


# --------------------------------------- orders ---------------------------------------

class OrderListCreateAPIView(generics.ListCreateAPIView):
    """GET: list orders of the authenticated user (as customer or tailor).
    POST: place a new order with a tailor (customer-only).
    """

    def get_permissions(self):
        """Customer-only on POST, otherwise just authenticated."""
        if self.request.method == "POST":
            return [IsAuthenticated(), IsCustomerUser()]
        return [IsAuthenticated()]

    def get_serializer_class(self):
        return OrderListSerializer if self.request.method == "GET" else OrderCreateSerializer

    # --- GET ---
    def list(self, request, *args, **kwargs):
        qs, err = _run(
            lifecycle.orders_for_actor,
            actor=request.user,
            status=request.query_params.get("status"),
        )
        if err:
            return err
        return Response(OrderListSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    # --- POST ---
    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order, err = _run(
            lifecycle.create_order, customer=request.user, **serializer.validated_data
        )
        if err:
            return err
        return _order_response(request, order.pk, status.HTTP_201_CREATED)


class OrderDetailAPIView(APIView):
    """GET: order detail for a party (or admin).
    PATCH: pricing update (tailor of the order only).
    """

    permission_classes = [IsAuthenticated]
    pricing_fields = {"fabric_cost", "additional_charges", "discount", "total_price"}

    def get(self, request, pk: int):
        return _order_response(request, pk)

    def patch(self, request, pk: int):
        bad = _validate_patch_only(request.data, self.pricing_fields)
        if bad is not None:
            return bad
        serializer = OrderPricingPatchSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        _, err = _run(
            lifecycle.update_pricing, order_id=pk, actor=request.user, **serializer.validated_data
        )
        return err or _order_response(request, pk)


class OrderStatusAPIView(APIView):
    """PATCH /api/orders/{pk}/status/ -> set the order status (either party)."""

    permission_classes = [IsAuthenticated]

    def patch(self, request, pk: int):
        serializer = OrderStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        _, err = _run(
            lifecycle.update_order_status, order_id=pk, actor=request.user, **serializer.validated_data
        )
        return err or _order_response(request, pk)


class ConsultationAPIView(APIView):
    """POST: schedule the consultation. PATCH: reschedule it."""

    permission_classes = [IsAuthenticated]

    def post(self, request, pk: int):
        serializer = ConsultationScheduleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        _, err = _run(
            lifecycle.schedule_consultation, order_id=pk, actor=request.user, **serializer.validated_data
        )
        return err or _order_response(request, pk)

    def patch(self, request, pk: int):
        serializer = ConsultationRescheduleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        _, err = _run(
            lifecycle.reschedule_consultation, order_id=pk, actor=request.user, **serializer.validated_data
        )
        return err or _order_response(request, pk)


class ConsultationStatusAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def patch(self, request, pk: int):
        serializer = ConsultationStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        _, err = _run(
            lifecycle.update_consultation_status,
            order_id=pk,
            actor=request.user,
            **serializer.validated_data,
        )
        return err or _order_response(request, pk)


class FabricAPIView(APIView):
    """PATCH /api/orders/{pk}/fabric/ -> record the fabric selection (tailor only)."""

    permission_classes = [IsAuthenticated]

    def patch(self, request, pk: int):
        serializer = FabricSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        _, err = _run(
            lifecycle.update_fabric, order_id=pk, actor=request.user, **serializer.validated_data
        )
        return err or _order_response(request, pk)


class DeliveryAPIView(APIView):
    """PATCH /api/orders/{pk}/delivery/ -> edit delivery details (either party)."""

    permission_classes = [IsAuthenticated]

    def patch(self, request, pk: int):
        serializer = DeliveryUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        _, err = _run(
            lifecycle.update_delivery, order_id=pk, actor=request.user, **serializer.validated_data
        )
        return err or _order_response(request, pk)


# --------------------------------------- revisions ---------------------------------------

class RevisionListCreateAPIView(APIView):
    """GET: revisions of the order. POST: request a new revision (customer only)."""

    permission_classes = [IsAuthenticated]

    def get(self, request, pk: int):
        order, err = _run(lifecycle.get_order_for_actor, order_id=pk, actor=request.user)
        if err:
            return err
        return Response(OrderRevisionSerializer(order.revisions.all(), many=True).data)

    def post(self, request, pk: int):
        serializer = RevisionCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        _, err = _run(
            revisions.add_revision, order_id=pk, actor=request.user, **serializer.validated_data
        )
        return err or _order_response(request, pk, status.HTTP_201_CREATED)


class RevisionActionAPIView(APIView):
    """POST /api/orders/{pk}/revisions/{n}/{action}/ -> one revision transition."""

    permission_classes = [IsAuthenticated]

    # action -> (operation, payload keys it accepts)
    actions = {
        "approve": (revisions.approve_revision, ("notes",)),
        "reject": (revisions.reject_revision, ("reason",)),
        "start": (revisions.start_revision, ()),
        "complete": (revisions.complete_revision, ("images", "notes")),
        "customer-approve": (revisions.customer_approve_revision, ()),
        "customer-reject": (revisions.customer_reject_revision, ("reason",)),
    }

    def post(self, request, pk: int, revision_number: int, action: str):
        if action not in self.actions:
            return Response({"detail": "Unknown revision action."}, status=status.HTTP_404_NOT_FOUND)
        operation, accepted = self.actions[action]

        serializer = RevisionActionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        payload = {k: v for k, v in serializer.validated_data.items() if k in accepted}

        _, err = _run(
            operation, order_id=pk, revision_number=revision_number, actor=request.user, **payload
        )
        return err or _order_response(request, pk)


# --------------------------------------- messages ---------------------------------------

class MessageListCreateAPIView(APIView):
    """GET: the order's message log. POST: post a message (either party)."""

    permission_classes = [IsAuthenticated]

    def get(self, request, pk: int):
        order, err = _run(lifecycle.get_order_for_actor, order_id=pk, actor=request.user)
        if err:
            return err
        return Response(OrderMessageSerializer(order.messages.all(), many=True).data)

    def post(self, request, pk: int):
        serializer = MessageCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        message, err = _run(
            messages.add_message, order_id=pk, actor=request.user, **serializer.validated_data
        )
        if err:
            return err
        return Response(OrderMessageSerializer(message).data, status=status.HTTP_201_CREATED)


class MessageReadAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, pk: int, message_id: int):
        message, err = _run(
            messages.mark_message_read, order_id=pk, actor=request.user, message_id=message_id
        )
        if err:
            return err
        return Response(OrderMessageSerializer(message).data, status=status.HTTP_200_OK)


# --------------------------------------- disputes ---------------------------------------

class DisputeListCreateAPIView(APIView):
    """GET: disputes of the order. POST: raise a dispute (either party)."""

    permission_classes = [IsAuthenticated]

    def get(self, request, pk: int):
        order, err = _run(lifecycle.get_order_for_actor, order_id=pk, actor=request.user)
        if err:
            return err
        return Response(OrderDisputeSerializer(order.disputes.all(), many=True).data)

    def post(self, request, pk: int):
        serializer = DisputeCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dispute, err = _run(
            disputes.raise_dispute, order_id=pk, actor=request.user, **serializer.validated_data
        )
        if err:
            return err
        return Response(OrderDisputeSerializer(dispute).data, status=status.HTTP_201_CREATED)


class DisputeResolveAPIView(APIView):
    """POST /api/orders/{pk}/disputes/{id}/resolve/ -> settle a dispute."""

    permission_classes = [IsAuthenticated]

    def post(self, request, pk: int, dispute_id: int):
        serializer = DisputeResolveSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        dispute, err = _run(
            disputes.resolve_dispute,
            order_id=pk,
            dispute_id=dispute_id,
            actor=request.user,
            **serializer.validated_data,
        )
        if err:
            return err
        return Response(OrderDisputeSerializer(dispute).data, status=status.HTTP_200_OK)


# --------------------------------------- alterations ---------------------------------------

class AlterationListCreateAPIView(APIView):
    """GET: alteration requests of the order. POST: request one (customer only)."""

    permission_classes = [IsAuthenticated]

    def get(self, request, pk: int):
        order, err = _run(lifecycle.get_order_for_actor, order_id=pk, actor=request.user)
        if err:
            return err
        return Response(OrderAlterationSerializer(order.alterations.all(), many=True).data)

    def post(self, request, pk: int):
        serializer = AlterationCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        alteration, err = _run(
            alterations.request_alteration, order_id=pk, actor=request.user, **serializer.validated_data
        )
        if err:
            return err
        return Response(OrderAlterationSerializer(alteration).data, status=status.HTTP_201_CREATED)


class AlterationStatusAPIView(APIView):
    """PATCH /api/orders/{pk}/alterations/{id}/ -> status and quote (tailor only)."""

    permission_classes = [IsAuthenticated]

    def patch(self, request, pk: int, alteration_id: int):
        serializer = AlterationStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        alteration, err = _run(
            alterations.update_alteration_status,
            order_id=pk,
            alteration_id=alteration_id,
            actor=request.user,
            **serializer.validated_data,
        )
        if err:
            return err
        return Response(OrderAlterationSerializer(alteration).data, status=status.HTTP_200_OK)
