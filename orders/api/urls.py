from django.urls import path
from .views import (
    AlterationListCreateAPIView,
    AlterationStatusAPIView,
    ConsultationAPIView,
    ConsultationStatusAPIView,
    DeliveryAPIView,
    DisputeListCreateAPIView,
    DisputeResolveAPIView,
    FabricAPIView,
    MessageListCreateAPIView,
    MessageReadAPIView,
    OrderDetailAPIView,
    OrderListCreateAPIView,
    OrderStatusAPIView,
    RevisionActionAPIView,
    RevisionListCreateAPIView,
)

urlpatterns = [
    path("orders/", OrderListCreateAPIView.as_view(), name="order-create"),
    path("orders/<int:pk>/", OrderDetailAPIView.as_view(), name="order-detail"),
    path("orders/<int:pk>/status/", OrderStatusAPIView.as_view(), name="order-status"),
    path("orders/<int:pk>/consultation/", ConsultationAPIView.as_view(), name="order-consultation"),
    path(
        "orders/<int:pk>/consultation/status/",
        ConsultationStatusAPIView.as_view(),
        name="order-consultation-status",
    ),
    path("orders/<int:pk>/fabric/", FabricAPIView.as_view(), name="order-fabric"),
    path("orders/<int:pk>/revisions/", RevisionListCreateAPIView.as_view(), name="order-revisions"),
    path(
        "orders/<int:pk>/revisions/<int:revision_number>/<slug:action>/",
        RevisionActionAPIView.as_view(),
        name="order-revision-action",
    ),
    path("orders/<int:pk>/messages/", MessageListCreateAPIView.as_view(), name="order-messages"),
    path(
        "orders/<int:pk>/messages/<int:message_id>/read/",
        MessageReadAPIView.as_view(),
        name="order-message-read",
    ),
    path("orders/<int:pk>/delivery/", DeliveryAPIView.as_view(), name="order-delivery"),
    path("orders/<int:pk>/disputes/", DisputeListCreateAPIView.as_view(), name="order-disputes"),
    path(
        "orders/<int:pk>/disputes/<int:dispute_id>/resolve/",
        DisputeResolveAPIView.as_view(),
        name="order-dispute-resolve",
    ),
    path("orders/<int:pk>/alterations/", AlterationListCreateAPIView.as_view(), name="order-alterations"),
    path(
        "orders/<int:pk>/alterations/<int:alteration_id>/",
        AlterationStatusAPIView.as_view(),
        name="order-alteration-status",
    ),
]
