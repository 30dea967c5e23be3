from django.urls import path

from .views import (
    OrderReviewAPIView,
    ReviewDetailUpdateDeleteAPIView,
    ReviewListCreateAPIView,
    TailorReviewListAPIView,
)

urlpatterns = [
    path("reviews/", ReviewListCreateAPIView.as_view(), name="review-create"),
    path("reviews/<int:pk>/", ReviewDetailUpdateDeleteAPIView.as_view(), name="review-detail"),
    path("reviews/tailor/<int:tailor_id>/", TailorReviewListAPIView.as_view(), name="tailor-reviews"),
    path("reviews/order/<int:order_id>/", OrderReviewAPIView.as_view(), name="order-review"),
]
