from django.urls import path
from .views import ProfileView, TailorProfileListView, CustomerProfileListView

urlpatterns = [
    path("profile/<int:pk>/", ProfileView.as_view(), name="profile"),
    path("profiles/tailor/", TailorProfileListView.as_view(), name="tailor-profiles"),
    path("profiles/customer/", CustomerProfileListView.as_view(), name="customer-profiles"),
]
