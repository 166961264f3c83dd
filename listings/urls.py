from django.urls import path

from .views import AllListingsView, ListingCreateView, ListingDetailView, MyListingsView

urlpatterns = [
    path("create", ListingCreateView.as_view(), name="listing-create"),
    path("my-listings", MyListingsView.as_view(), name="my-listings"),
    path("all", AllListingsView.as_view(), name="listing-list"),
    path("<int:pk>", ListingDetailView.as_view(), name="listing-detail"),
]
