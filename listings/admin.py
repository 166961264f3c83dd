from django.contrib import admin

from .models import Listing


@admin.register(Listing)
class ListingAdmin(admin.ModelAdmin):
    list_display = ("commodity", "variety", "quantity", "unit", "expected_price", "farmer_id", "created_at")
    list_filter = ("unit",)
    search_fields = ("commodity", "variety", "location", "farmer_id")
