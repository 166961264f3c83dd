from django.core.validators import MinValueValidator
from django.db import models


class Listing(models.Model):
    UNIT_CHOICES = [
        ("kg", "Kilogram"),
        ("quintal", "Quintal"),
        ("ton", "Ton"),
    ]

    farmer_id = models.CharField(max_length=100, db_index=True)
    commodity = models.CharField(max_length=120)
    variety = models.CharField(max_length=120, blank=True, default="")
    quantity = models.FloatField(validators=[MinValueValidator(0)])
    unit = models.CharField(max_length=10, choices=UNIT_CHOICES, default="kg")
    expected_price = models.FloatField(validators=[MinValueValidator(0)])
    description = models.TextField(blank=True, default="")
    location = models.CharField(max_length=255)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"{self.commodity} ({self.quantity} {self.unit}) by {self.farmer_id}"

    def is_owned_by(self, user_id):
        return str(self.farmer_id) == str(user_id)
