from django.contrib import admin

from .models import User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('user_id', 'user_name', 'email', 'created_at')
    search_fields = ('user_id', 'user_name', 'email')
    readonly_fields = ('created_at', 'updated_at')
