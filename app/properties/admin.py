"""
Django admin configuration for property listings.
"""

from django.contrib import admin

from properties.models import Property


@admin.register(Property)
class PropertyAdmin(admin.ModelAdmin):
    """Admin interface for listing moderation."""

    list_display = ["title", "city", "status", "realtor", "is_featured", "created_at"]
    list_filter = ["status", "is_featured", "city"]
    search_fields = ["title", "location", "city"]
    raw_id_fields = ["realtor"]
    readonly_fields = ["created_at", "updated_at"]
    ordering = ["-created_at"]
