"""
Django admin configuration for viewings.
"""

from django.contrib import admin

from viewings.models import Viewing


@admin.register(Viewing)
class ViewingAdmin(admin.ModelAdmin):
    list_display = ["property", "customer", "scheduled_at", "status", "created_at"]
    list_filter = ["status"]
    search_fields = ["property__title", "customer__email"]
    raw_id_fields = ["property", "customer"]
    readonly_fields = ["created_at", "updated_at"]
    ordering = ["scheduled_at"]
