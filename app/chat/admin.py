"""
Django admin configuration for chat models.
"""

from django.contrib import admin

from chat.models import Message, Thread


class MessageInline(admin.TabularInline):
    model = Message
    extra = 0
    fields = ["sender", "body", "created_at"]
    readonly_fields = fields
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Thread)
class ThreadAdmin(admin.ModelAdmin):
    """Admin interface for threads; duplicates from racing creators show up here."""

    list_display = ["id", "property", "customer", "realtor", "status", "updated_at"]
    list_filter = ["status"]
    search_fields = ["property__title", "customer__email", "realtor__email"]
    raw_id_fields = ["property", "customer", "realtor"]
    readonly_fields = ["created_at", "updated_at"]
    inlines = [MessageInline]


@admin.register(Message)
class MessageAdmin(admin.ModelAdmin):
    """Read-only admin interface; messages are immutable."""

    list_display = ["id", "thread", "sender", "created_at"]
    search_fields = ["body", "sender__email"]
    raw_id_fields = ["thread", "sender"]
    readonly_fields = ["thread", "sender", "body", "created_at"]

    def has_change_permission(self, request, obj=None):
        return False
