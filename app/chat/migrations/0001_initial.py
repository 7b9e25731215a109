"""
Initial schema for chat threads and messages.

The ``threads`` table deliberately has no unique constraint on
(property, customer, realtor); see chat.models.Thread.
"""

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("properties", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Thread",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        db_index=True,
                        help_text="Timestamp when this record was created",
                    ),
                ),
                (
                    "updated_at",
                    models.DateTimeField(
                        auto_now=True,
                        help_text="Timestamp when this record was last modified",
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[("active", "Active"), ("archived", "Archived")],
                        db_index=True,
                        default="active",
                        max_length=10,
                    ),
                ),
                (
                    "customer",
                    models.ForeignKey(
                        db_column="user_id",
                        help_text="Customer who opened the thread",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="customer_threads",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "property",
                    models.ForeignKey(
                        help_text="Listing this thread is about",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="chat_threads",
                        to="properties.property",
                    ),
                ),
                (
                    "realtor",
                    models.ForeignKey(
                        help_text="Realtor answering the thread",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="realtor_threads",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "threads",
                "ordering": ["-updated_at", "-id"],
                "indexes": [
                    models.Index(
                        fields=["property", "customer", "realtor", "status"],
                        name="thread_lookup_idx",
                    ),
                    models.Index(
                        fields=["customer", "-updated_at"],
                        name="thread_customer_idx",
                    ),
                    models.Index(
                        fields=["realtor", "-updated_at"],
                        name="thread_realtor_idx",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Message",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("body", models.TextField()),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                (
                    "sender",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="sent_messages",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "thread",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="messages",
                        to="chat.thread",
                    ),
                ),
            ],
            options={
                "db_table": "messages",
                "ordering": ["created_at", "id"],
                "indexes": [
                    models.Index(
                        fields=["thread", "created_at", "id"],
                        name="message_thread_idx",
                    )
                ],
            },
        ),
    ]
