import django.db.models.deletion
from django.db import migrations, models


STATUS_CHOICES = [("draft", "Draft"), ("published", "Published")]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Document",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("collection", models.SlugField(max_length=100)),
                ("data", models.JSONField(blank=True, default=dict)),
                (
                    "status",
                    models.CharField(
                        blank=True,
                        choices=STATUS_CHOICES,
                        default="",
                        help_text="Blank when the collection has no drafts.",
                        max_length=16,
                    ),
                ),
            ],
            options={
                "ordering": ("-created_at", "-id"),
                "indexes": [
                    models.Index(fields=["collection", "status"], name="content_doc_coll_status_idx"),
                    models.Index(fields=["collection", "-created_at"], name="content_doc_coll_created_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="GlobalDocument",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("slug", models.SlugField(max_length=100, unique=True)),
                ("data", models.JSONField(blank=True, default=dict)),
                ("status", models.CharField(blank=True, choices=STATUS_CHOICES, default="", max_length=16)),
            ],
            options={
                "ordering": ("slug",),
            },
        ),
        migrations.CreateModel(
            name="Version",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("data", models.JSONField(blank=True, default=dict)),
                ("status", models.CharField(blank=True, choices=STATUS_CHOICES, default="", max_length=16)),
                ("latest", models.BooleanField(default=False)),
                (
                    "document",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="versions",
                        to="content.document",
                    ),
                ),
                (
                    "global_document",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="versions",
                        to="content.globaldocument",
                    ),
                ),
            ],
            options={
                "ordering": ("-created_at", "-id"),
                "indexes": [
                    models.Index(fields=["document", "latest"], name="content_ver_doc_latest_idx"),
                    models.Index(fields=["global_document", "latest"], name="content_ver_global_latest_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=(
                            models.Q(("document__isnull", False), ("global_document__isnull", True))
                            | models.Q(("document__isnull", True), ("global_document__isnull", False))
                        ),
                        name="version_xor_document_or_global",
                    ),
                ],
            },
        ),
    ]
