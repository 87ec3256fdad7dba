# Generated manually for initial schema.
from __future__ import annotations

from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="AuditLogEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("action", models.CharField(max_length=255)),
                ("actor", models.CharField(max_length=255)),
                (
                    "status",
                    models.CharField(
                        choices=[("Success", "Success"), ("Failure", "Failure")],
                        default="Success",
                        max_length=16,
                    ),
                ),
                ("detail", models.TextField(blank=True)),
                ("timestamp", models.DateTimeField(auto_now_add=True)),
            ],
            options={"ordering": ["-timestamp", "-id"]},
        ),
    ]
