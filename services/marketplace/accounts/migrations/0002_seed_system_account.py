# Seeds the platform account that authors system messages.
from __future__ import annotations

from django.conf import settings
from django.db import migrations


def create_system_account(apps, schema_editor):
    User = apps.get_model("accounts", "User")
    User.objects.get_or_create(
        email=settings.SYSTEM_ACCOUNT_EMAIL,
        defaults={
            "name": settings.SYSTEM_ACCOUNT_NAME,
            "role": "SYSTEM",
            "status": "active",
        },
    )


def remove_system_account(apps, schema_editor):
    User = apps.get_model("accounts", "User")
    User.objects.filter(email=settings.SYSTEM_ACCOUNT_EMAIL, role="SYSTEM").delete()


class Migration(migrations.Migration):
    dependencies = [
        ("accounts", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(create_system_account, remove_system_account),
    ]
