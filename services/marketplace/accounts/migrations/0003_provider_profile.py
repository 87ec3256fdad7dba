# Generated manually: provider profile fields.
from __future__ import annotations

from django.db import migrations, models


class Migration(migrations.Migration):
    dependencies = [
        ("accounts", "0002_seed_system_account"),
    ]

    operations = [
        migrations.AddField(
            model_name="user",
            name="motivation",
            field=models.TextField(blank=True),
        ),
        migrations.AddField(
            model_name="user",
            name="qualifications",
            field=models.TextField(blank=True),
        ),
        migrations.AddField(
            model_name="user",
            name="rating",
            field=models.DecimalField(decimal_places=2, default=0, max_digits=3),
        ),
        migrations.AddField(
            model_name="user",
            name="jobs_done",
            field=models.PositiveIntegerField(default=0),
        ),
    ]
