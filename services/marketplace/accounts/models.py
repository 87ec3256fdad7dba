"""Database models for marketplace accounts."""
from __future__ import annotations

from django.conf import settings
from django.db import models


class UserManager(models.Manager):
    def system_account(self) -> "User":
        """Return the platform account that authors system messages."""

        user = self.filter(role=User.SYSTEM).order_by("id").first()
        if user is not None:
            return user
        user, _ = self.get_or_create(
            email=settings.SYSTEM_ACCOUNT_EMAIL,
            defaults={
                "name": settings.SYSTEM_ACCOUNT_NAME,
                "role": User.SYSTEM,
                "status": User.ACTIVE,
            },
        )
        return user

    def pending_providers(self) -> models.QuerySet:
        return self.filter(role=User.PROVIDER, status=User.PENDING)


class User(models.Model):
    """A client, provider, administrator or the platform itself."""

    CLIENT = "CLIENT"
    PROVIDER = "PROVIDER"
    ADMIN = "ADMIN"
    SYSTEM = "SYSTEM"

    ROLE_CHOICES = [
        (CLIENT, "Client"),
        (PROVIDER, "Provider"),
        (ADMIN, "Administrator"),
        (SYSTEM, "System"),
    ]

    ACTIVE = "active"
    PENDING = "pending"
    REJECTED = "rejected"

    STATUS_CHOICES = [
        (ACTIVE, "Active"),
        (PENDING, "Pending"),
        (REJECTED, "Rejected"),
    ]

    name = models.CharField(max_length=255)
    email = models.EmailField(unique=True)
    password = models.CharField(max_length=128, blank=True)
    role = models.CharField(max_length=16, choices=ROLE_CHOICES, default=CLIENT)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=ACTIVE)
    phone_number = models.CharField(max_length=32, blank=True)
    service = models.CharField(max_length=255, blank=True)
    location = models.CharField(max_length=255, blank=True)
    motivation = models.TextField(blank=True)
    qualifications = models.TextField(blank=True)
    rating = models.DecimalField(max_digits=3, decimal_places=2, default=0)
    jobs_done = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    class Meta:
        ordering = ["name", "email"]
        indexes = [models.Index(fields=["role", "status"], name="accounts_role_status_idx")]

    def __str__(self) -> str:
        return f"{self.name} <{self.email}>"

    @property
    def is_system(self) -> bool:
        return self.role == self.SYSTEM
