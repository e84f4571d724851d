import uuid

from django.conf import settings
from django.db import models


class TimeStampedUUIDModel(models.Model):
    """Abstract base model with a UUID primary key and timestamps"""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class UserRole(TimeStampedUUIDModel):
    ADMIN = "admin"
    STAFF = "staff"
    ROLE_CHOICES = [
        (ADMIN, "Admin"),
        (STAFF, "Staff"),
    ]

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="roles"
    )
    role = models.CharField(max_length=20, choices=ROLE_CHOICES)

    class Meta:
        db_table = "user_roles"
        constraints = [
            models.UniqueConstraint(fields=["user", "role"], name="unique_user_role"),
        ]

    def __str__(self):
        return f"{self.user} - {self.role}"
