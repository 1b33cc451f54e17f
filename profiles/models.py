from django.conf import settings
from django.db import models


class Visibility(models.TextChoices):
    PUBLIC = "public", "Public"
    PRIVATE = "private", "Private"


def normalize_organization_key(value):
    """Organization tags compare case-insensitively and ignore surrounding whitespace."""
    return " ".join(str(value).split()).casefold()


class Profile(models.Model):
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="profile"
    )
    profile_name = models.CharField(max_length=255, unique=True, db_index=True)
    bio = models.TextField(max_length=500, blank=True)
    visibility = models.CharField(
        max_length=10, choices=Visibility.choices, default=Visibility.PUBLIC
    )
    follower_count = models.PositiveIntegerField(default=0)
    following_count = models.PositiveIntegerField(default=0)

    class Meta:
        indexes = [
            models.Index(fields=['user', 'visibility'], name='profile_user_visibility_idx'),
        ]

    def __str__(self):
        return self.profile_name

    @property
    def is_private(self):
        return self.visibility == Visibility.PRIVATE

    @property
    def organization_keys(self):
        return set(
            OrganizationMembership.objects.filter(user_id=self.user_id).values_list("key", flat=True)
        )

    def set_organizations(self, keys):
        """Replace the profile's organization tags with ``keys``."""
        normalized = {normalize_organization_key(key) for key in keys if str(key).strip()}
        OrganizationMembership.objects.filter(user_id=self.user_id).exclude(key__in=normalized).delete()
        existing = self.organization_keys
        OrganizationMembership.objects.bulk_create(
            [OrganizationMembership(user_id=self.user_id, key=key) for key in normalized - existing],
            ignore_conflicts=True,
        )
        return normalized


class OrganizationMembership(models.Model):
    """A school, team or club tag attached to a user; shared tags grant visibility."""
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="organizations"
    )
    key = models.CharField(max_length=120)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["user", "key"], name="unique_organization_per_user"),
        ]
        indexes = [
            models.Index(fields=["key", "user"], name="organization_key_user_idx"),
        ]

    def save(self, *args, **kwargs):
        self.key = normalize_organization_key(self.key)
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.user_id} @ {self.key}"
