from django.contrib.auth.base_user import BaseUserManager
from django.db import transaction


class CustomUserManager(BaseUserManager):
    """Manager for CustomUser model."""

    def create_user(self, email, profile_name, password=None, visibility=None, **extra_fields):
        """Create and return a regular user together with its profile."""
        from profiles.models import Profile

        if not email:
            raise ValueError("The Email field must be set")
        if not profile_name:
            raise ValueError("The Profile Name field must be set")
        email = self.normalize_email(email)
        with transaction.atomic(using=self._db):
            user = self.model(email=email, **extra_fields)
            user.set_password(password)
            user.save(using=self._db)
            profile_fields = {"visibility": visibility} if visibility else {}
            Profile.objects.create(user=user, profile_name=profile_name, **profile_fields)
        return user

    def create_superuser(self, email, profile_name=None, password=None, **extra_fields):
        """Create and return a superuser; profile_name falls back to the email local part."""
        profile_name = profile_name or email.split("@")[0]
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("is_active", True)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")

        return self.create_user(email, profile_name, password, **extra_fields)
