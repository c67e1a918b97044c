"""
User account models.
"""
from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """
    Dashboard user. Logs in with email and owns registration forms.

    ``bearer_token`` is the WebinarFuel API credential injected into every
    generated registration form.
    """
    email = models.EmailField(unique=True)
    name = models.CharField(max_length=255, blank=True, default='')
    bearer_token = models.TextField(
        blank=True,
        null=True,
        help_text="WebinarFuel bearer token used when generating forms"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['username']

    class Meta:
        db_table = 'users'
        ordering = ['-created_at']

    def __str__(self):
        return self.email

    def has_bearer_token(self):
        return bool(self.bearer_token and self.bearer_token.strip())

    def set_bearer_token(self, token):
        self.bearer_token = token.strip()
        self.save(update_fields=['bearer_token', 'updated_at'])
