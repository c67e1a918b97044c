"""
Registration form models.
"""
import uuid

from django.conf import settings
from django.db import models
from django.utils import timezone

from .artifacts import artifact_filename
from .widget_url import parse_widget_url


class RegistrationForm(models.Model):
    """
    An Infusionsoft form paired with a WebinarFuel widget.
    One user can have many forms; each is visible to its owner only.
    """
    STATUS_DRAFT = 'draft'
    STATUS_GENERATED = 'generated'
    STATUS_ACTIVE = 'active'
    STATUS_ARCHIVED = 'archived'
    STATUS_CHOICES = [
        (STATUS_DRAFT, 'Draft'),
        (STATUS_GENERATED, 'Generated'),
        (STATUS_ACTIVE, 'Active'),
        (STATUS_ARCHIVED, 'Archived'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='registration_forms'
    )
    name = models.CharField(max_length=255)
    infusionsoft_html = models.TextField(
        blank=True,
        default='',
        help_text="Raw form HTML pasted from Infusionsoft"
    )
    widget_url = models.URLField(
        max_length=1000,
        blank=True,
        default='',
        help_text="WebinarFuel widget URL (.../widgets/<id>/<version>/elements)"
    )
    widget_id = models.CharField(max_length=32, blank=True, default='')
    widget_version = models.CharField(max_length=32, blank=True, default='')
    session_id = models.CharField(max_length=255, blank=True, default='')
    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=STATUS_DRAFT,
        db_index=True
    )
    custom_fields = models.JSONField(default=dict, blank=True)
    settings = models.JSONField(default=dict, blank=True)
    generated_filename = models.CharField(max_length=512, blank=True, null=True)
    generated_at = models.DateTimeField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'forms'
        ordering = ['-updated_at']

    def __str__(self):
        return f"{self.name} ({self.status})"

    def apply_widget_url(self):
        """Overwrite widget id/version from ``widget_url`` when it parses."""
        ref = parse_widget_url(self.widget_url)
        if ref:
            self.widget_id = ref.widget_id
            self.widget_version = ref.version
        return ref

    @property
    def artifact_filename(self):
        return artifact_filename(self.name, self.id)

    def mark_generated(self, filename, generated_at=None):
        self.status = self.STATUS_GENERATED
        self.generated_filename = filename
        self.generated_at = generated_at or timezone.now()
        self.save(update_fields=['status', 'generated_filename', 'generated_at', 'updated_at'])
