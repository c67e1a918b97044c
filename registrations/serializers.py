"""
Serializers for RegistrationForm and the generation endpoints.
"""
import json

from rest_framework import serializers

from .models import RegistrationForm
from .widget_url import parse_widget_url

HTML_REQUIRED_MESSAGE = 'Infusionsoft HTML is required'


class RegistrationFormSerializer(serializers.ModelSerializer):
    """Serializer for RegistrationForm model."""
    custom_fields = serializers.JSONField(required=False)
    settings = serializers.JSONField(required=False)

    class Meta:
        model = RegistrationForm
        fields = (
            'id', 'name', 'infusionsoft_html',
            'widget_url', 'widget_id', 'widget_version', 'session_id',
            'status', 'custom_fields', 'settings',
            'generated_filename', 'generated_at',
            'created_at', 'updated_at',
        )
        read_only_fields = ('id', 'generated_filename', 'generated_at', 'created_at', 'updated_at')

    def _decode_structured(self, value, label):
        """Structured fields may arrive JSON-encoded as text from older clients."""
        if isinstance(value, str):
            try:
                value = json.loads(value) if value.strip() else {}
            except ValueError:
                raise serializers.ValidationError(f"{label} must be a JSON object")
        if not isinstance(value, dict):
            raise serializers.ValidationError(f"{label} must be a JSON object")
        return value

    def validate_custom_fields(self, value):
        return self._decode_structured(value, 'custom_fields')

    def validate_settings(self, value):
        return self._decode_structured(value, 'settings')

    def validate_widget_id(self, value):
        if value and not value.isdigit():
            raise serializers.ValidationError("Widget ID must be numeric")
        return value

    def validate_widget_version(self, value):
        if value and not value.isdigit():
            raise serializers.ValidationError("Widget version must be numeric")
        return value

    def validate(self, attrs):
        """A parseable widget URL always wins over explicit widget_id / widget_version."""
        if 'widget_url' in attrs:
            url = attrs['widget_url']
        else:
            url = self.instance.widget_url if self.instance else ''

        ref = parse_widget_url(url)
        if ref:
            attrs['widget_id'] = ref.widget_id
            attrs['widget_version'] = ref.version
        return attrs


class RegistrationFormListSerializer(serializers.ModelSerializer):
    """Dashboard listing - omits the raw HTML."""

    class Meta:
        model = RegistrationForm
        fields = (
            'id', 'name', 'widget_id', 'widget_version', 'session_id',
            'status', 'generated_filename', 'generated_at',
            'created_at', 'updated_at',
        )
        read_only_fields = fields


class ValidateHTMLSerializer(serializers.Serializer):
    """Payload for POST /generate/validate/."""
    infusionsoft_html = serializers.CharField(
        trim_whitespace=False,
        error_messages={
            'required': HTML_REQUIRED_MESSAGE,
            'blank': HTML_REQUIRED_MESSAGE,
        },
    )
