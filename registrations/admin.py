from django.contrib import admin

from .models import RegistrationForm


@admin.register(RegistrationForm)
class RegistrationFormAdmin(admin.ModelAdmin):
    list_display = ('name', 'user', 'status', 'widget_id', 'widget_version', 'generated_at', 'updated_at')
    list_filter = ('status', 'created_at')
    search_fields = ('name', 'user__email', 'session_id')
    readonly_fields = ('id', 'generated_filename', 'generated_at', 'created_at', 'updated_at')

    def save_model(self, request, obj, form, change):
        obj.apply_widget_url()
        super().save_model(request, obj, form, change)
