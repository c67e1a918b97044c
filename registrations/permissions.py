"""
Custom permissions for registrations app.
"""
from rest_framework import permissions


class IsFormOwner(permissions.BasePermission):
    """
    Permission to check if user owns the registration form.
    """
    def has_object_permission(self, request, view, obj):
        return obj.user == request.user
