"""
URL routing for registration forms.
"""
from django.urls import path, include
from rest_framework.routers import SimpleRouter

from .views import RegistrationFormViewSet

router = SimpleRouter()
router.register(r'', RegistrationFormViewSet, basename='form')

urlpatterns = [
    path('', include(router.urls)),
]
