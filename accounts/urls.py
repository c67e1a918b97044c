"""
URL routing for accounts app.
"""
from django.urls import path

from . import auth

urlpatterns = [
    path('login/', auth.login, name='login'),
    path('register/', auth.register, name='register'),
    path('logout/', auth.logout, name='logout'),
    path('me/', auth.me, name='me'),
    path('bearer-token/', auth.bearer_token, name='bearer-token'),
]
