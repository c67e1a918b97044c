"""
Management command to create (or reset) a dashboard user.
Usage: python manage.py create_admin --email admin@example.com --password ... --name "Admin"

ADMIN_EMAIL / ADMIN_PASSWORD / ADMIN_NAME environment variables are used
when the matching option is omitted.
"""
import os

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError


class Command(BaseCommand):
    help = 'Create a dashboard user, or update password and name if the email exists'

    def add_arguments(self, parser):
        parser.add_argument('--email', default=os.getenv('ADMIN_EMAIL'))
        parser.add_argument('--password', default=os.getenv('ADMIN_PASSWORD'))
        parser.add_argument('--name', default=os.getenv('ADMIN_NAME', 'Admin'))
        parser.add_argument('--staff', action='store_true', help='Also grant Django admin access')

    def handle(self, *args, **options):
        email = options['email']
        password = options['password']
        if not email or not password:
            raise CommandError('Both --email and --password are required (or ADMIN_EMAIL / ADMIN_PASSWORD).')

        User = get_user_model()
        user, created = User.objects.update_or_create(
            email=email,
            defaults={'username': email, 'name': options['name']},
        )
        user.set_password(password)
        if options['staff']:
            user.is_staff = True
            user.is_superuser = True
        user.save()

        action = 'Created' if created else 'Updated'
        self.stdout.write(self.style.SUCCESS(f'{action} user {user.email} (id={user.id})'))
