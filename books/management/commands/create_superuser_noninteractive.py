import os

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError


class Command(BaseCommand):
    help = "Create or promote a superuser without prompting (run once by hand after the first deploy)"

    def add_arguments(self, parser):
        parser.add_argument(
            '--username',
            type=str,
            help='Username for the superuser',
            default=os.environ.get('DJANGO_SUPERUSER_USERNAME', 'admin'),
        )
        parser.add_argument(
            '--email',
            type=str,
            help='Email for the superuser',
            default=os.environ.get('DJANGO_SUPERUSER_EMAIL', 'admin@example.com'),
        )
        parser.add_argument(
            '--password',
            type=str,
            help='Password for the superuser (default: $DJANGO_SUPERUSER_PASSWORD)',
            default=os.environ.get('DJANGO_SUPERUSER_PASSWORD', ''),
        )

    def handle(self, *args, **options):
        User = get_user_model()
        username = options['username']
        email = options['email']
        password = options['password']

        user = User.objects.filter(username=username).first()
        if user is not None:
            if user.is_superuser:
                self.stdout.write(self.style.WARNING(f'Superuser "{username}" already exists.'))
                return

            # Existing account, promote it
            user.is_superuser = True
            user.is_staff = True
            if password:
                user.set_password(password)
            user.save()
            self.stdout.write(self.style.SUCCESS(f'Existing user "{username}" has been promoted to superuser.'))
            return

        if not password:
            raise CommandError('Password is required. Use --password or set DJANGO_SUPERUSER_PASSWORD.')

        User.objects.create_superuser(username=username, email=email, password=password)
        self.stdout.write(self.style.SUCCESS(f'Successfully created superuser "{username}"'))
