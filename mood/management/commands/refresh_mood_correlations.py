from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from mood.services.correlation_cache import refresh_correlations


class Command(BaseCommand):
    help = 'Rebuild cached mood correlations from complete mood check-ins'

    def add_arguments(self, parser):
        parser.add_argument(
            '--username',
            type=str,
            help='Refresh only this user',
        )

    def handle(self, *_args, **options):
        username = options.get('username')
        User = get_user_model()

        if username:
            users = User.objects.filter(username=username)
            if not users.exists():
                self.stdout.write(self.style.ERROR(f'No user found with username: {username}'))
                return
        else:
            users = User.objects.filter(mood_checkins__isnull=False).distinct()

        refreshed = 0
        error_count = 0

        for user in users:
            try:
                groups = refresh_correlations(user)
                self.stdout.write(
                    self.style.SUCCESS(f'✓ {user.username}: {groups} strain/method group(s)')
                )
                refreshed += 1
            except Exception as e:
                self.stdout.write(self.style.ERROR(f'✗ Error refreshing {user.username} - {str(e)}'))
                error_count += 1

        self.stdout.write(
            self.style.SUCCESS(
                f'\nComplete! Refreshed {refreshed} user(s), {error_count} error(s)'
            )
        )
