"""Tests for the refresh_mood_correlations management command."""
from io import StringIO

from django.core.management import call_command

from mood.models import MoodCorrelation
from .test_models import MoodTestBase, scores


class RefreshMoodCorrelationsTests(MoodTestBase):

    def call(self, *args):
        out = StringIO()
        call_command('refresh_mood_correlations', *args, stdout=out)
        return out.getvalue()

    def test_refreshes_users_with_moods(self):
        mood = self.make_mood(self.make_entry())
        mood.record_post_mood(**scores('post_mood', 6))
        output = self.call()
        self.assertIn('tester: 1 strain/method group(s)', output)
        self.assertIn('Refreshed 1 user(s), 0 error(s)', output)
        self.assertEqual(MoodCorrelation.objects.count(), 1)

    def test_unknown_username(self):
        output = self.call('--username', 'nobody')
        self.assertIn('No user found with username: nobody', output)
