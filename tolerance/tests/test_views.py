"""Tests for tolerance check-in views."""
import json
from datetime import date, datetime, timezone as dt_timezone
from decimal import Decimal
from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.test import TestCase, Client
from django.urls import reverse

from tolerance.models import ToleranceTracking


class AddCheckinTests(TestCase):

    def setUp(self):
        self.user = get_user_model().objects.create_user(username='tester', password='pw')
        self.client = Client()
        self.client.force_login(self.user)
        self.url = reverse('tolerance:add_checkin')

    def post_json(self, data):
        return self.client.post(self.url, data=json.dumps(data), content_type='application/json')

    def test_add_checkin(self):
        resp = self.post_json({'baseline_amount': 0.3, 'effectiveness_rating': 7, 'tracking_date': '2025-03-10'})
        self.assertEqual(resp.status_code, 200)
        checkin = ToleranceTracking.objects.get(id=resp.json()['checkin_id'])
        self.assertEqual(checkin.baseline_amount, Decimal('0.300'))
        self.assertEqual(checkin.tracking_date, date(2025, 3, 10))

    @patch('django.utils.timezone.now')
    def test_tracking_date_defaults_to_today(self, mock_now):
        mock_now.return_value = datetime(2025, 3, 15, 20, 0, tzinfo=dt_timezone.utc)
        self.post_json({'baseline_amount': 0.3, 'effectiveness_rating': 7})
        self.assertEqual(ToleranceTracking.objects.get().tracking_date, date(2025, 3, 15))

    @patch('django.utils.timezone.now')
    def test_tracking_date_defaults_to_today_in_user_timezone(self, mock_now):
        """02:00 UTC on the 16th is still the evening of the 15th in Los Angeles."""
        mock_now.return_value = datetime(2025, 3, 16, 2, 0, tzinfo=dt_timezone.utc)
        self.client.cookies['user_timezone'] = 'America/Los_Angeles'
        self.post_json({'baseline_amount': 0.3, 'effectiveness_rating': 7})
        self.assertEqual(ToleranceTracking.objects.get().tracking_date, date(2025, 3, 15))

    def test_break_dates(self):
        resp = self.post_json({
            'baseline_amount': 0.3,
            'effectiveness_rating': 7,
            'tolerance_break_start': '2025-03-10',
        })
        self.assertEqual(resp.status_code, 200)
        self.assertIsNone(ToleranceTracking.objects.get().tolerance_break_end)

    def test_invalid_break_dates(self):
        base = {'baseline_amount': 0.3, 'effectiveness_rating': 7}
        self.assertEqual(self.post_json(dict(base, tolerance_break_end='2025-03-10')).status_code, 400)
        self.assertEqual(self.post_json(dict(
            base, tolerance_break_start='2025-03-10', tolerance_break_end='2025-03-01'
        )).status_code, 400)

    def test_rating_and_baseline_are_validated(self):
        self.assertEqual(self.post_json({'baseline_amount': 0, 'effectiveness_rating': 7}).status_code, 400)
        self.assertEqual(self.post_json({'baseline_amount': 0.3, 'effectiveness_rating': 11}).status_code, 400)
        self.assertEqual(self.post_json({'baseline_amount': 0.3}).status_code, 400)
        self.assertEqual(ToleranceTracking.objects.count(), 0)
