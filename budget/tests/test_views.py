"""Tests for budget views."""
import json
from datetime import datetime, timezone as dt_timezone
from decimal import Decimal
from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.test import TestCase, Client
from django.urls import reverse

from budget.models import BudgetAlert, BudgetSettings


class BudgetViewTestBase(TestCase):

    def setUp(self):
        self.user = get_user_model().objects.create_user(username='tester', password='pw')
        self.client = Client()
        self.client.force_login(self.user)

    def post_json(self, url, data=None):
        return self.client.post(url, data=json.dumps(data or {}), content_type='application/json')


class UpdateSettingsTests(BudgetViewTestBase):

    def test_create_then_update(self):
        url = reverse('budget:update_settings')
        resp = self.post_json(url, {'monthly_budget': 150, 'weekly_budget': 40})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()['message'], 'Budget created')
        self.assertEqual(resp.json()['alert_threshold'], 80)

        resp = self.post_json(url, {'monthly_budget': 120, 'alert_threshold': 90, 'push_alerts': True})
        self.assertEqual(resp.json()['message'], 'Budget updated')
        settings = BudgetSettings.objects.get(user=self.user)
        self.assertEqual(settings.monthly_budget, Decimal('120.00'))
        self.assertIsNone(settings.weekly_budget)
        self.assertEqual(settings.alert_threshold, 90)
        self.assertTrue(settings.push_alerts)
        self.assertTrue(settings.email_alerts)

    def test_validation(self):
        url = reverse('budget:update_settings')
        self.assertEqual(self.post_json(url, {}).status_code, 400)
        self.assertEqual(self.post_json(url, {'monthly_budget': -5}).status_code, 400)
        self.assertEqual(self.post_json(url, {'monthly_budget': 100, 'alert_threshold': 150}).status_code, 400)
        self.assertFalse(BudgetSettings.objects.exists())


class AcknowledgeAlertTests(BudgetViewTestBase):

    def setUp(self):
        super().setUp()
        self.alert = BudgetAlert.objects.create(
            user=self.user,
            alert_type='monthly_threshold',
            current_spending=Decimal('85.00'),
            budget_limit=Decimal('100.00'),
            percentage_used=Decimal('85.00'),
        )

    def test_acknowledge_is_idempotent(self):
        url = reverse('budget:acknowledge_alert', args=[self.alert.id])
        first = datetime(2025, 3, 15, 20, 0, tzinfo=dt_timezone.utc)
        with patch('django.utils.timezone.now', return_value=first):
            self.assertEqual(self.post_json(url).status_code, 200)
        with patch('django.utils.timezone.now', return_value=datetime(2025, 3, 16, tzinfo=dt_timezone.utc)):
            self.assertEqual(self.post_json(url).status_code, 200)
        self.alert.refresh_from_db()
        self.assertTrue(self.alert.acknowledged)
        self.assertEqual(self.alert.acknowledged_at, first)

    def test_other_users_alert(self):
        other = get_user_model().objects.create_user(username='other', password='pw')
        self.client.force_login(other)
        resp = self.post_json(reverse('budget:acknowledge_alert', args=[self.alert.id]))
        self.assertEqual(resp.status_code, 404)
