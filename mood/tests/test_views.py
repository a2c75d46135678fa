"""Tests for mood check-in views."""
import json
from unittest.mock import patch

from django.contrib.auth import get_user_model
from django.db.models.query import QuerySet
from django.test import Client
from django.urls import reverse

from mood.models import MoodCorrelation, MoodTracking
from .test_models import DIMENSIONS, MoodTestBase


def payload(value, **extra):
    data = {d: value for d in DIMENSIONS}
    data.update(extra)
    return data


class MoodViewTests(MoodTestBase):

    def setUp(self):
        super().setUp()
        self.client = Client()
        self.client.force_login(self.user)
        self.entry = self.make_entry()

    def post_json(self, url, data):
        return self.client.post(url, data=json.dumps(data), content_type='application/json')

    def test_pre_then_post_mood(self):
        resp = self.post_json(reverse('mood:add_pre_mood'), payload(
            4, consumption_entry_id=self.entry.id, environment='home', activity='relaxing'
        ))
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data['status'], 'pre_pending')

        resp = self.post_json(reverse('mood:update_post_mood', args=[data['mood_id']]), payload(
            7, experience_rating=5, side_effects=['dryMouth', 'relaxation'], effects_onset_minutes=10
        ))
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()['status'], 'complete')

        mood = MoodTracking.objects.get()
        self.assertEqual(mood.side_effects, ['dryMouth', 'relaxation'])
        self.assertEqual(mood.effects_onset_minutes, 10)
        correlation = MoodCorrelation.objects.get(user=self.user)
        self.assertEqual(correlation.avg_happiness_change, 3)
        self.assertEqual(correlation.avg_stress_change, -3)

    def test_second_post_mood_conflicts(self):
        mood = self.make_mood(self.entry)
        url = reverse('mood:update_post_mood', args=[mood.id])
        self.assertEqual(self.post_json(url, payload(6)).status_code, 200)
        resp = self.post_json(url, payload(2))
        self.assertEqual(resp.status_code, 409)
        self.assertFalse(resp.json()['success'])

    def test_second_pre_mood_conflicts(self):
        self.make_mood(self.entry)
        resp = self.post_json(reverse('mood:add_pre_mood'), payload(5, consumption_entry_id=self.entry.id))
        self.assertEqual(resp.status_code, 409)

    def test_concurrent_pre_mood_conflicts(self):
        """A check-in created between the existence check and the insert still gives 409."""
        self.make_mood(self.entry)
        with patch.object(QuerySet, 'exists', return_value=False):
            resp = self.post_json(reverse('mood:add_pre_mood'), payload(5, consumption_entry_id=self.entry.id))
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(MoodTracking.objects.count(), 1)

    def test_scores_are_validated(self):
        url = reverse('mood:add_pre_mood')
        self.assertEqual(self.post_json(url, payload(11, consumption_entry_id=self.entry.id)).status_code, 400)
        missing = payload(5, consumption_entry_id=self.entry.id)
        del missing['pain']
        self.assertEqual(self.post_json(url, missing).status_code, 400)
        self.assertEqual(self.post_json(url, payload(5, consumption_entry_id=self.entry.id, environment='moon')).status_code, 400)
        self.assertFalse(MoodTracking.objects.exists())

    def test_unknown_side_effect(self):
        mood = self.make_mood(self.entry)
        resp = self.post_json(reverse('mood:update_post_mood', args=[mood.id]), payload(6, side_effects=['flying']))
        self.assertEqual(resp.status_code, 400)

    def test_other_users_records_are_not_found(self):
        other = get_user_model().objects.create_user(username='other', password='pw')
        self.client.force_login(other)
        resp = self.post_json(reverse('mood:add_pre_mood'), payload(5, consumption_entry_id=self.entry.id))
        self.assertEqual(resp.status_code, 404)
        mood = self.make_mood(self.entry)
        resp = self.post_json(reverse('mood:update_post_mood', args=[mood.id]), payload(6))
        self.assertEqual(resp.status_code, 404)
