"""Tests for consumption app views."""
import json
from datetime import date, datetime, timezone as dt_timezone
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase, Client
from django.urls import reverse

from analytics.catalog import MOOD_DIMENSIONS
from consumption.models import Consumable, ConsumptionEntry, RawProduct
from greenery.data_store import load_user_records
from mood.models import MoodCorrelation, MoodTracking


class ConsumptionViewTestBase(TestCase):

    def setUp(self):
        self.user = get_user_model().objects.create_user(username='tester', password='pw')
        self.client = Client()
        self.client.force_login(self.user)
        self.product = RawProduct.objects.create(
            user=self.user,
            strain_name='Blue Dream',
            thc_content=Decimal('22.50'),
            current_amount=Decimal('3.500'),
            original_amount=Decimal('3.500'),
            cost=Decimal('35.00'),
            purchase_date=date(2025, 1, 15),
        )

    def post_json(self, url, data=None):
        return self.client.post(
            url,
            data=json.dumps(data or {}),
            content_type='application/json'
        )

    def patch_json(self, url, data=None):
        return self.client.patch(
            url,
            data=json.dumps(data or {}),
            content_type='application/json'
        )

    def delete_json(self, url):
        return self.client.delete(url, content_type='application/json')

    def make_entry(self, **fields):
        fields.setdefault('product_name', 'Blue Dream')
        fields.setdefault('amount', Decimal('0.500'))
        fields.setdefault('consumption_method', 'Smoked')
        fields.setdefault('consumed_at', datetime(2025, 3, 15, 18, 0, tzinfo=dt_timezone.utc))
        return ConsumptionEntry.objects.create(user=self.user, **fields)

    def make_consumable(self, **fields):
        fields.setdefault('consumable_type', 'Joints')
        fields.setdefault('name', 'Blue Dream Joints')
        fields.setdefault('quantity', 3)
        fields.setdefault('grams_per_unit', Decimal('0.600'))
        return Consumable.objects.create(user=self.user, **fields)


class LogEntryTests(ConsumptionViewTestBase):

    def test_naive_consumed_at_is_read_in_user_timezone(self):
        self.client.cookies['user_timezone'] = 'America/Los_Angeles'
        resp = self.post_json(reverse('consumption:log_entry'), {
            'product_name': 'Blue Dream',
            'amount': 0.3,
            'consumed_at': '2025-03-15T19:00:00',
        })
        self.assertEqual(resp.status_code, 200)
        entry = ConsumptionEntry.objects.get(id=resp.json()['entry_id'])
        self.assertEqual(entry.consumed_at, datetime(2025, 3, 16, 2, 0, tzinfo=dt_timezone.utc))

    def test_log_entry_from_raw_product(self):
        resp = self.post_json(reverse('consumption:log_entry'), {
            'raw_product_id': self.product.id,
            'amount': 0.5,
            'consumption_method': 'Smoked',
            'rating': 4,
            'consumed_at': '2025-03-15T20:00:00Z',
        })
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertTrue(data['success'])
        entry = ConsumptionEntry.objects.get(id=data['entry_id'])
        self.assertEqual(entry.product_name, 'Blue Dream')
        self.assertEqual(entry.consumption_method, 'Smoked')
        self.assertEqual(entry.consumed_at.hour, 20)
        self.product.refresh_from_db()
        self.assertEqual(self.product.current_amount, Decimal('3.000'))

    def test_log_more_than_is_left(self):
        resp = self.post_json(reverse('consumption:log_entry'), {
            'raw_product_id': self.product.id,
            'amount': 5,
        })
        self.assertEqual(resp.status_code, 400)
        self.assertFalse(resp.json()['success'])
        self.assertEqual(ConsumptionEntry.objects.count(), 0)

    def test_log_entry_from_consumable_defaults_to_one_unit(self):
        joint = Consumable.objects.create(
            user=self.user,
            consumable_type='Joints',
            name='Pre-rolled Joints',
            quantity=5,
            grams_per_unit=Decimal('0.750'),
            cost_per_unit=Decimal('8.00'),
            source_strain='Northern Lights',
        )
        resp = self.post_json(reverse('consumption:log_entry'), {'consumable_id': joint.id})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()['amount'], 0.75)
        entry = ConsumptionEntry.objects.get()
        self.assertEqual(entry.product_name, 'Northern Lights')
        self.assertEqual(entry.consumable, joint)
        joint.refresh_from_db()
        self.assertEqual(joint.quantity, 4)

    def test_consumable_units_must_be_available(self):
        cart = Consumable.objects.create(user=self.user, consumable_type='Cartridges', name='Cart', quantity=1)
        resp = self.post_json(reverse('consumption:log_entry'), {'consumable_id': cart.id, 'units_consumed': 2})
        self.assertEqual(resp.status_code, 400)
        resp = self.post_json(reverse('consumption:log_entry'), {'consumable_id': cart.id, 'units_consumed': 0.5})
        self.assertEqual(resp.status_code, 400)

    def test_free_form_entry(self):
        resp = self.post_json(reverse('consumption:log_entry'), {'product_name': 'Gift', 'amount': '0.3'})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(ConsumptionEntry.objects.get().consumption_method, '')

    def test_validation_errors(self):
        url = reverse('consumption:log_entry')
        self.assertEqual(self.post_json(url, {'product_name': 'X', 'amount': 1, 'consumption_method': 'Dabbed'}).status_code, 400)
        self.assertEqual(self.post_json(url, {'product_name': 'X', 'amount': 1, 'rating': 6}).status_code, 400)
        self.assertEqual(self.post_json(url, {'product_name': 'X', 'amount': -1}).status_code, 400)
        self.assertEqual(self.post_json(url, {'product_name': 'X'}).status_code, 400)
        self.assertEqual(self.post_json(url, {'amount': 1}).status_code, 400)
        self.assertEqual(self.post_json(url, {'product_name': 'X', 'amount': 1, 'consumed_at': 'soon'}).status_code, 400)

    def test_invalid_json(self):
        resp = self.client.post(reverse('consumption:log_entry'), data='not json', content_type='application/json')
        self.assertEqual(resp.status_code, 400)

    def test_other_users_product_is_not_found(self):
        other = get_user_model().objects.create_user(username='other', password='pw')
        product = RawProduct.objects.create(
            user=other, strain_name='Theirs', current_amount=1, original_amount=1, purchase_date=date(2025, 1, 1)
        )
        resp = self.post_json(reverse('consumption:log_entry'), {'raw_product_id': product.id, 'amount': 0.1})
        self.assertEqual(resp.status_code, 404)

    def test_get_not_allowed(self):
        self.assertEqual(self.client.get(reverse('consumption:log_entry')).status_code, 405)

    def test_login_required(self):
        self.client.logout()
        resp = self.post_json(reverse('consumption:log_entry'), {'product_name': 'X', 'amount': 1})
        self.assertEqual(resp.status_code, 302)


class AddRawProductTests(ConsumptionViewTestBase):

    def test_add_raw_product(self):
        resp = self.post_json(reverse('consumption:add_raw_product'), {
            'strain_name': 'OG Kush Hash',
            'product_type': 'Hash',
            'amount': 2,
            'cost': 40,
            'thc_content': 45,
            'purchase_date': '2025-01-10',
        })
        self.assertEqual(resp.status_code, 200)
        product = RawProduct.objects.get(id=resp.json()['product_id'])
        self.assertEqual(product.current_amount, product.original_amount)
        self.assertEqual(product.purchase_date, date(2025, 1, 10))

    def test_rejects_bad_values(self):
        url = reverse('consumption:add_raw_product')
        base = {'strain_name': 'X', 'amount': 1, 'purchase_date': '2025-01-10'}
        self.assertEqual(self.post_json(url, dict(base, thc_content=120)).status_code, 400)
        self.assertEqual(self.post_json(url, dict(base, product_type='Wax')).status_code, 400)
        self.assertEqual(self.post_json(url, dict(base, purchase_date='Jan 10')).status_code, 400)
        self.assertEqual(self.post_json(url, dict(base, strain_name='')).status_code, 400)


class ConvertToConsumableTests(ConsumptionViewTestBase):

    def test_convert_uses_default_weight_and_purchase_price(self):
        resp = self.post_json(reverse('consumption:convert_to_consumable'), {
            'raw_product_id': self.product.id,
            'consumable_type': 'Joints',
            'quantity': 5,
        })
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data['remaining_amount'], 0.5)
        consumable = Consumable.objects.get(id=data['consumable_id'])
        self.assertEqual(consumable.grams_per_unit, Decimal('0.600'))
        self.assertEqual(consumable.cost_per_unit, Decimal('6.00'))
        self.assertEqual(consumable.source_strain, 'Blue Dream')
        self.assertEqual(consumable.name, 'Blue Dream Joints')

    def test_cannot_make_more_than_stock_allows(self):
        resp = self.post_json(reverse('consumption:convert_to_consumable'), {
            'raw_product_id': self.product.id,
            'consumable_type': 'Edibles',
            'quantity': 4,
        })
        self.assertEqual(resp.status_code, 400)
        self.product.refresh_from_db()
        self.assertEqual(self.product.current_amount, Decimal('3.500'))

    def test_unknown_type(self):
        resp = self.post_json(reverse('consumption:convert_to_consumable'), {
            'raw_product_id': self.product.id,
            'consumable_type': 'Tinctures',
            'quantity': 1,
        })
        self.assertEqual(resp.status_code, 400)


class RecentEntriesTests(ConsumptionViewTestBase):

    def test_newest_first_with_efficiency(self):
        older = self.make_entry(consumed_at=datetime(2025, 3, 14, 18, 0, tzinfo=dt_timezone.utc))
        newer = self.make_entry(amount=Decimal('1.000'), consumption_method='Eaten')
        resp = self.client.get(reverse('consumption:recent_entries'))
        self.assertEqual(resp.status_code, 200)
        entries = resp.json()['entries']
        self.assertEqual([e['id'] for e in entries], [newer.id, older.id])
        self.assertEqual(entries[0]['efficiency_percent'], 60)
        self.assertEqual(entries[0]['effective_amount'], 0.6)

    def test_defaults_to_ten_and_honours_limit(self):
        for _ in range(12):
            self.make_entry()
        self.assertEqual(len(self.client.get(reverse('consumption:recent_entries')).json()['entries']), 10)
        resp = self.client.get(reverse('consumption:recent_entries'), {'limit': 3})
        self.assertEqual(len(resp.json()['entries']), 3)

    def test_bad_limit(self):
        resp = self.client.get(reverse('consumption:recent_entries'), {'limit': 0})
        self.assertEqual(resp.status_code, 400)

    def test_only_own_entries(self):
        other = get_user_model().objects.create_user(username='other', password='pw')
        ConsumptionEntry.objects.create(
            user=other, product_name='OG Kush', amount=Decimal('1.000'),
            consumed_at=datetime(2025, 3, 15, tzinfo=dt_timezone.utc),
        )
        self.assertEqual(self.client.get(reverse('consumption:recent_entries')).json()['entries'], [])


class UpdateEntryTests(ConsumptionViewTestBase):

    def test_update_fields(self):
        entry = self.make_entry(rating=3)
        resp = self.patch_json(reverse('consumption:update_entry', args=[entry.id]), {
            'amount': 0.25,
            'consumption_method': 'Vaporised',
            'rating': None,
            'notes': 'Evening',
        })
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()['entry']['efficiency_percent'], 40)
        entry.refresh_from_db()
        self.assertEqual(entry.amount, Decimal('0.250'))
        self.assertEqual(entry.consumption_method, 'Vaporised')
        self.assertIsNone(entry.rating)
        self.assertEqual(entry.notes, 'Evening')
        self.assertEqual(entry.product_name, 'Blue Dream')

    def test_rejects_bad_values(self):
        entry = self.make_entry()
        url = reverse('consumption:update_entry', args=[entry.id])
        self.assertEqual(self.patch_json(url, {'amount': -1}).status_code, 400)
        self.assertEqual(self.patch_json(url, {'consumption_method': 'Dabbed'}).status_code, 400)
        self.assertEqual(self.patch_json(url, {'product_name': ' '}).status_code, 400)

    def test_other_users_entry_is_not_found(self):
        other = get_user_model().objects.create_user(username='other', password='pw')
        entry = ConsumptionEntry.objects.create(
            user=other, product_name='OG Kush', amount=Decimal('1.000'),
            consumed_at=datetime(2025, 3, 15, tzinfo=dt_timezone.utc),
        )
        resp = self.patch_json(reverse('consumption:update_entry', args=[entry.id]), {'amount': 2})
        self.assertEqual(resp.status_code, 404)

    def test_renaming_refreshes_mood_correlations(self):
        entry = self.make_entry()
        MoodTracking.objects.create(
            user=self.user, consumption_entry=entry,
            **{f'pre_mood_{d}': 5 for d in MOOD_DIMENSIONS},
            **{f'post_mood_{d}': 7 for d in MOOD_DIMENSIONS},
        )
        self.patch_json(reverse('consumption:update_entry', args=[entry.id]), {'product_name': 'OG Kush'})
        self.assertEqual(
            list(MoodCorrelation.objects.filter(user=self.user).values_list('strain_name', flat=True)),
            ['OG Kush'],
        )

    def test_post_not_allowed(self):
        entry = self.make_entry()
        self.assertEqual(self.post_json(reverse('consumption:update_entry', args=[entry.id])).status_code, 405)


class DeleteEntryTests(ConsumptionViewTestBase):

    def test_delete_entry_and_its_mood(self):
        entry = self.make_entry()
        MoodTracking.objects.create(
            user=self.user, consumption_entry=entry,
            **{f'pre_mood_{d}': 5 for d in MOOD_DIMENSIONS},
            **{f'post_mood_{d}': 7 for d in MOOD_DIMENSIONS},
        )
        MoodCorrelation.objects.create(user=self.user, strain_name='Blue Dream', sessions_count=1)

        resp = self.delete_json(reverse('consumption:delete_entry', args=[entry.id]))

        self.assertEqual(resp.status_code, 200)
        self.assertFalse(ConsumptionEntry.objects.filter(id=entry.id).exists())
        self.assertFalse(MoodTracking.objects.exists())
        self.assertFalse(MoodCorrelation.objects.exists())

    def test_stock_is_not_restored(self):
        entry = self.make_entry()
        self.delete_json(reverse('consumption:delete_entry', args=[entry.id]))
        self.product.refresh_from_db()
        self.assertEqual(self.product.current_amount, Decimal('3.500'))

    def test_delete_not_found(self):
        self.assertEqual(self.delete_json(reverse('consumption:delete_entry', args=[9999])).status_code, 404)


class RawProductEditTests(ConsumptionViewTestBase):

    def test_update_raw_product(self):
        url = reverse('consumption:update_raw_product', args=[self.product.id])
        resp = self.patch_json(url, {'current_amount': 2, 'cost': None, 'product_type': 'Hash'})
        self.assertEqual(resp.status_code, 200)
        self.product.refresh_from_db()
        self.assertEqual(self.product.current_amount, Decimal('2.000'))
        self.assertIsNone(self.product.cost)
        self.assertEqual(self.product.product_type, 'Hash')

    def test_current_amount_cannot_exceed_original(self):
        url = reverse('consumption:update_raw_product', args=[self.product.id])
        resp = self.patch_json(url, {'current_amount': 4})
        self.assertEqual(resp.status_code, 400)
        self.product.refresh_from_db()
        self.assertEqual(self.product.current_amount, Decimal('3.500'))

    def test_rejects_bad_values(self):
        url = reverse('consumption:update_raw_product', args=[self.product.id])
        self.assertEqual(self.patch_json(url, {'thc_content': 120}).status_code, 400)
        self.assertEqual(self.patch_json(url, {'product_type': 'Rosin'}).status_code, 400)
        self.assertEqual(self.patch_json(url, {'purchase_date': '2025-02-30'}).status_code, 400)

    def test_delete_raw_product_keeps_consumables(self):
        consumable = self.make_consumable(source_strain='Blue Dream')
        resp = self.delete_json(reverse('consumption:delete_raw_product', args=[self.product.id]))
        self.assertEqual(resp.status_code, 200)
        self.assertFalse(RawProduct.objects.exists())
        self.assertTrue(Consumable.objects.filter(id=consumable.id).exists())

    def test_other_users_product_is_not_found(self):
        other = get_user_model().objects.create_user(username='other', password='pw')
        self.client.force_login(other)
        self.assertEqual(self.delete_json(reverse('consumption:delete_raw_product', args=[self.product.id])).status_code, 404)
        self.assertTrue(RawProduct.objects.filter(id=self.product.id).exists())


class ConsumableEditTests(ConsumptionViewTestBase):

    def test_update_consumable(self):
        consumable = self.make_consumable()
        resp = self.patch_json(reverse('consumption:update_consumable', args=[consumable.id]), {
            'quantity': 1,
            'name': 'Pre-rolls',
            'grams_per_unit': None,
        })
        self.assertEqual(resp.status_code, 200)
        consumable.refresh_from_db()
        self.assertEqual(consumable.quantity, 1)
        self.assertEqual(consumable.name, 'Pre-rolls')
        self.assertIsNone(consumable.grams_per_unit)

    def test_rejects_bad_values(self):
        url = reverse('consumption:update_consumable', args=[self.make_consumable().id])
        self.assertEqual(self.patch_json(url, {'quantity': -1}).status_code, 400)
        self.assertEqual(self.patch_json(url, {'consumable_type': 'Tinctures'}).status_code, 400)

    def test_delete_consumable_keeps_entries(self):
        consumable = self.make_consumable()
        entry = self.make_entry(consumable=consumable)
        resp = self.delete_json(reverse('consumption:delete_consumable', args=[consumable.id]))
        self.assertEqual(resp.status_code, 200)
        entry.refresh_from_db()
        self.assertIsNone(entry.consumable_id)

    def test_archive_and_unarchive(self):
        consumable = self.make_consumable()
        url = reverse('consumption:archive_consumable', args=[consumable.id])

        resp = self.post_json(url)
        self.assertTrue(resp.json()['is_archived'])
        consumable.refresh_from_db()
        self.assertTrue(consumable.is_archived)

        self.post_json(url, {'archived': False})
        consumable.refresh_from_db()
        self.assertFalse(consumable.is_archived)

    def test_archived_consumables_leave_inventory(self):
        consumable = self.make_consumable(is_archived=True)
        self.make_consumable(name='Carts', consumable_type='Cartridges', quantity=2)
        names = [c.name for c in load_user_records(self.user).consumables]
        self.assertEqual(names, ['Carts'])
        self.assertTrue(Consumable.objects.filter(id=consumable.id).exists())
