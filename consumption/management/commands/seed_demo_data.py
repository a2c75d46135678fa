"""
Management command to populate the database with demo products, sessions,
tolerance check-ins and moods for one user.
"""
import random
from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from analytics.catalog import ACTIVITIES, ENVIRONMENTS, MOOD_DIMENSIONS, ConsumptionMethod
from budget.models import BudgetSettings
from consumption.models import Consumable, ConsumptionEntry, RawProduct
from mood.models import MoodTracking
from mood.services.correlation_cache import refresh_correlations
from tolerance.models import ToleranceTracking

DEMO_TAG = '[DEMO]'

RAW_PRODUCTS = [
    # (type, strain, source, notes, thc, current, original, cost, days ago)
    ('Flower-Buds', 'Blue Dream', 'Local Dispensary',
     'High quality indoor grown, dense buds with good trichome coverage', 22.5, 3.5, 3.5, 35, 10),
    ('Hash', 'OG Kush Hash', 'Friend', 'Bubble hash, sticky texture', 45.0, 1.2, 2.0, 40, 15),
    ('Flower-Buds', 'Northern Lights', 'Online Store',
     'Classic indica, great for evening use, earthy smell', 18.5, 0.8, 7.0, 50, 20),
]

CONSUMABLES = [
    # (type, name, quantity, grams per unit, cost per unit, source strain)
    ('Edibles', 'Blue Dream Gummies', 15, 0.1, 1.67, 'Blue Dream'),
    ('Cartridges', 'OG Kush Cart', 1, 0.5, 35, 'OG Kush Hash'),
    ('Joints', 'Pre-rolled Joints', 5, 0.75, 8, 'Northern Lights'),
]


class Command(BaseCommand):
    help = 'Populate the database with demo cannabis tracking data for a user'

    def add_arguments(self, parser):
        parser.add_argument(
            '--username',
            type=str,
            default='demo',
            help='User to seed (created if missing, default: demo)'
        )
        parser.add_argument(
            '--days',
            type=int,
            default=30,
            help='Number of days of sessions to generate (default: 30)'
        )
        parser.add_argument(
            '--seed',
            type=int,
            help='Random seed for repeatable data'
        )
        parser.add_argument(
            '--clear',
            action='store_true',
            help="Clear the user's existing demo data first"
        )

    def handle(self, *_args, **options):
        rng = random.Random(options.get('seed'))
        days = options['days']
        User = get_user_model()
        user, created = User.objects.get_or_create(username=options['username'])
        if created:
            user.set_unusable_password()
            user.save()
            self.stdout.write(f'Created user {user.username}')

        if options['clear']:
            self.stdout.write('Clearing existing demo data...')
            ConsumptionEntry.objects.filter(user=user, notes__contains=DEMO_TAG).delete()
            RawProduct.objects.filter(user=user, quality_notes__contains=DEMO_TAG).delete()
            Consumable.objects.filter(user=user, notes__contains=DEMO_TAG).delete()
            ToleranceTracking.objects.filter(user=user, notes__contains=DEMO_TAG).delete()
            self.stdout.write(self.style.SUCCESS('✓ Cleared demo data'))

        self.stdout.write(f'\nGenerating {days} days of demo data for {user.username}...\n')

        with transaction.atomic():
            counts = {
                'raw_products': self._create_raw_products(user),
                'consumables': self._create_consumables(user),
            }
            entries = self._create_entries(user, days, rng)
            counts['entries'] = len(entries)
            counts['moods'] = self._create_moods(user, entries, rng)
            counts['tolerance'] = self._create_tolerance(user, days, rng)
            BudgetSettings.objects.get_or_create(
                user=user,
                defaults={'monthly_budget': Decimal('150.00'), 'weekly_budget': Decimal('40.00')},
            )

        groups = refresh_correlations(user)

        self.stdout.write('\n' + '=' * 60)
        self.stdout.write(self.style.SUCCESS('✓ Demo data generation complete!'))
        self.stdout.write('=' * 60)
        self.stdout.write(f"Raw products:            {counts['raw_products']}")
        self.stdout.write(f"Consumables:             {counts['consumables']}")
        self.stdout.write(f"Consumption entries:     {counts['entries']}")
        self.stdout.write(f"Mood check-ins:          {counts['moods']}")
        self.stdout.write(f"Tolerance check-ins:     {counts['tolerance']}")
        self.stdout.write(f"Mood correlations:       {groups}")
        self.stdout.write('=' * 60 + '\n')

    def _create_raw_products(self, user):
        today = timezone.localdate()
        for product_type, strain, source, notes, thc, current, original, cost, days_ago in RAW_PRODUCTS:
            RawProduct.objects.create(
                user=user,
                product_type=product_type,
                strain_name=strain,
                source=source,
                quality_notes=f'{notes} {DEMO_TAG}',
                thc_content=Decimal(str(thc)),
                current_amount=Decimal(str(current)),
                original_amount=Decimal(str(original)),
                cost=Decimal(cost),
                purchase_date=today - timedelta(days=days_ago),
            )
        return len(RAW_PRODUCTS)

    def _create_consumables(self, user):
        for consumable_type, name, quantity, grams, cost, strain in CONSUMABLES:
            Consumable.objects.create(
                user=user,
                consumable_type=consumable_type,
                name=name,
                quantity=quantity,
                grams_per_unit=Decimal(str(grams)),
                cost_per_unit=Decimal(str(cost)),
                source_strain=strain,
                notes=DEMO_TAG,
            )
        return len(CONSUMABLES)

    def _create_entries(self, user, days, rng):
        """Zero to two evening sessions a day."""
        now = timezone.now()
        strains = [row[1] for row in RAW_PRODUCTS]
        methods = list(ConsumptionMethod)
        entries = []
        for day_offset in range(days, 0, -1):
            for _ in range(rng.choice([0, 1, 1, 2])):
                consumed_at = (now - timedelta(days=day_offset)).replace(
                    hour=rng.randint(17, 23), minute=rng.randint(0, 59), second=0, microsecond=0
                )
                entries.append(ConsumptionEntry.objects.create(
                    user=user,
                    product_name=rng.choice(strains),
                    amount=Decimal(str(round(rng.uniform(0.1, 0.6), 2))),
                    consumption_method=rng.choice(methods).value,
                    rating=rng.randint(2, 5),
                    notes=DEMO_TAG,
                    consumed_at=consumed_at,
                ))
        return entries

    def _create_moods(self, user, entries, rng):
        """Complete moods for two thirds of the sessions."""
        created = 0
        for entry in entries:
            if rng.random() > 0.66:
                continue
            pre = {dimension: rng.randint(3, 7) for dimension in MOOD_DIMENSIONS}
            mood = MoodTracking(
                user=user,
                consumption_entry=entry,
                environment=rng.choice(list(ENVIRONMENTS)),
                activity=rng.choice(list(ACTIVITIES)),
                **{f'pre_mood_{dimension}': score for dimension, score in pre.items()}
            )
            for dimension, info in MOOD_DIMENSIONS.items():
                shift = rng.randint(0, 3)
                post = pre[dimension] - shift if info.lower_is_better else pre[dimension] + shift
                setattr(mood, f'post_mood_{dimension}', min(max(post, 1), 10))
            mood.experience_rating = entry.rating
            mood.save()
            created += 1
        return created

    def _create_tolerance(self, user, days, rng):
        """A weekly check-in with a slowly rising baseline."""
        today = timezone.localdate()
        created = 0
        baseline = 0.2
        for week in range(days // 7, -1, -1):
            baseline += rng.uniform(0.0, 0.05)
            ToleranceTracking.objects.create(
                user=user,
                tracking_date=today - timedelta(days=week * 7),
                baseline_amount=Decimal(str(round(baseline, 3))),
                effectiveness_rating=rng.randint(5, 9),
                notes=DEMO_TAG,
            )
            created += 1
        return created
