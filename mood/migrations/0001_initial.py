import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


def scale(**kwargs):
    return models.PositiveSmallIntegerField(
        validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(10)],
        **kwargs
    )


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('consumption', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='MoodTracking',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('pre_mood_energy', scale()),
                ('pre_mood_happiness', scale()),
                ('pre_mood_stress', scale()),
                ('pre_mood_focus', scale()),
                ('pre_mood_anxiety', scale()),
                ('pre_mood_pain', scale()),
                ('post_mood_energy', scale(blank=True, null=True)),
                ('post_mood_happiness', scale(blank=True, null=True)),
                ('post_mood_stress', scale(blank=True, null=True)),
                ('post_mood_focus', scale(blank=True, null=True)),
                ('post_mood_anxiety', scale(blank=True, null=True)),
                ('post_mood_pain', scale(blank=True, null=True)),
                ('effects_onset_minutes', models.PositiveIntegerField(blank=True, null=True)),
                ('effects_duration_minutes', models.PositiveIntegerField(blank=True, null=True)),
                ('effects_intensity', scale(blank=True, null=True)),
                ('experience_rating', models.PositiveSmallIntegerField(blank=True, null=True, validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(5)])),
                ('side_effects', models.JSONField(blank=True, default=list, help_text="Side effect tags (e.g., 'dryMouth', 'hunger')")),
                ('environment', models.CharField(blank=True, default='', max_length=50)),
                ('activity', models.CharField(blank=True, default='', max_length=50)),
                ('mood_notes', models.TextField(blank=True, default='')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('consumption_entry', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='mood', to='consumption.consumptionentry')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='mood_checkins', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Mood Check-in',
                'verbose_name_plural': 'Mood Check-ins',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='MoodCorrelation',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('strain_name', models.CharField(max_length=255)),
                ('consumption_method', models.CharField(blank=True, default='', max_length=20)),
                ('avg_energy_change', models.FloatField(default=0)),
                ('avg_happiness_change', models.FloatField(default=0)),
                ('avg_stress_change', models.FloatField(default=0)),
                ('avg_focus_change', models.FloatField(default=0)),
                ('avg_anxiety_change', models.FloatField(default=0)),
                ('avg_pain_change', models.FloatField(default=0)),
                ('sessions_count', models.PositiveIntegerField(default=0)),
                ('last_updated', models.DateTimeField(auto_now=True)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='mood_correlations', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Mood Correlation',
                'verbose_name_plural': 'Mood Correlations',
                'ordering': ['-avg_happiness_change'],
                'unique_together': {('user', 'strain_name', 'consumption_method')},
            },
        ),
    ]
