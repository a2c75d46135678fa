import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='ToleranceTracking',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('tracking_date', models.DateField(db_index=True)),
                ('baseline_amount', models.DecimalField(decimal_places=3, help_text='Grams needed for the usual effect', max_digits=6)),
                ('effectiveness_rating', models.PositiveSmallIntegerField(help_text='1-10')),
                ('tolerance_break_start', models.DateField(blank=True, null=True)),
                ('tolerance_break_end', models.DateField(blank=True, help_text='Leave empty for an open-ended break', null=True)),
                ('notes', models.TextField(blank=True, default='')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='tolerance_checkins', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Tolerance Check-in',
                'verbose_name_plural': 'Tolerance Check-ins',
                'ordering': ['-tracking_date', '-created_at'],
            },
        ),
    ]
