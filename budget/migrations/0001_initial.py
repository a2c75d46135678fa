import django.core.validators
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
            name='BudgetSettings',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('monthly_budget', models.DecimalField(decimal_places=2, max_digits=8)),
                ('weekly_budget', models.DecimalField(blank=True, decimal_places=2, max_digits=8, null=True)),
                ('alert_threshold', models.PositiveSmallIntegerField(default=80, help_text='Percent of the budget that triggers an alert', validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(100)])),
                ('email_alerts', models.BooleanField(default=True)),
                ('push_alerts', models.BooleanField(default=False)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='budget_settings', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Budget Settings',
                'verbose_name_plural': 'Budget Settings',
            },
        ),
        migrations.CreateModel(
            name='BudgetAlert',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('alert_type', models.CharField(choices=[('budget_exceeded', 'Budget exceeded'), ('monthly_threshold', 'Monthly threshold reached'), ('weekly_threshold', 'Weekly threshold reached')], max_length=30)),
                ('current_spending', models.DecimalField(decimal_places=2, max_digits=8)),
                ('budget_limit', models.DecimalField(decimal_places=2, max_digits=8)),
                ('percentage_used', models.DecimalField(decimal_places=2, max_digits=5)),
                ('alert_date', models.DateTimeField(auto_now_add=True, db_index=True)),
                ('acknowledged', models.BooleanField(default=False)),
                ('acknowledged_at', models.DateTimeField(blank=True, null=True)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='budget_alerts', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Budget Alert',
                'verbose_name_plural': 'Budget Alerts',
                'ordering': ['-alert_date'],
            },
        ),
    ]
