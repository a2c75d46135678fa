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
            name='Consumable',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('consumable_type', models.CharField(choices=[('Joints', 'Joints'), ('Cartridges', 'Cartridges'), ('Edibles', 'Edibles')], max_length=50)),
                ('name', models.CharField(max_length=255)),
                ('quantity', models.PositiveIntegerField(default=0)),
                ('grams_per_unit', models.DecimalField(blank=True, decimal_places=3, max_digits=6, null=True)),
                ('cost_per_unit', models.DecimalField(blank=True, decimal_places=2, max_digits=8, null=True)),
                ('source_strain', models.CharField(blank=True, default='', help_text='Strain name of the raw product it was made from', max_length=255)),
                ('thc_content', models.DecimalField(blank=True, decimal_places=2, max_digits=5, null=True)),
                ('notes', models.TextField(blank=True, default='')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='consumables', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Consumable',
                'verbose_name_plural': 'Consumables',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='RawProduct',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('product_type', models.CharField(choices=[('Flower-Buds', 'Flower Buds'), ('Hash', 'Hash')], default='Flower-Buds', max_length=50)),
                ('strain_name', models.CharField(help_text='Strain name; consumption entries are matched to it by product name', max_length=255)),
                ('source', models.CharField(blank=True, default='', help_text="Where it was bought (e.g., 'Local Dispensary')", max_length=255)),
                ('quality_notes', models.TextField(blank=True, default='')),
                ('thc_content', models.DecimalField(blank=True, decimal_places=2, help_text='THC content in percent', max_digits=5, null=True)),
                ('cbd_content', models.DecimalField(blank=True, decimal_places=2, help_text='CBD content in percent', max_digits=5, null=True)),
                ('current_amount', models.DecimalField(decimal_places=3, help_text='Grams remaining', max_digits=8)),
                ('original_amount', models.DecimalField(decimal_places=3, help_text='Grams purchased', max_digits=8)),
                ('cost', models.DecimalField(blank=True, decimal_places=2, help_text='Purchase price', max_digits=8, null=True)),
                ('purchase_date', models.DateField(db_index=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='raw_products', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Raw Product',
                'verbose_name_plural': 'Raw Products',
                'ordering': ['-purchase_date', 'strain_name'],
            },
        ),
        migrations.CreateModel(
            name='ConsumptionEntry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('product_name', models.CharField(max_length=255)),
                ('amount', models.DecimalField(decimal_places=3, help_text='Grams consumed', max_digits=7)),
                ('unit', models.CharField(default='g', max_length=10)),
                ('consumption_method', models.CharField(blank=True, choices=[('Smoked', 'Smoked (20% efficiency)'), ('Vaporised', 'Vaporised (40% efficiency)'), ('Eaten', 'Eaten (60% efficiency)'), ('Tincture', 'Tincture'), ('Topical', 'Topical')], default='', max_length=20)),
                ('units_consumed', models.DecimalField(blank=True, decimal_places=2, max_digits=6, null=True)),
                ('rating', models.PositiveSmallIntegerField(blank=True, help_text='1-5', null=True)),
                ('notes', models.TextField(blank=True, default='')),
                ('consumed_at', models.DateTimeField(db_index=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('consumable', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='entries', to='consumption.consumable')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='consumption_entries', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Consumption Entry',
                'verbose_name_plural': 'Consumption Entries',
                'ordering': ['-consumed_at'],
            },
        ),
    ]
