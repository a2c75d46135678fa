from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('consumption', '0001_initial'),
    ]

    operations = [
        migrations.AddField(
            model_name='consumable',
            name='is_archived',
            field=models.BooleanField(default=False, help_text='Archived consumables stay in history but leave the inventory'),
        ),
    ]
