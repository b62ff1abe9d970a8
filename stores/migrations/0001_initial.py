import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Store',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(error_messages={'blank': 'Please enter a store name!', 'null': 'Please enter a store name!'}, max_length=200)),
                ('slug', models.SlugField(editable=False, max_length=220, unique=True)),
                ('description', models.TextField(blank=True)),
                ('created', models.DateTimeField(default=django.utils.timezone.now)),
                ('location_type', models.CharField(default='Point', editable=False, max_length=20)),
                ('longitude', models.DecimalField(decimal_places=6, error_messages={'null': 'You must supply coordinates!'}, max_digits=9)),
                ('latitude', models.DecimalField(decimal_places=6, error_messages={'null': 'You must supply coordinates!'}, max_digits=9)),
                ('address', models.CharField(error_messages={'blank': 'You must supply an address!', 'null': 'You must supply an address!'}, max_length=255)),
                ('photo', models.CharField(blank=True, max_length=255)),
                ('author', models.ForeignKey(error_messages={'null': 'You must supply an author'}, on_delete=django.db.models.deletion.CASCADE, related_name='stores', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-created', '-id'],
                'indexes': [
                    models.Index(fields=['name'], name='store_name_idx'),
                    models.Index(fields=['latitude', 'longitude'], name='store_lat_lng_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='StoreTag',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('label', models.CharField(max_length=100)),
                ('position', models.PositiveIntegerField(default=0)),
                ('store', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='tag_entries', to='stores.store')),
            ],
            options={
                'ordering': ['position', 'id'],
                'indexes': [
                    models.Index(fields=['label'], name='storetag_label_idx'),
                ],
            },
        ),
    ]
