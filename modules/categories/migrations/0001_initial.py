from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='CategoryModel',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100, unique=True, verbose_name='Category name')),
                ('slug', models.CharField(max_length=100, unique=True, verbose_name='Slug')),
                ('icon', models.CharField(blank=True, default='', max_length=255, verbose_name='Icon')),
                ('color', models.CharField(blank=True, default='', max_length=32, verbose_name='Color')),
                ('legacy_subcategories', models.JSONField(blank=True, default=list, help_text='[{id, name, slug, secondary_subcategories: [{id, name, slug}]}]', verbose_name='Legacy subcategories')),
                ('nodes', models.JSONField(blank=True, default=list, help_text='[{id, name, slug, legacy_ref, children: [...]}]', verbose_name='Nodes')),
                ('version', models.PositiveIntegerField(default=0, help_text='Bumped on every save; stale writers are rejected', verbose_name='Version')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated at')),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='categories', to=settings.AUTH_USER_MODEL, verbose_name='Owner')),
            ],
            options={
                'verbose_name': 'Category',
                'verbose_name_plural': 'Categories',
                'db_table': 'categories',
                'ordering': ['-created_at', '-id'],
            },
        ),
    ]
