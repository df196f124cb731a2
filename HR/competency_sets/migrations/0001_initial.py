from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('person', '0001_initial'),
        ('work_structures', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='CompetencySet',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('status', models.CharField(choices=[('active', 'Active'), ('inactive', 'Inactive')], default='active', help_text='Record status. Set to INACTIVE instead of deleting.', max_length=10)),
                ('created_at', models.DateTimeField(auto_now_add=True, help_text='Timestamp when record was created')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when record was last modified')),
                ('name', models.CharField(help_text='Competency set name', max_length=200)),
                ('description', models.CharField(blank=True, help_text='Optional description of the set', max_length=1000)),
                ('visibility', models.CharField(choices=[('public', 'Public'), ('private', 'Private')], default='private', help_text='Public sets are visible to every user, private ones only to the owner', max_length=10)),
                ('owner', models.ForeignKey(help_text='User who owns this set', on_delete=django.db.models.deletion.PROTECT, related_name='competency_sets', to=settings.AUTH_USER_MODEL)),
                ('created_by', models.ForeignKey(blank=True, help_text='User who created this record', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='competency_sets_competencyset_created', to=settings.AUTH_USER_MODEL)),
                ('updated_by', models.ForeignKey(blank=True, help_text='User who last updated this record', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='competency_sets_competencyset_updated', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Competency Set',
                'verbose_name_plural': 'Competency Sets',
                'db_table': 'hr_competency_set',
                'ordering': ['name'],
                'indexes': [models.Index(fields=['status', 'visibility'], name='hr_competen_status_a41c2e_idx')],
            },
        ),
        migrations.CreateModel(
            name='CompetencySetItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('required_level', models.PositiveSmallIntegerField(help_text='Level the set requires for this competency')),
                ('is_mandatory', models.BooleanField(default=True)),
                ('display_order', models.PositiveIntegerField(default=1, help_text='1-based position of the item within the set')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('competency', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='set_items', to='person.competency')),
                ('competency_set', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='competency_sets.competencyset')),
            ],
            options={
                'verbose_name': 'Competency Set Item',
                'verbose_name_plural': 'Competency Set Items',
                'db_table': 'hr_competency_set_item',
                'ordering': ['display_order', 'id'],
                'unique_together': {('competency_set', 'competency')},
            },
        ),
        migrations.CreateModel(
            name='PositionCompetencySet',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, help_text='Timestamp when record was created')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when record was last modified')),
                ('assigned_date', models.DateTimeField(default=django.utils.timezone.now)),
                ('last_synced_date', models.DateTimeField(blank=True, null=True)),
                ('synced_items', models.JSONField(blank=True, default=list, help_text='[{competency_id, required_level, is_mandatory}] merged at last sync')),
                ('set_version_hash', models.CharField(blank=True, max_length=64)),
                ('assigned_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='competency_set_assignments', to=settings.AUTH_USER_MODEL)),
                ('competency_set', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='assignments', to='competency_sets.competencyset')),
                ('position', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='competency_set_assignments', to='work_structures.position')),
                ('created_by', models.ForeignKey(blank=True, help_text='User who created this record', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='competency_sets_positioncompetencyset_created', to=settings.AUTH_USER_MODEL)),
                ('updated_by', models.ForeignKey(blank=True, help_text='User who last updated this record', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='competency_sets_positioncompetencyset_updated', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Position Competency Set',
                'verbose_name_plural': 'Position Competency Sets',
                'db_table': 'hr_position_competency_set',
                'ordering': ['position__code'],
                'unique_together': {('position', 'competency_set')},
            },
        ),
    ]
