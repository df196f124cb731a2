from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ('work_structures', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Competency',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('status', models.CharField(choices=[('active', 'Active'), ('inactive', 'Inactive')], default='active', help_text='Record status. Set to INACTIVE instead of deleting.', max_length=10)),
                ('created_at', models.DateTimeField(auto_now_add=True, help_text='Timestamp when record was created')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when record was last modified')),
                ('code', models.CharField(db_index=True, help_text='Unique competency code', max_length=50, unique=True)),
                ('name', models.CharField(help_text='Competency name (e.g., Communication, Delegation)', max_length=255)),
                ('description', models.TextField(blank=True, help_text='Detailed description of the competency')),
                ('category', models.CharField(blank=True, help_text='Competency category (e.g., Technical, Behavioral)', max_length=100)),
                ('created_by', models.ForeignKey(blank=True, help_text='User who created this record', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='person_competency_created', to=settings.AUTH_USER_MODEL)),
                ('updated_by', models.ForeignKey(blank=True, help_text='User who last updated this record', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='person_competency_updated', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Competency',
                'verbose_name_plural': 'Competencies',
                'db_table': 'hr_competency',
                'ordering': ['category', 'name'],
                'indexes': [
                    models.Index(fields=['status', 'category'], name='hr_competen_status_5d0b1a_idx'),
                    models.Index(fields=['name'], name='hr_competen_name_9e2c47_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='PositionCompetencyRequirement',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, help_text='Timestamp when record was created')),
                ('updated_at', models.DateTimeField(auto_now=True, help_text='Timestamp when record was last modified')),
                ('required_level', models.PositiveSmallIntegerField(help_text='Required proficiency level for this competency')),
                ('is_mandatory', models.BooleanField(default=True, help_text='Mandatory requirements must be met in assessments')),
                ('competency', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='position_requirements', to='person.competency')),
                ('position', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='competency_requirements', to='work_structures.position')),
                ('created_by', models.ForeignKey(blank=True, help_text='User who created this record', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='person_positioncompetencyrequirement_created', to=settings.AUTH_USER_MODEL)),
                ('updated_by', models.ForeignKey(blank=True, help_text='User who last updated this record', null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='person_positioncompetencyrequirement_updated', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'Position Competency Requirement',
                'verbose_name_plural': 'Position Competency Requirements',
                'db_table': 'hr_position_competency_requirement',
                'indexes': [models.Index(fields=['position', 'competency'], name='hr_position_positio_3a8e61_idx')],
                'unique_together': {('position', 'competency')},
            },
        ),
    ]
