from django.db import migrations, models


class Migration(migrations.Migration):

    dependencies = [
        ('person', '0001_initial'),
        ('work_structures', '0001_initial'),
    ]

    operations = [
        migrations.AddField(
            model_name='position',
            name='competencies',
            field=models.ManyToManyField(blank=True, help_text='Required competencies with required levels', related_name='required_for_positions', through='person.PositionCompetencyRequirement', to='person.competency'),
        ),
    ]
