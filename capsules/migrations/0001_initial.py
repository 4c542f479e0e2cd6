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
            name='Capsule',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated At')),
                ('is_deleted', models.BooleanField(default=False, verbose_name='Is Deleted')),
                ('lock_date', models.DateTimeField(blank=True, null=True, verbose_name='Lock Date')),
                ('notified', models.BooleanField(default=False, verbose_name='Notified')),
                ('title', models.CharField(max_length=255, verbose_name='Title')),
                ('description', models.TextField(blank=True, null=True, verbose_name='Description')),
                ('content', models.TextField(blank=True, null=True, verbose_name='Content')),
                ('media', models.JSONField(blank=True, default=list, verbose_name='Media')),
                ('type', models.CharField(choices=[('personal', 'Personal'), ('collaborative', 'Collaborative')], default='personal', max_length=20, verbose_name='Capsule Type')),
                ('member_details', models.JSONField(blank=True, default=list, verbose_name='Member Details')),
                ('created_by', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='capsules', to=settings.AUTH_USER_MODEL, verbose_name='Creator')),
                ('members', models.ManyToManyField(blank=True, related_name='shared_capsules', to=settings.AUTH_USER_MODEL, verbose_name='Members')),
            ],
            options={
                'verbose_name': 'Capsule',
                'verbose_name_plural': 'Capsules',
                'ordering': ('-created_at', '-id'),
                'indexes': [models.Index(fields=['type', 'notified', 'lock_date'], name='capsule_unlock_idx')],
            },
        ),
        migrations.CreateModel(
            name='MemoryEntry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created At')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated At')),
                ('is_deleted', models.BooleanField(default=False, verbose_name='Is Deleted')),
                ('lock_date', models.DateTimeField(blank=True, null=True, verbose_name='Lock Date')),
                ('notified', models.BooleanField(default=False, verbose_name='Notified')),
                ('content', models.TextField(verbose_name='Content')),
                ('media', models.JSONField(blank=True, default=list, verbose_name='Media')),
                ('member_name', models.CharField(max_length=150, verbose_name='Member Name')),
                ('capsule', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='entries', to='capsules.capsule', verbose_name='Capsule')),
                ('created_by', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='memory_entries', to=settings.AUTH_USER_MODEL, verbose_name='Author')),
            ],
            options={
                'verbose_name': 'Memory Entry',
                'verbose_name_plural': 'Memory Entries',
                'ordering': ('created_at', 'id'),
            },
        ),
    ]
