import django.contrib.auth.models
import django.contrib.auth.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


ROLE_CHOICES = [
    ('SUPER_ADMIN', 'Super Admin'),
    ('ADMIN', 'Admin'),
    ('DOCTOR', 'Doctor'),
    ('NURSE', 'Nurse'),
    ('OPD_MANAGER', 'OPD Manager'),
    ('PATIENT', 'Patient'),
    ('MEDICAL_STORE', 'Medical Store'),
    ('PATHOLOGY_LAB', 'Pathology Lab'),
    ('TECHNICIAN', 'Technician'),
]


class Migration(migrations.Migration):
    initial = True
    dependencies = [
        ('auth', '0012_alter_user_first_name_max_length'),
    ]

    operations = [
        migrations.CreateModel(
            name='User',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('password', models.CharField(max_length=128, verbose_name='password')),
                ('last_login', models.DateTimeField(blank=True, null=True, verbose_name='last login')),
                ('is_superuser', models.BooleanField(default=False, help_text='Designates that this user has all permissions without explicitly assigning them.', verbose_name='superuser status')),
                ('username', models.CharField(error_messages={'unique': 'A user with that username already exists.'}, help_text='Required. 150 characters or fewer. Letters, digits and @/./+/-/_ only.', max_length=150, unique=True, validators=[django.contrib.auth.validators.UnicodeUsernameValidator()], verbose_name='username')),
                ('first_name', models.CharField(blank=True, max_length=150, verbose_name='first name')),
                ('last_name', models.CharField(blank=True, max_length=150, verbose_name='last name')),
                ('email', models.EmailField(blank=True, max_length=254, verbose_name='email address')),
                ('is_staff', models.BooleanField(default=False, help_text='Designates whether the user can log into this admin site.', verbose_name='staff status')),
                ('is_active', models.BooleanField(default=True, help_text='Designates whether this user should be treated as active. Unselect this instead of deleting accounts.', verbose_name='active')),
                ('date_joined', models.DateTimeField(default=django.utils.timezone.now, verbose_name='date joined')),
                ('role', models.CharField(choices=ROLE_CHOICES, db_index=True, default='PATIENT', max_length=20)),
                ('hospital_name', models.CharField(blank=True, max_length=255)),
                ('groups', models.ManyToManyField(blank=True, help_text='The groups this user belongs to. A user will get all permissions granted to each of their groups.', related_name='user_set', related_query_name='user', to='auth.group', verbose_name='groups')),
                ('user_permissions', models.ManyToManyField(blank=True, help_text='Specific permissions for this user.', related_name='user_set', related_query_name='user', to='auth.permission', verbose_name='user permissions')),
            ],
            options={
                'verbose_name': 'user',
                'verbose_name_plural': 'users',
                'abstract': False,
            },
            managers=[
                ('objects', django.contrib.auth.models.UserManager()),
            ],
        ),
        migrations.CreateModel(
            name='NurseDepartmentPreference',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('nurse_id', models.CharField(max_length=50, unique=True)),
                ('nurse_name', models.CharField(max_length=255)),
                ('primary_department', models.CharField(max_length=255)),
                ('secondary_department', models.CharField(max_length=255)),
                ('tertiary_department', models.CharField(max_length=255)),
                ('is_available', models.BooleanField(db_index=True, default=True)),
                ('assigned_room', models.CharField(blank=True, max_length=100, null=True)),
                ('assigned_doctor', models.CharField(blank=True, max_length=255, null=True)),
                ('assigned_position', models.CharField(blank=True, choices=[('Primary', 'Primary'), ('Secondary', 'Secondary'), ('Tertiary', 'Tertiary')], max_length=20, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'ordering': ['nurse_id'],
                'constraints': [
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(('primary_department', models.F('secondary_department')), _negated=True),
                            models.Q(('primary_department', models.F('tertiary_department')), _negated=True),
                            models.Q(('secondary_department', models.F('tertiary_department')), _negated=True),
                        ),
                        name='pref_departments_distinct',
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name='DepartmentNurseAssignment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('department_name', models.CharField(max_length=255, unique=True)),
                ('primary_nurse_id', models.CharField(blank=True, max_length=50, null=True)),
                ('primary_nurse_name', models.CharField(blank=True, max_length=255, null=True)),
                ('secondary_nurse_id', models.CharField(blank=True, max_length=50, null=True)),
                ('secondary_nurse_name', models.CharField(blank=True, max_length=255, null=True)),
                ('tertiary_nurse_id', models.CharField(blank=True, max_length=50, null=True)),
                ('tertiary_nurse_name', models.CharField(blank=True, max_length=255, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'ordering': ['id'],
                'constraints': [
                    models.CheckConstraint(
                        condition=models.Q(
                            models.Q(('primary_nurse_id', models.F('secondary_nurse_id')), _negated=True),
                            models.Q(('primary_nurse_id', models.F('tertiary_nurse_id')), _negated=True),
                            models.Q(('secondary_nurse_id', models.F('tertiary_nurse_id')), _negated=True),
                        ),
                        name='assignment_nurses_distinct',
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name='RolePermission',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('role', models.CharField(choices=ROLE_CHOICES, max_length=20)),
                ('module', models.CharField(max_length=32)),
                ('can_view', models.BooleanField(default=False)),
                ('can_create', models.BooleanField(default=False)),
                ('can_edit', models.BooleanField(default=False)),
                ('can_delete', models.BooleanField(default=False)),
                ('can_approve', models.BooleanField(default=False)),
                ('can_lock', models.BooleanField(default=False)),
                ('can_unlock', models.BooleanField(default=False)),
                ('can_export', models.BooleanField(default=False)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'constraints': [models.UniqueConstraint(fields=('role', 'module'), name='uniq_role_module_permission')],
            },
        ),
        migrations.CreateModel(
            name='AuditEvent',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('action', models.CharField(max_length=64)),
                ('object_type', models.CharField(blank=True, max_length=64, null=True)),
                ('object_id', models.CharField(blank=True, max_length=64, null=True)),
                ('detail', models.JSONField(blank=True, default=dict)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'indexes': [
                    models.Index(fields=['action', 'created_at'], name='hmscore_aud_action_5d1c2e_idx'),
                    models.Index(fields=['object_type', 'object_id', 'created_at'], name='hmscore_aud_object__8a3f41_idx'),
                ],
            },
        ),
    ]
