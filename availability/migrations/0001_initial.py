from django.db import migrations, models


STATE_CHOICES = [
    ("active", "Active"),
    ("inactive", "Inactive"),
    ("signed-off", "Signed off"),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="MemberStatus",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("member_id", models.CharField(max_length=32, unique=True)),
                ("state", models.CharField(choices=STATE_CHOICES, max_length=16)),
                ("metadata", models.JSONField(default=dict)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name_plural": "member statuses",
            },
        ),
        migrations.CreateModel(
            name="ActivityLogEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("member_id", models.CharField(db_index=True, max_length=32)),
                ("action", models.CharField(choices=STATE_CHOICES, max_length=16)),
                ("timestamp", models.DateTimeField(db_index=True)),
            ],
            options={
                "ordering": ["timestamp", "id"],
                "verbose_name_plural": "activity log",
            },
        ),
        migrations.CreateModel(
            name="BoardPointer",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("channel_id", models.CharField(max_length=32)),
                ("message_id", models.CharField(max_length=32)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
        ),
    ]
