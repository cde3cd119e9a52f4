from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Family",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("family_code", models.CharField(max_length=20, unique=True, verbose_name="Family Code")),
                ("address", models.TextField(verbose_name="Family Address")),
                ("native_place", models.CharField(max_length=100, verbose_name="Native Place")),
                ("gotra", models.CharField(max_length=100, verbose_name="Gotra")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Family",
                "verbose_name_plural": "Families",
                "db_table": "families",
                "ordering": ["id"],
            },
        ),
        migrations.CreateModel(
            name="FamilyMember",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200, verbose_name="Name")),
                (
                    "relation",
                    models.CharField(
                        choices=[
                            ("Self", "Self"),
                            ("Father", "Father"),
                            ("Mother", "Mother"),
                            ("Daughter", "Daughter"),
                            ("Daughter-in-Law", "Daughter-in-Law"),
                            ("Grandson", "Grandson"),
                            ("Granddaughter", "Granddaughter"),
                            ("Son", "Son"),
                            ("Son-in-Law", "Son-in-Law"),
                            ("Wife", "Wife"),
                            ("Husband", "Husband"),
                            ("Brother", "Brother"),
                            ("Sister", "Sister"),
                            ("Other", "Other"),
                        ],
                        default="Other",
                        max_length=20,
                        verbose_name="Relation to Main Member",
                    ),
                ),
                ("date_of_birth", models.DateField(verbose_name="Date of Birth")),
                (
                    "marital_status",
                    models.CharField(
                        choices=[
                            ("Single", "Single"),
                            ("Married", "Married"),
                            ("Divorced", "Divorced"),
                            ("Widow", "Widow"),
                            ("Widower", "Widower"),
                        ],
                        max_length=20,
                        verbose_name="Marital Status",
                    ),
                ),
                ("married_to_other_samaj", models.BooleanField(default=False, verbose_name="Married to Other Samaj")),
                ("education", models.CharField(blank=True, max_length=200, verbose_name="Education")),
                ("mobile_number", models.CharField(blank=True, max_length=20, verbose_name="Mobile Number")),
                ("email", models.EmailField(blank=True, max_length=254, verbose_name="Email")),
                ("job_role", models.CharField(blank=True, max_length=100, verbose_name="Job Role")),
                ("job_address", models.CharField(blank=True, max_length=255, verbose_name="Job Address")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "family",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="members",
                        to="families.family",
                        verbose_name="Family",
                    ),
                ),
            ],
            options={
                "verbose_name": "Family Member",
                "verbose_name_plural": "Family Members",
                "db_table": "family_members",
                "ordering": ["id"],
                "indexes": [
                    models.Index(fields=["name"], name="family_members_name_idx"),
                    models.Index(fields=["relation"], name="family_members_relation_idx"),
                ],
            },
        ),
    ]
