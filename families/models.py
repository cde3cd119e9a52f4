from django.db import models


# ──────────────────────────────────────────
# FAMILY
# ──────────────────────────────────────────
class Family(models.Model):
    family_code  = models.CharField(max_length=20, unique=True, verbose_name="Family Code")
    address      = models.TextField(verbose_name="Family Address")
    native_place = models.CharField(max_length=100, verbose_name="Native Place")
    gotra        = models.CharField(max_length=100, verbose_name="Gotra")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table            = "families"
        verbose_name        = "Family"
        verbose_name_plural = "Families"
        ordering            = ["id"]

    def __str__(self):
        return self.family_code

    @property
    def primary_member(self):
        """The member recorded as Self, if any."""
        return self.members.filter(relation=FamilyMember.Relation.SELF).first()


# ──────────────────────────────────────────
# FAMILY MEMBER
# ──────────────────────────────────────────
class FamilyMember(models.Model):

    class Relation(models.TextChoices):
        SELF            = "Self",            "Self"
        FATHER          = "Father",          "Father"
        MOTHER          = "Mother",          "Mother"
        DAUGHTER        = "Daughter",        "Daughter"
        DAUGHTER_IN_LAW = "Daughter-in-Law", "Daughter-in-Law"
        GRANDSON        = "Grandson",        "Grandson"
        GRANDDAUGHTER   = "Granddaughter",   "Granddaughter"
        SON             = "Son",             "Son"
        SON_IN_LAW      = "Son-in-Law",      "Son-in-Law"
        WIFE            = "Wife",            "Wife"
        HUSBAND         = "Husband",         "Husband"
        BROTHER         = "Brother",         "Brother"
        SISTER          = "Sister",          "Sister"
        OTHER           = "Other",           "Other"

    class MaritalStatus(models.TextChoices):
        SINGLE   = "Single",   "Single"
        MARRIED  = "Married",  "Married"
        DIVORCED = "Divorced", "Divorced"
        WIDOW    = "Widow",    "Widow"
        WIDOWER  = "Widower",  "Widower"

    family = models.ForeignKey(
        Family, on_delete=models.CASCADE,
        related_name="members",
        verbose_name="Family"
    )

    # ── Identity ──
    name     = models.CharField(max_length=200, verbose_name="Name")
    relation = models.CharField(
        max_length=20,
        choices=Relation.choices,
        default=Relation.OTHER,
        verbose_name="Relation to Main Member"
    )
    date_of_birth = models.DateField(verbose_name="Date of Birth")

    # ── Marriage ──
    marital_status = models.CharField(
        max_length=20,
        choices=MaritalStatus.choices,
        verbose_name="Marital Status"
    )
    married_to_other_samaj = models.BooleanField(
        default=False,
        verbose_name="Married to Other Samaj"
    )

    # ── Education & Contact ──
    education     = models.CharField(max_length=200, blank=True, verbose_name="Education")
    mobile_number = models.CharField(max_length=20, blank=True, verbose_name="Mobile Number")
    email         = models.EmailField(blank=True, verbose_name="Email")

    # ── Work ──
    job_role    = models.CharField(max_length=100, blank=True, verbose_name="Job Role")
    job_address = models.CharField(max_length=255, blank=True, verbose_name="Job Address")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table            = "family_members"
        verbose_name        = "Family Member"
        verbose_name_plural = "Family Members"
        ordering            = ["id"]
        indexes = [
            models.Index(fields=["name"], name="family_members_name_idx"),
            models.Index(fields=["relation"], name="family_members_relation_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.relation})"
