import re

from django import forms
from django.core.exceptions import ValidationError

from .conf import get_setting
from .models import FamilyMember

MEMBER_PREFIX = "members"
OTHER_CHOICE  = "Other"

PRIMARY_MEMBER_ERROR = "Exactly one member must be designated as the Main Member (Self)"


def native_place_choices():
    places = [(place, place) for place in get_setting("NATIVE_PLACES")]
    return [("", "Select native place")] + places + [(OTHER_CHOICE, "Other")]


def gotra_choices():
    gotras = [(gotra, gotra) for gotra in get_setting("GOTRAS")]
    return [("", "Select gotra")] + gotras + [(OTHER_CHOICE, "Other")]


def split_choice(value, choices):
    """
    Map a stored value back onto a (choice, custom text) pair.

    Values outside the configured list come back as "Other" plus the text.
    """
    value = value or ""
    known = {key for key, _ in choices}
    if value in known and value != OTHER_CHOICE:
        return value, ""
    return OTHER_CHOICE, value


def resolve_choice(choice, custom):
    if choice == OTHER_CHOICE:
        return (custom or "").strip()
    return choice


# ════════════════════════════════════════════════════════════
# FAMILY FORM
# ════════════════════════════════════════════════════════════

class FamilyForm(forms.Form):
    """Family-level fields of the editor."""

    family_code = forms.CharField(
        max_length=20,
        label="Family Code",
        error_messages={"required": "Family Code is required"},
        widget=forms.TextInput(attrs={
            'class': 'input-field',
            'placeholder': 'Enter Family Code'
        })
    )
    address = forms.CharField(
        label="Family Address",
        error_messages={"required": "Address is required"},
        widget=forms.Textarea(attrs={
            'class': 'input-field',
            'rows': 3
        })
    )
    native_place = forms.ChoiceField(
        label="Native Place",
        choices=native_place_choices,
        error_messages={"required": "Native place is required"},
        widget=forms.Select(attrs={'class': 'input-field'})
    )
    native_place_other = forms.CharField(
        required=False,
        max_length=100,
        label="Other Native Place",
        widget=forms.TextInput(attrs={
            'class': 'input-field',
            'placeholder': 'Enter native place'
        })
    )
    gotra = forms.ChoiceField(
        label="Gotra",
        choices=gotra_choices,
        error_messages={"required": "Gotra is required"},
        widget=forms.Select(attrs={'class': 'input-field'})
    )
    gotra_other = forms.CharField(
        required=False,
        max_length=100,
        label="Other Gotra",
        widget=forms.TextInput(attrs={
            'class': 'input-field',
            'placeholder': 'Enter gotra'
        })
    )

    def clean(self):
        cleaned_data = super().clean()

        # "Other" needs the free-text override
        if cleaned_data.get('native_place') == OTHER_CHOICE:
            if not cleaned_data.get('native_place_other', '').strip():
                self.add_error('native_place_other', 'Native place is required')

        if cleaned_data.get('gotra') == OTHER_CHOICE:
            if not cleaned_data.get('gotra_other', '').strip():
                self.add_error('gotra_other', 'Gotra is required')

        return cleaned_data


# ════════════════════════════════════════════════════════════
# MEMBER FORMS
# ════════════════════════════════════════════════════════════

class MemberForm(forms.Form):
    """One member card of the editor."""

    id = forms.IntegerField(required=False, widget=forms.HiddenInput)
    name = forms.CharField(
        max_length=200,
        label="Name",
        error_messages={"required": "Name is required"},
        widget=forms.TextInput(attrs={
            'class': 'input-field',
            'placeholder': 'Enter full name'
        })
    )
    relation = forms.ChoiceField(
        label="Relation to Main Member",
        choices=[("", "Select relation")] + list(FamilyMember.Relation.choices),
        error_messages={"required": "Relation is required"},
        widget=forms.Select(attrs={'class': 'input-field'})
    )
    date_of_birth = forms.DateField(
        label="Date of Birth",
        error_messages={"required": "Date of birth is required"},
        widget=forms.DateInput(format='%Y-%m-%d', attrs={
            'class': 'input-field',
            'type': 'date'
        })
    )
    marital_status = forms.ChoiceField(
        label="Marital Status",
        choices=[("", "Select marital status")] + list(FamilyMember.MaritalStatus.choices),
        error_messages={"required": "Marital status is required"},
        widget=forms.Select(attrs={'class': 'input-field'})
    )
    married_to_other_samaj = forms.BooleanField(
        required=False,
        label="Married to Other Samaj",
        widget=forms.CheckboxInput(attrs={'class': 'checkbox'})
    )
    education = forms.CharField(
        max_length=200,
        label="Education",
        error_messages={"required": "Education is required"},
        widget=forms.TextInput(attrs={'class': 'input-field'})
    )
    mobile_number = forms.CharField(
        required=False,
        max_length=20,
        label="Mobile Number",
        widget=forms.TextInput(attrs={'class': 'input-field'})
    )
    email = forms.EmailField(
        required=False,
        label="Email",
        error_messages={"invalid": "Invalid email address"},
        widget=forms.EmailInput(attrs={'class': 'input-field'})
    )
    job_role = forms.CharField(
        required=False,
        max_length=100,
        label="Job Role",
        widget=forms.TextInput(attrs={'class': 'input-field'})
    )
    job_address = forms.CharField(
        required=False,
        max_length=255,
        label="Job Address",
        widget=forms.TextInput(attrs={'class': 'input-field'})
    )

    def clean_mobile_number(self):
        """Strip separators and require a plain phone number shape."""
        mobile = self.cleaned_data.get('mobile_number', '').strip()
        if not mobile:
            return mobile

        mobile = re.sub(r'[\s\-()]', '', mobile)
        if not re.match(r'^\+?\d{7,15}$', mobile):
            raise ValidationError('Invalid mobile number')

        return mobile


class BaseMemberFormSet(forms.BaseFormSet):

    def clean(self):
        """Exactly one member carries the Self relation."""
        primary_count = sum(
            1 for form in self.forms
            if getattr(form, 'cleaned_data', {}).get('relation') == FamilyMember.Relation.SELF
        )
        if primary_count != 1:
            raise ValidationError(PRIMARY_MEMBER_ERROR, code='primary_member')


MemberFormSet = forms.formset_factory(MemberForm, formset=BaseMemberFormSet, extra=0)


class DirectorySearchForm(forms.Form):
    """Live search box above the directory table."""

    q = forms.CharField(
        required=False,
        label='',
        widget=forms.TextInput(attrs={
            'class': 'input-field',
            'placeholder': 'Search by family code, name, relation, email, job, address...',
            'type': 'search',
        })
    )


# ════════════════════════════════════════════════════════════
# VALIDATION ENTRY POINTS
# ════════════════════════════════════════════════════════════

FAMILY_KEYS = ("family_code", "address", "native_place", "native_place_other", "gotra", "gotra_other")

MEMBER_KEYS = (
    "id", "name", "relation", "date_of_birth", "marital_status",
    "married_to_other_samaj", "education", "mobile_number", "email",
    "job_role", "job_address",
)


def _form_value(value):
    if value is None:
        return ""
    return value


def to_form_data(family):
    """
    Flatten a nested family dict into the POST layout the forms expect.

    `family` has the family keys plus a "members" list of member dicts.
    """
    members = list(family.get("members") or [])
    data = {key: _form_value(family.get(key)) for key in FAMILY_KEYS}
    data.update({
        f"{MEMBER_PREFIX}-TOTAL_FORMS": str(len(members)),
        f"{MEMBER_PREFIX}-INITIAL_FORMS": str(len(members)),
        f"{MEMBER_PREFIX}-MIN_NUM_FORMS": "0",
        f"{MEMBER_PREFIX}-MAX_NUM_FORMS": "1000",
    })
    for index, member in enumerate(members):
        for key in MEMBER_KEYS:
            value = member.get(key)
            if key == "married_to_other_samaj":
                if value:
                    data[f"{MEMBER_PREFIX}-{index}-{key}"] = "on"
                continue
            data[f"{MEMBER_PREFIX}-{index}-{key}"] = _form_value(value)
    return data


def build_forms(family, bound=False):
    """Forms for rendering the editor; bound forms carry their errors."""
    if bound:
        data = to_form_data(family)
        return FamilyForm(data), MemberFormSet(data, prefix=MEMBER_PREFIX)

    family_initial = {key: family.get(key) for key in FAMILY_KEYS}
    members_initial = [
        {key: member.get(key) for key in MEMBER_KEYS}
        for member in family.get("members") or []
    ]
    return (
        FamilyForm(initial=family_initial),
        MemberFormSet(initial=members_initial, prefix=MEMBER_PREFIX),
    )


def check_family(family):
    """
    Validate a candidate family with its members.

    Returns `(cleaned, errors)`. On success `errors` is empty and `cleaned`
    holds the family fields plus a "members" list of cleaned member dicts.
    On failure `cleaned` is None and `errors` maps a field path
    ("family_code", "members.2.email") to its message; the single-primary
    rule is reported under the collection path "members".
    """
    data = to_form_data(family)
    family_form = FamilyForm(data)
    member_formset = MemberFormSet(data, prefix=MEMBER_PREFIX)

    family_valid = family_form.is_valid()
    members_valid = member_formset.is_valid()

    errors = {}
    for field, messages in family_form.errors.items():
        errors[field] = messages[0]
    for index, form in enumerate(member_formset.forms):
        for field, messages in form.errors.items():
            errors[f"{MEMBER_PREFIX}.{index}.{field}"] = messages[0]
    if member_formset.non_form_errors():
        errors[MEMBER_PREFIX] = member_formset.non_form_errors()[0]

    if errors or not (family_valid and members_valid):
        return None, errors

    cleaned = dict(family_form.cleaned_data)
    cleaned["members"] = [form.cleaned_data for form in member_formset.forms]
    return cleaned, {}


def validate_family(family):
    """Field-path → message mapping, empty when the family is valid."""
    _, errors = check_family(family)
    return errors
