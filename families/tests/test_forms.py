"""
Validation of a candidate family and its members.

Run with:
    python manage.py test families.tests.test_forms -v 2
"""
import datetime

from django.test import SimpleTestCase, override_settings

from families.forms import (OTHER_CHOICE, PRIMARY_MEMBER_ERROR, check_family,
                            gotra_choices, native_place_choices, resolve_choice,
                            split_choice, to_form_data, validate_family)


def make_member(**overrides):
    member = {
        "name": "Ramesh Patel",
        "relation": "Self",
        "date_of_birth": "1970-05-14",
        "marital_status": "Married",
        "married_to_other_samaj": False,
        "education": "B.Com",
        "mobile_number": "",
        "email": "",
        "job_role": "",
        "job_address": "",
    }
    member.update(overrides)
    return member


def make_family(members=None, **overrides):
    family = {
        "family_code": "FAM-AB12CD",
        "address": "12 Station Road, Rajkot",
        "native_place": "Rajkot",
        "native_place_other": "",
        "gotra": "Kashyap",
        "gotra_other": "",
        "members": members if members is not None else [make_member()],
    }
    family.update(overrides)
    return family


class FamilyValidationTest(SimpleTestCase):

    def test_valid_family_has_no_errors(self):
        self.assertEqual(validate_family(make_family()), {})

    def test_cleaned_values_are_parsed(self):
        cleaned, errors = check_family(make_family())
        self.assertEqual(errors, {})
        self.assertEqual(cleaned["members"][0]["date_of_birth"], datetime.date(1970, 5, 14))
        self.assertIs(cleaned["members"][0]["married_to_other_samaj"], False)

    def test_required_family_fields(self):
        errors = validate_family(make_family(family_code="", address="", native_place="", gotra=""))
        self.assertEqual(errors["family_code"], "Family Code is required")
        self.assertEqual(errors["address"], "Address is required")
        self.assertEqual(errors["native_place"], "Native place is required")
        self.assertEqual(errors["gotra"], "Gotra is required")

    def test_other_native_place_needs_custom_text(self):
        errors = validate_family(make_family(native_place=OTHER_CHOICE, native_place_other="  "))
        self.assertEqual(errors["native_place_other"], "Native place is required")

    def test_other_gotra_with_custom_text_is_valid(self):
        errors = validate_family(make_family(gotra=OTHER_CHOICE, gotra_other="Sandilya"))
        self.assertEqual(errors, {})

    def test_unknown_native_place_is_rejected(self):
        errors = validate_family(make_family(native_place="Atlantis"))
        self.assertIn("native_place", errors)


class MemberValidationTest(SimpleTestCase):

    def test_member_errors_use_indexed_paths(self):
        members = [make_member(), make_member(relation="Son", name="", email="not-an-email")]
        errors = validate_family(make_family(members=members))
        self.assertEqual(errors["members.1.name"], "Name is required")
        self.assertEqual(errors["members.1.email"], "Invalid email address")
        self.assertNotIn("members.0.name", errors)

    def test_required_member_fields(self):
        member = make_member(date_of_birth="", marital_status="", education="")
        errors = validate_family(make_family(members=[member]))
        self.assertEqual(errors["members.0.date_of_birth"], "Date of birth is required")
        self.assertEqual(errors["members.0.marital_status"], "Marital status is required")
        self.assertEqual(errors["members.0.education"], "Education is required")

    def test_invalid_date_of_birth(self):
        errors = validate_family(make_family(members=[make_member(date_of_birth="31-31-1990")]))
        self.assertIn("members.0.date_of_birth", errors)

    def test_mobile_number_is_normalized(self):
        cleaned, errors = check_family(make_family(members=[make_member(mobile_number="+91 98765-43210")]))
        self.assertEqual(errors, {})
        self.assertEqual(cleaned["members"][0]["mobile_number"], "+919876543210")

    def test_invalid_mobile_number(self):
        errors = validate_family(make_family(members=[make_member(mobile_number="12ab")]))
        self.assertEqual(errors["members.0.mobile_number"], "Invalid mobile number")

    def test_optional_fields_may_be_blank(self):
        member = make_member(mobile_number="", email="", job_role="", job_address="")
        self.assertEqual(validate_family(make_family(members=[member])), {})


class PrimaryMemberRuleTest(SimpleTestCase):
    """Exactly one member per family is Self."""

    def test_no_primary_member(self):
        errors = validate_family(make_family(members=[make_member(relation="Father")]))
        self.assertEqual(errors["members"], PRIMARY_MEMBER_ERROR)

    def test_one_primary_member(self):
        members = [make_member(), make_member(name="Geeta Patel", relation="Wife")]
        self.assertNotIn("members", validate_family(make_family(members=members)))

    def test_two_primary_members(self):
        members = [make_member(), make_member(name="Suresh Patel")]
        errors = validate_family(make_family(members=members))
        self.assertEqual(errors["members"], PRIMARY_MEMBER_ERROR)

    def test_empty_member_list(self):
        errors = validate_family(make_family(members=[]))
        self.assertEqual(errors["members"], PRIMARY_MEMBER_ERROR)

    def test_invalid_primary_member_still_counts(self):
        # The Self member fails on its name, the rule itself is satisfied
        errors = validate_family(make_family(members=[make_member(name="")]))
        self.assertIn("members.0.name", errors)
        self.assertNotIn("members", errors)


class ChoiceHelpersTest(SimpleTestCase):

    @override_settings(FAMILY_DIRECTORY={"NATIVE_PLACES": ["Surat"], "GOTRAS": ["Atri"]})
    def test_choices_come_from_settings(self):
        self.assertEqual(
            native_place_choices(),
            [("", "Select native place"), ("Surat", "Surat"), (OTHER_CHOICE, "Other")],
        )
        self.assertEqual(
            gotra_choices(),
            [("", "Select gotra"), ("Atri", "Atri"), (OTHER_CHOICE, "Other")],
        )

    def test_split_known_value(self):
        self.assertEqual(split_choice("Rajkot", native_place_choices()), ("Rajkot", ""))

    def test_split_custom_value(self):
        self.assertEqual(split_choice("Atlantis", native_place_choices()), (OTHER_CHOICE, "Atlantis"))

    def test_resolve_choice(self):
        self.assertEqual(resolve_choice("Rajkot", "ignored"), "Rajkot")
        self.assertEqual(resolve_choice(OTHER_CHOICE, "  Atlantis "), "Atlantis")

    def test_form_data_layout(self):
        data = to_form_data(make_family(members=[make_member(married_to_other_samaj=True)]))
        self.assertEqual(data["members-TOTAL_FORMS"], "1")
        self.assertEqual(data["members-0-married_to_other_samaj"], "on")
        self.assertEqual(data["members-0-name"], "Ramesh Patel")
