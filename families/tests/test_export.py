"""
Spreadsheet export of the directory.

Run with:
    python manage.py test families.tests.test_export -v 2
"""
import datetime

from django.test import SimpleTestCase, override_settings

from families.export import EXPORT_COLUMNS, build_workbook, export_filename, flatten_directory


def sample_family():
    return {
        "id": 1, "family_code": "FAM-AAA111", "address": "12 Station Road",
        "native_place": "Rajkot", "gotra": "Kashyap",
        "members": [
            {
                "name": "Ramesh Patel", "relation": "Self",
                "date_of_birth": datetime.date(1970, 5, 14), "marital_status": "Married",
                "married_to_other_samaj": True, "education": "B.Com",
                "mobile_number": "9876543210", "email": "", "job_role": "", "job_address": "",
            },
            {
                "name": "Geeta Patel", "relation": "Wife",
                "date_of_birth": datetime.date(1974, 1, 2), "marital_status": "Married",
                "married_to_other_samaj": False, "education": "B.A",
                "mobile_number": "", "email": "geeta@example.com", "job_role": "", "job_address": "",
            },
        ],
    }


class FlattenTest(SimpleTestCase):

    def test_one_row_per_member(self):
        rows = list(flatten_directory([sample_family()]))
        self.assertEqual(len(rows), 2)
        self.assertEqual(list(rows[0]), [header for header, _ in EXPORT_COLUMNS])

    def test_family_fields_repeat_on_each_member(self):
        rows = list(flatten_directory([sample_family()]))
        self.assertEqual({row["Family Code"] for row in rows}, {"FAM-AAA111"})
        self.assertEqual(rows[1]["Gotra"], "Kashyap")
        self.assertEqual(rows[1]["Name"], "Geeta Patel")

    def test_cell_formatting(self):
        first, second = flatten_directory([sample_family()])
        self.assertEqual(first["Date of Birth"], "1970-05-14")
        self.assertEqual(first["Married to Other Samaj"], "Yes")
        self.assertEqual(second["Married to Other Samaj"], "No")

    def test_family_without_members(self):
        family = sample_family()
        family["members"] = []
        self.assertEqual(list(flatten_directory([family])), [])


class WorkbookTest(SimpleTestCase):

    def test_header_and_rows(self):
        wb = build_workbook(flatten_directory([sample_family()]))
        ws = wb.active
        self.assertEqual(ws.title, "Family Directory")
        self.assertEqual(ws.cell(row=1, column=1).value, "Family Code")
        self.assertEqual(ws.cell(row=1, column=14).value, "Job Address")
        self.assertTrue(ws.cell(row=1, column=1).font.bold)
        self.assertEqual(ws.cell(row=3, column=5).value, "Geeta Patel")
        self.assertEqual(ws.max_row, 3)

    def test_empty_directory_has_header_only(self):
        ws = build_workbook([]).active
        self.assertEqual(ws.max_row, 1)
        self.assertEqual(ws.max_column, len(EXPORT_COLUMNS))

    @override_settings(FAMILY_DIRECTORY={"EXPORT_FILENAME": "directory.xlsx"})
    def test_filename_from_settings(self):
        self.assertEqual(export_filename(), "directory.xlsx")

    def test_default_filename(self):
        self.assertEqual(export_filename(), "family_directory.xlsx")
