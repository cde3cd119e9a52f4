"""
families/export.py

Spreadsheet export of the directory: one row per member, with the
family's fields repeated on each of its members.
"""
import datetime as dt
import logging

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill

from .conf import get_setting

logger = logging.getLogger(__name__)

XLSX_CONTENT_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'

# (column header, row key)
EXPORT_COLUMNS = [
    ('Family Code', 'family_code'),
    ('Family Address', 'address'),
    ('Native Place', 'native_place'),
    ('Gotra', 'gotra'),
    ('Name', 'name'),
    ('Relation', 'relation'),
    ('Date of Birth', 'date_of_birth'),
    ('Marital Status', 'marital_status'),
    ('Married to Other Samaj', 'married_to_other_samaj'),
    ('Education', 'education'),
    ('Mobile Number', 'mobile_number'),
    ('Email', 'email'),
    ('Job Role', 'job_role'),
    ('Job Address', 'job_address'),
]

FAMILY_COLUMNS = {'family_code', 'address', 'native_place', 'gotra'}


def _cell_value(key, value):
    if key == 'married_to_other_samaj':
        return 'Yes' if value else 'No'
    if isinstance(value, dt.date):
        return value.isoformat()
    return value if value is not None else ''


def flatten_directory(families):
    """
    Yield one header → value dict per member.

    Takes the full directory as returned by load_directory(); families
    without members contribute no rows.
    """
    for family in families:
        for member in family.get('members', []):
            yield {
                header: _cell_value(key, family.get(key) if key in FAMILY_COLUMNS else member.get(key))
                for header, key in EXPORT_COLUMNS
            }


def build_workbook(rows):
    """Single-sheet workbook with a styled header row."""
    wb = Workbook()
    ws = wb.active
    ws.title = get_setting('EXPORT_SHEET_TITLE')

    headers = [header for header, _ in EXPORT_COLUMNS]

    # Header row styling
    header_fill = PatternFill(start_color="6272f5", end_color="6272f5", fill_type="solid")
    header_font = Font(color="FFFFFF", bold=True)

    for col_num, header in enumerate(headers, 1):
        cell = ws.cell(row=1, column=col_num, value=header)
        cell.fill = header_fill
        cell.font = header_font

    row_count = 0
    for row_num, row in enumerate(rows, 2):
        for col_num, header in enumerate(headers, 1):
            ws.cell(row=row_num, column=col_num, value=row.get(header, ''))
        row_count += 1

    # Adjust column widths
    for column in ws.columns:
        column_letter = column[0].column_letter
        max_length = max(len(str(cell.value)) for cell in column if cell.value is not None)
        ws.column_dimensions[column_letter].width = min(max_length + 2, 50)

    logger.info(f"Built directory export with {row_count} member row(s)")
    return wb


def export_filename():
    return get_setting('EXPORT_FILENAME')
