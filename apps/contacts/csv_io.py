"""
Contact CSV import/export
=========================

Export writes one quoted row per contact (plus an Excel variant).

Import is two-step: the upload is tokenised and its headers are mapped to
contact fields with keyword heuristics, the user adjusts the mapping, then
the mapped rows are bulk-inserted. The tokenizer is deliberately simple:
a double quote toggles quoted mode, a doubled quote inside a quoted cell
is a literal quote (the escaping `write_csv` produces), and a comma outside
quotes ends a cell. Quoted fields spanning several lines are not supported.
"""
import csv
import logging

import openpyxl
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter
from django.db import DatabaseError, transaction
from django.utils import timezone

from .models import Contact

logger = logging.getLogger(__name__)


EXPORT_HEADERS = ['Name', 'Email', 'Phone', 'Business', 'Owner', 'Lead Score', 'Source', 'LinkedIn', 'Created']

# Fields a CSV column can be mapped to
IMPORT_FIELDS = [
    ('name', 'Name'),
    ('email', 'Email'),
    ('phone', 'Phone'),
    ('business_name', 'Business Name'),
    ('address', 'Address'),
    ('city', 'City'),
    ('postal_code', 'Postal Code'),
    ('website', 'Website'),
    ('linkedin_url', 'LinkedIn URL'),
    ('source', 'Source'),
    ('notes', 'Notes'),
]


class CSVImportError(Exception):
    """Raised when an upload cannot be turned into contacts."""



# EXPORT
def export_row(contact):
    return [
        contact.name,
        contact.email or '',
        contact.phone or '',
        contact.business_name or '',
        contact.owner.get_full_name() if contact.owner else '',
        contact.lead_score or '',
        contact.source or '',
        contact.linkedin_url or '',
        contact.created_at.strftime('%Y-%m-%d'),
    ]


def export_filename(extension='csv'):
    return f"contacts-{timezone.localdate().strftime('%Y-%m-%d')}.{extension}"


def write_csv(contacts, stream):
    """Write the header and one row per contact, every cell quoted."""
    writer = csv.writer(stream, quoting=csv.QUOTE_ALL)
    writer.writerow(EXPORT_HEADERS)
    for contact in contacts:
        writer.writerow(export_row(contact))


def write_excel(contacts, stream):
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Contacts"

    for col, header in enumerate(EXPORT_HEADERS, start=1):
        cell = ws.cell(row=1, column=col, value=header)
        cell.font = Font(bold=True, color="FFFFFF")
        cell.fill = PatternFill(start_color="2563EB", end_color="2563EB", fill_type="solid")

    widths = [len(h) for h in EXPORT_HEADERS]
    for row, contact in enumerate(contacts, start=2):
        for col, value in enumerate(export_row(contact), start=1):
            ws.cell(row=row, column=col, value=value)
            widths[col - 1] = max(widths[col - 1], len(str(value)))

    for col, width in enumerate(widths, start=1):
        ws.column_dimensions[get_column_letter(col)].width = min(width + 2, 50)

    wb.save(stream)



# IMPORT
def split_csv_line(line):
    """Split one CSV line into trimmed cells. ``""`` inside quotes is a literal quote."""
    cells = []
    current = []
    in_quotes = False

    i = 0
    while i < len(line):
        char = line[i]
        if char == '"':
            if in_quotes and line[i + 1:i + 2] == '"':
                current.append('"')
                i += 1
            else:
                in_quotes = not in_quotes
        elif char == ',' and not in_quotes:
            cells.append(''.join(current).strip())
            current = []
        else:
            current.append(char)
        i += 1

    cells.append(''.join(current).strip())
    return cells


def parse_csv(text):
    """Tokenise every non-blank line. The first row is the header row."""
    return [split_csv_line(line) for line in text.split('\n') if line.strip()]


def auto_map_columns(headers):
    """
    Guess a contact field for each header.

    Returns ``{column_index: field}`` for the headers that matched; the
    first matching rule wins.
    """
    mapping = {}
    for index, header in enumerate(headers):
        h = header.lower().strip()
        if 'name' in h and 'business' not in h:
            field = 'name'
        elif 'email' in h or 'e-mail' in h:
            field = 'email'
        elif 'phone' in h or 'tel' in h:
            field = 'phone'
        elif 'business' in h or 'company' in h:
            field = 'business_name'
        elif 'address' in h and 'email' not in h:
            field = 'address'
        elif 'city' in h:
            field = 'city'
        elif 'postal' in h or 'zip' in h:
            field = 'postal_code'
        elif 'website' in h or ('url' in h and 'linkedin' not in h):
            field = 'website'
        elif 'linkedin' in h:
            field = 'linkedin_url'
        elif 'source' in h:
            field = 'source'
        elif 'note' in h:
            field = 'notes'
        else:
            continue
        mapping[index] = field
    return mapping


def build_contact_rows(rows, mapping):
    """
    Turn data rows into field dicts using ``{column_index: field}``.

    Empty cells are left out and rows without a name are skipped.
    """
    contacts = []
    for row in rows:
        data = {}
        for index, field in mapping.items():
            index = int(index)
            if field and index < len(row) and row[index]:
                data[field] = row[index]
        if data.get('name'):
            contacts.append(data)
    return contacts


def import_contacts(text, mapping, account, owner=None):
    """
    Create contacts from CSV text and a column mapping.

    Raises:
        CSVImportError: name is not mapped, no valid rows, or the insert failed
    """
    if 'name' not in mapping.values():
        raise CSVImportError('Map a column to Name before importing.')

    rows = parse_csv(text)
    contact_rows = build_contact_rows(rows[1:], mapping)
    if not contact_rows:
        raise CSVImportError('No valid contacts found in CSV.')

    allowed = {name for name, _label in IMPORT_FIELDS}
    contacts = [
        Contact(
            account=account,
            owner=owner,
            **{field: value for field, value in data.items() if field in allowed}
        )
        for data in contact_rows
    ]

    try:
        with transaction.atomic():
            created = Contact.objects.bulk_create(contacts)
    except DatabaseError as exc:
        logger.exception("CSV import failed for account %s", account.pk)
        raise CSVImportError(f'Error importing contacts: {exc}') from exc

    logger.info("Imported %s contacts into account %s", len(created), account.pk)
    return created
