"""
families/store.py

Record store for the two directory tables, `families` and `family_members`.

Callers work with plain dict rows keyed by column name; nothing outside
this module touches the ORM for reads or writes. Every call is its own
atomic unit, a submit that issues several calls is not wrapped in a
transaction.
"""
import logging
from contextlib import contextmanager

from django.db import DatabaseError, IntegrityError, transaction

from .models import Family, FamilyMember

logger = logging.getLogger(__name__)

FAMILY_FIELDS = ("id", "family_code", "address", "native_place", "gotra")

MEMBER_FIELDS = (
    "id", "family_id", "name", "relation", "date_of_birth",
    "marital_status", "married_to_other_samaj", "education",
    "mobile_number", "email", "job_role", "job_address",
)


class StoreError(Exception):
    """Generic failure while reading or writing the record store."""


class RecordNotFound(StoreError):
    pass


class DuplicateFamilyCode(StoreError):
    """The unique constraint on families.family_code was violated."""

    def __init__(self, family_code):
        self.family_code = family_code
        super().__init__(f"Family code {family_code!r} is already in use")


def _writable(row, fields):
    return {k: v for k, v in row.items() if k in fields and k != "id"}


class RecordStore:
    """Request/response facade over the families and family_members tables."""

    # ──────────────────────────────────────────
    # READ
    # ──────────────────────────────────────────
    def list_families(self):
        return self._read(lambda: list(Family.objects.values(*FAMILY_FIELDS)))

    def list_members(self):
        return self._read(lambda: list(FamilyMember.objects.values(*MEMBER_FIELDS)))

    def get_family(self, family_id):
        rows = self._read(
            lambda: list(Family.objects.filter(pk=family_id).values(*FAMILY_FIELDS))
        )
        if not rows:
            raise RecordNotFound(f"Family {family_id} does not exist")
        return rows[0]

    def get_members(self, family_id):
        return self._read(
            lambda: list(
                FamilyMember.objects.filter(family_id=family_id).values(*MEMBER_FIELDS)
            )
        )

    # ──────────────────────────────────────────
    # WRITE
    # ──────────────────────────────────────────
    def insert_families(self, rows):
        inserted = []
        for row in rows:
            values = _writable(row, FAMILY_FIELDS)
            with _write_guard(family_code=values.get("family_code")):
                family = Family.objects.create(**values)
            inserted.append({"id": family.pk, **values})
        return inserted

    def insert_members(self, rows):
        inserted = []
        with _write_guard():
            for row in rows:
                values = _writable(row, MEMBER_FIELDS)
                member = FamilyMember.objects.create(**values)
                inserted.append({"id": member.pk, **values})
        return inserted

    def update_family(self, family_id, row):
        values = _writable(row, FAMILY_FIELDS)
        with _write_guard(family_code=values.get("family_code"), exclude_id=family_id):
            updated = Family.objects.filter(pk=family_id).update(**values)
        if not updated:
            raise RecordNotFound(f"Family {family_id} does not exist")

    def update_member(self, member_id, row):
        values = _writable(row, MEMBER_FIELDS)
        with _write_guard():
            updated = FamilyMember.objects.filter(pk=member_id).update(**values)
        if not updated:
            raise RecordNotFound(f"Family member {member_id} does not exist")

    def delete_member(self, member_id):
        with _write_guard():
            deleted, _ = FamilyMember.objects.filter(pk=member_id).delete()
        if not deleted:
            raise RecordNotFound(f"Family member {member_id} does not exist")

    def delete_family(self, family_id):
        # Members go with it through ON DELETE CASCADE
        with _write_guard():
            family = Family.objects.filter(pk=family_id).first()
            if family is not None:
                family.delete()
        if family is None:
            raise RecordNotFound(f"Family {family_id} does not exist")

    # ──────────────────────────────────────────
    # ERROR MAPPING
    # ──────────────────────────────────────────
    def _read(self, query):
        try:
            return query()
        except DatabaseError as exc:
            raise StoreError(str(exc)) from exc


@contextmanager
def _write_guard(family_code=None, exclude_id=None):
    """
    Runs one write inside a savepoint and translates database errors.

    An IntegrityError is reported as DuplicateFamilyCode only when another
    family really holds the code, anything else stays a generic StoreError.
    """
    try:
        with transaction.atomic():
            yield
    except IntegrityError as exc:
        if family_code and _code_taken(family_code, exclude_id):
            logger.warning(f"Duplicate family code rejected: {family_code}")
            raise DuplicateFamilyCode(family_code) from exc
        raise StoreError(str(exc)) from exc
    except DatabaseError as exc:
        raise StoreError(str(exc)) from exc


def _code_taken(family_code, exclude_id):
    qs = Family.objects.filter(family_code=family_code)
    if exclude_id is not None:
        qs = qs.exclude(pk=exclude_id)
    return qs.exists()
