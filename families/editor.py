"""
families/editor.py

State machine behind the family form.

Every transition takes an EditorState and returns a new one; nothing is
mutated in place. The states are:

    EMPTY      new family, one default Self member
    EDITING    fields changed since the editor was opened
    SUBMITTING validation passed, store calls in flight
    DONE       every row write acknowledged
    FAILED     a store call failed; earlier writes are not undone
"""
import enum
import logging
import string
from dataclasses import asdict, dataclass, field, fields, replace
from typing import Optional

from django.utils.crypto import get_random_string

from .conf import get_setting
from .forms import (MEMBER_PREFIX, check_family, gotra_choices,
                    native_place_choices, resolve_choice, split_choice)
from .models import FamilyMember
from .store import DuplicateFamilyCode, RecordNotFound, StoreError

logger = logging.getLogger(__name__)

SELF  = FamilyMember.Relation.SELF.value
OTHER = FamilyMember.Relation.OTHER.value

CODE_ALPHABET = string.ascii_uppercase + string.digits


class EditorStatus(enum.Enum):
    EMPTY      = "empty"
    EDITING    = "editing"
    SUBMITTING = "submitting"
    DONE       = "done"
    FAILED     = "failed"


class FailureKind:
    GENERIC        = "generic"
    DUPLICATE_CODE = "duplicate_code"


class EditorError(ValueError):
    """A transition was asked to do something the editor does not allow."""


@dataclass(frozen=True)
class MemberDraft:
    id: Optional[int] = None
    name: str = ""
    relation: str = ""
    # date, or the raw input until it has been validated
    date_of_birth: object = None
    marital_status: str = ""
    married_to_other_samaj: bool = False
    education: str = ""
    mobile_number: str = ""
    email: str = ""
    job_role: str = ""
    job_address: str = ""


@dataclass(frozen=True)
class FamilyDraft:
    id: Optional[int] = None
    family_code: str = ""
    address: str = ""
    native_place: str = ""
    native_place_other: str = ""
    gotra: str = ""
    gotra_other: str = ""
    members: tuple = ()
    removed_member_ids: tuple = ()

    @property
    def is_new(self):
        return self.id is None

    def as_dict(self):
        return asdict(self)


@dataclass(frozen=True)
class EditorState:
    draft: FamilyDraft
    status: EditorStatus = EditorStatus.EMPTY
    errors: dict = field(default_factory=dict)
    failure: Optional[str] = None

    @property
    def primary_error(self):
        return self.errors.get(MEMBER_PREFIX)


MEMBER_FIELDS = frozenset(f.name for f in fields(MemberDraft)) - {"id"}
FAMILY_FIELDS = frozenset(f.name for f in fields(FamilyDraft)) - {"id", "members", "removed_member_ids"}
MEMBER_TEXT_FIELDS = (
    "name", "relation", "marital_status", "education",
    "mobile_number", "email", "job_role", "job_address",
)


# ──────────────────────────────────────────
# OPENING THE EDITOR
# ──────────────────────────────────────────
def new_family():
    return EditorState(draft=FamilyDraft(members=(MemberDraft(relation=SELF),)))


def _member_draft(row):
    text = {key: row.get(key) or "" for key in MEMBER_TEXT_FIELDS}
    return MemberDraft(
        id=row.get("id"),
        date_of_birth=row.get("date_of_birth"),
        married_to_other_samaj=bool(row.get("married_to_other_samaj")),
        **text,
    )


def draft_from_rows(family_row, member_rows):
    """Build a draft from store rows, splitting custom native place / gotra."""
    native_place, native_place_other = split_choice(
        family_row.get("native_place"), native_place_choices()
    )
    gotra, gotra_other = split_choice(family_row.get("gotra"), gotra_choices())
    members = tuple(_member_draft(row) for row in member_rows)
    return FamilyDraft(
        id=family_row["id"],
        family_code=family_row.get("family_code") or "",
        address=family_row.get("address") or "",
        native_place=native_place,
        native_place_other=native_place_other,
        gotra=gotra,
        gotra_other=gotra_other,
        members=members,
    )


def load_family(store, family_id):
    family_row = store.get_family(family_id)
    member_rows = store.get_members(family_id)
    return EditorState(
        draft=draft_from_rows(family_row, member_rows),
        status=EditorStatus.EDITING,
    )


def _to_int(value):
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _to_bool(value):
    if isinstance(value, bool):
        return value
    return str(value or "").strip().lower() not in ("", "0", "false", "off", "no")


def draft_from_form_data(data, family_id=None):
    """
    Rebuild the draft from a submitted editor form.

    Values stay as the operator typed them; the validator parses them.
    """
    total = _to_int(data.get(f"{MEMBER_PREFIX}-TOTAL_FORMS")) or 0
    members = []
    for index in range(total):
        key = f"{MEMBER_PREFIX}-{index}-"
        text = {name: data.get(key + name, "") for name in MEMBER_TEXT_FIELDS}
        members.append(MemberDraft(
            id=_to_int(data.get(key + "id")),
            date_of_birth=data.get(key + "date_of_birth") or None,
            married_to_other_samaj=_to_bool(data.get(key + "married_to_other_samaj")),
            **text,
        ))
    removed = tuple(
        member_id
        for member_id in (_to_int(v) for v in data.get("removed_member_ids", "").split(","))
        if member_id is not None
    )
    return FamilyDraft(
        id=family_id,
        family_code=data.get("family_code", ""),
        address=data.get("address", ""),
        native_place=data.get("native_place", ""),
        native_place_other=data.get("native_place_other", ""),
        gotra=data.get("gotra", ""),
        gotra_other=data.get("gotra_other", ""),
        members=tuple(members),
        removed_member_ids=removed,
    )


# ──────────────────────────────────────────
# TRANSITIONS
# ──────────────────────────────────────────
def _edited(state, draft):
    return replace(state, draft=draft, status=EditorStatus.EDITING, errors={}, failure=None)


def _check_index(state, index):
    if not 0 <= index < len(state.draft.members):
        raise EditorError(f"No member at position {index}")


def update_family_field(state, name, value):
    if name not in FAMILY_FIELDS:
        raise EditorError(f"Unknown family field: {name}")
    return _edited(state, replace(state.draft, **{name: value}))


def generate_family_code(state):
    prefix = get_setting("FAMILY_CODE_PREFIX")
    code = f"{prefix}-{get_random_string(6, allowed_chars=CODE_ALPHABET)}"
    return update_family_field(state, "family_code", code)


def add_member(state):
    members = state.draft.members + (MemberDraft(),)
    return _edited(state, replace(state.draft, members=members))


def remove_member(state, index):
    _check_index(state, index)
    if len(state.draft.members) == 1:
        raise EditorError("A family needs at least one member")

    removed = state.draft.members[index]
    members = state.draft.members[:index] + state.draft.members[index + 1:]
    removed_ids = state.draft.removed_member_ids
    if removed.id is not None:
        removed_ids = removed_ids + (removed.id,)
    return _edited(state, replace(state.draft, members=members, removed_member_ids=removed_ids))


def update_member(state, index, **changes):
    """
    Change fields of one member.

    Making a member Self demotes any other Self member to Other, so the
    single-primary rule already holds before submit.
    """
    _check_index(state, index)
    unknown = set(changes) - MEMBER_FIELDS
    if unknown:
        raise EditorError(f"Unknown member field(s): {', '.join(sorted(unknown))}")

    members = list(state.draft.members)
    members[index] = replace(members[index], **changes)
    if changes.get("relation") == SELF:
        members = [
            replace(member, relation=OTHER)
            if i != index and member.relation == SELF else member
            for i, member in enumerate(members)
        ]
    return _edited(state, replace(state.draft, members=tuple(members)))


# ──────────────────────────────────────────
# SUBMIT
# ──────────────────────────────────────────
def _family_row(cleaned):
    return {
        "family_code": cleaned["family_code"].strip(),
        "address": cleaned["address"].strip(),
        "native_place": resolve_choice(cleaned["native_place"], cleaned["native_place_other"]),
        "gotra": resolve_choice(cleaned["gotra"], cleaned["gotra_other"]),
    }


def _member_row(cleaned_member):
    return {
        "name": cleaned_member["name"].strip(),
        "relation": cleaned_member["relation"],
        "date_of_birth": cleaned_member["date_of_birth"],
        "marital_status": cleaned_member["marital_status"],
        "married_to_other_samaj": bool(cleaned_member["married_to_other_samaj"]),
        "education": cleaned_member["education"].strip(),
        "mobile_number": cleaned_member["mobile_number"],
        "email": cleaned_member["email"],
        "job_role": cleaned_member["job_role"].strip(),
        "job_address": cleaned_member["job_address"].strip(),
    }


def _persist(draft, cleaned, store):
    family_row = _family_row(cleaned)

    if draft.is_new:
        family = store.insert_families([family_row])[0]
        store.insert_members([
            {**_member_row(member), "family_id": family["id"]}
            for member in cleaned["members"]
        ])
        return family["id"]

    # Ownership is checked before anything is written
    known_ids = {row["id"] for row in store.get_members(draft.id)}
    for member in cleaned["members"]:
        if member.get("id") is not None and member["id"] not in known_ids:
            raise RecordNotFound(f"Member {member['id']} does not belong to family {draft.id}")

    store.update_family(draft.id, family_row)
    for member in cleaned["members"]:
        row = _member_row(member)
        if member.get("id") is None:
            store.insert_members([{**row, "family_id": draft.id}])
        else:
            store.update_member(member["id"], row)
    for member_id in draft.removed_member_ids:
        if member_id in known_ids:
            store.delete_member(member_id)
    return draft.id


def submit(state, store, on_done=None):
    """
    Validate and persist the draft.

    Returns the EDITING state with `errors` when validation fails, DONE
    after every write succeeded (then calls `on_done(state)`), or FAILED
    with `failure` set to a FailureKind.
    """
    cleaned, errors = check_family(state.draft.as_dict())
    if errors:
        return replace(state, status=EditorStatus.EDITING, errors=errors, failure=None)

    state = replace(state, status=EditorStatus.SUBMITTING, errors={}, failure=None)
    try:
        family_id = _persist(state.draft, cleaned, store)
    except DuplicateFamilyCode as exc:
        logger.warning(f"Family submit rejected, code already in use: {exc.family_code}")
        return replace(state, status=EditorStatus.FAILED, failure=FailureKind.DUPLICATE_CODE)
    except StoreError:
        logger.exception(f"Family submit failed for code {cleaned['family_code']}")
        return replace(state, status=EditorStatus.FAILED, failure=FailureKind.GENERIC)

    state = replace(
        state,
        draft=replace(state.draft, id=family_id, removed_member_ids=()),
        status=EditorStatus.DONE,
    )
    logger.info(
        f"Family {cleaned['family_code']} saved with {len(cleaned['members'])} member(s)"
    )
    if on_done is not None:
        on_done(state)
    return state
