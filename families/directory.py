"""
families/directory.py

Loading, searching and describing the family directory.

The whole dataset is read (families, then members) and joined in memory,
then filtered there. The web views are stateless, so each directory
request loads a fresh browser; a DirectoryBrowser kept across searches
never goes back to the store.
"""
from collections import defaultdict

from .models import FamilyMember

PRIMARY_RELATION = FamilyMember.Relation.SELF.value

FAMILY_SEARCH_FIELDS = ("family_code", "address", "native_place", "gotra")
MEMBER_SEARCH_FIELDS = ("name", "relation", "email", "job_role")


def load_directory(store):
    """
    Every family row with its member rows under "members".

    Families keep the store's order, members keep theirs within a family.
    Raises StoreError when either read fails.
    """
    families = store.list_families()
    members = store.list_members()

    members_by_family = defaultdict(list)
    for member in members:
        members_by_family[member["family_id"]].append(member)

    return [
        {**family, "members": members_by_family.get(family["id"], [])}
        for family in families
    ]


def _contains(value, needle):
    return bool(value) and needle in str(value).lower()


def family_matches(family, query):
    needle = query.lower()
    if any(_contains(family.get(key), needle) for key in FAMILY_SEARCH_FIELDS):
        return True
    return any(
        _contains(member.get(key), needle)
        for member in family.get("members", [])
        for key in MEMBER_SEARCH_FIELDS
    )


def filter_families(families, query):
    """Case-insensitive substring search; an empty query keeps everything."""
    if not query:
        return list(families)
    return [family for family in families if family_matches(family, query)]


def primary_member(family):
    for member in family.get("members", []):
        if member.get("relation") == PRIMARY_RELATION:
            return member
    return None


def summarize(family):
    """One row of the directory table."""
    primary = primary_member(family)
    return {
        "id": family["id"],
        "family_code": family["family_code"],
        "primary_name": primary["name"] if primary else "N/A",
        "member_count": len(family.get("members", [])),
    }


def describe_family(family):
    """Primary member as the tree root, the rest listed with their relation."""
    members = family.get("members", [])
    return {
        "family": family,
        "primary": primary_member(family),
        "others": [m for m in members if m.get("relation") != PRIMARY_RELATION],
        "members": members,
    }


class DirectoryBrowser:
    """
    Holds the loaded directory and the currently visible subset.

    `all_families` is never changed by a search, so clearing the query
    brings back the full list without reloading.
    """

    def __init__(self, families):
        self.all_families = list(families)
        self.families     = list(self.all_families)
        self.query        = ""

    @classmethod
    def load(cls, store):
        return cls(load_directory(store))

    def search(self, query):
        self.query    = query or ""
        self.families = filter_families(self.all_families, self.query)
        return self.families

    @property
    def rows(self):
        return [summarize(family) for family in self.families]

    def find(self, family_id):
        for family in self.all_families:
            if family["id"] == family_id:
                return family
        return None
