from django.conf import settings

DEFAULTS = {
    "NATIVE_PLACES": [],
    "GOTRAS": [],
    "FAMILY_CODE_PREFIX": "FAM",
    "EXPORT_FILENAME": "family_directory.xlsx",
    "EXPORT_SHEET_TITLE": "Family Directory",
}


def get_setting(name):
    """Read one key of settings.FAMILY_DIRECTORY, falling back to DEFAULTS."""
    overrides = getattr(settings, "FAMILY_DIRECTORY", {})
    if name in overrides:
        return overrides[name]
    return DEFAULTS[name]
