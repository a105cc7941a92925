"""Named capabilities held by a requesting principal."""

from enum import StrEnum


class Capability(StrEnum):
    """Capabilities consulted by the record subsystem.

    Accounts, groups and sessions that grant them live outside this package.
    """

    VIEW_SUPPRESSED = "view_suppressed"
    SUPPRESS_RECORDS = "suppress_records"
    UPDATE_RECORDS = "update_records"
    MANAGE_REPOSITORY = "manage_repository"
