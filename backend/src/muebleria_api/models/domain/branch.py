"""Branch domain model."""

from enum import StrEnum


class BranchStatus(StrEnum):
    """Status filter used when listing branches.

    ``DELETED`` and ``ALL`` include logically deleted branches and are
    reserved to the top role.
    """

    ACTIVE = "ACTIVE"
    DELETED = "DELETED"
    ALL = "ALL"
