from .directory import (
    Grant,
    IfrcChallenge,
    Organisation,
    OrganisationDirectoryEntry,
    Project,
    Sdg,
    WatchdogIssue,
)

__all__ = [
    "Project",
    "OrganisationDirectoryEntry",
    "Organisation",
    "Grant",
    "WatchdogIssue",
    "Sdg",
    "IfrcChallenge",
]
