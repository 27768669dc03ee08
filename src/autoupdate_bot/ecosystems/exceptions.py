"""Exceptions for ecosystem installers and updaters."""


class EcosystemError(Exception):
    """Base exception for all ecosystem operations."""


class UnsupportedEcosystemError(EcosystemError):
    """Raised when no installer/updater is registered for an ecosystem."""


class CandidateApplyError(EcosystemError):
    """Raised when an update set cannot be applied to the local tree.

    The candidate itself is at fault: it is classified invalid and the
    loop moves on to the next one.
    """


class CantInstallRequirementsError(CandidateApplyError):
    """Raised when a requirement patch cannot be applied."""


class CantUpdateVersionsError(CandidateApplyError):
    """Raised when a package version pin cannot be rewritten."""
