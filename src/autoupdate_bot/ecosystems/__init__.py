"""Per-ecosystem installers and updaters, selected by identifier."""

from autoupdate_bot.ecosystems.base import Ecosystem
from autoupdate_bot.ecosystems.exceptions import (
    CandidateApplyError,
    CantInstallRequirementsError,
    CantUpdateVersionsError,
    EcosystemError,
    UnsupportedEcosystemError,
)
from autoupdate_bot.ecosystems.npm import NpmEcosystem
from autoupdate_bot.ecosystems.pypi import PypiEcosystem
from autoupdate_bot.ecosystems.registry import EcosystemRegistry, default_registry

__all__ = [
    "CandidateApplyError",
    "CantInstallRequirementsError",
    "CantUpdateVersionsError",
    "Ecosystem",
    "EcosystemError",
    "EcosystemRegistry",
    "NpmEcosystem",
    "PypiEcosystem",
    "UnsupportedEcosystemError",
    "default_registry",
]
