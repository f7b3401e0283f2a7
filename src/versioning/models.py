"""Data models for version descriptors and install directives."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from constants import QualityOption


class DirectiveKind(Enum):
    """How the install script is told which SDK to fetch."""
    NONE = "none"
    VERSION = "version"
    CHANNEL = "channel"


@dataclass(frozen=True)
class VersionDescriptor:
    """One requested SDK installation."""
    version: str
    architecture: Optional[str] = None
    quality: Optional[QualityOption] = None


@dataclass(frozen=True)
class ResolvedDirective:
    """Resolver output consumed by the install script builder."""
    kind: DirectiveKind
    value: str
    quality_allowed: bool = False


@dataclass(frozen=True)
class InstallResult:
    """Captured result of one install script invocation."""
    exit_code: int
    stdout: str
    stderr: str


@dataclass(frozen=True)
class InstallOutcome:
    """Per-descriptor result reported back to the caller."""
    descriptor: VersionDescriptor
    architecture: str
    installed_version: Optional[str]


NO_DIRECTIVE = ResolvedDirective(kind=DirectiveKind.NONE, value="")
