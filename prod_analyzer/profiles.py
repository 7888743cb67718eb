"""Platforms, scan profiles and platform detection."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import PurePath
from typing import Dict, Iterable, Sequence, Tuple

from .errors import InvalidArgumentError


class Platform(str, Enum):
    """Application platforms that built-in rules can target."""

    SPRING_BOOT = "spring-boot"
    NODEJS = "nodejs"
    DOTNET = "dotnet"
    GENERIC = "generic"


class ScanProfile(str, Enum):
    """Named platform subsets selecting which built-in rules run."""

    SPRING = "spring"
    NODE = "node"
    DOTNET = "dotnet"
    ALL = "all"


@dataclass(frozen=True)
class PlatformMetadata:
    platform: Platform
    display_name: str
    file_patterns: Tuple[str, ...]
    description: str


PLATFORM_METADATA: Sequence[PlatformMetadata] = (
    PlatformMetadata(
        Platform.SPRING_BOOT,
        "Spring Boot",
        (
            "application.properties",
            "application.yml",
            "application.yaml",
            "bootstrap.properties",
            "bootstrap.yml",
            "bootstrap.yaml",
        ),
        "Java/Kotlin Spring Boot applications",
    ),
    PlatformMetadata(
        Platform.NODEJS,
        "Node.js",
        (".env", ".env.local", ".env.production", "config.js", "config.json", "package.json"),
        "Node.js, Express, NestJS applications",
    ),
    PlatformMetadata(
        Platform.DOTNET,
        ".NET",
        (
            "appsettings.json",
            "appsettings.Development.json",
            "appsettings.Production.json",
            "web.config",
            "app.config",
        ),
        ".NET, ASP.NET Core applications",
    ),
    PlatformMetadata(Platform.GENERIC, "Generic", ("*",), "Generic configuration files"),
)

PROFILE_PLATFORMS: Dict[ScanProfile, Tuple[Platform, ...]] = {
    ScanProfile.SPRING: (Platform.SPRING_BOOT,),
    ScanProfile.NODE: (Platform.NODEJS,),
    ScanProfile.DOTNET: (Platform.DOTNET,),
    ScanProfile.ALL: (Platform.SPRING_BOOT, Platform.NODEJS, Platform.DOTNET, Platform.GENERIC),
}

_PROFILE_ALIASES = {
    "spring": ScanProfile.SPRING,
    "node": ScanProfile.NODE,
    "nodejs": ScanProfile.NODE,
    "dotnet": ScanProfile.DOTNET,
    ".net": ScanProfile.DOTNET,
    "all": ScanProfile.ALL,
}


def platforms_for_profile(profile: ScanProfile) -> Tuple[Platform, ...]:
    return PROFILE_PLATFORMS[profile]


def parse_profile(value: str) -> ScanProfile:
    """Parse a profile name, accepting the ``nodejs`` and ``.net`` aliases."""

    profile = _PROFILE_ALIASES.get(str(value).strip().lower())
    if profile is None:
        raise InvalidArgumentError(
            f"Invalid profile: {value}. Valid options: spring, node, dotnet, all"
        )
    return profile


def detect_platform(file_paths: Iterable[str]) -> Platform:
    """Return the most specific platform hinted at by the discovered files.

    Platforms are tried in metadata order (Spring Boot first) so a project
    carrying both ``application.yml`` and ``.env`` reports Spring Boot.
    """

    names = [PurePath(path).name for path in file_paths]
    for metadata in PLATFORM_METADATA:
        if metadata.platform == Platform.GENERIC:
            continue
        for name in names:
            if name and any(pattern in name for pattern in metadata.file_patterns):
                return metadata.platform
    return Platform.GENERIC
