from typing import Iterable

from ..enum.rental_enum import EXTERNAL_PLATFORM_ROLES, PlatformRole

# name tokens used by platform rows that predate the role column
LEGACY_NAME_TOKENS = (
    (PlatformRole.airbnb, ("airbnb",)),
    (PlatformRole.booking, ("booking",)),
    (PlatformRole.available, ("libre", "free", "available")),
)


def resolve_platform_role(platform) -> PlatformRole:
    if platform.role:
        return PlatformRole(platform.role)

    name = (platform.name or "").lower()
    for role, tokens in LEGACY_NAME_TOKENS:
        if any(token in name for token in tokens):
            return role
    return PlatformRole.manual


def is_external_platform(platform) -> bool:
    return resolve_platform_role(platform) in EXTERNAL_PLATFORM_ROLES


def platform_ids_by_role(platforms: Iterable) -> dict:
    """First platform row found for each role; later duplicates are ignored."""
    lookup = {}
    for platform in platforms:
        lookup.setdefault(resolve_platform_role(platform), platform.id)
    return lookup
