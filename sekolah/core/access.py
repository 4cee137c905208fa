from typing import Iterable, Optional, Union

from sekolah.core.constants import ALL_LOKASI, Lokasi, UserRole
from sekolah.core.errors import AccessDenied

ROLE_LOCATIONS: dict[UserRole, frozenset[Lokasi]] = {
    UserRole.ADMIN: frozenset(ALL_LOKASI),
    UserRole.OPERATOR_PAUD: frozenset({Lokasi.PAUD}),
    UserRole.OPERATOR_TK: frozenset({Lokasi.TK}),
    UserRole.OPERATOR_SD: frozenset({Lokasi.SD}),
    UserRole.OPERATOR_SMP: frozenset({Lokasi.SMP}),
}

_unmapped = set(UserRole) - set(ROLE_LOCATIONS)
if _unmapped:
    raise RuntimeError(f"Roles without a location mapping: {sorted(r.value for r in _unmapped)}")


def parse_role(role: Union[str, UserRole, None]) -> Optional[UserRole]:
    if isinstance(role, UserRole):
        return role
    if role is None:
        return None
    try:
        return UserRole(str(role).strip())
    except ValueError:
        return None


def locations_for_role(role: Union[str, UserRole, None]) -> frozenset[Lokasi]:
    """Locations a role may see and write; empty for unknown roles."""
    parsed = parse_role(role)
    if parsed is None:
        return frozenset()
    return ROLE_LOCATIONS[parsed]


def require_locations(role: Union[str, UserRole, None]) -> frozenset[Lokasi]:
    locations = locations_for_role(role)
    if not locations:
        raise AccessDenied("Invalid role")
    return locations


def location_values(locations: Iterable[Lokasi]) -> list[str]:
    return sorted(Lokasi(value).value for value in locations)


def ensure_location_allowed(lokasi: Union[str, Lokasi], locations: frozenset[Lokasi]) -> None:
    try:
        parsed = Lokasi(lokasi)
    except ValueError as exc:
        raise AccessDenied() from exc
    if parsed not in locations:
        raise AccessDenied()


__all__ = [
    "ROLE_LOCATIONS",
    "ensure_location_allowed",
    "location_values",
    "locations_for_role",
    "parse_role",
    "require_locations",
]
