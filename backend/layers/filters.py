from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from layers.errors import UnknownFilterFieldError
from layers.types import PointFeature

FILTER_FIELDS: tuple[str, ...] = (
    "Municipio",
    "Comunidad",
    "Beneficiar",
)
DEFAULT_FILTER_FIELD = "Beneficiar"

_ALIASES: dict[str, str] = {
    "municipio": "Municipio",
    "comunidad": "Comunidad",
    "beneficiar": "Beneficiar",
    "beneficiario": "Beneficiar",
}


@dataclass(frozen=True)
class FilterState:
    field: str = DEFAULT_FILTER_FIELD
    query: str = ""

    @property
    def is_active(self) -> bool:
        return bool(self.query)


def normalize_filter_field(
    raw: str | None, supported: Iterable[str] = FILTER_FIELDS
) -> str:
    """
    Map user input onto a canonical attribute key.

    Lookup is case-insensitive; anything outside `supported` is rejected.
    """
    allowed = tuple(supported)
    key = str(raw or "").strip()
    if key in allowed:
        return key
    lowered = key.lower()
    for name in allowed:
        if name.lower() == lowered:
            return name
    alias = _ALIASES.get(lowered)
    if alias is not None and alias in allowed:
        return alias
    raise UnknownFilterFieldError(key, allowed)


def matches(props: dict[str, Any] | None, state: FilterState) -> bool:
    if not state.query:
        return True
    val = (props or {}).get(state.field)
    if val is None:
        return False
    return state.query.lower() in str(val).lower()


def apply_filter(
    features: Iterable[PointFeature], state: FilterState
) -> tuple[PointFeature, ...]:
    if not state.query:
        return tuple(features)
    return tuple(f for f in features if matches(f.props, state))
