from __future__ import annotations

"""
Per-vertical configuration.

The desk-setup ("desktour") and camera verticals share the ranking and
scoring logic but differ in price brackets, category pairings and which
extension fields (subcategory, lens/body tags) exist.  Configs are frozen
and handed to the scorer explicitly.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import List, Mapping, Tuple

from .constants import (
    CAMERA_COMPATIBLE_CATEGORIES,
    CAMERA_PRICE_RANGE_ORDER,
    DESKTOUR_COMPATIBLE_CATEGORIES,
    DESKTOUR_PRICE_RANGE_ORDER,
)


class UnknownDomainError(ValueError):
    """Raised when a domain id has no registered configuration."""


@dataclass(frozen=True)
class DomainConfig:
    id: str
    price_range_order: Tuple[str, ...]
    compatible_categories: Mapping[str, Tuple[str, ...]] = field(default_factory=dict)
    has_subcategory: bool = False
    has_lens_tags: bool = False
    has_body_tags: bool = False
    base_path: str = ""

    def get_compatible_categories(self, category: str) -> List[str]:
        return list(self.compatible_categories.get(category, ()))


def _freeze(table: Mapping[str, List[str]]) -> Mapping[str, Tuple[str, ...]]:
    return MappingProxyType({k: tuple(v) for k, v in table.items()})


DESKTOUR = DomainConfig(
    id="desktour",
    price_range_order=DESKTOUR_PRICE_RANGE_ORDER,
    compatible_categories=_freeze(DESKTOUR_COMPATIBLE_CATEGORIES),
    base_path="/desktour",
)

CAMERA = DomainConfig(
    id="camera",
    price_range_order=CAMERA_PRICE_RANGE_ORDER,
    compatible_categories=_freeze(CAMERA_COMPATIBLE_CATEGORIES),
    has_subcategory=True,
    has_lens_tags=True,
    has_body_tags=True,
    base_path="/camera",
)

_DOMAIN_CONFIGS: Mapping[str, DomainConfig] = MappingProxyType({
    DESKTOUR.id: DESKTOUR,
    CAMERA.id: CAMERA,
})


def get_domain_config(domain: str) -> DomainConfig:
    config = _DOMAIN_CONFIGS.get(domain)
    if config is None:
        raise UnknownDomainError(f"Unknown domain: {domain}")
    return config


def get_all_domains() -> List[str]:
    return list(_DOMAIN_CONFIGS.keys())
