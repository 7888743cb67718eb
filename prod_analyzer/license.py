"""License tiers and the reporting features they unlock."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict

from .errors import InvalidArgumentError


class LicenseTier(str, Enum):
    FREE = "FREE"
    PRO = "PRO"


@dataclass(frozen=True)
class TierFeatures:
    """Reporting richness per tier. Detection is identical for every tier."""

    ci_mode: bool
    grouped_violations: bool
    verbose_mode: bool


TIER_FEATURES: Dict[LicenseTier, TierFeatures] = {
    LicenseTier.FREE: TierFeatures(ci_mode=False, grouped_violations=False, verbose_mode=False),
    LicenseTier.PRO: TierFeatures(ci_mode=True, grouped_violations=True, verbose_mode=True),
}


def features_for(tier: LicenseTier) -> TierFeatures:
    return TIER_FEATURES[tier]


def parse_license_tier(value: str) -> LicenseTier:
    try:
        return LicenseTier(str(value).strip().upper())
    except ValueError as exc:
        raise InvalidArgumentError(
            f'Invalid license tier: "{value}". Valid values are: FREE, PRO'
        ) from exc
