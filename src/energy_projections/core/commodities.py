"""Static commodity table: display names, units, and projection constants."""

from __future__ import annotations

from energy_projections.core.exceptions import InvalidCommodityError
from energy_projections.core.models import CommodityConfig, CommodityKey

COMMODITIES: dict[CommodityKey, CommodityConfig] = {
    CommodityKey.OIL: CommodityConfig(
        key=CommodityKey.OIL,
        name="Oil",
        full_name="Crude Oil (WTI)",
        unit="barrel",
        elasticity=0.4,
        us_unit="/barrel",
        world_unit="/barrel",
        supply_constraint_factor=1.2,  # OPEC+ cuts
    ),
    CommodityKey.NATURAL_GAS: CommodityConfig(
        key=CommodityKey.NATURAL_GAS,
        name="Natural Gas",
        full_name="Natural Gas (Henry Hub)",
        unit="MMBtu",
        elasticity=0.25,
        us_unit="/MMBtu",
        world_unit="/MMBtu",
        supply_constraint_factor=1.1,  # LNG export capacity
    ),
    CommodityKey.NUCLEAR: CommodityConfig(
        key=CommodityKey.NUCLEAR,
        name="Nuclear",
        full_name="Nuclear Energy (Uranium)",
        unit="lb",
        elasticity=0.15,
        us_unit="/MWh",
        world_unit="/MWh",
        supply_constraint_factor=0.8,  # long-term contracts
    ),
    CommodityKey.SOLAR: CommodityConfig(
        key=CommodityKey.SOLAR,
        name="Solar",
        full_name="Solar PV",
        unit="MWh",
        elasticity=0.1,
        us_unit="/MWh",
        world_unit="/MWh",
        supply_constraint_factor=0.6,  # rapidly expanding supply
    ),
    CommodityKey.RENEWABLES: CommodityConfig(
        key=CommodityKey.RENEWABLES,
        name="Other Renewables",
        full_name="Wind & Other Renewables",
        unit="MWh",
        elasticity=0.12,
        us_unit="/MWh",
        world_unit="/MWh",
        supply_constraint_factor=0.7,
    ),
    CommodityKey.COAL: CommodityConfig(
        key=CommodityKey.COAL,
        name="Coal",
        full_name="Thermal Coal",
        unit="ton",
        elasticity=0.35,
        us_unit="/short ton",
        world_unit="/metric ton",
        supply_constraint_factor=1.0,
    ),
}


def valid_keys() -> list[str]:
    return [k.value for k in CommodityKey]


def parse_commodity(raw: str | CommodityKey) -> CommodityKey:
    """Resolve a user-supplied key, rejecting anything unsupported."""
    if isinstance(raw, CommodityKey):
        return raw
    normalized = str(raw).strip().lower()
    try:
        return CommodityKey(normalized)
    except ValueError:
        raise InvalidCommodityError(
            f"Unknown commodity {raw!r}. Valid keys: {', '.join(valid_keys())}",
            context={"commodity": raw, "valid_keys": valid_keys()},
        ) from None


def get_commodity(raw: str | CommodityKey) -> CommodityConfig:
    return COMMODITIES[parse_commodity(raw)]
