from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple, Type, Union

import yaml

from .schemas import BuyingInputs, InvalidInputError, RentingInputs

logger = logging.getLogger(__name__)

SCENARIO_ENV_VAR = "RENT_VS_BUY_SCENARIO"
SHARED_FIELDS = ("holding_period_years", "opportunity_cost_rate")


@dataclass
class Scenario:
    """A paired set of buying and renting assumptions."""

    buying: BuyingInputs = field(default_factory=BuyingInputs)
    renting: RentingInputs = field(default_factory=RentingInputs)

    def to_dict(self) -> Dict[str, Any]:
        buying = asdict(self.buying)
        renting = asdict(self.renting)
        shared = {name: buying.pop(name) for name in SHARED_FIELDS}
        for name in SHARED_FIELDS:
            renting.pop(name)
        return {"shared": shared, "buying": buying, "renting": renting}


def synchronize(buying: BuyingInputs, renting: RentingInputs) -> RentingInputs:
    """Copy the shared assumptions from the buying side onto the renting side."""
    updates = {
        name: getattr(buying, name)
        for name in SHARED_FIELDS
        if getattr(buying, name) != getattr(renting, name)
    }
    if not updates:
        return renting
    logger.debug("Synchronizing renting inputs with buying: %s", updates)
    return replace(renting, **updates)


def build_scenario(data: Optional[Mapping[str, Any]] = None) -> Scenario:
    """
    Build a scenario from a ``{"shared", "buying", "renting"}`` mapping.

    Missing sections and fields fall back to the dataclass defaults; unknown
    ones are rejected so typos do not silently keep a default.
    """
    data = data or {}
    if not isinstance(data, Mapping):
        raise InvalidInputError("scenario must be a mapping of sections")
    unknown = set(data) - {"shared", "buying", "renting"}
    if unknown:
        raise InvalidInputError(f"Unknown scenario sections: {', '.join(sorted(unknown))}")

    shared = _section(data, "shared", SHARED_FIELDS)
    buying_values = {**_section(data, "buying", _field_names(BuyingInputs)), **shared}
    renting_values = {**_section(data, "renting", _field_names(RentingInputs)), **shared}

    buying = BuyingInputs(**buying_values)
    renting = synchronize(buying, RentingInputs(**renting_values))
    return Scenario(buying=buying, renting=renting)


def load_scenario(path: Union[str, Path]) -> Scenario:
    with open(path, "r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle)
    logger.debug("Loaded scenario from %s", path)
    return build_scenario(data)


def dump_scenario(scenario: Scenario) -> str:
    return yaml.safe_dump(scenario.to_dict(), sort_keys=False)


def _section(
    data: Mapping[str, Any], name: str, allowed: Iterable[str]
) -> Dict[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, Mapping):
        raise InvalidInputError(f"'{name}' section must be a mapping")
    unknown = set(section) - set(allowed)
    if unknown:
        raise InvalidInputError(f"Unknown {name} fields: {', '.join(sorted(unknown))}")
    return dict(section)


def _field_names(cls: Type[Any]) -> Tuple[str, ...]:
    return tuple(spec.name for spec in fields(cls))
