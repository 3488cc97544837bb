"""
Units of measure shared by stock keeping, recipes and costing.

Every unit belongs to exactly one family and carries its scale relative to
the family's base unit (gram, millilitre, single count). Quantities only
convert within a family; there is no density model.
"""
from enum import Enum
from typing import Union

from backoffice.core.errors import IncompatibleUnits, ValidationError


class UnitFamily(str, Enum):
    MASS = "mass"
    VOLUME = "volume"
    COUNT = "count"


class Unit(str, Enum):
    G = "g"
    KG = "kg"
    ML = "ml"
    L = "l"
    UNIT = "unit"

    @property
    def family(self) -> UnitFamily:
        return _UNIT_TABLE[self][0]

    @property
    def scale(self) -> float:
        """Size of one of this unit expressed in the family base unit."""
        return _UNIT_TABLE[self][1]


_UNIT_TABLE = {
    Unit.G: (UnitFamily.MASS, 1.0),
    Unit.KG: (UnitFamily.MASS, 1000.0),
    Unit.ML: (UnitFamily.VOLUME, 1.0),
    Unit.L: (UnitFamily.VOLUME, 1000.0),
    Unit.UNIT: (UnitFamily.COUNT, 1.0),
}

UnitLike = Union[Unit, str]


def as_unit(value: UnitLike) -> Unit:
    if isinstance(value, Unit):
        return value
    try:
        return Unit(str(value).strip().lower())
    except ValueError:
        raise ValidationError(f"Unknown unit '{value}'", {"unit": str(value)})


def are_compatible(a: UnitLike, b: UnitLike) -> bool:
    return as_unit(a).family == as_unit(b).family


def convert(quantity: float, from_unit: UnitLike, to_unit: UnitLike) -> float:
    """Convert ``quantity`` between two units of the same family."""
    src, dst = as_unit(from_unit), as_unit(to_unit)
    if src.family != dst.family:
        raise IncompatibleUnits(src.value, dst.value)
    if src is dst:
        return float(quantity)
    return quantity * src.scale / dst.scale
