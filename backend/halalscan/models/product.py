"""
Catalog product record. Immutable once loaded; identity is the barcode.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class ComplianceStatus(str, Enum):
    HALAL = "halal"
    HARAM = "haram"
    DOUBTFUL = "doubtful"


@dataclass(frozen=True)
class Product:
    barcode: str
    name: str
    manufacturer: str = ""
    ingredients: tuple[str, ...] = field(default_factory=tuple)
    halal_status: ComplianceStatus = ComplianceStatus.DOUBTFUL
    haram_ingredients: tuple[str, ...] = field(default_factory=tuple)
    boycott: bool = False
    boycott_reason: Optional[str] = None
    name_en: Optional[str] = None

    @property
    def has_ingredients(self) -> bool:
        return bool(self.ingredients)

    def to_dict(self) -> dict[str, Any]:
        return {
            "barcode": self.barcode,
            "name": self.name,
            "nameEn": self.name_en,
            "manufacturer": self.manufacturer,
            "ingredients": list(self.ingredients),
            "halalStatus": self.halal_status.value,
            "haramIngredients": list(self.haram_ingredients),
            "boycott": self.boycott,
            "boycottReason": self.boycott_reason,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "Product":
        """
        Accepts the catalog record shape. Both `boycott` and the older
        `boycottStatus` spelling are understood. Raises KeyError/ValueError
        on records without a barcode or with an unknown status.
        """
        barcode = str(d["barcode"] or "").strip()
        if not barcode:
            raise ValueError("empty barcode")
        status = d.get("halalStatus") or d.get("status") or ComplianceStatus.DOUBTFUL
        if isinstance(status, str):
            status = ComplianceStatus(status.lower())
        elif not isinstance(status, ComplianceStatus):
            raise ValueError(f"invalid halalStatus: {status!r}")
        boycott = d.get("boycott", d.get("boycottStatus", False))
        reason = d.get("boycottReason") or None
        return cls(
            barcode=barcode,
            name=(d.get("name") or "").strip(),
            manufacturer=(d.get("manufacturer") or "").strip(),
            ingredients=tuple(str(i) for i in (d.get("ingredients") or [])),
            halal_status=status,
            haram_ingredients=tuple(str(i) for i in (d.get("haramIngredients") or [])),
            boycott=bool(boycott),
            boycott_reason=reason,
            name_en=d.get("nameEn") or None,
        )
