"""Report record and the wire keys the oracle answers with."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Mapping

from django.conf import settings

from .rules import Mode

# Record attribute -> key in the oracle JSON / session payload.
WIRE_KEYS: dict[str, str] = {
    "case_id": "expediente",
    "establishment": "establecimiento",
    "phone": "telefono",
    "delegation": "delegacion",
    "division": "reparticion",
    "tax_id": "cuil",
    "role": "rol",
    "full_name": "apellidoYNombre",
    "review_status": "situacionDeRevista",
    "effective_date": "fecha",
    "position_description": "cargoACubrir",
    "replaced_person": "reemplazaA",
    "cessation_reason": "motivoDeCese",
}

REQUIRED_FIELDS = (
    "expediente",
    "fecha",
    "cuil",
    "rol",
    "apellidoYNombre",
    "situacionDeRevista",
    "cargoACubrir",
)
OPTIONAL_FIELDS = ("reemplazaA", "motivoDeCese")
SOURCE_KEY = "fuente"
MODE_KEY = "modo"


@dataclass(frozen=True)
class OrganizationConfig:
    establishment: str
    phone: str
    delegation: str
    division: str

    @classmethod
    def from_settings(cls) -> "OrganizationConfig":
        return cls(
            establishment=settings.REPORT_ESTABLISHMENT,
            phone=settings.REPORT_PHONE,
            delegation=settings.REPORT_DELEGATION,
            division=settings.REPORT_DIVISION,
        )


@dataclass(frozen=True)
class ReportRecord:
    case_id: str
    establishment: str
    phone: str
    delegation: str
    division: str
    tax_id: str
    role: str
    full_name: str
    review_status: str
    effective_date: str
    position_description: str
    mode: Mode = Mode.APPOINTMENT
    replaced_person: str | None = None
    cessation_reason: str | None = None

    def __post_init__(self):
        if self.replaced_person and self.cessation_reason:
            raise ValueError("A report carries either a replaced person or a cessation reason, not both.")

    @property
    def is_cessation(self) -> bool:
        return self.mode is Mode.CESSATION

    def to_dict(self) -> dict[str, Any]:
        data = {WIRE_KEYS[name]: value for name, value in asdict(self).items() if name in WIRE_KEYS}
        data[MODE_KEY] = self.mode.value
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ReportRecord":
        values = {name: data.get(key) for name, key in WIRE_KEYS.items()}
        for name in ("replaced_person", "cessation_reason"):
            values[name] = values[name] or None
        for name, value in values.items():
            if value is None and name not in ("replaced_person", "cessation_reason"):
                values[name] = ""
        mode = data.get(MODE_KEY)
        if mode:
            values["mode"] = Mode(mode)
        else:
            values["mode"] = Mode.CESSATION if values["cessation_reason"] else Mode.APPOINTMENT
        return cls(**values)
