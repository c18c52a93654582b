"""Report assembly: validate the oracle answer and overlay the fixed fields."""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping

from .errors import ReportSchemaError
from .rules import (
    Mode,
    SourceFields,
    derive_fields,
    map_review_status,
    normalize_cessation_reason,
    normalize_whitespace,
)
from .schema import OPTIONAL_FIELDS, REQUIRED_FIELDS, SOURCE_KEY, WIRE_KEYS, OrganizationConfig, ReportRecord

logger = logging.getLogger(__name__)


def _load_payload(payload: str | bytes | Mapping[str, Any]) -> Mapping[str, Any]:
    if isinstance(payload, Mapping):
        data = payload
    else:
        try:
            data = json.loads(payload)
        except (TypeError, ValueError) as exc:
            raise ReportSchemaError(f"Oracle response is not valid JSON: {exc}") from exc
    if not isinstance(data, Mapping):
        raise ReportSchemaError("Oracle response is not a JSON object.")
    return data


def validate_payload(data: Mapping[str, Any]) -> None:
    missing = [key for key in REQUIRED_FIELDS if data.get(key) is None]
    if missing:
        raise ReportSchemaError("Missing required fields: " + ", ".join(missing))
    not_strings = [
        key for key in (*REQUIRED_FIELDS, *OPTIONAL_FIELDS) if data.get(key) is not None and not isinstance(data[key], str)
    ]
    if not_strings:
        raise ReportSchemaError("Fields must be strings: " + ", ".join(not_strings))
    source = data.get(SOURCE_KEY)
    if source is not None and not isinstance(source, Mapping):
        raise ReportSchemaError(f"'{SOURCE_KEY}' must be an object.")


def _oracle_fields(data: Mapping[str, Any]) -> dict[str, object]:
    values = {name: normalize_whitespace(data.get(key)) for name, key in WIRE_KEYS.items()}
    cessation_reason = normalize_cessation_reason(values["cessation_reason"])
    mode = Mode.CESSATION if cessation_reason else Mode.APPOINTMENT
    return {
        "case_id": values["case_id"],
        "tax_id": values["tax_id"],
        "role": values["role"],
        "full_name": values["full_name"],
        "review_status": map_review_status(values["review_status"]),
        "effective_date": values["effective_date"],
        "position_description": values["position_description"],
        "mode": mode,
        "cessation_reason": cessation_reason,
        "replaced_person": None if mode is Mode.CESSATION else (values["replaced_person"] or None),
    }


# Source keys each derived field is computed from. A field is only recomputed
# when at least one of its inputs was actually read into ``fuente``.
RULE_INPUTS: dict[str, tuple[str, ...]] = {
    "case_id": ("expedienteAlta", "expedienteCese"),
    "tax_id": ("cuil",),
    "full_name": ("apellidoYNombre",),
    "review_status": ("caracterDesignacion",),
    "position_description": ("cargo", "asignatura", "turno"),
    "replaced_person": ("reemplazadoNombre", "reemplazadoCuil", "motivoCobertura"),
    "cessation_reason": ("motivoCese",),
}
MODE_INPUTS: dict[Mode, dict[str, tuple[str, ...]]] = {
    Mode.CESSATION: {"effective_date": ("fechaCese",), "role": ("rol", "expedienteAlta")},
    Mode.APPOINTMENT: {"effective_date": ("fechaAlta",), "role": ("rol",)},
}
CESSATION_DATE_KEY = "fechaCese"


def _has_input(source_payload: Mapping[str, Any], keys: tuple[str, ...]) -> bool:
    return any(
        normalize_whitespace(str(source_payload[key])) for key in keys if source_payload.get(key) is not None
    )


def _apply_source_rules(fields: dict[str, object], source_payload: Mapping[str, Any]) -> dict[str, object]:
    # Without a cessation date in the source the oracle's mode stands.
    forced_mode = None if _has_input(source_payload, (CESSATION_DATE_KEY,)) else fields["mode"]
    derived = derive_fields(SourceFields.from_payload(source_payload), mode=forced_mode)
    mode = derived.pop("mode")
    inputs = {**RULE_INPUTS, **MODE_INPUTS[mode]}

    if mode is not fields["mode"]:
        logger.debug("Source cessation date switches mode %s -> %s", fields["mode"].value, mode.value)
        if not _has_input(source_payload, inputs["effective_date"]):
            logger.warning("Mode switched to %s without a source date; keeping oracle date", mode.value)

    for name, value in derived.items():
        if not value or not _has_input(source_payload, inputs[name]):
            continue
        if fields.get(name) != value:
            logger.debug("Rule value for %s overrides oracle value %r -> %r", name, fields.get(name), value)
        fields[name] = value

    fields["mode"] = mode
    if mode is Mode.CESSATION:
        fields["replaced_person"] = None
    else:
        fields["cessation_reason"] = None
    return fields


def assemble_report(payload: str | bytes | Mapping[str, Any], organization: OrganizationConfig) -> ReportRecord:
    data = _load_payload(payload)
    validate_payload(data)

    fields = _oracle_fields(data)
    source = data.get(SOURCE_KEY)
    if source:
        fields = _apply_source_rules(fields, source)

    return ReportRecord(
        establishment=organization.establishment,
        phone=organization.phone,
        delegation=organization.delegation,
        division=organization.division,
        **fields,
    )
