"""Field rules for the appointment report.

The document reports either a cessation ("5. CESE" carries a date) or an
appointment/replacement. ``select_mode`` picks the branch and
``derive_fields`` applies the per-field rules of that branch to the raw values
read from the document.
"""

from __future__ import annotations

import logging
import re
import unicodedata
from dataclasses import dataclass, fields
from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Mapping

logger = logging.getLogger(__name__)

DATE_PATTERN = re.compile(r"(\d{1,2})[.\-/ ](\d{1,2})[.\-/ ](\d{2,4})")
ISO_DATE_PATTERN = re.compile(r"(\d{4})-(\d{2})-(\d{2})")
HOURS_PATTERN = re.compile(r"\d+(?:[.,]\d+)?")
HOURS_SUFFIX_RE = re.compile(r"\s*(?:hs|hrs?)\.?$", re.IGNORECASE)
ROLE_SEPARATORS_RE = re.compile(r"[\s.\-/]")

PRESENTATION_PREFIX = "PRESENTACION"
PRESENTATION_REASON = "Presentación reemplazado"
ROLE_PENDING_PREFIX = "aun no posee rol, alta tramitada por "
ROLE_MISSING = "No se consigna rol por error de integracion"

REVIEW_STATUS_CODES = {
    "SUPLENTE": "4",
    "INTERINO": "3",
    "TITULAR": "2",
}


class Mode(str, Enum):
    CESSATION = "cese"
    APPOINTMENT = "alta"


@dataclass(frozen=True)
class SourceFields:
    """Raw values as they appear in the document, empty when absent."""

    appointment_file: str = ""
    cessation_file: str = ""
    appointment_date: str = ""
    cessation_date: str = ""
    cessation_reason: str = ""
    role: str = ""
    tax_id: str = ""
    full_name: str = ""
    designation: str = ""
    replaced_name: str = ""
    replaced_tax_id: str = ""
    coverage_reason: str = ""
    post_title: str = ""
    subject: str = ""
    teaching_hours: str = ""
    year_division: str = ""
    shift: str = ""

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any] | None) -> "SourceFields":
        payload = payload or {}
        values = {}
        for field in fields(cls):
            raw = payload.get(SOURCE_FIELD_KEYS[field.name])
            values[field.name] = "" if raw is None else normalize_whitespace(str(raw))
        return cls(**values)


# Wire keys used by the oracle for each source field.
SOURCE_FIELD_KEYS = {
    "appointment_file": "expedienteAlta",
    "cessation_file": "expedienteCese",
    "appointment_date": "fechaAlta",
    "cessation_date": "fechaCese",
    "cessation_reason": "motivoCese",
    "role": "rol",
    "tax_id": "cuil",
    "full_name": "apellidoYNombre",
    "designation": "caracterDesignacion",
    "replaced_name": "reemplazadoNombre",
    "replaced_tax_id": "reemplazadoCuil",
    "coverage_reason": "motivoCobertura",
    "post_title": "cargo",
    "subject": "asignatura",
    "teaching_hours": "horasCatedra",
    "year_division": "anioDivision",
    "shift": "turno",
}


def normalize_whitespace(text: str | None) -> str:
    return re.sub(r"\s+", " ", (text or "").strip())


def fold_text(text: str | None) -> str:
    """Uppercase ``text`` and drop accents, for label comparisons."""
    decomposed = unicodedata.normalize("NFKD", normalize_whitespace(text))
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch)).upper()


def parse_date(text: str | None):
    if not text:
        return None
    iso_match = ISO_DATE_PATTERN.search(text)
    if iso_match:
        year, month, day = map(int, iso_match.groups())
    else:
        match = DATE_PATTERN.search(text)
        if not match:
            return None
        day, month, year = map(int, match.groups())
        if year < 100:
            year = 2000 + year
    try:
        return datetime(year, month, day).date()
    except ValueError:
        return None


def is_valid_date(text: str | None) -> bool:
    return parse_date(text) is not None


def parse_hours(text: str | None) -> Decimal | None:
    cleaned = HOURS_SUFFIX_RE.sub("", normalize_whitespace(text))
    if not HOURS_PATTERN.fullmatch(cleaned):
        return None
    try:
        return Decimal(cleaned.replace(",", "."))
    except InvalidOperation:
        return None


def select_mode(source: SourceFields) -> Mode:
    if is_valid_date(source.cessation_date):
        return Mode.CESSATION
    return Mode.APPOINTMENT


def map_review_status(designation: str | None) -> str:
    """Map the designation character to its status code.

    Unknown values are returned unchanged so nothing read from the document
    is silently lost.
    """
    code = REVIEW_STATUS_CODES.get(fold_text(designation))
    if code is not None:
        return code
    raw = normalize_whitespace(designation)
    if raw and raw not in REVIEW_STATUS_CODES.values():
        logger.warning("Unmapped designation character %r passed through", raw)
    return raw


def normalize_cessation_reason(reason: str | None) -> str | None:
    reason = normalize_whitespace(reason)
    if not reason:
        return None
    if fold_text(reason).startswith(PRESENTATION_PREFIX):
        return PRESENTATION_REASON
    return reason


def _is_numeric_role(role: str) -> bool:
    return ROLE_SEPARATORS_RE.sub("", role).isdigit()


def cessation_role(role: str | None, appointment_file: str | None) -> str:
    role = normalize_whitespace(role)
    if role and _is_numeric_role(role):
        return role
    return ROLE_PENDING_PREFIX + normalize_whitespace(appointment_file)


def appointment_role(role: str | None) -> str:
    return normalize_whitespace(role) or ROLE_MISSING


def combine_replaced_person(name: str | None, tax_id: str | None, reason: str | None) -> str | None:
    parts = [normalize_whitespace(part) for part in (name, tax_id, reason)]
    combined = ", ".join(part for part in parts if part)
    return combined or None


def format_year_division(text: str | None) -> str:
    """Render a "Y / D / C / N" quad as ordinal tokens, e.g. "2 / 1 / /" -> "2° 1°"."""
    tokens: list[str] = []
    for part in (text or "").split("/")[:2]:
        part = normalize_whitespace(part).rstrip("°º").strip()
        if not part:
            break
        tokens.append(f"{part}°")
    return " ".join(tokens)


def compose_position_description(
    post_title: str | None,
    subject: str | None = None,
    teaching_hours: str | None = None,
    year_division: str | None = None,
    shift: str | None = None,
) -> str:
    segments = [normalize_whitespace(post_title), normalize_whitespace(subject)]
    hours = parse_hours(teaching_hours)
    if hours is not None and hours > 0:
        segments.append(f"{HOURS_SUFFIX_RE.sub('', normalize_whitespace(teaching_hours))} hs")
        segments.append(format_year_division(year_division))
    description = ", ".join(segment for segment in segments if segment)
    shift = normalize_whitespace(shift)
    if shift:
        description = f"{description} {shift}" if description else shift
    return description


def _derive_cessation(source: SourceFields) -> dict[str, object]:
    if source.replaced_name or source.replaced_tax_id:
        logger.info("Cessation date present; ignoring replacement data for %s", source.replaced_name or "-")
    return {
        "case_id": source.cessation_file or source.appointment_file,
        "effective_date": source.cessation_date,
        "cessation_reason": normalize_cessation_reason(source.cessation_reason),
        "replaced_person": None,
        "role": cessation_role(source.role, source.appointment_file),
    }


def _derive_appointment(source: SourceFields) -> dict[str, object]:
    return {
        "case_id": source.appointment_file,
        "effective_date": source.appointment_date,
        "cessation_reason": None,
        "replaced_person": combine_replaced_person(
            source.replaced_name, source.replaced_tax_id, source.coverage_reason
        ),
        "role": appointment_role(source.role),
    }


def derive_fields(source: SourceFields, mode: Mode | None = None) -> dict[str, object]:
    """Apply the rules of the selected mode; keys match ``ReportRecord`` fields.

    ``mode`` forces the branch when the cessation date was not read.
    """
    mode = mode or select_mode(source)
    if mode is Mode.CESSATION:
        derived = _derive_cessation(source)
    else:
        derived = _derive_appointment(source)
    derived.update(
        {
            "mode": mode,
            "tax_id": source.tax_id,
            "full_name": source.full_name,
            "review_status": map_review_status(source.designation),
            "position_description": compose_position_description(
                source.post_title,
                source.subject,
                source.teaching_hours,
                source.year_division,
                source.shift,
            ),
        }
    )
    return derived
