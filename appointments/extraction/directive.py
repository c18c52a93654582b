"""Extraction directive: response schema and decision rules sent to the oracle."""

from __future__ import annotations

from dataclasses import dataclass

from .rules import PRESENTATION_REASON, ROLE_MISSING, ROLE_PENDING_PREFIX, SOURCE_FIELD_KEYS
from .schema import REQUIRED_FIELDS, SOURCE_KEY


def _string(description: str) -> dict:
    return {"type": "STRING", "description": description}


SOURCE_DESCRIPTIONS = {
    "expedienteAlta": "File number of section '4. TOMA DE POSESIÓN' (Expediente de Alta), verbatim.",
    "expedienteCese": "File number associated with section '5. CESE' (Expediente de Cese), verbatim. Empty if none.",
    "fechaAlta": "'FECHA' of section '4. TOMA DE POSESIÓN', verbatim.",
    "fechaCese": "'FECHA DE CESE' of section '5. CESE', verbatim. Empty if the field is blank.",
    "motivoCese": "'MOTIVO DE CESE' of section '5. CESE', verbatim.",
    "rol": "Value next to 'Rol:' for the proposed teacher, verbatim. Empty if missing.",
    "cuil": "CUIL of the proposed teacher ('DOCENTE PROPUESTO').",
    "apellidoYNombre": "Full name of the proposed teacher ('DOCENTE PROPUESTO').",
    "caracterDesignacion": "'CARÁCTER DE LA DESIGNACIÓN' of the proposed teacher, verbatim.",
    "reemplazadoNombre": "Name of the replaced teacher ('DOCENTE INTERINO' / 'DOCENTE TITULAR').",
    "reemplazadoCuil": "CUIL of the replaced teacher.",
    "motivoCobertura": "'MOTIVO DE LA COBERTURA', verbatim.",
    "cargo": "'CARGO A CUBRIR', verbatim.",
    "asignatura": "'ASIGNATURA', verbatim. Empty if none.",
    "horasCatedra": "'HORAS CÁTEDRA A CUBRIR', verbatim (e.g. '2.00').",
    "anioDivision": "'AÑO / DIV / COM / NIV', verbatim (e.g. '2 / 1 / /').",
    "turno": "'Turno', verbatim (e.g. 'Turno Tarde').",
}

REPORT_SCHEMA: dict = {
    "type": "OBJECT",
    "properties": {
        "expediente": _string("The full 'Número de Expediente'. Its source depends on the logic path."),
        "fecha": _string(
            "The relevant date. If 'FECHA DE CESE' in section '5. CESE' has a date, use it. "
            "Otherwise, use the 'FECHA' from section '4. TOMA DE POSESIÓN'."
        ),
        "motivoDeCese": _string(
            "The reason for cessation, from 'MOTIVO DE CESE' in section '5. CESE'. "
            "Only populated if 'FECHA DE CESE' has a date."
        ),
        "reemplazaA": _string(
            "The person being replaced. Only populated if 'FECHA DE CESE' is empty. "
            "Combine name, CUIL, and reason from 'DOCENTE INTERINO'/'TITULAR'."
        ),
        "cuil": _string("The CUIL of the proposed teacher ('DOCENTE PROPUESTO')."),
        "rol": _string("The role of the proposed teacher. Its value depends on the logic path."),
        "apellidoYNombre": _string("Full name of the proposed teacher ('DOCENTE PROPUESTO')."),
        "situacionDeRevista": _string(
            "Based on 'CARÁCTER DE LA DESIGNACIÓN'. Map 'SUPLENTE' to '4', 'INTERINO' to '3', and 'TITULAR' to '2'."
        ),
        "cargoACubrir": _string(
            "Job description combining 'CARGO A CUBRIR', 'ASIGNATURA', 'HORAS CÁTEDRA A CUBRIR', "
            "'AÑO / DIV / COM / NIV' and 'Turno', e.g. "
            "'PROFESOR DE EDUCACIÓN MEDIA, EDUCACIÓN TECNOLÓGICA, 2.00 hs, 2° 1° Turno Tarde'."
        ),
        SOURCE_KEY: {
            "type": "OBJECT",
            "description": "The raw document values the report fields are derived from.",
            "properties": {key: _string(SOURCE_DESCRIPTIONS[key]) for key in SOURCE_FIELD_KEYS.values()},
        },
    },
    "required": list(REQUIRED_FIELDS),
}

INSTRUCTIONS = f"""
Analyze the following OCR text from a two-page document about a teacher appointment in Argentina.
Extract ONLY the information required by the provided schema and return it as a JSON object.

**Definitions:**
*   **Expediente de Alta**: the file number located in section '4. TOMA DE POSESIÓN'.
*   **Expediente de Cese**: a file number that appears under or next to section '5. CESE'.

**Primary logic path:**
1.  **Check for cessation**: look at section '5. CESE'. If 'FECHA DE CESE' holds a valid date, you are reporting a cessation.
2.  **Cessation**:
    *   expediente: the Expediente de Cese if present, otherwise the Expediente de Alta.
    *   fecha: the date from 'FECHA DE CESE'.
    *   motivoDeCese: the text of 'MOTIVO DE CESE'. If it starts with 'presentacion' (case-insensitive), the value MUST be '{PRESENTATION_REASON}'.
    *   rol: the 'Rol:' value. If it is not a number (empty or missing), the value MUST be "{ROLE_PENDING_PREFIX}[Expediente de Alta]".
    *   reemplazaA: null or omitted.
3.  **Appointment** ('FECHA DE CESE' is empty):
    *   expediente: the Expediente de Alta.
    *   fecha: the 'FECHA' of section '4. TOMA DE POSESIÓN'.
    *   reemplazaA: the replaced teacher ('DOCENTE INTERINO' or 'DOCENTE TITULAR'): name, CUIL and 'MOTIVO DE LA COBERTURA' in one string.
    *   motivoDeCese: null or omitted.
    *   rol: the 'Rol:' value. If it is missing or empty, the exact string '{ROLE_MISSING}'.

**Rules for both cases:**
*   situacionDeRevista: map 'CARÁCTER DE LA DESIGNACIÓN' of the proposed teacher: 'SUPLENTE' -> '4', 'INTERINO' -> '3', 'TITULAR' -> '2'.
*   cargoACubrir: one clean, comma-separated string without field labels:
    a. Start with 'CARGO A CUBRIR'.
    b. If 'ASIGNATURA' has a value, append it.
    c. Only if 'HORAS CÁTEDRA A CUBRIR' is a number greater than 0: append the value followed by ' hs' ('2.00' -> '2.00 hs'),
       then append 'AÑO / DIV / COM / NIV' formatted with the degree symbol ('2 / 1 / /' -> '2° 1°').
    d. Append the 'Turno' value at the very end, separated by a space.
    Example with hours: 'PROFESOR DE EDUCACIÓN MEDIA, EDUCACIÓN TECNOLÓGICA, 2.00 hs, 2° 1° Turno Tarde'.
    Example without hours: 'MAESTRO DE MATERIAS ESPECIALES TECNOLOGÍAS, DISEÑO Y PROGRAMACIÓN (EDUCACIÓN SUPERIOR) Turno TARDE'.
*   {SOURCE_KEY}: copy every raw value listed in its schema verbatim, leaving a field empty when the document has no value for it.
""".strip()


@dataclass(frozen=True)
class ExtractionDirective:
    text: str
    schema: dict
    instructions: str

    @property
    def prompt(self) -> str:
        return compose_prompt(self.instructions, self.text)


def compose_prompt(instructions: str, text: str) -> str:
    return f"{instructions}\n\nHere is the document text:\n---\n{text}\n---"


def build_directive(text: str) -> ExtractionDirective:
    return ExtractionDirective(text=text, schema=REPORT_SCHEMA, instructions=INSTRUCTIONS)
