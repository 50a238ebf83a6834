"""Field validation for contract variables.

The kind of a field is inferred from its variable name (``nombre``, ``rut``,
``email``/``correo``, ``telefono``/``celular``). Validators return a message
in Spanish, or None when the value is acceptable. Empty values are accepted
except for phone numbers; completeness is checked separately.
"""

import re
from collections.abc import Iterable, Mapping

RUT_FORMAT = re.compile(r"^\d{7,8}-[\dkK]$")
EMAIL_FORMAT = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_FORMAT = re.compile(r"^(\+?56)?9\d{8}$")

RUT_FORMAT_MESSAGE = "Debe ser formato XXXXXXXX-X (sin puntos, con guion)"


# =============================================================================
# Field kind detection
# =============================================================================


def is_name_field(variable: str) -> bool:
    return "nombre" in variable.lower()


def is_rut_field(variable: str) -> bool:
    return "rut" in variable.lower()


def is_email_field(variable: str) -> bool:
    lowered = variable.lower()
    return "email" in lowered or "correo" in lowered or "mail" in lowered


def is_phone_field(variable: str) -> bool:
    lowered = variable.lower()
    return any(word in lowered for word in ("telefono", "teléfono", "celular", "phone"))


# =============================================================================
# RUT (Chilean national id)
# =============================================================================


def format_rut(value: str) -> str:
    """Format a RUT as the user types, e.g. ``12.345.678-5``."""
    rut = re.sub(r"[^0-9kK]", "", value).upper()
    if len(rut) > 1:
        body, check_digit = rut[:-1], rut[-1]
        body = re.sub(r"\B(?=(\d{3})+(?!\d))", ".", body)
        rut = f"{body}-{check_digit}"
    return rut


def is_valid_rut(rut: str) -> bool:
    """Check the modulo-11 verification digit."""
    if not rut or len(rut) < 3:
        return False
    clean = re.sub(r"[.-]", "", rut).upper()
    body, check_digit = clean[:-1], clean[-1]
    if not body.isdigit():
        return False

    total = 0
    multiplier = 2
    for digit in reversed(body):
        total += int(digit) * multiplier
        multiplier = 2 if multiplier == 7 else multiplier + 1

    expected = 11 - (total % 11)
    expected_char = "0" if expected == 11 else "K" if expected == 10 else str(expected)
    return check_digit == expected_char


def validate_rut_format(value: str) -> str | None:
    if not value or not value.strip():
        return None
    if not RUT_FORMAT.match(value.strip()):
        return RUT_FORMAT_MESSAGE
    return None


def validate_rut(value: str) -> str | None:
    """Format check followed by the verification digit check."""
    if not value or not value.strip():
        return None
    if not RUT_FORMAT.match(value.replace(".", "").strip()):
        return RUT_FORMAT_MESSAGE
    if not is_valid_rut(value.strip()):
        return "El RUT ingresado no es válido"
    return None


# =============================================================================
# Email, phone and name
# =============================================================================


def is_valid_email(email: str) -> bool:
    return bool(email and email.strip() and EMAIL_FORMAT.match(email.strip()))


def validate_email(value: str) -> str | None:
    if not value or not value.strip():
        return None
    if not is_valid_email(value):
        return "Debe ser un email válido (ejemplo@dominio.com)"
    return None


def is_valid_phone(phone: str) -> bool:
    if not phone or not phone.strip():
        return False
    return bool(PHONE_FORMAT.match(re.sub(r"\s", "", phone)))


def validate_phone(value: str) -> str | None:
    if not value or not value.strip():
        return "Teléfono es requerido"
    if not is_valid_phone(value):
        return "Formato: +56912345678 o 912345678"
    return None


def format_phone(value: str) -> str:
    """Keep digits and ``+``, capping the subscriber number at nine digits."""
    phone = re.sub(r"[^\d+]", "", value)
    if phone.startswith("+56"):
        phone = "+56" + phone[3:][:9]
    elif phone.startswith("56"):
        phone = "56" + phone[2:][:9]
    elif phone.startswith("9"):
        phone = phone[:9]
    return phone


def validate_name(value: str) -> str | None:
    if not value or not value.strip():
        return None
    if len(value.strip()) < 2:
        return "El nombre debe tener al menos 2 caracteres"
    return None


# =============================================================================
# Aggregation
# =============================================================================


def field_validation_error(variable: str, value: str, check_rut_digit: bool = False) -> str | None:
    """Validation message for ``value`` based on the kind of ``variable``.

    RUT fields are checked for format only unless ``check_rut_digit`` is set.
    """
    if is_name_field(variable):
        return validate_name(value)
    if is_rut_field(variable):
        return validate_rut(value) if check_rut_digit else validate_rut_format(value)
    if is_email_field(variable):
        return validate_email(value)
    if is_phone_field(variable):
        return validate_phone(value)
    return None


def validation_errors(
    variables: Iterable[str],
    form_data: Mapping[str, str],
    check_rut_digit: bool = False,
) -> dict[str, str]:
    """Map each invalid variable to its message."""
    errors: dict[str, str] = {}
    for variable in variables:
        if not variable:
            continue
        message = field_validation_error(variable, form_data.get(variable) or "", check_rut_digit)
        if message:
            errors[variable] = message
    return errors


def format_field_value(variable: str, value: str) -> str:
    """Normalize as-you-type input for RUT and phone fields; other values pass through."""
    if is_rut_field(variable):
        return format_rut(value)
    if is_phone_field(variable):
        return format_phone(value)
    return value
