"""Unit tests for pricing, completion and field validation."""

import pytest

from contrato.editor.aggregator import completion_percentage, format_price, missing_fields, total_price
from contrato.editor.models import Capsule
from contrato.editor.validators import (
    field_validation_error,
    format_phone,
    format_field_value,
    format_rut,
    is_email_field,
    is_phone_field,
    is_valid_email,
    is_valid_phone,
    is_valid_rut,
    validate_email,
    validate_name,
    validate_phone,
    validate_rut,
    validate_rut_format,
    validation_errors,
)

CAPSULES = [Capsule(id=1, price=2000), Capsule(id=2, price=3000)]


# =============================================================================
# Pricing Tests
# =============================================================================


class TestPricing:
    """Test suite for total price and its display."""

    def test_total_with_selection(self):
        assert total_price(10000, CAPSULES, [1]) == 12000

    def test_total_without_selection(self):
        assert total_price(10000, CAPSULES, []) == 10000

    def test_total_ignores_unknown_ids(self):
        assert total_price(10000, CAPSULES, [1, 2, 99]) == 15000

    @pytest.mark.parametrize(
        "amount, expected",
        [
            (12000, "$12.000"),
            (0, "$0"),
            (999, "$999"),
            (1234567.6, "$1.234.568"),
            (-5000, "-$5.000"),
            (None, "$0"),
            ("abc", "$0"),
            (float("nan"), "$0"),
            (True, "$0"),
        ],
    )
    def test_format_price(self, amount, expected):
        assert format_price(amount) == expected

    def test_format_price_custom_separator(self):
        assert format_price(1500000, symbol="CLP ", thousands_separator=",") == "CLP 1,500,000"


# =============================================================================
# Completion Tests
# =============================================================================


class TestCompletion:
    """Test suite for completion percentage and missing fields."""

    def test_no_variables_is_zero(self):
        assert completion_percentage([], {}) == 0

    def test_half_filled(self):
        assert completion_percentage(["a", "b"], {"a": "x"}) == 50

    def test_rounds_half_up(self):
        variables = [f"v{i}" for i in range(8)]

        assert completion_percentage(variables, {"v0": "x"}) == 13
        assert completion_percentage(["a", "b", "c"], {"a": "x", "b": "y"}) == 67

    def test_blank_values_and_names_are_ignored(self):
        assert completion_percentage(["", "a", "b"], {"a": "x", "b": "   "}) == 50
        assert completion_percentage([""], {"": "x"}) == 0

    def test_missing_fields_in_order(self):
        assert missing_fields(["a", "", "b", "c"], {"b": "ok", "c": " "}) == ["a", "c"]


# =============================================================================
# Validation Tests
# =============================================================================


class TestValidators:
    """Test suite for field validators."""

    # =========================================================================
    # RUT Tests
    # =========================================================================

    def test_valid_rut(self):
        assert is_valid_rut("12345678-5") is True
        assert is_valid_rut("12.345.678-5") is True
        assert is_valid_rut("11111111-1") is True
        assert is_valid_rut("6-k") is True

    def test_invalid_rut(self):
        assert is_valid_rut("12345678-K") is False
        assert is_valid_rut("ab") is False
        assert is_valid_rut("") is False

    def test_format_rut(self):
        assert format_rut("123456785") == "12.345.678-5"
        assert format_rut("12.345.678-k") == "12.345.678-K"
        assert format_rut("1") == "1"

    def test_validate_rut_format(self):
        assert validate_rut_format("12345678-5") is None
        assert validate_rut_format("") is None
        assert validate_rut_format("12.345.678-5") == "Debe ser formato XXXXXXXX-X (sin puntos, con guion)"

    def test_validate_rut_checks_digit(self):
        assert validate_rut("12.345.678-5") is None
        assert validate_rut("12345678-K") == "El RUT ingresado no es válido"

    # =========================================================================
    # Email, Phone and Name Tests
    # =========================================================================

    def test_email(self):
        assert is_valid_email("ana@example.com") is True
        assert is_valid_email("ana@") is False
        assert validate_email("") is None
        assert validate_email("ana@") == "Debe ser un email válido (ejemplo@dominio.com)"

    def test_phone(self):
        assert is_valid_phone("+56 9 1234 5678") is True
        assert is_valid_phone("912345678") is True
        assert is_valid_phone("12345") is False
        assert validate_phone("") == "Teléfono es requerido"
        assert validate_phone("12345") == "Formato: +56912345678 o 912345678"

    def test_format_phone(self):
        assert format_phone("+56 9 1234 5678 99") == "+56912345678"
        assert format_phone("9-1234-5678-0") == "912345678"

    def test_name(self):
        assert validate_name("A") == "El nombre debe tener al menos 2 caracteres"
        assert validate_name("Ana") is None
        assert validate_name("") is None

    # =========================================================================
    # Aggregation Tests
    # =========================================================================

    def test_field_kind_detection(self):
        assert is_email_field("correo_contacto") is True
        assert is_phone_field("celular_arrendatario") is True
        assert field_validation_error("comuna", "") is None

    def test_validation_errors(self):
        variables = ["nombre", "rut", "email", "telefono", "comuna"]
        form_data = {"nombre": "A", "rut": "123", "email": "x"}

        errors = validation_errors(variables, form_data)

        assert set(errors) == {"nombre", "rut", "email", "telefono"}

    def test_valid_form_has_no_errors(self):
        form_data = {"nombre": "Ana", "rut": "12345678-5", "email": "ana@example.com"}

        assert validation_errors(list(form_data), form_data) == {}

    def test_rut_check_digit_is_optional(self):
        form_data = {"rut": "12345678-K"}

        assert validation_errors(["rut"], form_data) == {}
        assert validation_errors(["rut"], form_data, check_rut_digit=True) == {
            "rut": "El RUT ingresado no es válido"
        }
        assert field_validation_error("rut", "12.345.678-5", check_rut_digit=True) is None

    def test_format_field_value(self):
        assert format_field_value("rut_arrendador", "123456785") == "12.345.678-5"
        assert format_field_value("telefono", "+56 9 1234 5678") == "+56912345678"
        assert format_field_value("comuna", " Ñuñoa ") == " Ñuñoa "
