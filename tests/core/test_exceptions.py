"""Tests for zakatflow.core.exceptions."""

from zakatflow.core.exceptions import (
    ConfigurationError,
    ConservationViolation,
    InvalidInput,
    UnknownMethodology,
    ZakatFlowError,
)


def test_hierarchy():
    """All exceptions should inherit from ZakatFlowError."""
    for exc_cls in [ConfigurationError, UnknownMethodology, InvalidInput, ConservationViolation]:
        assert issubclass(exc_cls, ZakatFlowError)


def test_unknown_methodology_is_value_error():
    assert issubclass(UnknownMethodology, ValueError)


def test_unknown_methodology_message():
    err = UnknownMethodology("zahiri", ["bradford", "hanafi"])
    assert err.methodology == "zahiri"
    assert err.supported == ["bradford", "hanafi"]
    assert str(err) == "Unknown methodology: 'zahiri'. Supported: bradford, hanafi"


def test_unknown_methodology_without_supported_list():
    assert str(UnknownMethodology(None)) == "Unknown methodology: None"


def test_catch_base():
    """Catching ZakatFlowError should catch all subtypes."""
    try:
        raise ConservationViolation("obligation total 1 != zakat due 2")
    except ZakatFlowError as e:
        assert "zakat due" in str(e)
