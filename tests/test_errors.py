"""Tests for error capabilities and naming."""
import pytest
from werkzeug.exceptions import Conflict, HTTPException, NotFound

from xmlmarshal.domain.errors import (
    HTTPEquivError,
    MarshalerError,
    NamedError,
    error_description,
    error_name,
    http_status,
)


class WidgetMissing(NotFound):
    def name(self):
        return "widget_missing"


class QuotaExceeded(Exception):
    """Structural HTTP-equivalent error, not derived from HTTPException."""

    def status(self):
        return 429


class _Hidden(Exception):
    pass


class lowercase_error(Exception):
    pass


class TestCapabilities:
    """Capabilities are detected structurally."""

    def test_structural_detection(self):
        assert isinstance(QuotaExceeded(), HTTPEquivError)
        assert isinstance(WidgetMissing(), NamedError)
        assert not isinstance(ValueError(), HTTPEquivError)

    def test_werkzeug_name_property_is_not_a_name_method(self):
        assert not isinstance(NotFound(), NamedError)

    def test_marshaler_error_formats_message(self):
        assert str(MarshalerError("kind was %s, not %s", "int", "function")) == "kind was int, not function"
        assert str(MarshalerError("100% literal")) == "100% literal"


class TestHTTPStatus:
    """Status codes equivalent to errors."""

    @pytest.mark.parametrize(
        "err, expected",
        [(NotFound(), 404), (Conflict(), 409), (WidgetMissing(), 404), (QuotaExceeded(), 429), (ValueError(), None)],
    )
    def test_http_status(self, err, expected):
        assert http_status(err) == expected

    def test_bare_http_exception_has_no_status(self):
        assert http_status(HTTPException()) is None

    def test_description_of_werkzeug_errors(self):
        assert error_description(NotFound("no widget 7")) == "no widget 7"
        assert error_description(ValueError("bad")) == "bad"


class TestErrorName:
    """Category names in error documents."""

    def test_named_error_wins(self):
        assert error_name(WidgetMissing(), snake_case_http_equiv_errors=True) == "widget_missing"

    @pytest.mark.parametrize(
        "err, expected",
        [(NotFound(), "not_found"), (Conflict(), "conflict"), (QuotaExceeded(), "too_many_requests")],
    )
    def test_snake_case_status_text(self, err, expected):
        assert error_name(err, snake_case_http_equiv_errors=True) == expected

    def test_type_name_without_snake_case(self):
        assert error_name(NotFound()) == "werkzeug.exceptions.NotFound"
        assert error_name(QuotaExceeded()) == f"{__name__}.QuotaExceeded"

    def test_builtin_type_name(self):
        assert error_name(KeyError("x")) == "KeyError"

    @pytest.mark.parametrize("err", [_Hidden(), lowercase_error()])
    def test_private_types_are_plain_error(self, err):
        assert error_name(err) == "error"
