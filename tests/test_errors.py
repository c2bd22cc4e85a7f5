"""Tests for waypoint.errors: exception hierarchy and error messages."""

import pytest

from waypoint.errors import (
    BadRequest,
    ChainError,
    ConfigurationError,
    HTTPError,
    InvalidArgument,
    WaypointError,
)
from waypoint.routing.router import Router


class TestHierarchy:
    def test_configuration_error_is_waypoint_error(self) -> None:
        assert issubclass(ConfigurationError, WaypointError)

    def test_invalid_argument_is_type_error(self) -> None:
        assert issubclass(InvalidArgument, WaypointError)
        assert issubclass(InvalidArgument, TypeError)

    def test_chain_error_is_waypoint_error(self) -> None:
        assert issubclass(ChainError, WaypointError)

    def test_bad_request_is_http_error(self) -> None:
        assert issubclass(BadRequest, HTTPError)
        assert issubclass(HTTPError, WaypointError)


class TestHTTPError:
    def test_status_and_detail(self) -> None:
        err = HTTPError(status=418, detail="Short and stout")
        assert err.status == 418
        assert err.detail == "Short and stout"

    def test_str_with_detail(self) -> None:
        assert str(HTTPError(status=400, detail="Bad path")) == "400: Bad path"

    def test_str_without_detail(self) -> None:
        assert str(HTTPError(status=500)) == "500"

    def test_frozen(self) -> None:
        err = HTTPError(status=400)
        with pytest.raises(AttributeError):
            err.status = 500  # type: ignore[misc]

    def test_bad_request_defaults(self) -> None:
        err = BadRequest()
        assert err.status == 400
        assert err.detail == "Bad Request"


class TestRegistrationMessages:
    def test_method_type_named_in_message(self) -> None:
        with pytest.raises(InvalidArgument, match="`method` to be a string, got int"):
            Router().create_route(123, "/x", lambda ctx, next: None)  # type: ignore[arg-type]

    def test_route_type_named_in_message(self) -> None:
        with pytest.raises(InvalidArgument, match="`route` to be a string"):
            Router().create_route("GET", 123)

    def test_caught_as_type_error(self) -> None:
        with pytest.raises(TypeError):
            Router().create_route("GET", 123)
