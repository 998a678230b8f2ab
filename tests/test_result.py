import pytest

from slotledger.core.errors import ResultAssertionError
from slotledger.core.names import ErrorKind
from slotledger.core.result import OptionalValue, Response


def test_ok_response():
    r = Response.ok(True)
    assert r.is_ok and not r.is_err
    assert r.error_kind is None
    assert str(r) == "(ok true)"


def test_err_response_carries_code():
    r = Response.err(ErrorKind.NOT_AUTHORIZED)
    assert r.value == 1001
    assert r.error_kind is ErrorKind.NOT_AUTHORIZED
    assert str(r) == "(err u1001)"


def test_expect_ok_on_err_fails():
    with pytest.raises(ResultAssertionError):
        Response.err(ErrorKind.OVERFLOW).expect_ok()


def test_expect_err_on_ok_fails():
    with pytest.raises(ResultAssertionError):
        Response.ok(True).expect_err()


def test_expect_bool_mismatch():
    with pytest.raises(ResultAssertionError):
        Response.ok(False).expect_ok().expect_bool(True)
    with pytest.raises(ResultAssertionError):
        Response.ok(1).expect_ok().expect_bool(True)


def test_expect_uint_mismatch():
    with pytest.raises(ResultAssertionError):
        Response.err(ErrorKind.OVERFLOW).expect_err().expect_uint(1001)
    with pytest.raises(ResultAssertionError):
        OptionalValue.some(True).expect_some().expect_uint(1)


def test_optional_value():
    assert OptionalValue.of(None).is_some is False
    OptionalValue.none().expect_none()
    assert OptionalValue.some(0).expect_some().expect_uint(0) == 0
    assert str(OptionalValue.some(3)) == "(some u3)"
    with pytest.raises(ResultAssertionError):
        OptionalValue.none().expect_some()
    with pytest.raises(ResultAssertionError):
        OptionalValue.some(1).expect_none()
    with pytest.raises(ValueError):
        OptionalValue.some(None)


def test_result_assertion_error_is_assertion_error():
    assert issubclass(ResultAssertionError, AssertionError)
