"""Tests for remote call results."""

from habitgem.services.result import RemoteError, RemoteErrorKind, RemoteResult


def test_ok_result():
    result = RemoteResult.ok(5)
    assert result.success
    assert result.value == 5
    assert result.error is None


def test_fail_result():
    result = RemoteResult.fail(RemoteErrorKind.STATUS, "Internal Server Error", status=500)
    assert not result.success
    assert result.error == RemoteError(RemoteErrorKind.STATUS, "Internal Server Error", 500)
    assert str(result.error) == "status (500): Internal Server Error"


def test_map_success():
    assert RemoteResult.ok(2).map(lambda x: x * 10).value == 20


def test_map_keeps_error():
    failed = RemoteResult.fail(RemoteErrorKind.TIMEOUT, "timed out")
    mapped = failed.map(lambda x: x * 10)
    assert mapped.error.kind == RemoteErrorKind.TIMEOUT


def test_map_conversion_error_becomes_parse():
    mapped = RemoteResult.ok({}).map(lambda data: data["missing"])
    assert not mapped.success
    assert mapped.error.kind == RemoteErrorKind.PARSE


def test_or_else_compute():
    calls = []

    def fallback():
        calls.append(1)
        return "local"

    assert RemoteResult.ok("remote").or_else_compute(fallback) == "remote"
    assert calls == []

    assert RemoteResult.fail(RemoteErrorKind.DISABLED, "off").or_else_compute(fallback) == "local"
    assert calls == [1]
