from ezdispatch.utils.exceptions import (
    ConfigError,
    ErrorCategory,
    ParseError,
    SynthesisError,
    classify_exception,
    format_error,
)
from ezdispatch.utils.helpers import camel_to_snake, snake_to_camel, to_camel_case


def test_parse_error_details_and_format():
    err = ParseError("parameter 's' has no type annotation", interface="Svc", method="echo", line=7)
    assert err.details == {"interface": "Svc", "method": "echo", "line": 7}
    assert str(err) == "[PARSE_ERROR] parameter 's' has no type annotation"
    assert format_error(err) == "Error: Svc.echo:7: parameter 's' has no type annotation"
    assert format_error(err, include_code=True).startswith("Error [PARSE_ERROR]: Svc.echo:7:")


def test_parse_error_without_location():
    err = ParseError("no class declaration found")
    assert err.location() == ""
    assert format_error(err) == "Error: no class declaration found"
    assert ParseError("bad", line=3).location() == "line 3"


def test_classify_exception():
    assert classify_exception(ConfigError("x", path="/tmp/c.json")) == ("CONFIG_ERROR", ErrorCategory.VALIDATION)
    assert classify_exception(SynthesisError("x")) == ("SYNTHESIS_ERROR", ErrorCategory.FATAL)
    assert classify_exception(FileNotFoundError("x")) == ("FILE_NOT_FOUND", ErrorCategory.NOT_FOUND)
    assert classify_exception(ValueError("x")) == ("INVALID_VALUE", ErrorCategory.VALIDATION)
    assert classify_exception(RuntimeError("x")) == ("INTERNAL_ERROR", ErrorCategory.FATAL)


def test_to_dict():
    data = ConfigError("bad file", path="/tmp/c.json").to_dict()
    assert data == {
        "error": "CONFIG_ERROR",
        "message": "bad file",
        "category": "validation",
        "details": {"path": "/tmp/c.json"},
    }


def test_name_helpers():
    assert to_camel_case("echo") == "Echo"
    assert to_camel_case("get_user_by_id") == "GetUserById"
    assert to_camel_case("_helper") == "Helper"
    assert to_camel_case("getUser") == "GetUser"
    assert camel_to_snake("resultMode") == "result_mode"
    assert snake_to_camel("allow_sync_methods") == "allowSyncMethods"
