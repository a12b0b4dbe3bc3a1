# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Unit tests for the sandboxed script evaluator
"""

import pytest

from nodeflow.script_evaluator import ScriptError, evaluate_script, stringify_result


class TestEvaluation:
    """Supported language subset"""

    def test_last_expression_is_result(self):
        assert evaluate_script("x = 2\ny = x * 3\ny + 1") == 7

    def test_return_stops_execution(self):
        assert evaluate_script("return 'early'\nundefined_name") == "early"

    def test_if_else_blocks(self):
        script = "n = 5\nif n > 3:\n    label = 'big'\nelse:\n    label = 'small'\nlabel"
        assert evaluate_script(script) == "big"

    def test_string_methods(self):
        assert evaluate_script("'  Hello '.strip().upper()") == "HELLO"

    def test_json_helper_round_trip(self):
        script = "data = json.decode('{\"items\": [1, 2, 3]}')\njson.encode(sum(data['items']))"
        assert evaluate_script(script) == "6"

    def test_json_encode_dict(self):
        assert evaluate_script("json.encode({'a': [1, True, None]})") == '{"a": [1, true, null]}'

    def test_bool_ops_short_circuit(self):
        assert evaluate_script("0 or 'fallback'") == "fallback"
        assert evaluate_script("False and missing") is False

    def test_empty_script_is_none(self):
        assert evaluate_script("") is None


class TestSandbox:
    """Anything outside the whitelist is rejected"""

    @pytest.mark.parametrize("script", [
        "import os",
        "__import__('os')",
        "open('/etc/passwd')",
        "(1).__class__",
        "'x'.__class__.__mro__",
        "def f():\n    return 1",
        "[x for x in range(3)]",
        "lambda: 1",
        "while True:\n    pass",
    ])
    def test_rejects_unsafe_constructs(self, script):
        with pytest.raises(ScriptError):
            evaluate_script(script)

    def test_syntax_error(self):
        with pytest.raises(ScriptError, match="Invalid script syntax"):
            evaluate_script("x = ")

    def test_runtime_error_is_wrapped(self):
        with pytest.raises(ScriptError, match="ZeroDivisionError"):
            evaluate_script("1 / 0")

    def test_huge_exponent_rejected(self):
        with pytest.raises(ScriptError, match="Exponent too large"):
            evaluate_script("9 ** 100000")

    def test_cannot_rebind_json_helper(self):
        with pytest.raises(ScriptError):
            evaluate_script("json = 1")

    def test_invalid_json_is_wrapped(self):
        with pytest.raises(ScriptError):
            evaluate_script("json.decode('not json')")


class TestStringify:
    """Result rendering"""

    @pytest.mark.parametrize("value, expected", [
        (None, "null"),
        (True, "true"),
        (False, "false"),
        (42, "42"),
        (2.5, "2.5"),
        ("text", "text"),
        ([1, 2], "unsupported type: list"),
        ({"a": 1}, "unsupported type: dict"),
    ])
    def test_stringify(self, value, expected):
        assert stringify_result(value) == expected
