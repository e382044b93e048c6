"""
Tests for api/validation.py
"""

import pytest

from api.validation import validate_source_code


class TestValidateSourceCode:
    def test_accepts_component_source(self):
        assert validate_source_code("export default () => null;") == (True, None)

    @pytest.mark.parametrize("value", [None, 123, ["x"], {"a": 1}, True])
    def test_rejects_missing_or_non_string(self, value):
        ok, err = validate_source_code(value)
        assert ok is False
        assert "sourceCode" in err

    def test_rejects_empty(self):
        ok, err = validate_source_code("")
        assert ok is False
        assert "non-empty" in err

    @pytest.mark.parametrize("value", ["   ", "\n\t"])
    def test_whitespace_only_goes_to_the_build(self, value):
        assert validate_source_code(value) == (True, None)

    def test_rejects_oversized_source(self):
        ok, err = validate_source_code("x" * 11, max_size=10)
        assert ok is False
        assert "too large" in err

    def test_size_limit_is_inclusive(self):
        assert validate_source_code("x" * 10, max_size=10) == (True, None)
