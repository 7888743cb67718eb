import pytest

from prod_analyzer.errors import InvalidArgumentError
from prod_analyzer.severity import Severity, max_severity, parse_severity


def test_parse_severity_is_case_insensitive():
    assert parse_severity(" high ") == Severity.HIGH
    assert parse_severity("Critical") == Severity.CRITICAL


def test_parse_severity_rejects_unknown_names():
    with pytest.raises(InvalidArgumentError) as excinfo:
        parse_severity("SEVERE")
    assert "INFO, LOW, MEDIUM, HIGH, CRITICAL" in str(excinfo.value)


def test_levels_are_ordered():
    levels = [severity.level for severity in (Severity.INFO, Severity.LOW, Severity.MEDIUM, Severity.HIGH, Severity.CRITICAL)]
    assert levels == sorted(levels)
    assert Severity.HIGH.at_least(Severity.MEDIUM)
    assert not Severity.LOW.at_least(Severity.MEDIUM)


def test_max_severity_defaults_to_info():
    assert max_severity([]) == Severity.INFO
    assert max_severity([Severity.LOW, Severity.CRITICAL, Severity.HIGH]) == Severity.CRITICAL
