"""Tests for ImportRuleService."""

import logging

import pytest

from bankbook.domain.errors import IntegrityViolation, ValidationError


@pytest.fixture
def templates(template_service):
    return {
        "shopping": template_service.create_template("Shopping", -25.0),
        "coffee": template_service.create_template("Coffee", -3.0),
    }


def test_match_is_case_insensitive(import_rule_service, templates):
    rule_id = import_rule_service.create_rule(templates["shopping"], "WALMART|TARGET|COSTCO")

    matches = import_rule_service.match("purchase at walmart")

    assert [rule.id for rule in matches] == [rule_id]
    assert matches[0].template_title == "Shopping"


def test_invalid_pattern_is_skipped(import_rule_service, templates, caplog):
    broken = import_rule_service.create_rule(templates["coffee"], "[invalid(regex")
    import_rule_service.create_rule(templates["shopping"], "walmart")

    with caplog.at_level(logging.WARNING, logger="bankbook.domain.import_rule"):
        matches = import_rule_service.match("[invalid(regex at walmart")

    assert [rule.template_title for rule in matches] == ["Shopping"]
    assert f"import rule {broken}" in caplog.text


def test_all_matches_returned_in_template_order(import_rule_service, templates):
    import_rule_service.create_rule(templates["shopping"], "STARBUCKS")
    import_rule_service.create_rule(templates["coffee"], "starbucks|espresso")

    matches = import_rule_service.match("STARBUCKS #123")

    assert [rule.template_title for rule in matches] == ["Coffee", "Shopping"]


def test_no_match(import_rule_service, templates):
    import_rule_service.create_rule(templates["shopping"], "walmart")
    assert import_rule_service.match("rent payment") == []


def test_create_requires_existing_template(import_rule_service):
    with pytest.raises(IntegrityViolation):
        import_rule_service.create_rule(9999, "anything")


def test_create_requires_pattern(import_rule_service, templates):
    with pytest.raises(ValidationError):
        import_rule_service.create_rule(templates["shopping"], "")


def test_get_and_list(import_rule_service, templates):
    rule_id = import_rule_service.create_rule(templates["shopping"], "walmart", account_id="ACC-1", payee="Walmart")

    rule = import_rule_service.get_rule(rule_id)
    assert rule.pattern == "walmart"
    assert rule.account_id == "ACC-1"
    assert rule.payee == "Walmart"
    assert [r.id for r in import_rule_service.list_rules()] == [rule_id]
    assert import_rule_service.get_rule(9999) is None


def test_update_rule(import_rule_service, templates):
    rule_id = import_rule_service.create_rule(templates["shopping"], "walmart")

    assert import_rule_service.update_rule(rule_id, pattern="target") is True

    assert import_rule_service.get_rule(rule_id).pattern == "target"
    assert import_rule_service.update_rule(rule_id) is False
    assert import_rule_service.update_rule(9999, pattern="x") is False


def test_update_and_delete_ignore_schedules(import_rule_service, schedule_service, templates):
    schedule_id = schedule_service.create_schedule(templates["coffee"], "2024-01-01")

    assert import_rule_service.update_rule(schedule_id, pattern="x") is False
    assert import_rule_service.delete_rule(schedule_id) is False
    assert schedule_service.get_schedule(schedule_id) is not None


def test_delete_rule(import_rule_service, templates):
    rule_id = import_rule_service.create_rule(templates["shopping"], "walmart")

    assert import_rule_service.delete_rule(rule_id) is True
    assert import_rule_service.get_rule(rule_id) is None
    assert import_rule_service.delete_rule(rule_id) is False
