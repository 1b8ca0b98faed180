"""Tests for ScheduleService."""

import pytest

from bankbook.database.models import RecurringTransaction
from bankbook.domain.errors import IntegrityViolation, ValidationError
from bankbook.utils.date_codec import to_epoch


@pytest.fixture
def template_id(template_service):
    return template_service.create_template("Rent", -900.0)


def _recurring(store, recurring_id):
    store.session.expire_all()
    return store.session.query(RecurringTransaction).filter(RecurringTransaction.id == recurring_id).first()


def test_create_with_defaults(store, schedule_service, template_id):
    schedule_id = schedule_service.create_schedule(template_id, "2024-02-01")

    schedule = schedule_service.get_schedule(schedule_id)
    assert schedule.template_title == "Rent"
    assert schedule.amount == -900.0
    assert schedule.start_date == "2024-02-01"
    assert schedule.next_date == "2024-02-01"
    assert schedule.repeat_interval == 1
    assert schedule.repeat_multiplier == 1
    assert schedule.reminder_days == 7

    recurring = _recurring(store, schedule.recurring_transaction_id)
    assert recurring.remind_days_in_advance == 7
    assert recurring.first_unprocessed_event_date == to_epoch("2024-02-01")


def test_create_with_missing_template_leaves_nothing(store, schedule_service):
    with pytest.raises(IntegrityViolation):
        schedule_service.create_schedule(9999, "2024-02-01")

    assert store.session.query(RecurringTransaction).count() == 0
    assert schedule_service.list_schedules() == []


def test_create_rejects_bad_input(schedule_service, template_id):
    with pytest.raises(ValidationError):
        schedule_service.create_schedule(template_id, "2024-02-31")
    with pytest.raises(ValidationError):
        schedule_service.create_schedule(template_id, "2024-02-01", repeat_multiplier=0)


def test_list_by_start_date(schedule_service, template_id):
    later = schedule_service.create_schedule(template_id, "2024-06-01")
    earlier = schedule_service.create_schedule(template_id, "2024-01-01")
    assert [s.id for s in schedule_service.list_schedules()] == [earlier, later]


def test_update_schedule(schedule_service, template_id):
    schedule_id = schedule_service.create_schedule(template_id, "2024-01-01")

    assert schedule_service.update_schedule(
        schedule_id, next_date="2024-02-01", repeat_multiplier=2, account_id="ACC-1", reminder_days=3
    ) is True

    schedule = schedule_service.get_schedule(schedule_id)
    assert schedule.start_date == "2024-01-01"
    assert schedule.next_date == "2024-02-01"
    assert schedule.repeat_multiplier == 2
    assert schedule.account_id == "ACC-1"
    assert schedule.reminder_days == 3


def test_update_missing_or_empty(schedule_service, template_id):
    schedule_id = schedule_service.create_schedule(template_id, "2024-01-01")
    assert schedule_service.update_schedule(schedule_id) is False
    assert schedule_service.update_schedule(9999, repeat_interval=2) is False


def test_update_ignores_import_rules(schedule_service, import_rule_service, template_id):
    rule_id = import_rule_service.create_rule(template_id, "rent")
    assert schedule_service.update_schedule(rule_id, repeat_interval=2) is False
    assert schedule_service.delete_schedule(rule_id) is False
    assert import_rule_service.get_rule(rule_id) is not None


def test_delete_removes_recurring_row(store, schedule_service, template_id):
    schedule_id = schedule_service.create_schedule(template_id, "2024-01-01")
    recurring_id = schedule_service.get_schedule(schedule_id).recurring_transaction_id

    assert schedule_service.delete_schedule(schedule_id) is True

    assert schedule_service.get_schedule(schedule_id) is None
    assert _recurring(store, recurring_id) is None


def test_delete_tolerates_missing_recurring_row(store, schedule_service, template_id):
    schedule_id = schedule_service.create_schedule(template_id, "2024-01-01")
    recurring_id = schedule_service.get_schedule(schedule_id).recurring_transaction_id
    store.delete_rows(RecurringTransaction, RecurringTransaction.id == recurring_id)

    assert schedule_service.delete_schedule(schedule_id) is True
    assert schedule_service.get_schedule(schedule_id) is None


def test_delete_missing(schedule_service):
    assert schedule_service.delete_schedule(9999) is False
