"""Tests for line item operations and their running balance upkeep."""

from decimal import Decimal

import pytest

from bankbook.database.models import LineItem
from bankbook.domain.errors import IntegrityViolation, ValidationError


def _balances(line_item_service, account_id):
    return [item.running_balance for item in line_item_service.list_for_account(account_id)]


def test_create_line_item_recalculates(line_item_service, accounts, make_transaction):
    checking = accounts["checking"]
    make_transaction("A", "2024-01-01", (checking, 10.0))
    later = make_transaction("B", "2024-01-05", (checking, 5.0))
    earlier = make_transaction("C", "2024-01-03", (accounts["savings"], 1.0))

    line_item_id = line_item_service.create_line_item(earlier, checking, -4.0, memo="split")

    item = line_item_service.get_line_item(line_item_id)
    assert item.memo == "split"
    assert item.transaction_id == earlier
    assert _balances(line_item_service, checking) == [10.0, 6.0, 11.0]
    assert later in [li.transaction_id for li in line_item_service.list_for_account(checking)]


def test_create_line_item_for_missing_transaction(line_item_service, accounts):
    with pytest.raises(IntegrityViolation):
        line_item_service.create_line_item(9999, accounts["checking"], 1.0)


def test_list_for_transaction(line_item_service, accounts, make_transaction):
    txn_id = make_transaction("A", "2024-01-01", (accounts["checking"], -3.0), (accounts["dining"], 3.0))

    items = line_item_service.list_for_transaction(txn_id)

    assert [item.account_name for item in items] == ["Checking", "Dining"]
    assert line_item_service.account_ids_for_transaction(txn_id) == sorted(
        [accounts["checking"], accounts["dining"]]
    )


def test_update_amount(line_item_service, accounts, make_transaction):
    checking = accounts["checking"]
    make_transaction("A", "2024-01-01", (checking, 10.0))
    make_transaction("B", "2024-01-02", (checking, 5.0))
    first = line_item_service.list_for_account(checking)[0]

    assert line_item_service.update_line_item(first.id, amount=20.0) is True

    assert _balances(line_item_service, checking) == [20.0, 25.0]


def test_move_to_another_account_recalculates_both(line_item_service, accounts, make_transaction):
    groceries, dining = accounts["groceries"], accounts["dining"]
    make_transaction("A", "2024-01-01", (groceries, 10.0))
    moved_txn = make_transaction("B", "2024-01-02", (groceries, 7.0))
    make_transaction("C", "2024-01-03", (groceries, 3.0))
    make_transaction("D", "2024-01-01", (dining, 50.0))
    moved = line_item_service.list_for_transaction(moved_txn)[0]

    line_item_service.update_line_item(moved.id, account_id=dining)

    assert _balances(line_item_service, groceries) == [10.0, 13.0]
    assert _balances(line_item_service, dining) == [50.0, 57.0]


def test_update_does_not_bump_version(store, line_item_service, accounts, make_transaction):
    txn_id = make_transaction("A", "2024-01-01", (accounts["checking"], 1.0))
    item = line_item_service.list_for_transaction(txn_id)[0]

    line_item_service.update_line_item(item.id, memo="note", amount=2.0)

    assert store.session.query(LineItem.opt).filter(LineItem.id == item.id).scalar() == 0
    assert line_item_service.get_line_item(item.id).memo == "note"


def test_update_to_missing_account_is_rolled_back(line_item_service, accounts, make_transaction):
    txn_id = make_transaction("A", "2024-01-01", (accounts["checking"], 1.0))
    item = line_item_service.list_for_transaction(txn_id)[0]

    with pytest.raises(IntegrityViolation):
        line_item_service.update_line_item(item.id, account_id=9999)

    assert line_item_service.get_line_item(item.id).account_id == accounts["checking"]


def test_update_missing_or_empty(line_item_service, accounts, make_transaction):
    txn_id = make_transaction("A", "2024-01-01", (accounts["checking"], 1.0))
    item = line_item_service.list_for_transaction(txn_id)[0]

    assert line_item_service.update_line_item(9999, amount=1.0) is False
    assert line_item_service.update_line_item(item.id) is False


def test_delete_last_line_item_leaves_empty_account(line_item_service, account_service, accounts, make_transaction):
    txn_id = make_transaction("A", "2024-01-01", (accounts["savings"], 12.0), (accounts["checking"], -12.0))
    savings_item = [i for i in line_item_service.list_for_transaction(txn_id) if i.account_id == accounts["savings"]][0]

    assert line_item_service.delete_line_item(savings_item.id) is True

    assert line_item_service.list_for_account(accounts["savings"]) == []
    assert account_service.get_balance(accounts["savings"]) == 0.0
    assert len(line_item_service.list_for_transaction(txn_id)) == 1


def test_delete_recalculates_remaining(line_item_service, accounts, make_transaction):
    checking = accounts["checking"]
    make_transaction("A", "2024-01-01", (checking, 10.0))
    make_transaction("B", "2024-01-02", (checking, 5.0))
    make_transaction("C", "2024-01-03", (checking, 1.0))
    middle = line_item_service.list_for_account(checking)[1]

    line_item_service.delete_line_item(middle.id)

    assert _balances(line_item_service, checking) == [10.0, 11.0]


def test_delete_removes_tag_associations(line_item_service, tag_service, accounts, make_transaction):
    txn_id = make_transaction("A", "2024-01-01", (accounts["checking"], 1.0))
    item = line_item_service.list_for_transaction(txn_id)[0]
    tag_id = tag_service.create_tag("Work")
    tag_service.add_to_line_item(item.id, tag_id)

    line_item_service.delete_line_item(item.id)

    assert tag_service.tags_for_line_item(item.id) == []


def test_delete_missing(line_item_service):
    assert line_item_service.delete_line_item(9999) is False


@pytest.mark.parametrize("field", ["account_id", "amount"])
def test_update_rejects_none(line_item_service, accounts, make_transaction, field):
    checking = accounts["checking"]
    txn_id = make_transaction("A", "2024-01-01", (checking, 4.0))
    item = line_item_service.list_for_transaction(txn_id)[0]

    with pytest.raises(ValidationError):
        line_item_service.update_line_item(item.id, **{field: None})

    unchanged = line_item_service.get_line_item(item.id)
    assert unchanged.account_id == checking
    assert unchanged.amount == 4
    assert _balances(line_item_service, checking) == [4]


def test_update_amount_rounds_to_cents(line_item_service, account_service, accounts, make_transaction):
    checking = accounts["checking"]
    txn_id = make_transaction("A", "2024-01-01", (checking, 1.0))
    item = line_item_service.list_for_transaction(txn_id)[0]

    line_item_service.update_line_item(item.id, amount=0.105)

    assert line_item_service.get_line_item(item.id).amount == Decimal("0.11")
    assert account_service.get_balance(checking) == Decimal("0.11")
