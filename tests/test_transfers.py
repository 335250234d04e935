"""Tests for transfer matching."""

from datetime import date

import pytest

from ledgerkit.domain.entities import TransactionType
from ledgerkit.domain.errors import ConflictError, NotFoundError, ValidationError

DEBIT = TransactionType.DEBIT
CREDIT = TransactionType.CREDIT


@pytest.fixture
def transfer_pair(add_transaction):
    """$50 leaving checking on Jan 10 and arriving in savings on Jan 12."""
    tx1 = add_transaction("checking", "50.00", DEBIT, date(2024, 1, 10))
    tx2 = add_transaction("savings", "50.00", CREDIT, date(2024, 1, 12))
    return tx1, tx2


def test_transfer_scenario(transfer_service, temp_store, user_id, transfer_pair):
    """Find, link, and unlink a transfer pair."""
    tx1, tx2 = transfer_pair

    candidates = transfer_service.find_candidates(user_id, tx1)
    assert [c.id for c in candidates] == [tx2]

    linked_1, linked_2 = transfer_service.link(user_id, tx1, tx2)
    assert linked_1.linked_transaction_id == tx2
    assert linked_2.linked_transaction_id == tx1

    assert transfer_service.unlink(user_id, tx1) == tx2
    assert temp_store.get_transaction(tx1, user_id).linked_transaction_id is None
    assert temp_store.get_transaction(tx2, user_id).linked_transaction_id is None


def test_candidates_exclusions(transfer_service, user_id, add_transaction):
    source = add_transaction("checking", "50.00", DEBIT, date(2024, 1, 10))
    add_transaction("checking", "50.00", CREDIT, date(2024, 1, 10))  # same account
    add_transaction("savings", "50.01", CREDIT, date(2024, 1, 10))  # different amount
    add_transaction("savings", "50.00", DEBIT, date(2024, 1, 10))  # same type
    add_transaction("savings", "50.00", CREDIT, date(2024, 1, 14))  # outside window
    match = add_transaction("savings", "50.00", CREDIT, date(2024, 1, 7))

    assert [c.id for c in transfer_service.find_candidates(user_id, source)] == [match]


def test_candidates_respect_window(transfer_service, user_id, add_transaction):
    source = add_transaction("checking", "50.00", DEBIT, date(2024, 1, 10))
    far = add_transaction("savings", "50.00", CREDIT, date(2024, 1, 15))

    assert transfer_service.find_candidates(user_id, source) == []
    assert [c.id for c in transfer_service.find_candidates(user_id, source, date_window_days=5)] == [far]


def test_candidates_exclude_linked(transfer_service, user_id, add_transaction, transfer_pair):
    tx1, tx2 = transfer_pair
    other = add_transaction("credit_card", "50.00", DEBIT, date(2024, 1, 11))
    transfer_service.link(user_id, tx1, tx2)

    assert transfer_service.find_candidates(user_id, tx1) == []
    assert transfer_service.find_candidates(user_id, other) == []


def test_candidates_are_user_scoped(transfer_service, temp_store, transfer_pair):
    tx1, _ = transfer_pair
    other_account = temp_store.create_account("mallory", "checking")
    temp_store.create_transaction(other_account, date(2024, 1, 11), 50, CREDIT)

    with pytest.raises(NotFoundError):
        transfer_service.find_candidates("mallory", tx1)


@pytest.mark.parametrize(
    "account,amount,type,message",
    [
        ("checking", "50.00", CREDIT, "same account"),
        ("savings", "49.00", CREDIT, "different amounts"),
        ("savings", "50.00", DEBIT, "same type"),
    ],
)
def test_link_validation(transfer_service, user_id, add_transaction, account, amount, type, message):
    source = add_transaction("checking", "50.00", DEBIT, date(2024, 1, 10))
    target = add_transaction(account, amount, type, date(2024, 1, 10))

    with pytest.raises(ValidationError, match=message):
        transfer_service.link(user_id, source, target)


def test_link_to_itself(transfer_service, user_id, transfer_pair):
    tx1, _ = transfer_pair

    with pytest.raises(ValidationError, match="itself"):
        transfer_service.link(user_id, tx1, tx1)


def test_link_already_linked_conflicts(transfer_service, temp_store, user_id, add_transaction, transfer_pair):
    tx1, tx2 = transfer_pair
    third = add_transaction("credit_card", "50.00", CREDIT, date(2024, 1, 10))
    transfer_service.link(user_id, tx1, tx2)

    with pytest.raises(ConflictError, match=f"Transaction {tx1} is already linked"):
        transfer_service.link(user_id, tx1, third)

    assert temp_store.get_transaction(third, user_id).linked_transaction_id is None


def test_store_set_link_is_compare_and_set(temp_store, user_id, transfer_pair):
    tx1, tx2 = transfer_pair
    temp_store.set_link(tx1, tx2)

    with pytest.raises(ConflictError):
        temp_store.set_link(tx1, 12345)

    assert temp_store.get_transaction(tx1, user_id).linked_transaction_id == tx2


def test_conflict_rolls_back_both_sides(temp_store, user_id, add_transaction, transfer_pair):
    tx1, tx2 = transfer_pair
    third = add_transaction("credit_card", "50.00", CREDIT, date(2024, 1, 10))
    temp_store.set_link(tx2, third)

    with pytest.raises(ConflictError):
        with temp_store.unit_of_work():
            temp_store.set_link(tx1, tx2)
            temp_store.set_link(tx2, tx1)

    assert temp_store.get_transaction(tx1, user_id).linked_transaction_id is None
    assert temp_store.get_transaction(tx2, user_id).linked_transaction_id == third


def test_unlink_not_linked_returns_none(transfer_service, user_id, transfer_pair):
    tx1, _ = transfer_pair
    assert transfer_service.unlink(user_id, tx1) is None


def test_unlink_unknown_transaction(transfer_service, user_id):
    with pytest.raises(NotFoundError, match="Transaction 999 not found"):
        transfer_service.unlink(user_id, 999)


class TestBulkMatch:
    """Tests for bulk transfer matching."""

    @pytest.fixture
    def ledger(self, add_transaction):
        ids = {
            # Ambiguous: two credits match tx1
            "tx1": add_transaction("checking", "75.00", DEBIT, date(2024, 2, 1)),
            "tx2": add_transaction("savings", "75.00", CREDIT, date(2024, 2, 2)),
            "tx3": add_transaction("credit_card", "75.00", CREDIT, date(2024, 2, 3)),
            # Unambiguous pair
            "tx4": add_transaction("checking", "30.00", DEBIT, date(2024, 3, 1)),
            "tx5": add_transaction("savings", "30.00", CREDIT, date(2024, 3, 2)),
            # No partner
            "tx6": add_transaction("checking", "12.34", DEBIT, date(2024, 3, 5)),
        }
        return ids

    def test_ambiguous_match_needs_review(self, transfer_service, temp_store, user_id, ledger):
        result = transfer_service.bulk_match(user_id)

        assert result.needs_review_count == 1
        group = result.needs_review[0]
        assert group.transaction.id == ledger["tx1"]
        assert [c.id for c in group.candidates] == [ledger["tx2"], ledger["tx3"]]
        for name in ("tx1", "tx2", "tx3"):
            assert temp_store.get_transaction(ledger[name], user_id).linked_transaction_id is None

    def test_unambiguous_pair_is_linked(self, transfer_service, temp_store, user_id, ledger):
        result = transfer_service.bulk_match(user_id)

        assert result.auto_matched_count == 1
        pair = result.auto_matched[0]
        assert (pair.transaction.id, pair.linked_to.id) == (ledger["tx4"], ledger["tx5"])
        assert temp_store.get_transaction(ledger["tx5"], user_id).linked_transaction_id == ledger["tx4"]

    def test_small_batches_give_same_result(self, transfer_service, user_id, ledger):
        result = transfer_service.bulk_match(user_id, batch_size=1)

        assert [p.transaction.id for p in result.auto_matched] == [ledger["tx4"]]
        assert [g.transaction.id for g in result.needs_review] == [ledger["tx1"]]

    def test_second_pass_finds_nothing_new(self, transfer_service, user_id, ledger):
        transfer_service.bulk_match(user_id)
        result = transfer_service.bulk_match(user_id)

        assert result.auto_matched_count == 0
        assert result.needs_review_count == 1

    def test_rejects_bad_batch_size(self, transfer_service, user_id):
        with pytest.raises(ValidationError):
            transfer_service.bulk_match(user_id, batch_size=0)
