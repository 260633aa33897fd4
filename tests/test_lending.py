# tests/test_lending.py

import pytest
from datetime import date, timedelta
from library_ledger.errors import ErrorKind, LendingError
from library_ledger.models.transaction import TransactionStatus


def test_borrow_creates_active_transaction(service, clock, sample_book, regular_member):
    txn = service.borrow(regular_member.user_id, sample_book.isbn)

    assert txn.transaction_id == "TXN000001"
    assert txn.user_id == regular_member.user_id
    assert txn.isbn == sample_book.isbn
    assert txn.status == TransactionStatus.ACTIVE
    assert txn.borrow_date == clock.today
    assert txn.due_date == clock.today + timedelta(days=14)
    assert txn.return_date is None
    assert txn.fine == 0
    assert service.get_book(sample_book.isbn).available_copies == 2

def test_transaction_ids_increase(service, sample_book, regular_member, premium_member):
    ids = [
        service.borrow(regular_member.user_id, sample_book.isbn).transaction_id,
        service.borrow(premium_member.user_id, sample_book.isbn).transaction_id,
    ]
    assert ids == ["TXN000001", "TXN000002"]

def test_borrow_unknown_user_or_book(service, sample_book, regular_member):
    with pytest.raises(LendingError) as exc_info:
        service.borrow("ghost", sample_book.isbn)
    assert exc_info.value.kind == ErrorKind.NOT_FOUND

    with pytest.raises(LendingError) as exc_info:
        service.borrow(regular_member.user_id, "no-such-isbn")
    assert exc_info.value.kind == ErrorKind.NOT_FOUND

    assert service.active_transactions() == []
    assert service.get_book(sample_book.isbn).available_copies == 3

def test_single_copy_scenario(service, single_copy_book, regular_member, premium_member):
    """Last copy out: nobody else can borrow until it comes back."""
    txn = service.borrow(regular_member.user_id, single_copy_book.isbn)
    assert service.get_book(single_copy_book.isbn).available_copies == 0

    for user_id in (premium_member.user_id, regular_member.user_id):
        with pytest.raises(LendingError) as exc_info:
            service.borrow(user_id, single_copy_book.isbn)
        assert exc_info.value.kind == ErrorKind.UNAVAILABLE

    returned = service.return_book(txn.transaction_id)
    assert returned.fine == 0
    assert service.get_book(single_copy_book.isbn).available_copies == 1

def test_unavailable_borrow_does_not_mutate(service, single_copy_book, regular_member, premium_member):
    service.borrow(regular_member.user_id, single_copy_book.isbn)
    before = service.active_transactions()

    with pytest.raises(LendingError):
        service.borrow(premium_member.user_id, single_copy_book.isbn)

    assert service.active_transactions() == before
    assert service.user_transactions(premium_member.user_id) == []
    assert service.get_book(single_copy_book.isbn).available_copies == 0

def test_member_limit(service, regular_member, many_books):
    """A regular member with five loans cannot take a sixth."""
    for book in many_books[:5]:
        service.borrow(regular_member.user_id, book.isbn)
    assert service.ledger.active_count_for(regular_member.user_id) == 5

    with pytest.raises(LendingError) as exc_info:
        service.borrow(regular_member.user_id, many_books[5].isbn)
    assert exc_info.value.kind == ErrorKind.LIMIT_EXCEEDED
    assert service.get_book(many_books[5].isbn).available_copies == 1
    assert len(service.user_transactions(regular_member.user_id)) == 5

def test_premium_member_limit(service, premium_member, many_books):
    for book in many_books[:10]:
        service.borrow(premium_member.user_id, book.isbn)
    with pytest.raises(LendingError) as exc_info:
        service.borrow(premium_member.user_id, many_books[10].isbn)
    assert exc_info.value.kind == ErrorKind.LIMIT_EXCEEDED

def test_returning_frees_a_slot(service, regular_member, many_books):
    txns = [service.borrow(regular_member.user_id, book.isbn) for book in many_books[:5]]
    service.return_book(txns[0].transaction_id)
    txn = service.borrow(regular_member.user_id, many_books[5].isbn)
    assert txn.status == TransactionStatus.ACTIVE

def test_availability_checked_before_limit(service, single_copy_book, regular_member, premium_member, many_books):
    """A user at the limit asking for an unavailable book hears about availability first."""
    service.borrow(premium_member.user_id, single_copy_book.isbn)
    for book in many_books[:5]:
        service.borrow(regular_member.user_id, book.isbn)

    with pytest.raises(LendingError) as exc_info:
        service.borrow(regular_member.user_id, single_copy_book.isbn)
    assert exc_info.value.kind == ErrorKind.UNAVAILABLE

def test_return_on_time_has_no_fine(service, clock, sample_book, regular_member):
    txn = service.borrow(regular_member.user_id, sample_book.isbn)
    clock.advance(14)

    returned = service.return_book(txn.transaction_id)
    assert returned.status == TransactionStatus.RETURNED
    assert returned.return_date == txn.due_date
    assert returned.fine == 0

def test_return_ten_days_late(service, clock, sample_book, regular_member):
    """Due ten days ago, returned today: 10 x 5 = 50."""
    txn = service.borrow(regular_member.user_id, sample_book.isbn)
    clock.today = txn.due_date + timedelta(days=10)

    returned = service.return_book(txn.transaction_id)
    assert returned.status == TransactionStatus.RETURNED
    assert returned.fine == 50.0
    assert service.total_fines_collected() == 50.0

@pytest.mark.parametrize("days_late, expected_fine", [(1, 5.0), (3, 15.0), (30, 150.0)])
def test_fine_per_day(service, clock, sample_book, regular_member, days_late, expected_fine):
    txn = service.borrow(regular_member.user_id, sample_book.isbn)
    clock.today = txn.due_date + timedelta(days=days_late)
    assert service.return_book(txn.transaction_id).fine == expected_fine

def test_fine_rate_follows_settings(settings, clock, service):
    assert service.ledger.fine_for(date(2024, 1, 1), date(2024, 1, 5)) == 20.0
    assert service.ledger.fine_for(date(2024, 1, 5), date(2024, 1, 1)) == 0

def test_double_return(service, clock, sample_book, regular_member):
    """Second return fails and leaves fine and return date as settled."""
    txn = service.borrow(regular_member.user_id, sample_book.isbn)
    clock.today = txn.due_date + timedelta(days=2)
    first = service.return_book(txn.transaction_id)

    clock.advance(30)
    with pytest.raises(LendingError) as exc_info:
        service.return_book(txn.transaction_id)
    assert exc_info.value.kind == ErrorKind.INVALID_STATE

    after = service.get_transaction(txn.transaction_id)
    assert after.fine == first.fine == 10.0
    assert after.return_date == first.return_date
    assert after.status == TransactionStatus.RETURNED
    assert service.get_book(sample_book.isbn).available_copies == 3

def test_return_unknown_transaction(service):
    with pytest.raises(LendingError) as exc_info:
        service.return_book("TXN999999")
    assert exc_info.value.kind == ErrorKind.NOT_FOUND

def test_borrow_then_return_restores_counter(service, sample_book, regular_member):
    before = service.get_book(sample_book.isbn).available_copies
    txn = service.borrow(regular_member.user_id, sample_book.isbn)
    service.return_book(txn.transaction_id)
    assert service.get_book(sample_book.isbn).available_copies == before

def test_counters_stay_in_bounds(service, clock, sample_book, regular_member, premium_member, librarian):
    """0 <= available <= total through a mixed borrow/return sequence, and open loans match the counter."""
    users = [regular_member.user_id, premium_member.user_id, librarian.user_id]
    open_txns = []
    for step in range(20):
        book = service.get_book(sample_book.isbn)
        assert 0 <= book.available_copies <= book.total_copies
        assert book.total_copies - book.available_copies == len(open_txns)

        if step % 3 == 2 and open_txns:
            service.return_book(open_txns.pop(0))
        else:
            try:
                open_txns.append(service.borrow(users[step % 3], sample_book.isbn).transaction_id)
            except LendingError as e:
                assert e.kind == ErrorKind.UNAVAILABLE
        clock.advance(1)

    book = service.get_book(sample_book.isbn)
    assert 0 <= book.available_copies <= book.total_copies
    assert len(service.active_transactions()) == len(open_txns)

def test_user_transactions_in_order(service, sample_book, single_copy_book, regular_member, premium_member):
    first = service.borrow(regular_member.user_id, sample_book.isbn)
    service.borrow(premium_member.user_id, sample_book.isbn)
    second = service.borrow(regular_member.user_id, single_copy_book.isbn)
    service.return_book(first.transaction_id)

    txns = service.user_transactions(regular_member.user_id)
    assert [t.transaction_id for t in txns] == [first.transaction_id, second.transaction_id]
    assert [t.status for t in txns] == [TransactionStatus.RETURNED, TransactionStatus.ACTIVE]

def test_user_transactions_unknown_user(service):
    with pytest.raises(LendingError) as exc_info:
        service.user_transactions("ghost")
    assert exc_info.value.kind == ErrorKind.NOT_FOUND

def test_active_transactions_exclude_returned(service, sample_book, regular_member):
    kept = service.borrow(regular_member.user_id, sample_book.isbn)
    gone = service.borrow(regular_member.user_id, sample_book.isbn)
    service.return_book(gone.transaction_id)
    assert [t.transaction_id for t in service.active_transactions()] == [kept.transaction_id]
