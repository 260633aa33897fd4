# tests/test_concurrency.py

import threading
from library_ledger.errors import ErrorKind, LendingError
from library_ledger.schemas.user import MemberCreate


def run_concurrently(calls):
    """Start every call at once and collect (result, error) pairs."""
    barrier = threading.Barrier(len(calls))
    outcomes = []
    outcomes_lock = threading.Lock()

    def worker(call):
        barrier.wait()
        try:
            result, error = call(), None
        except LendingError as e:
            result, error = None, e
        with outcomes_lock:
            outcomes.append((result, error))

    threads = [threading.Thread(target=worker, args=(call,)) for call in calls]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)
    return outcomes

def test_last_copy_goes_to_exactly_one_borrower(service, single_copy_book):
    user_ids = []
    for i in range(8):
        user = service.register_user(MemberCreate(user_id=f"R{i}", name=f"Reader {i}", email=f"reader{i}@mail.com"))
        user_ids.append(user.user_id)

    outcomes = run_concurrently([
        (lambda uid=uid: service.borrow(uid, single_copy_book.isbn)) for uid in user_ids
    ])

    successes = [result for result, error in outcomes if error is None]
    failures = [error for result, error in outcomes if error is not None]
    assert len(successes) == 1
    assert len(failures) == 7
    assert all(e.kind == ErrorKind.UNAVAILABLE for e in failures)
    assert service.get_book(single_copy_book.isbn).available_copies == 0
    assert len(service.active_transactions()) == 1

def test_limit_holds_under_concurrent_borrows(service, regular_member, many_books):
    outcomes = run_concurrently([
        (lambda isbn=book.isbn: service.borrow(regular_member.user_id, isbn)) for book in many_books[:10]
    ])

    successes = [result for result, error in outcomes if error is None]
    failures = [error for result, error in outcomes if error is not None]
    assert len(successes) == 5
    assert all(e.kind == ErrorKind.LIMIT_EXCEEDED for e in failures)
    assert service.ledger.outstanding_count_for(regular_member.user_id) == 5

def test_concurrent_returns_settle_once(service, sample_book, regular_member):
    txn = service.borrow(regular_member.user_id, sample_book.isbn)

    outcomes = run_concurrently([
        (lambda: service.return_book(txn.transaction_id)) for _ in range(4)
    ])

    failures = [error for result, error in outcomes if error is not None]
    assert len(failures) == 3
    assert all(e.kind == ErrorKind.INVALID_STATE for e in failures)
    assert service.get_book(sample_book.isbn).available_copies == sample_book.total_copies

def test_transaction_ids_unique_under_concurrency(service, premium_member, many_books):
    outcomes = run_concurrently([
        (lambda isbn=book.isbn: service.borrow(premium_member.user_id, isbn)) for book in many_books[:8]
    ])

    ids = [result.transaction_id for result, error in outcomes if error is None]
    assert len(ids) == 8
    assert sorted(ids) == [f"TXN{i:06d}" for i in range(1, 9)]
