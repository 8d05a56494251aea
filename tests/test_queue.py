import threading

import pytest

from boundbuf import CircularQueue, Job
from boundbuf.errors import ConcurrentAccessError

def test_initialize():
    q = CircularQueue(3)
    assert (q.head, q.tail, q.capacity) == (0, 0, 3)
    assert len(q.slots) == 3

@pytest.mark.parametrize("capacity", [0, -1, 1.5])
def test_invalid_capacity(capacity):
    with pytest.raises(ValueError):
        CircularQueue(capacity)

def test_deposit_then_fetch():
    q = CircularQueue(4)
    job = Job(q.tail+1, 7)
    q.deposit(job)
    got = q.fetch()
    assert got.duration == 7
    assert got is job

def test_indices_wrap_around():
    q = CircularQueue(2)
    q.deposit(Job(1, 1))
    q.deposit(Job(2, 2))
    assert q.tail == 0
    assert q.fetch() == Job(1, 1)
    q.deposit(Job(1, 3))
    assert q.fetch() == Job(2, 2)
    assert q.fetch() == Job(1, 3)
    assert q.head == 1 and q.tail == 1

def test_fifo_with_counting_discipline():
    # deposits and fetches interleaved while never exceeding the
    # capacity: every fetch returns the oldest job not yet fetched
    q = CircularQueue(3)
    pending = []
    jobs = [Job(i, i) for i in range(20)]
    it = iter(jobs)
    fetched = []
    for step in "ddfdfddfffdddfffdfdf":
        if step == 'd' and len(pending) < q.capacity:
            j = next(it)
            q.deposit(j)
            pending.append(j)
        elif step == 'f' and pending:
            fetched.append(q.fetch())
            assert fetched[-1] is pending.pop(0)
    assert fetched == jobs[:len(fetched)]

def test_teardown():
    q = CircularQueue(2)
    q.teardown()
    assert q.slots is None
    with pytest.raises(RuntimeError):
        q.deposit(Job(1, 1))
    with pytest.raises(RuntimeError):
        q.fetch()

def test_checked_queue_detects_overlap():
    q = CircularQueue(2, checked=True)
    # pretend another thread is inside the queue
    q._guard.acquire()
    try:
        with pytest.raises(ConcurrentAccessError):
            q.deposit(Job(1, 1))
        with pytest.raises(ConcurrentAccessError):
            q.fetch()
    finally:
        q._guard.release()
    assert (q.head, q.tail) == (0, 0)
    q.deposit(Job(1, 1))
    assert q.fetch() == Job(1, 1)

def test_checked_queue_released_after_error():
    q = CircularQueue(1, checked=True)
    q.teardown()
    with pytest.raises(RuntimeError):
        q.fetch()
    assert not q._guard.locked()
