import itertools

import pytest

import boundbuf
from boundbuf import semset

_keys = itertools.count(0x7000)

@pytest.fixture
def key():
    """A semaphore-set key no other test uses."""
    return next(_keys)

@pytest.fixture
def fast():
    """Return a function making settings for a run that's a hundred times
    faster than real time and gives up waiting after half a second."""
    def make(capacity, jobs, producers, consumers, **kwargs):
        kwargs.setdefault('timeout', 0.5)
        kwargs.setdefault('time_unit', 0.01)
        kwargs.setdefault('seed', 12345)
        kwargs.setdefault('key', next(_keys))
        return boundbuf.Settings(capacity, jobs, producers, consumers, **kwargs)
    return make

@pytest.fixture(autouse=True)
def no_leftover_sets():
    before = set(semset._registry)
    yield
    leftover = set(semset._registry) - before
    for k in leftover:
        del semset._registry[k]
    assert not leftover, "semaphore sets left behind: %r" % leftover
