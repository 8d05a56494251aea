# FILE INFO ###################################################
# Author: Jason Liu <jasonxliu2010@gmail.com>
# Created on June 15, 2019
# Last Update: Time-stamp: <2019-10-13 16:40:02 liux>
###############################################################

from collections import deque
import threading

__all__ = ["Semaphore"]

class _Waiter(object):
    """A thread blocked on a semaphore."""

    __slots__ = ('event', 'granted')

    def __init__(self):
        self.event = threading.Event()
        self.granted = False

class Semaphore(object):
    """A counting semaphore shared by threads.

    A semaphore here implements what is commonly called a "counting
    semaphore." Initially, a semaphore can have a nonnegative integer
    count, which indicates the number of available resources. The
    threads atomically increment the semaphore count when resources
    are added or returned to the pool (using the signal() method) and
    atomically decrement the semaphore count when resources are
    removed (using the wait() method). When the semaphore count is
    zero, it means that there are no available resources. In that
    case, a thread trying to decrement the semaphore (to remove a
    resource) will be blocked until more resources are added back to
    the pool, or until its timeout expires if it asked for one.

    Each time a thread waits on a semaphore, the semaphore value will
    be decremented. If the value becomes negative, the thread will be
    blocked; the magnitude of a negative value is the number of
    blocked threads. Each time one signals a semaphore, the semaphore
    value will be incremented. If there are blocked threads, *one* of
    these threads will be unblocked and the resource is handed over
    to it directly, so that no other thread can sneak in and take it
    first. Blocked threads are unblocked in FIFO order (first in
    first out).

    A thread that gives up waiting because of a timeout takes itself
    off the blocked queue and bumps the value back up; it does not
    consume a resource. If a signal arrives at the same moment as the
    timeout, the signal wins and the wait is considered successful.

    """

    def __init__(self, initval=0, name=None):
        """Create a semaphore with the given initial value (must be
        nonnegative) and an optional name for debugging."""

        assert initval >= 0
        self.name = name
        self.val = initval
        self.blocked = deque()
        self._lock = threading.Lock()

    def wait(self, timeout=None):
        """Waiting on a semphore will decrement its value; and if it becomes
        negative, the calling thread needs to be blocked.

        Args:
            timeout (float): the maximum number of seconds to block;
                if None (the default), the thread blocks until the
                semaphore is signaled

        Returns:
            True if the semaphore has been decremented; False if the
            timeout expired first, in which case the semaphore value
            is left untouched.

        """

        with self._lock:
            w = self._try_wait()
        if w is None:
            return True

        w.event.wait(timeout)

        with self._lock:
            if w.granted:
                return True
            self._cancel_wait(w)
            return False

    def signal(self):
        """Signaling a semphore increments its value; and if there are waiting
        threads, one of them will be unblocked."""

        with self._lock:
            self.val += 1
            if len(self.blocked) > 0:
                # there're waiting threads, we unblock one
                self._grant(self.blocked.popleft())

    def set(self, value):
        """Set the semaphore to the given nonnegative value.

        Any blocked threads are woken up as long as the new value
        allows; the rest remain blocked.

        """

        assert value >= 0
        with self._lock:
            n = min(value, len(self.blocked))
            self.val = value - len(self.blocked)
            for _ in range(n):
                self._grant(self.blocked.popleft())
            assert len(self.blocked) == max(-self.val, 0)

    def value(self):
        """Return the number of available resources (never negative)."""
        with self._lock:
            return max(self.val, 0)

    def num_blocked(self):
        """Return the number of threads blocked on the semaphore."""
        with self._lock:
            return len(self.blocked)

    def _grant(self, w):
        w.granted = True
        w.event.set()

    def _try_wait(self):
        """Conditional wait on the semaphore.

        This function must be called with the lock held. It behaves
        the same as the wait() function, except that it does not
        block: it returns the waiter record if the thread needs to be
        suspended, or None if the semaphore has been decremented
        without blocking.

        """

        self.val -= 1
        if self.val < 0:
            w = _Waiter()
            self.blocked.append(w)
            assert len(self.blocked) == -self.val
            return w
        else:
            # nothing to be done; there are no waiting threads
            assert len(self.blocked) == 0
            return None

    def _cancel_wait(self, w):
        """Cancel the previous try-wait.

        This function must be called with the lock held, when the
        wait didn't happen because of timeout.

        """

        # at least this thread is currently waiting, so the semaphore
        # value must be negative
        assert self.val < 0

        # we are going to remove this thread from the waiting queue,
        # so the semaphore value needs to be bumped back up
        self.val += 1
        self.blocked.remove(w)

    def __repr__(self):
        return "Semaphore(name=%r, val=%d, blocked=%d)" % \
            (self.name, self.val, len(self.blocked))
