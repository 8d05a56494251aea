# FILE INFO ###################################################
# Author: Jason Liu <jasonxliu2010@gmail.com>
# Created on October 4, 2019
# Last Update: Time-stamp: <2019-10-13 21:17:40 liux>
###############################################################

import threading

from .errors import ConcurrentAccessError

__all__ = ["CircularQueue"]

import logging
log = logging.getLogger(__name__)
log.addHandler(logging.NullHandler())

class CircularQueue(object):
    """A fixed-size ring buffer of jobs.

    The queue keeps a head index (the next slot to fetch from) and a
    tail index (the next slot to deposit into), both wrapping around
    at the capacity. It does not count its entries and does not
    check whether it is full or empty: the caller is expected to
    have decremented the 'space' semaphore before a deposit and the
    'item' semaphore before a fetch, and to hold the mutex during
    both. A deposit into a full queue silently overwrites the oldest
    entry; a fetch from an empty queue returns whatever is left in
    the slot.

    If the queue is created with checked=True, deposit() and fetch()
    detect two threads being inside the queue at the same time (which
    can only happen if the caller doesn't hold the mutex) and raise
    ConcurrentAccessError.

    """

    def __init__(self, capacity, checked=False):
        """Allocate the slots and set head and tail to zero; the capacity
        must be a positive integer."""

        if not isinstance(capacity, int) or capacity <= 0:
            errmsg = "CircularQueue(capacity=%r) non-positive capacity" % capacity
            log.error(errmsg)
            raise ValueError(errmsg)
        self.head = 0
        self.tail = 0
        self.capacity = capacity
        self.slots = [None] * capacity
        self._guard = threading.Lock() if checked else None

    def deposit(self, job):
        """Write the job at the tail and advance the tail."""
        self._enter("deposit")
        try:
            self.slots[self.tail] = job
            self.tail = (self.tail + 1) % self.capacity
        finally:
            self._leave()

    def fetch(self):
        """Read the job at the head, advance the head, and return the job."""
        self._enter("fetch")
        try:
            job = self.slots[self.head]
            self.head = (self.head + 1) % self.capacity
            return job
        finally:
            self._leave()

    def teardown(self):
        """Release the slots; the queue can't be used afterwards."""
        self.slots = None

    def _enter(self, op):
        if self.slots is None:
            errmsg = "CircularQueue.%s() after teardown" % op
            log.error(errmsg)
            raise RuntimeError(errmsg)
        if self._guard is not None and not self._guard.acquire(blocking=False):
            errmsg = "CircularQueue.%s() concurrent access from %s" % \
                     (op, threading.current_thread().name)
            log.error(errmsg)
            raise ConcurrentAccessError(errmsg)

    def _leave(self):
        if self._guard is not None:
            self._guard.release()

    def __repr__(self):
        return "CircularQueue(capacity=%d, head=%d, tail=%d)" % \
            (self.capacity, self.head, self.tail)
