# FILE INFO ###################################################
# Author: Jason Liu <jasonxliu2010@gmail.com>
# Created on October 4, 2019
# Last Update: Time-stamp: <2019-10-14 09:55:31 liux>
###############################################################

"""Semaphore sets identified by a key.

A semaphore set bundles a fixed number of semaphores under one key,
much like a System V semaphore array. Sets are registered in a
process-wide table so that any thread can find a set by its key;
creating a set with a key that is already in use fails.

"""

from contextlib import contextmanager
import errno, threading

from .semaphore import Semaphore
from .config import SEMMSL, SEMMNI, SEMVMX
from .errors import ResourceExists, ResourceLimit, OutOfMemory, PermissionDenied, \
    InvalidArgument, ValueOutOfRange, ResourceRemoved, OperationTimeout

__all__ = ["SemaphoreSet", "create", "lookup"]

import logging
log = logging.getLogger(__name__)
log.addHandler(logging.NullHandler())

# a map from keys to the semaphore sets currently in use
_registry = {}
_registry_lock = threading.Lock()

def create(key, nsems, mode=0o666, names=None):
    """Create a semaphore set and register it with the given key.

    Args:
        key (int): the key identifying the set

        nsems (int): the number of semaphores in the set; must be
            between 1 and SEMMSL

        mode (int): permission bits; if the 'others' bits (0o006) are
            clear, threads other than the creator are refused access

        names (list): optional names of the semaphores, for logging

    Returns:
        This function returns the newly created semaphore set, owned
        by the calling thread. All semaphores start at zero.

    The function raises InvalidArgument if nsems is out of range,
    PermissionDenied if the key is in use by a set the caller may not
    access, ResourceExists if the key is in use otherwise,
    ResourceLimit if there are already SEMMNI sets, and OutOfMemory if
    the set can't be allocated.

    """

    if not isinstance(nsems, int) or nsems < 1 or nsems > SEMMSL:
        errmsg = "semset.create(key=%#x, nsems=%r) invalid number of semaphores" % (key, nsems)
        log.error(errmsg)
        raise InvalidArgument(errmsg, creating=True)

    with _registry_lock:
        if key in _registry:
            other = _registry[key]
            if not other._accessible():
                errmsg = "semset.create(key=%#x) permission denied" % key
                log.error(errmsg)
                raise PermissionDenied(errmsg, errno.EACCES)
            errmsg = "semset.create(key=%#x) semaphore set already exists" % key
            log.error(errmsg)
            raise ResourceExists(errmsg)
        if len(_registry) >= SEMMNI:
            errmsg = "semset.create(key=%#x) too many semaphore sets (SEMMNI=%d)" % (key, SEMMNI)
            log.error(errmsg)
            raise ResourceLimit(errmsg)
        try:
            sems = SemaphoreSet(key, nsems, mode, names)
        except MemoryError:
            errmsg = "semset.create(key=%#x, nsems=%d) out of memory" % (key, nsems)
            log.error(errmsg)
            raise OutOfMemory(errmsg)
        _registry[key] = sems

    log.info("created semaphore set key=%#x nsems=%d" % (key, nsems))
    return sems

def lookup(key):
    """Return the semaphore set registered with the given key, or None
    if there isn't one."""
    with _registry_lock:
        return _registry.get(key)

class SemaphoreSet(object):
    """A fixed-size array of semaphores under one key.

    A semaphore set is created using the create() function. The
    semaphores are addressed by their index in the set. Each
    supports a blocking wait, a timed wait, and a signal. Only the
    thread that created the set may destroy it; after that, any
    operation on the set raises ResourceRemoved.

    Instead of an undo log kept by the kernel, the set offers scoped
    acquisition: hold() and transfer() are context managers that give
    a decremented semaphore back on every abnormal exit path, so that
    a thread dying in the middle of a critical section can't leave
    the other threads starved.

    """

    def __init__(self, key, nsems, mode=0o666, names=None):
        self.key = key
        self.mode = mode
        self.owner = threading.get_ident()
        if names is None:
            names = ["sem%d" % i for i in range(nsems)]
        elif len(names) != nsems:
            errmsg = "SemaphoreSet(nsems=%d, names=%r) unmatched number of names" % (nsems, names)
            log.error(errmsg)
            raise ValueError(errmsg)
        self.names = tuple(names)
        self._sems = [Semaphore(0, name) for name in self.names]
        self._removed = False

    def __len__(self):
        return len(self._sems)

    def set_value(self, index, value):
        """Set the semaphore at the given index to the given value.

        Raises InvalidArgument for an unknown index, ValueOutOfRange
        for a value outside 0..SEMVMX, PermissionDenied if the caller
        may not access the set, and ResourceRemoved if the set has
        been destroyed.

        """

        sem = self._sem(index, "set_value")
        if not self._accessible():
            errmsg = "SemaphoreSet.set_value(%d) permission denied" % index
            log.error(errmsg)
            raise PermissionDenied(errmsg, errno.EACCES)
        if not isinstance(value, int) or value < 0 or value > SEMVMX:
            errmsg = "SemaphoreSet.set_value(%d, %r) out of range" % (index, value)
            log.error(errmsg)
            raise ValueOutOfRange(errmsg)
        sem.set(value)
        log.debug("semaphore set key=%#x: %s=%d" % (self.key, sem.name, value))

    def get_value(self, index):
        """Return the current (nonnegative) value of a semaphore."""
        return self._sem(index, "get_value").value()

    def num_blocked(self, index):
        """Return the number of threads blocked on a semaphore."""
        return self._sem(index, "num_blocked").num_blocked()

    def wait(self, index):
        """Block until the semaphore at the given index is positive and then
        decrement it."""
        self._sem(index, "wait").wait()

    def timed_wait(self, index, timeout):
        """Same as wait(), but give up after the given number of seconds.

        Returns:
            True if the semaphore has been decremented; False if the
            timeout expired, in which case the semaphore is unchanged.

        """

        if timeout is not None and timeout < 0:
            errmsg = "SemaphoreSet.timed_wait(%d, timeout=%r) negative timeout" % (index, timeout)
            log.error(errmsg)
            raise ValueError(errmsg)
        return self._sem(index, "timed_wait").wait(timeout)

    def signal(self, index):
        """Increment the semaphore at the given index; never blocks."""
        self._sem(index, "signal").signal()

    @contextmanager
    def hold(self, index):
        """Hold a semaphore for the duration of a with-block.

        The semaphore is decremented on entry and incremented again
        when the block exits, whether normally or by an exception.
        This is typically used with the mutex.

        """

        self.wait(index)
        try:
            yield
        finally:
            self.signal(index)

    @contextmanager
    def transfer(self, src, dst, timeout=None):
        """Move one unit from one semaphore to another across a with-block.

        On entry, the 'src' semaphore is decremented (waiting at most
        'timeout' seconds if given); if the timeout expires,
        OperationTimeout is raised and the block is not executed. When
        the block exits normally, the 'dst' semaphore is incremented.
        If the block raises, the unit is given back to 'src' instead
        and the exception propagates.

        A producer transfers from 'space' to 'item' around a deposit,
        and a consumer from 'item' to 'space' around a fetch.

        """

        if timeout is None:
            self.wait(src)
        elif not self.timed_wait(src, timeout):
            raise OperationTimeout("SemaphoreSet.transfer(%s) timed out after %r seconds" %
                                   (self.names[src], timeout), src, timeout)
        try:
            yield
        except BaseException:
            log.warning("semaphore set key=%#x: rolling back %s" % (self.key, self.names[src]))
            self.signal(src)
            raise
        self.signal(dst)

    def destroy(self):
        """Remove the semaphore set.

        Only the thread that created the set may remove it; otherwise
        PermissionDenied is raised. Threads still blocked on the set
        are left blocked until their timeout (if any) expires.

        """

        if threading.get_ident() != self.owner:
            errmsg = "SemaphoreSet.destroy(key=%#x) caller is not the owner" % self.key
            log.error(errmsg)
            raise PermissionDenied(errmsg, errno.EPERM)
        with _registry_lock:
            if self._removed:
                errmsg = "SemaphoreSet.destroy(key=%#x) already removed" % self.key
                log.error(errmsg)
                raise ResourceRemoved(errmsg)
            self._removed = True
            if _registry.get(self.key) is self:
                del _registry[self.key]
        log.info("destroyed semaphore set key=%#x" % self.key)

    def removed(self):
        """Return whether the semaphore set has been destroyed."""
        return self._removed

    def _accessible(self):
        return threading.get_ident() == self.owner or self.mode & 0o006

    def _sem(self, index, op):
        if self._removed:
            errmsg = "SemaphoreSet.%s(%r) on removed set key=%#x" % (op, index, self.key)
            log.error(errmsg)
            raise ResourceRemoved(errmsg)
        if not isinstance(index, int) or index < 0 or index >= len(self._sems):
            errmsg = "SemaphoreSet.%s(%r) invalid semaphore index" % (op, index)
            log.error(errmsg)
            raise InvalidArgument(errmsg)
        return self._sems[index]

    def __repr__(self):
        return "SemaphoreSet(key=%#x, %s)" % \
            (self.key, ", ".join("%s=%d" % (n, s.value()) for n, s in zip(self.names, self._sems)))
