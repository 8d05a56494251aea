# FILE INFO ###################################################
# Author: Jason Liu <jasonxliu2010@gmail.com>
# Created on October 3, 2019
# Last Update: Time-stamp: <2019-10-12 10:21:47 liux>
###############################################################

"""Exceptions raised by boundbuf, and the diagnostic text that goes
with the errno of a failed semaphore-set operation."""

import errno as _errno

__all__ = ["BoundbufError", "ConfigurationError", "ResourceError",
           "ResourceCreationError", "ResourceExists", "ResourceLimit",
           "OutOfMemory", "PermissionDenied", "InvalidArgument",
           "ValueOutOfRange", "ResourceRemoved", "ResourceInitError",
           "OperationTimeout", "ConcurrentAccessError", "WorkerError",
           "semget_diagnostic", "semctl_diagnostic"]

# taken from the linux manual page for semget(2)
_SEMGET_ERRORS = {
    _errno.EACCES: "A semaphore set exists for key, but the calling process does not "
                   "have permission to access the set.\n"
                   "Please use a different key (see the --key option).",
    _errno.EEXIST: "A semaphore set already exists for key.\n"
                   "Please verify that no other run is using the same key, or use a "
                   "different key (see the --key option).",
    _errno.ENOMEM: "A semaphore set has to be created but the system does not have "
                   "enough memory for the new data structure.",
    _errno.ENOSPC: "A semaphore set has to be created but the system limit for the "
                   "maximum number of semaphore sets (SEMMNI) would be exceeded.",
    _errno.EINVAL: "nsems is less than 1 or greater than the limit on the number of "
                   "semaphores per semaphore set (SEMMSL).",
    _errno.ENOENT: "No semaphore set exists for key.",
}

# taken from the linux manual page for semctl(2)
_SEMCTL_ERRORS = {
    _errno.EACCES: "The calling process does not have the required permissions on "
                   "the semaphore set.",
    _errno.EIDRM:  "The semaphore set was removed.",
    _errno.EINVAL: "Invalid value for the semaphore index or the semaphore set.",
    _errno.EPERM:  "The semaphore set can only be removed by its creator.",
    _errno.ERANGE: "The value to which semval is to be set is less than 0 or "
                   "greater than the implementation limit SEMVMX.",
}

def semget_diagnostic(err):
    """Return the message explaining why a semaphore set could not be
    created, given the errno."""
    return _SEMGET_ERRORS.get(err, "Unknown error (errno=%d)." % err)

def semctl_diagnostic(err):
    """Return the message explaining why a control operation on a
    semaphore set failed, given the errno."""
    return _SEMCTL_ERRORS.get(err, "Unknown error (errno=%d)." % err)

# exit status for a bad command-line argument or setting
EXIT_NON_POSITIVE_INTEGER = 65

class BoundbufError(Exception):
    """Base class for all errors raised by boundbuf."""

class ConfigurationError(BoundbufError):
    """Bad command-line arguments or settings; reported before any
    resource is created."""

    def __init__(self, msg, exit_status=EXIT_NON_POSITIVE_INTEGER):
        super().__init__(msg)
        self.exit_status = exit_status

class ResourceError(BoundbufError):
    """A semaphore-set operation failed; 'errno' tells why."""

    errno = 0

    def __init__(self, msg, err=None):
        super().__init__(msg)
        if err is not None:
            self.errno = err

    @property
    def diagnostic(self):
        return semctl_diagnostic(self.errno)

class ResourceCreationError(ResourceError):
    """The semaphore set could not be created."""

    @property
    def diagnostic(self):
        return semget_diagnostic(self.errno)

class ResourceExists(ResourceCreationError):
    errno = _errno.EEXIST

class ResourceLimit(ResourceCreationError):
    errno = _errno.ENOSPC

class OutOfMemory(ResourceCreationError):
    errno = _errno.ENOMEM

class PermissionDenied(ResourceError):
    """Raised with EACCES when creating over a set one may not access,
    and with EPERM when a non-owner tries to remove the set."""
    errno = _errno.EACCES

    @property
    def diagnostic(self):
        if self.errno == _errno.EACCES:
            return semget_diagnostic(self.errno)
        return semctl_diagnostic(self.errno)

class InvalidArgument(ResourceError):
    errno = _errno.EINVAL

    def __init__(self, msg, err=None, creating=False):
        super().__init__(msg, err)
        self.creating = creating

    @property
    def diagnostic(self):
        if self.creating:
            return semget_diagnostic(self.errno)
        return semctl_diagnostic(self.errno)

class ValueOutOfRange(ResourceError):
    errno = _errno.ERANGE

class ResourceRemoved(ResourceError):
    errno = _errno.EIDRM

class ResourceInitError(ResourceError):
    """One of the counters in the semaphore set failed to initialize."""

    def __init__(self, counter, cause):
        super().__init__("Error found in semaphore '%s' initialization due to: %s" %
                         (counter, cause), cause.errno)
        self.counter = counter
        self.cause = cause

    @property
    def diagnostic(self):
        return self.cause.diagnostic

class OperationTimeout(BoundbufError):
    """A timed wait on a semaphore expired."""

    def __init__(self, msg, index=None, timeout=None):
        super().__init__(msg)
        self.index = index
        self.timeout = timeout

class ConcurrentAccessError(BoundbufError):
    """Two threads were found inside the queue at the same time."""

class WorkerError(BoundbufError):
    """One or more workers terminated abnormally."""

    def __init__(self, msg, workers):
        super().__init__(msg)
        self.workers = workers
