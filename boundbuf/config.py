# FILE INFO ###################################################
# Author: Jason Liu <jasonxliu2010@gmail.com>
# Created on October 3, 2019
# Last Update: Time-stamp: <2019-10-14 08:02:15 liux>
###############################################################

"""Named constants and the settings of a producer/consumer run."""

from .errors import ConfigurationError, EXIT_NON_POSITIVE_INTEGER

__all__ = ["SEM_KEY", "NUM_SEMAPHORES", "ITEM", "SPACE", "MUTEX", "COUNTER_NAMES",
           "TIMEOUT", "JOB_DURATION", "ARRIVAL_DELAY", "SEMMSL", "SEMMNI", "SEMVMX",
           "EXIT_OK", "EXIT_INCORRECT_NUMBER_OF_ARGUMENTS",
           "EXIT_NON_POSITIVE_INTEGER", "EXIT_WORKER_FAILURE", "Settings"]

import logging
log = logging.getLogger(__name__)
log.addHandler(logging.NullHandler())

# the key identifying the semaphore set; runs using the same key at
# the same time collide
SEM_KEY = 0x4A0B

# the semaphores in the set and their indices
NUM_SEMAPHORES = 3
ITEM  = 0 # number of filled slots
SPACE = 1 # number of free slots
MUTEX = 2 # exclusive access to the queue
COUNTER_NAMES = ("item", "space", "mutex")

# seconds a worker waits for item/space before giving up
TIMEOUT = 20

# (min, span) pairs: a random value is drawn from [min, min+span)
JOB_DURATION  = (1, 10) # service time of a job
ARRIVAL_DELAY = (1, 5)  # time between two jobs from the same producer

# system limits, as with linux defaults
SEMMSL = 32000       # max semaphores per set
SEMMNI = 32000       # max semaphore sets
SEMVMX = 32767       # max value of a semaphore

# process exit status
EXIT_OK = 0
EXIT_INCORRECT_NUMBER_OF_ARGUMENTS = 64
EXIT_WORKER_FAILURE = 70

class Settings(object):
    """The parameters of one run.

    The four integers (buffer capacity, jobs per producer, number of
    producers, number of consumers) come from the command line. The
    rest have defaults from the constants above and are overridden
    mostly by tests that want a run to finish quickly.

    Args:
        capacity (int): the number of slots in the circular queue;
            must be positive

        jobs_per_producer (int): the number of jobs each producer
            generates before it stops

        producers (int): the number of producer threads

        consumers (int): the number of consumer threads

        timeout (float): seconds a worker waits on 'space' or 'item'
            before it terminates

        duration (tuple): (min, span) for the job durations

        delay (tuple): (min, span) for the delay between two jobs

        time_unit (float): real seconds per simulated second; it
            scales all sleeps (but not the timeout)

        seed (int): seed for the job generator; if None, the current
            time is used

        key (int): the key of the semaphore set

    """

    def __init__(self, capacity, jobs_per_producer, producers, consumers,
                 timeout=TIMEOUT, duration=JOB_DURATION, delay=ARRIVAL_DELAY,
                 time_unit=1.0, seed=None, key=SEM_KEY):
        self.capacity = capacity
        self.jobs_per_producer = jobs_per_producer
        self.producers = producers
        self.consumers = consumers
        self.timeout = timeout
        self.duration = tuple(duration)
        self.delay = tuple(delay)
        self.time_unit = time_unit
        self.seed = seed
        self.key = key
        self.validate()

    def validate(self):
        """Raise ConfigurationError if any of the settings is out of range."""
        for name in ('capacity', 'jobs_per_producer', 'producers', 'consumers'):
            v = getattr(self, name)
            if not isinstance(v, int) or isinstance(v, bool) or v < 0:
                errmsg = "Settings(%s=%r) not a non-negative integer" % (name, v)
                log.error(errmsg)
                raise ConfigurationError(errmsg)
        if self.capacity == 0:
            errmsg = "Settings(capacity=0) buffer must have at least one slot"
            log.error(errmsg)
            raise ConfigurationError(errmsg)
        if self.timeout is not None and self.timeout < 0:
            errmsg = "Settings(timeout=%r) negative timeout" % self.timeout
            log.error(errmsg)
            raise ConfigurationError(errmsg)
        for name in ('duration', 'delay'):
            rng = getattr(self, name)
            if len(rng) != 2 or rng[0] < 0 or rng[1] <= 0:
                errmsg = "Settings(%s=%r) expects (min, span) with span > 0" % (name, rng)
                log.error(errmsg)
                raise ConfigurationError(errmsg)
        if self.time_unit < 0:
            errmsg = "Settings(time_unit=%r) negative time unit" % self.time_unit
            log.error(errmsg)
            raise ConfigurationError(errmsg)

    def __repr__(self):
        return "Settings(capacity=%d, jobs_per_producer=%d, producers=%d, consumers=%d, " \
            "timeout=%r, duration=%r, delay=%r, time_unit=%r, seed=%r, key=%#x)" % \
            (self.capacity, self.jobs_per_producer, self.producers, self.consumers,
             self.timeout, self.duration, self.delay, self.time_unit, self.seed, self.key)
