# FILE INFO ###################################################
# Author: Jason Liu <jasonxliu2010@gmail.com>
# Created on October 4, 2019
# Last Update: Time-stamp: <2019-10-10 14:03:58 liux>
###############################################################

from collections import namedtuple
import random, threading, time

__all__ = ["Job", "JobGenerator"]

import logging
log = logging.getLogger(__name__)
log.addHandler(logging.NullHandler())

# a unit of simulated work: its id and its service time in seconds
Job = namedtuple('Job', ['id', 'duration'])

class JobGenerator(object):
    """Pseudo-random durations for jobs and for the delays between them.

    All producers share one generator, which is seeded once when it
    is created. The numbers are only used to vary the simulated
    service times and inter-arrival times.

    """

    def __init__(self, seed=None):
        """Seed the generator; if the seed is None, the current time is
        used."""
        if seed is None:
            seed = int(time.time())
        self.seed = seed
        self._rng = random.Random(seed)
        self._lock = threading.Lock()
        log.info("job generator seeded with %d" % seed)

    def random_duration(self, min, max):
        """Return a pseudo-random integer between min (inclusive) and min+max
        (exclusive)."""
        if max <= 0:
            errmsg = "JobGenerator.random_duration(min=%r, max=%r) non-positive max" % (min, max)
            log.error(errmsg)
            raise ValueError(errmsg)
        with self._lock:
            return min + self._rng.randrange(max)
