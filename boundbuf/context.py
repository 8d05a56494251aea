# FILE INFO ###################################################
# Author: Jason Liu <jasonxliu2010@gmail.com>
# Created on October 5, 2019
# Last Update: Time-stamp: <2019-10-12 11:30:09 liux>
###############################################################

import time

__all__ = ["SharedContext"]

class SharedContext(object):
    """Everything the workers share.

    The coordinator creates one shared context per run and hands it
    to every producer and consumer when they are created. The workers
    touch the queue only while holding the mutex of the semaphore
    set; the rest of the context is either read-only or thread-safe.

    Attributes:
        settings (Settings): the parameters of the run

        queue (CircularQueue): the bounded buffer of jobs

        sems (SemaphoreSet): the item, space and mutex semaphores

        generator (JobGenerator): random durations and delays

        stats (RunStats): where the workers report their events

        sleep (function): called with a number of seconds to simulate
            the passing of time; time.sleep by default

    """

    def __init__(self, settings, queue, sems, generator, stats, sleep=time.sleep):
        self.settings = settings
        self.queue = queue
        self.sems = sems
        self.generator = generator
        self.stats = stats
        self._sleep = sleep

    def sleep(self, amount):
        """Sleep for the given amount of simulated seconds."""
        if amount > 0:
            self._sleep(amount * self.settings.time_unit)
