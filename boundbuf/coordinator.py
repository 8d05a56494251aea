# FILE INFO ###################################################
# Author: Jason Liu <jasonxliu2010@gmail.com>
# Created on October 5, 2019
# Last Update: Time-stamp: <2019-10-14 10:40:26 liux>
###############################################################

import time

from . import semset
from .config import NUM_SEMAPHORES, ITEM, SPACE, MUTEX, COUNTER_NAMES
from .context import SharedContext
from .errors import ResourceError, ResourceInitError, WorkerError
from .job import JobGenerator
from .queue import CircularQueue
from .stats import RunStats
from .worker import Producer, Consumer

__all__ = ["Coordinator"]

import logging
log = logging.getLogger(__name__)
log.addHandler(logging.NullHandler())

class Coordinator(object):
    """Runs the producers and consumers on a shared bounded buffer.

    The coordinator owns the shared state for the duration of a run:
    it creates the semaphore set and the circular queue, starts the
    producer and consumer threads, waits for all of them to finish,
    and then releases the semaphore set and the queue.

    """

    def __init__(self, settings, sleep=time.sleep):
        """Create a coordinator for the given settings. 'sleep' is the
        function used by the workers to let time pass."""

        self.settings = settings
        self._sleep = sleep
        self.producers = []
        self.consumers = []

    def run(self):
        """Run the producers and consumers to completion.

        Returns:
            The statistics (RunStats) of the run.

        Raises ResourceCreationError (or PermissionDenied or
        InvalidArgument) if the semaphore set can't be created, and
        ResourceInitError if one of the semaphores can't be
        initialized, in which case the semaphore set has already been
        removed. Raises WorkerError after everything has been torn down
        if any of the workers terminated abnormally.

        """

        settings = self.settings
        log.info("starting run: %r" % settings)

        sems = semset.create(settings.key, NUM_SEMAPHORES, names=COUNTER_NAMES)
        try:
            self._init_semaphores(sems)
        except ResourceInitError as e:
            log.error("Error found in semaphore '%s' initialization" % e.counter)
            sems.destroy()
            raise

        queue = CircularQueue(settings.capacity, checked=True)
        stats = RunStats()
        ctx = SharedContext(settings, queue, sems, JobGenerator(settings.seed),
                            stats, self._sleep)

        try:
            self.producers = [Producer(ctx, i+1) for i in range(settings.producers)]
            self.consumers = [Consumer(ctx, i+1) for i in range(settings.consumers)]
            for w in self.producers + self.consumers:
                w.start()

            # wait for the producers first and then the consumers
            for w in self.producers + self.consumers:
                w.join()
                log.debug("%s joined (%s)" % (w.name, w.reason))
        finally:
            sems.destroy()
            queue.teardown()

        failed = [w for w in self.producers + self.consumers if w.error is not None]
        if failed:
            errmsg = "%d worker(s) terminated abnormally: %s" % \
                     (len(failed), ", ".join(w.name for w in failed))
            log.error(errmsg)
            raise WorkerError(errmsg, failed)

        log.info("run finished")
        return stats

    def _init_semaphores(self, sems):
        for index, value in ((ITEM, 0),
                             (SPACE, self.settings.capacity),
                             (MUTEX, 1)):
            try:
                sems.set_value(index, value)
            except ResourceError as e:
                raise ResourceInitError(COUNTER_NAMES[index], e)
