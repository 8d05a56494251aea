# FILE INFO ###################################################
# Author: Jason Liu <jasonxliu2010@gmail.com>
# Created on October 5, 2019
# Last Update: Time-stamp: <2019-10-14 10:12:44 liux>
###############################################################

import threading, time

from .config import ITEM, SPACE, MUTEX
from .errors import OperationTimeout
from .job import Job
from .stats import RunStats

__all__ = ["Producer", "Consumer"]

import logging
log = logging.getLogger(__name__)
log.addHandler(logging.NullHandler())

# the lines reporting what the workers do
events = logging.getLogger("boundbuf.events")
events.addHandler(logging.NullHandler())

class _Worker(threading.Thread):
    """An independent thread of execution working on the shared queue.

    A worker runs its main loop in its own thread. If the loop raises
    an exception, the worker catches it at the thread boundary, logs
    it, keeps it in 'error', and terminates; the coordinator checks
    for it after joining the thread.

    """

    # the worker is terminated, whatever the reason
    STATE_TERMINATED = 'terminated'

    # why the worker terminated
    EXHAUSTED   = 'exhausted'
    TIMEOUT     = 'timeout'
    FAILED      = 'failed'

    kind = None

    def __init__(self, ctx, ident):
        super().__init__(name="%s(%d)" % (self.kind, ident))
        self.ctx = ctx
        self.worker_id = ident
        self.state = None
        self.reason = None
        self.error = None

    def run(self):
        try:
            self.reason = self.main()
        except Exception as e:
            log.error("%s terminated abnormally: %r" % (self.name, e))
            log.debug("%s traceback:" % self.name, exc_info=True)
            self.error = e
            self.reason = _Worker.FAILED
            self.ctx.stats.record(RunStats.FAILED, self.name)
        finally:
            self.state = _Worker.STATE_TERMINATED

    def main(self):
        raise NotImplementedError

class Producer(_Worker):
    """A producer generates jobs and deposits them into the queue.

    For each of its jobs, the producer picks a random duration, waits
    a random delay to simulate the arrival time, and then waits for a
    free slot in the queue. If no slot frees up before the timeout,
    the producer terminates and abandons its remaining jobs.

    """

    kind = 'Producer'

    STATE_GENERATING        = 'generating'
    STATE_WAITING_FOR_SPACE = 'waiting-for-space'
    STATE_DEPOSITING        = 'depositing'
    STATE_IDLE              = 'idle'

    def main(self):
        ctx = self.ctx
        settings = ctx.settings
        for _ in range(settings.jobs_per_producer):
            self.state = Producer.STATE_GENERATING
            duration = ctx.generator.random_duration(*settings.duration)
            ctx.sleep(ctx.generator.random_duration(*settings.delay))

            self.state = Producer.STATE_WAITING_FOR_SPACE
            started = time.monotonic()
            try:
                with ctx.sems.transfer(SPACE, ITEM, settings.timeout):
                    self.state = Producer.STATE_DEPOSITING
                    with ctx.sems.hold(MUTEX):
                        # the id is taken from the tail under the same
                        # mutex as the deposit
                        job = Job(ctx.queue.tail + 1, duration)
                        ctx.queue.deposit(job)
            except OperationTimeout:
                events.info("%s: terminated due to a timeout" % self.name)
                ctx.stats.record(RunStats.TIMEOUT, self.name)
                return _Worker.TIMEOUT

            ctx.stats.record_deposit(self.name, job, time.monotonic() - started)
            events.info("%s: Job ID %d duration %d" % (self.name, job.id, job.duration))
            self.state = Producer.STATE_IDLE

        events.info("%s: No more jobs to generate" % self.name)
        ctx.stats.record(RunStats.EXHAUSTED, self.name)
        return _Worker.EXHAUSTED

class Consumer(_Worker):
    """A consumer fetches jobs from the queue and executes them.

    Executing a job means sleeping for the job's duration. The
    consumer keeps going until no job shows up in the queue for as
    long as the timeout.

    """

    kind = 'Consumer'

    STATE_WAITING_FOR_ITEM  = 'waiting-for-item'
    STATE_FETCHING          = 'fetching'
    STATE_EXECUTING         = 'executing'

    def main(self):
        ctx = self.ctx
        while True:
            self.state = Consumer.STATE_WAITING_FOR_ITEM
            started = time.monotonic()
            try:
                with ctx.sems.transfer(ITEM, SPACE, ctx.settings.timeout):
                    self.state = Consumer.STATE_FETCHING
                    with ctx.sems.hold(MUTEX):
                        job = ctx.queue.fetch()
            except OperationTimeout:
                break

            ctx.stats.record_fetch(self.name, job, time.monotonic() - started)
            self.state = Consumer.STATE_EXECUTING
            events.info("%s: Job ID %d executing sleep duration %d" %
                        (self.name, job.id, job.duration))
            ctx.sleep(job.duration)
            events.info("%s: Job ID %d completed" % (self.name, job.id))
            ctx.stats.record(RunStats.COMPLETE, self.name, job.id)

        events.info("%s: No more jobs left" % self.name)
        ctx.stats.record(RunStats.TIMEOUT, self.name)
        return _Worker.TIMEOUT
