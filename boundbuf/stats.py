# FILE INFO ###################################################
# Author: Jason Liu <jasonxliu2010@gmail.com>
# Created on July 2, 2019
# Last Update: Time-stamp: <2019-10-21 09:12:40 liux>
###############################################################

import math, threading

__all__ = ["Samples", "RunStats"]

class Samples(object):
    """Running mean, deviation, minimum and maximum of a series of
    measurements (job durations or waiting times), computed in one
    pass with Welford's algorithm without keeping the samples."""

    def __init__(self, label):
        self.label = label
        self._n = 0
        self._mean = 0.0
        self._varsum = 0.0
        self._min = None
        self._max = None

    def __len__(self):
        return self._n

    def push(self, x):
        """Add a measurement."""
        self._n += 1
        if self._max is None or x > self._max: self._max = x
        if self._min is None or x < self._min: self._min = x
        d = x-self._mean
        self._varsum += d*d*(self._n-1)/self._n
        self._mean += d/self._n

    def mean(self): return self._mean
    def min(self): return self._min
    def max(self): return self._max

    def stdev(self):
        """Return the population standard deviation (zero for fewer than
        two measurements)."""
        if self._n < 2: return 0.0
        return math.sqrt(self._varsum/self._n)

    def summary(self):
        """Return the lines describing the measurements for a report."""
        lines = ["%s: samples=%d" % (self.label, self._n)]
        if self._n > 0:
            lines.append('  mean = %g' % self._mean)
            if self._n > 1:
                lines.append('  stdev = %g' % self.stdev())
            lines.append('  min = %g' % self._min)
            lines.append('  max = %g' % self._max)
        return lines

class RunStats(object):
    """Statistics and the event log of one producer/consumer run.

    The workers report what they do by calling the record methods;
    all of them are safe to call from any thread. The event log is a
    list of (kind, worker, job_id) tuples in the order the events were
    recorded. Since the workers run concurrently, only the relative
    order of the events from the same worker is meaningful.

    """

    # kinds of events
    DEPOSIT     = 'deposit'
    EXECUTE     = 'execute'
    COMPLETE    = 'complete'
    EXHAUSTED   = 'exhausted'
    TIMEOUT     = 'timeout'
    FAILED      = 'failed'

    def __init__(self):
        self._lock = threading.Lock()
        self.events = []
        self.durations = Samples("job durations")
        self.space_waits = Samples("waits for space")
        self.item_waits = Samples("waits for item")

    def record(self, kind, worker, job_id=None):
        with self._lock:
            self.events.append((kind, worker, job_id))

    def record_deposit(self, worker, job, waited):
        with self._lock:
            self.events.append((RunStats.DEPOSIT, worker, job.id))
            self.durations.push(job.duration)
            self.space_waits.push(waited)

    def record_fetch(self, worker, job, waited):
        with self._lock:
            self.events.append((RunStats.EXECUTE, worker, job.id))
            self.item_waits.push(waited)

    def count(self, kind, worker=None):
        """Return the number of events of the given kind, optionally only
        those of the given worker."""
        with self._lock:
            return sum(1 for k, w, _ in self.events
                       if k == kind and (worker is None or w == worker))

    def events_of(self, worker):
        """Return the events of one worker, in the order they happened."""
        with self._lock:
            return [(k, j) for k, w, j in self.events if w == worker]

    def report(self):
        """Return the collected statistics as printable text."""
        lines = []
        lines.append("jobs deposited: %d" % self.count(RunStats.DEPOSIT))
        lines.append("jobs executed: %d" % self.count(RunStats.EXECUTE))
        lines.append("jobs completed: %d" % self.count(RunStats.COMPLETE))
        lines.append("workers timed out: %d" % self.count(RunStats.TIMEOUT))
        for samples in (self.durations, self.space_waits, self.item_waits):
            lines.extend(samples.summary())
        return "\n".join(lines)
