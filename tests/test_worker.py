import logging

import pytest

from boundbuf import semset, Settings, SharedContext, CircularQueue, JobGenerator, \
    RunStats, Producer, Consumer, ITEM, SPACE, MUTEX, COUNTER_NAMES

class Env(object):
    """A shared context with a semaphore set initialized for the given
    capacity; workers don't really sleep."""

    def __init__(self, key, capacity, jobs=1, timeout=0.2):
        self.settings = Settings(capacity, jobs, 1, 1, timeout=timeout, key=key, seed=1)
        self.sems = semset.create(key, 3, names=COUNTER_NAMES)
        self.sems.set_value(SPACE, capacity)
        self.sems.set_value(MUTEX, 1)
        self.slept = []
        self.ctx = SharedContext(self.settings, CircularQueue(capacity, checked=True),
                                 self.sems, JobGenerator(1), RunStats(), self.slept.append)

    def close(self):
        self.sems.destroy()

@pytest.fixture
def env(key):
    envs = []
    def make(*args, **kwargs):
        envs.append(Env(key+0x100*len(envs), *args, **kwargs))
        return envs[-1]
    yield make
    for e in envs:
        e.close()

def run(worker):
    worker.start()
    worker.join(10)
    assert not worker.is_alive()
    return worker

def test_producer_exhausts_jobs(env, caplog):
    e = env(4, jobs=3)
    caplog.set_level(logging.INFO, logger="boundbuf.events")
    p = run(Producer(e.ctx, 1))
    assert p.reason == Producer.EXHAUSTED
    assert p.state == Producer.STATE_TERMINATED
    assert p.error is None
    assert e.sems.get_value(ITEM) == 3
    assert e.sems.get_value(SPACE) == 1
    assert e.sems.get_value(MUTEX) == 1
    assert [k for k, _ in e.ctx.stats.events_of("Producer(1)")] == \
        [RunStats.DEPOSIT]*3 + [RunStats.EXHAUSTED]
    # each job is preceded by an arrival delay
    assert len(e.slept) == 3
    assert all(1 <= d <= 5 for d in e.slept)
    lines = [r.getMessage() for r in caplog.records if r.name == "boundbuf.events"]
    assert lines[-1] == "Producer(1): No more jobs to generate"
    assert lines[0].startswith("Producer(1): Job ID 1 duration ")
    assert all("timeout" not in l for l in lines)

def test_producer_job_ids_and_durations(env):
    e = env(2, jobs=2)
    run(Producer(e.ctx, 1))
    q = e.ctx.queue
    assert [j.id for j in q.slots] == [1, 2]
    assert all(1 <= j.duration <= 10 for j in q.slots)

def test_producer_times_out_on_full_buffer(env, caplog):
    e = env(1, jobs=3)
    caplog.set_level(logging.INFO, logger="boundbuf.events")
    p = run(Producer(e.ctx, 2))
    assert p.reason == Producer.TIMEOUT
    assert e.ctx.stats.count(RunStats.DEPOSIT) == 1
    assert e.ctx.stats.count(RunStats.EXHAUSTED) == 0
    lines = [r.getMessage() for r in caplog.records if r.name == "boundbuf.events"]
    assert lines[-1] == "Producer(2): terminated due to a timeout"
    assert "Producer(2): No more jobs to generate" not in lines
    # the abandoned job still waited for its arrival
    assert len(e.slept) == 2

def test_producer_with_no_jobs(env):
    e = env(1, jobs=0)
    p = run(Producer(e.ctx, 1))
    assert p.reason == Producer.EXHAUSTED
    assert e.slept == []

def test_consumer_times_out_on_empty_buffer(env, caplog):
    e = env(2, timeout=0.2)
    caplog.set_level(logging.INFO, logger="boundbuf.events")
    c = run(Consumer(e.ctx, 1))
    assert c.reason == Consumer.TIMEOUT
    assert e.ctx.stats.events_of("Consumer(1)") == [(RunStats.TIMEOUT, None)]
    assert [r.getMessage() for r in caplog.records if r.name == "boundbuf.events"] == \
        ["Consumer(1): No more jobs left"]

def test_consumer_executes_jobs_in_order(env, caplog):
    e = env(3)
    from boundbuf import Job
    for job in (Job(1, 4), Job(2, 9)):
        e.ctx.queue.deposit(job)
        e.sems.wait(SPACE)
        e.sems.signal(ITEM)
    caplog.set_level(logging.INFO, logger="boundbuf.events")
    c = run(Consumer(e.ctx, 1))
    assert c.reason == Consumer.TIMEOUT
    assert e.slept == [4, 9]
    assert e.sems.get_value(SPACE) == 3
    assert e.sems.get_value(ITEM) == 0
    assert [r.getMessage() for r in caplog.records if r.name == "boundbuf.events"] == [
        "Consumer(1): Job ID 1 executing sleep duration 4",
        "Consumer(1): Job ID 1 completed",
        "Consumer(1): Job ID 2 executing sleep duration 9",
        "Consumer(1): Job ID 2 completed",
        "Consumer(1): No more jobs left",
    ]

def test_crashing_worker_rolls_back(env):
    e = env(2)
    def broken(job):
        raise IOError("disk on fire")
    e.ctx.queue.deposit = broken
    p = run(Producer(e.ctx, 1))
    assert p.reason == Producer.FAILED
    assert isinstance(p.error, IOError)
    assert e.ctx.stats.count(RunStats.FAILED) == 1
    # nothing has been leaked: the slot and the mutex are back
    assert e.sems.get_value(SPACE) == 2
    assert e.sems.get_value(MUTEX) == 1
    assert e.sems.get_value(ITEM) == 0
