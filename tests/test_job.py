import pytest

from boundbuf import Job, JobGenerator, RunStats, JOB_DURATION, ARRIVAL_DELAY
from boundbuf.stats import Samples

def test_job_fields():
    j = Job(3, 8)
    assert j.id == 3
    assert j.duration == 8

@pytest.mark.parametrize("rng", [JOB_DURATION, ARRIVAL_DELAY, (0, 1), (5, 2)])
def test_random_duration_range(rng):
    gen = JobGenerator(42)
    lo, span = rng
    values = [gen.random_duration(lo, span) for _ in range(500)]
    assert all(lo <= v < lo+span for v in values)
    assert all(isinstance(v, int) for v in values)
    if span > 1:
        assert len(set(values)) > 1

def test_same_seed_same_sequence():
    g1, g2 = JobGenerator(7), JobGenerator(7)
    assert [g1.random_duration(1, 10) for _ in range(20)] == \
        [g2.random_duration(1, 10) for _ in range(20)]

def test_seeded_from_time():
    assert JobGenerator().seed > 0

def test_invalid_span():
    with pytest.raises(ValueError):
        JobGenerator(1).random_duration(1, 0)

def test_samples():
    s = Samples("durations")
    for x in [2, 4, 4, 4, 5, 5, 7, 9]:
        s.push(x)
    assert len(s) == 8
    assert s.mean() == pytest.approx(5)
    assert s.stdev() == pytest.approx(2)
    assert s.min() == 2 and s.max() == 9
    assert s.summary()[0] == "durations: samples=8"

def test_samples_empty_and_single():
    s = Samples("waits")
    assert s.summary() == ["waits: samples=0"]
    assert s.min() is None and s.max() is None
    s.push(0.5)
    assert s.stdev() == 0.0
    assert s.summary() == ["waits: samples=1", "  mean = 0.5", "  min = 0.5", "  max = 0.5"]

def test_run_stats():
    stats = RunStats()
    stats.record_deposit("Producer(1)", Job(1, 4), 0.5)
    stats.record_fetch("Consumer(1)", Job(1, 4), 0.25)
    stats.record(RunStats.COMPLETE, "Consumer(1)", 1)
    stats.record(RunStats.TIMEOUT, "Consumer(1)")
    assert stats.count(RunStats.DEPOSIT) == 1
    assert stats.count(RunStats.TIMEOUT, "Producer(1)") == 0
    assert stats.events_of("Consumer(1)") == [
        (RunStats.EXECUTE, 1), (RunStats.COMPLETE, 1), (RunStats.TIMEOUT, None)]
    assert stats.durations.mean() == 4
    report = stats.report()
    assert "jobs deposited: 1" in report
    assert "waits for item: samples=1" in report
