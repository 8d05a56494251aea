import boundbuf
from boundbuf import RunStats

# two producers compete for the only slot and nobody consumes: one of
# the producers deposits its job, the other one times out
settings = boundbuf.Settings(capacity=1, jobs_per_producer=1, producers=2, consumers=0,
                             timeout=0.3, time_unit=0.01, seed=12345)
stats = boundbuf.Coordinator(settings).run()

print("deposited: %d" % stats.count(RunStats.DEPOSIT))
print("exhausted: %d" % stats.count(RunStats.EXHAUSTED))
print("timed out: %d" % stats.count(RunStats.TIMEOUT))
