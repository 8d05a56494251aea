import boundbuf
from boundbuf import RunStats

num_producers = 2 # number of producers
num_consumers = 3 # number of consumers

settings = boundbuf.Settings(capacity=5, jobs_per_producer=4, producers=num_producers,
                             consumers=num_consumers, timeout=0.5, time_unit=0.01)
stats = boundbuf.Coordinator(settings).run()

for i in range(num_producers):
    p = "Producer(%d)" % (i+1)
    print("%s: deposited %d, %s" % (p, stats.count(RunStats.DEPOSIT, p),
                                    stats.events_of(p)[-1][0]))
print("executed: %d" % stats.count(RunStats.EXECUTE))
print("completed: %d" % stats.count(RunStats.COMPLETE))
print("consumers timed out: %d" % sum(stats.count(RunStats.TIMEOUT, "Consumer(%d)" % (i+1))
                                      for i in range(num_consumers)))
