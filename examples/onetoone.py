import boundbuf

# one producer with three jobs, one consumer, a buffer of two slots;
# time runs a hundred times faster than real time
settings = boundbuf.Settings(capacity=2, jobs_per_producer=3, producers=1, consumers=1,
                             timeout=0.5, time_unit=0.01, seed=12345)
stats = boundbuf.Coordinator(settings).run()

for worker in ("Producer(1)", "Consumer(1)"):
    print("%s:" % worker)
    for kind, job_id in stats.events_of(worker):
        if job_id is None:
            print("  %s" % kind)
        else:
            print("  %s job %d" % (kind, job_id))
