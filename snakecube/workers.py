# snakecube/workers.py
# Pool-side entry points. Kept out of the driver module so they pickle by a
# stable import path even when the driver runs as __main__.
from __future__ import annotations

from snakecube.chain import ChainSpec
from snakecube.runctl import RunControl, Throttled
from snakecube.search import RunReport, SearchEngine

WORKER_RUNCTL = None
STOP_POLL_EVERY = 4096


def init_worker(path, poll_every=STOP_POLL_EVERY):
    """Initialize worker with the run-control path."""
    global WORKER_RUNCTL, STOP_POLL_EVERY
    WORKER_RUNCTL = path
    STOP_POLL_EVERY = poll_every


def run_seed_job(job) -> RunReport:
    """One seed in a worker process: private engine, private grid."""
    lengths, side, seed, max_results = job
    stop = None
    if WORKER_RUNCTL:
        stop = Throttled(RunControl(WORKER_RUNCTL).should_stop, STOP_POLL_EVERY)
    engine = SearchEngine(ChainSpec(tuple(lengths)), side)
    return engine.run(seed, should_stop=stop, max_results=max_results)
