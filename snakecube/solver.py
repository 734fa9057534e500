# snakecube/solver.py
# Snake cube solver driver: reads a chain file, runs one search per
# starting seed (optionally across worker processes) and writes results.
from __future__ import annotations
import argparse
import multiprocessing
import os
import sys
import time
from typing import List, Optional, Sequence

from snakecube.chain import ChainFile, Seed, check_seeds, check_side, load_chain, parse_seed
from snakecube.components import SymmetryFilter, default_seeds
from snakecube.errors import InvalidChainSpec
from snakecube.progress import ProgressStream, ensure_dir
from snakecube.results import solutions_document, write_layers, write_solutions_json
from snakecube.runctl import RunControl, Throttled
from snakecube.search import STATUS_CAPPED, STATUS_STOPPED, SearchEngine, Solution
from snakecube.workers import init_worker, run_seed_job

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DEFAULT_CHAIN = os.path.join(ROOT, "chains", "snake4.json")

RESULTS_DIR = "results"
LOGS_DIR = "logs"
PROGRESS_NAME = "progress.json"
STREAM_NAME = "progress.jsonl"
RUNCTL_OVERRIDE = os.environ.get("RUNCTL_OVERRIDE")

# stop checks are cheap but not free; poll the control file every N steps
STOP_POLL_EVERY = 4096


def runctl_path(logs_dir: str) -> str:
    return RUNCTL_OVERRIDE or os.path.join(logs_dir, "runctl.json")


# ---------- seeds ----------
def resolve_seeds(cf: ChainFile, override: Optional[Sequence[str]]) -> List[Seed]:
    """--seed overrides the file; the file overrides symmetry-reduced defaults."""
    if override:
        seeds = []
        for s in override:
            pt, _, ori = s.partition(":")
            seeds.append(parse_seed({"point": pt.split(","), "orientation": ori or None}))
        return check_seeds(seeds, cf.side)
    if cf.seeds:
        return list(cf.seeds)
    return default_seeds(cf.side)


# ---------- runners ----------
class Collector:
    """Applies --dedup and --max-results across seeds, emitting events as it goes."""

    def __init__(self, progress: ProgressStream, side: int, max_results: Optional[int], dedup: bool):
        self.progress = progress
        self.max_results = max_results
        self.sym = SymmetryFilter(side) if dedup else None
        self.kept: List[Solution] = []
        self.skipped = 0

    @property
    def full(self) -> bool:
        return self.max_results is not None and len(self.kept) >= self.max_results

    def offer(self, sol: Solution) -> bool:
        if self.sym is not None and not self.sym.admit(sol.cells()):
            self.skipped += 1
            return False
        self.kept.append(sol)
        self.progress.emit("solution", seed=sol.seed.label(), number=len(self.kept),
                           run_number=sol.number, positions=sol.positions)
        return True


def _seed_done(progress, seed, status, info, segments, solutions, elapsed):
    rate = int(info["positions"] / max(elapsed, 1e-6))
    return progress.emit("seed_done", seed=seed.label(), status=status,
                         solutions=solutions, positions=info["positions"],
                         best_depth=info["best_depth"], segments=segments,
                         elapsed=round(elapsed, 3), positions_per_sec=rate)


def run_sequential(cf: ChainFile, seeds: Sequence[Seed], collector: Collector,
                   progress: ProgressStream, runctl: Optional[RunControl],
                   check_invariants: bool = False) -> List[dict]:
    engine = SearchEngine(cf.chain, cf.side)
    runs = []

    def ctl_event(ev):
        progress.emit(ev)

    stop_ctl = Throttled(lambda: runctl.should_stop(ctl_event), STOP_POLL_EVERY) if runctl else None

    def should_stop() -> bool:
        if check_invariants:
            engine.check_invariants()
        return bool(stop_ctl and stop_ctl())

    for seed in seeds:
        if collector.full or (stop_ctl and stop_ctl.stopped):
            break
        progress.emit("seed_start", seed=seed.label(), segments=len(cf.chain), side=cf.side)
        t0 = time.time()
        before = len(collector.kept)
        capped = False
        gen = engine.solutions(seed, should_stop=should_stop)
        for sol in gen:
            if collector.offer(sol) and collector.full:
                capped = True
                gen.close()
                break
        status = STATUS_CAPPED if capped else engine.status
        info = {"positions": engine.positions_this_run, "best_depth": engine.best_depth}
        payload = _seed_done(progress, seed, status, info, len(cf.chain),
                             len(collector.kept) - before, time.time() - t0)
        runs.append({k: payload[k] for k in ("seed", "status", "solutions", "positions", "best_depth", "elapsed")})
        if status == STATUS_STOPPED:
            break
    return runs


def run_parallel(cf: ChainFile, seeds: Sequence[Seed], collector: Collector,
                 progress: ProgressStream, workers: int, runctl: Optional[RunControl]) -> List[dict]:
    # with dedup, raw solutions are not kept one-for-one, so only the collector may cap
    job_cap = None if collector.sym is not None else collector.max_results
    jobs = [(cf.chain.lengths, cf.side, seed, job_cap) for seed in seeds]
    runs = []
    path = runctl.path if runctl else None
    with multiprocessing.Pool(processes=workers, initializer=init_worker, initargs=(path, STOP_POLL_EVERY)) as pool:
        # imap keeps seed order, so output does not depend on scheduling
        for report in pool.imap(run_seed_job, jobs):
            progress.emit("seed_start", seed=report.seed.label(), segments=len(cf.chain), side=cf.side)
            before = len(collector.kept)
            status = report.status
            positions = report.positions
            for sol in report.solutions:
                if collector.offer(sol) and collector.full:
                    # report the seed as an in-process run would have stopped it
                    status = STATUS_CAPPED
                    positions = sol.positions
                    break
            info = {"positions": positions, "best_depth": report.best_depth}
            payload = _seed_done(progress, report.seed, status, info, len(cf.chain),
                                 len(collector.kept) - before, report.elapsed)
            runs.append({k: payload[k] for k in ("seed", "status", "solutions", "positions", "best_depth", "elapsed")})
            if collector.full or status == STATUS_STOPPED:
                pool.terminate()
                break
    return runs


# ---------- CLI ----------
def build_argparser():
    p = argparse.ArgumentParser(
        description=(
            "Snake cube solver — fold a chain of straight segments into an N×N×N cube.\n\n"
            "Examples:\n"
            "  python run_solver.py chains/snake4.json\n"
            "  python run_solver.py chains/snake3.json --max-results 1\n"
            "  python run_solver.py chains/snake4.json --dedup --workers 4\n"
            "  python run_solver.py chains/snake3.json --seed 0,0,0:left --seed 1,1,1\n"
        ),
        formatter_class=argparse.RawTextHelpFormatter
    )

    p.add_argument("chain", nargs="?", default=DEFAULT_CHAIN,
                   help="Path to chain JSON (default: chains/snake4.json)")

    p.add_argument("--side", type=int, default=None,
                   help="Cube side length (overrides the chain file).")

    p.add_argument("--seed", action="append", default=None, metavar="X,Y,Z[:ORIENTATION]",
                   help="Starting seed; repeatable. Default: seeds from the chain file, else one per symmetry class.")

    p.add_argument("--max-results", type=int, default=None, metavar="N",
                   help="Stop after N solutions in total.")

    p.add_argument("--dedup", action="store_true",
                   help="Collapse solutions that are rotations/reflections of an earlier one.")

    p.add_argument("--workers", type=int, default=1, metavar="N",
                   help="Run seeds in N worker processes (default: 1, in-process).")

    p.add_argument("--results-dir", default=RESULTS_DIR,
                   help="Where <name>.solutions.json / .solutions_layers.txt go (default: results).")

    p.add_argument("--logs-dir", default=LOGS_DIR,
                   help="Where progress.jsonl / progress.json / runctl.json go (default: logs).")

    p.add_argument("--no-write", action="store_true",
                   help="Do not write result files.")

    p.add_argument("--no-runctl", action="store_true",
                   help="Ignore the run-control file.")

    p.add_argument("--check-invariants", action="store_true",
                   help="Debug: verify grid/segment consistency after every step (slow, in-process only).")

    p.add_argument("--quiet", action="store_true",
                   help="No console echo.")

    return p


# ---------- driver ----------
def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_argparser().parse_args(argv)

    try:
        cf = load_chain(args.chain)
        if args.side is not None:
            cf.side = check_side(args.side)
            cf.seeds = check_seeds(cf.seeds, cf.side)
        seeds = resolve_seeds(cf, args.seed)
        if args.max_results is not None and args.max_results < 1:
            raise InvalidChainSpec("--max-results must be >= 1")
    except (OSError, ValueError) as e:
        sys.stderr.write(f"error: {e}\n")
        return 2

    echo = not args.quiet
    ensure_dir(args.logs_dir)
    progress = ProgressStream(os.path.join(args.logs_dir, STREAM_NAME),
                              os.path.join(args.logs_dir, PROGRESS_NAME), echo=echo)

    runctl = None
    if not args.no_runctl:
        runctl = RunControl(runctl_path(args.logs_dir))
        runctl.init(announce=echo, reset=True)

    if echo:
        print(f"[chain] {cf.name}: {len(cf.chain)} segments, {cf.chain.cell_count()} cells, "
              f"side {cf.side}, {len(seeds)} seed(s)", flush=True)
        if not cf.chain.fills(cf.side):
            print(f"[chain] covers {cf.chain.cell_count()} cells but the cube has {cf.side ** 3}: "
                  f"no folding can fill it", flush=True)

    collector = Collector(progress, cf.side, args.max_results, args.dedup)
    t0 = time.time()
    workers = max(1, int(args.workers))
    if workers > 1 and len(seeds) > 1:
        runs = run_parallel(cf, seeds, collector, progress, workers, runctl)
    else:
        runs = run_sequential(cf, seeds, collector, progress, runctl, args.check_invariants)

    total_positions = sum(r["positions"] for r in runs)
    progress.emit("done", chain=cf.name, solutions=len(collector.kept),
                  duplicates_skipped=collector.skipped, positions=total_positions,
                  elapsed=round(time.time() - t0, 3))

    if not args.no_write:
        ensure_dir(args.results_dir)
        doc = solutions_document(cf.name, cf.side, cf.chain.lengths, collector.kept, total_positions, runs)
        write_solutions_json(os.path.join(args.results_dir, f"{cf.name}.solutions.json"), doc)
        write_layers(os.path.join(args.results_dir, f"{cf.name}.solutions_layers.txt"), collector.kept, cf.side)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
