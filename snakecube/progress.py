# snakecube/progress.py
from __future__ import annotations
import json
import os
import time
from typing import Optional


def ensure_dir(p: str):
    if p and not os.path.isdir(p):
        os.makedirs(p, exist_ok=True)


class ProgressStream:
    """
    Progress/event sink:
      - appends one JSON line per event to `stream_path`
      - overwrites `summary_path` with the latest event
      - echoes a concise line to the console
    File writes are best effort: a full disk never interrupts a solve.
    """

    def __init__(self,
                 stream_path: Optional[str],
                 summary_path: Optional[str],
                 echo: bool = True):
        self.stream_path = stream_path
        self.summary_path = summary_path
        self.echo = echo
        for p in (stream_path, summary_path):
            if p:
                ensure_dir(os.path.dirname(p))

    def emit(self, event: str, **fields) -> dict:
        payload = {"event": event, "ts": time.time()}
        payload.update(fields)
        if self.stream_path:
            try:
                with open(self.stream_path, "a", encoding="utf-8") as f:
                    f.write(json.dumps(payload, ensure_ascii=False) + "\n")
            except OSError:
                pass
        if self.summary_path:
            try:
                with open(self.summary_path, "w", encoding="utf-8") as f:
                    json.dump(payload, f, ensure_ascii=False, indent=2)
            except OSError:
                pass
        if self.echo:
            line = format_event(payload)
            if line:
                print(line, flush=True)
        return payload


def format_event(payload: dict) -> str:
    ev = payload.get("event")
    seed = payload.get("seed", "")
    if ev == "seed_start":
        return f"[seed {seed}] start ({payload.get('segments', '?')} segments, side {payload.get('side', '?')})"
    if ev == "solution":
        return (f"[seed {seed}] solution #{payload.get('number')} "
                f"after {payload.get('positions', 0)} positions")
    if ev == "seed_done":
        rate = payload.get("positions_per_sec", 0)
        return (f"[seed {seed}] {payload.get('status')} | solutions {payload.get('solutions', 0)} "
                f"| positions {payload.get('positions', 0)} | best {payload.get('best_depth', 0)}"
                f"/{payload.get('segments', '?')} | rate {rate}/s")
    if ev in ("paused", "resumed", "stopped"):
        return f"[runctl] {ev}"
    if ev == "done":
        return (f"Done: {payload.get('solutions', 0)} solutions, "
                f"{payload.get('positions', 0)} total positions considered")
    return ""
