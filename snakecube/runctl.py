# snakecube/runctl.py
# Cooperative run control (pause/resume/stop) through a small JSON file:
#   {"state": "run" | "pause" | "stop", "ts": <epoch seconds>}
from __future__ import annotations
import json
import os
import time
from typing import Callable, Optional

STATE_RUN = "run"
STATE_PAUSE = "pause"
STATE_STOP = "stop"


class RunControl:
    def __init__(self, path: str, poll_interval: float = 0.05):
        self.path = path
        self.poll_interval = poll_interval
        self._cache_mtime = -1.0
        self._state = STATE_RUN

    def init(self, announce: bool = True, reset: bool = False) -> None:
        """Create the control file with state=run if missing. reset=True also clears a stale stop/pause."""
        d = os.path.dirname(self.path)
        if d:
            os.makedirs(d, exist_ok=True)
        if reset or not os.path.exists(self.path):
            self.write(STATE_RUN)
        if announce:
            print(f"[runctl] RUNCTL_PATH = {self.path}", flush=True)

    def write(self, state: str) -> None:
        try:
            with open(self.path, "w", encoding="utf-8") as f:
                json.dump({"state": state, "ts": time.time()}, f, ensure_ascii=False)
        except OSError:
            pass

    def state(self) -> str:
        """Cheap poll: only re-read the file if its mtime changed. Returns 'run'|'pause'|'stop'."""
        try:
            m = os.path.getmtime(self.path)
        except OSError:
            return self._state
        if m != self._cache_mtime:
            self._cache_mtime = m
            try:
                with open(self.path, "r", encoding="utf-8") as f:
                    s = json.load(f)
                self._state = str(s.get("state", STATE_RUN)).lower()
            except (OSError, ValueError, AttributeError):
                self._state = STATE_RUN
        return self._state

    def should_stop(self, on_event: Optional[Callable[[str], None]] = None) -> bool:
        """
        Poll once. Blocks while paused; True once the state is 'stop'.
        on_event receives 'paused' / 'resumed' / 'stopped'.
        """
        ctl = self.state()
        if ctl == STATE_STOP:
            if on_event:
                on_event("stopped")
            return True
        if ctl != STATE_PAUSE:
            return False
        if on_event:
            on_event("paused")
        while True:
            time.sleep(self.poll_interval)
            ctl = self.state()
            if ctl == STATE_STOP:
                if on_event:
                    on_event("stopped")
                return True
            if ctl == STATE_RUN:
                if on_event:
                    on_event("resumed")
                return False


class Throttled:
    """Wrap a stop check so it is only consulted every `every` calls."""

    def __init__(self, check: Callable[[], bool], every: int = 4096):
        self.check = check
        self.every = max(1, int(every))
        self._n = 0
        self.stopped = False

    def __call__(self) -> bool:
        if self.stopped:
            return True
        self._n += 1
        if self._n % self.every:
            return False
        self.stopped = bool(self.check())
        return self.stopped
