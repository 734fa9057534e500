# snakecube/results.py
from __future__ import annotations
import json
import os
import time
from typing import Dict, List, Optional, Sequence

from snakecube.components import canonical_signature, solution_signature
from snakecube.search import Solution
from snakecube.vectors import Cell

_GLYPHS = "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"


def glyph(index: int) -> str:
    return _GLYPHS[index % len(_GLYPHS)]


# ---------- atomic write helpers (Windows-safe) ----------
def _atomic_replace(src, dst, retries=12, delay=0.1):
    """
    Replace with retries. Returns True on success, False on final failure.
    Retries PermissionError/OSError (file temporarily locked by another process).
    """
    for _ in range(retries):
        try:
            os.replace(src, dst)
            return True
        except OSError:
            time.sleep(delay)
    return False

def atomic_write(path: str, data: str) -> bool:
    tmp = path + ".tmp"
    with open(tmp, "w", encoding="utf-8") as f:
        f.write(data)
    if _atomic_replace(tmp, path):
        return True
    try:
        os.remove(tmp)
    except OSError:
        pass
    return False


# ---------- cell ownership ----------
def cell_owners(solution: Solution) -> Dict[Cell, int]:
    """Cell -> index of the segment that reserved it (segment 0 also owns the seed cell)."""
    owners: Dict[Cell, int] = {}
    if solution.placements:
        owners[solution.placements[0].start] = 0
    for p in solution.placements:
        step = p.orientation.step
        c = p.start
        while c != p.end:
            c = (c[0] + step[0], c[1] + step[1], c[2] + step[2])
            owners[c] = p.index
    return owners


# ---------- outputs ----------
def solution_record(solution: Solution, side: int) -> dict:
    cells = solution.cells()
    rec = solution.as_dict()
    rec["sid_route_sha256"] = solution_signature(cells)
    rec["sid_canon_sha256"] = canonical_signature(cells, side)
    return rec

def solutions_document(name: str,
                       side: int,
                       lengths: Sequence[int],
                       solutions: Sequence[Solution],
                       positions: int,
                       runs: Optional[List[dict]] = None) -> dict:
    return {
        "schema": "snake_cube_solutions/1.0",
        "chain_name": name,
        "side": side,
        "lengths": list(lengths),
        "solution_count": len(solutions),
        "positions": positions,
        "runs": runs or [],
        "solutions": [solution_record(s, side) for s in solutions],
        "timestamp": time.time(),
    }

def write_solutions_json(path: str, document: dict) -> bool:
    return atomic_write(path, json.dumps(document, ensure_ascii=False, indent=2))

def layers_str(solution: Solution, side: int, title: Optional[str] = None) -> str:
    """
    Human-readable view: one block per z layer (bottom to top), rows y,
    columns x, each cell showing the segment index that owns it.
    """
    owners = cell_owners(solution)
    lines = []
    lines.append(title or f"[SOLUTION #{solution.number} — seed {solution.seed.label()}]")
    lines.append("Orientations: " + " ".join(o.value for o in solution.orientations()))
    lines.append("")
    for z in range(side):
        lines.append(f"Layer z={z}:")
        for y in range(side):
            row = []
            for x in range(side):
                idx = owners.get((x, y, z))
                row.append("." if idx is None else glyph(idx))
            lines.append(" ".join(row))
        lines.append("")
    return "\n".join(lines)

def write_layers(path: str, solutions: Sequence[Solution], side: int) -> bool:
    if not solutions:
        return atomic_write(path, "[NO SOLUTIONS]\n")
    blocks = [layers_str(s, side, title=f"[SOLUTION {k}/{len(solutions)} — seed {s.seed.label()}]")
              for k, s in enumerate(solutions, 1)]
    return atomic_write(path, "\n".join(blocks))
