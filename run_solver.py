# run_solver.py (at repo root)
#!/usr/bin/env python3
from pathlib import Path
import sys, runpy

repo = Path(__file__).resolve().parent
if str(repo) not in sys.path:
    sys.path.insert(0, str(repo))

# Chain path is resolved against the caller's cwd; results/ and logs/ land there too.
sys.argv = ["snakecube.solver"] + sys.argv[1:]

# Execute the solver module as __main__
runpy.run_module("snakecube.solver", run_name="__main__", alter_sys=True)
