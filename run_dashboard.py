#!/usr/bin/env python3
"""Direct launcher for the Expense Tracker dashboard.

Runs Streamlit on ``expense_tracker/dashboard.py`` with the project root on
the import path.
"""

import os
import subprocess
import sys
from pathlib import Path

project_root = Path(__file__).parent.resolve()
dashboard_path = project_root / "expense_tracker" / "dashboard.py"

if __name__ == "__main__":
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(project_root), env.get("PYTHONPATH")]))
    raise SystemExit(
        subprocess.run(
            [sys.executable, "-m", "streamlit", "run", str(dashboard_path), *sys.argv[1:]],
            env=env,
        ).returncode
    )
