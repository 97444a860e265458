#!/usr/bin/env python3
"""Direct launcher for the Smart Finance dashboard."""

import sys
import subprocess
from pathlib import Path

project_root = Path(__file__).parent.resolve()
app_path = project_root / "smart_finance" / "dashboard.py"

if __name__ == "__main__":
    subprocess.run([
        sys.executable, "-m", "streamlit", "run",
        str(app_path),
    ], cwd=project_root)
