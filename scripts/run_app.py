#!/usr/bin/env python
"""
Launch the valuation admin console (quotes, rules editor, catalog).

Usage:
    python scripts/run_app.py [--headless]

UI_PORT overrides the Streamlit port (default 8501). The console reads and
writes the same data directory as the API, so both can run side by side.
"""
import subprocess
import sys
import os
from pathlib import Path


def main():
    project_root = Path(__file__).parent.parent
    console = project_root / 'src' / 'valuation_tool' / 'ui' / 'app_streamlit.py'

    if not console.exists():
        print(f"ERROR: admin console not found at {console}")
        sys.exit(1)

    port = os.environ.get('UI_PORT', '8501')
    cmd = [sys.executable, '-m', 'streamlit', 'run', str(console), '--server.port', port]
    if '--headless' in sys.argv[1:]:
        cmd += ['--server.headless', 'true']

    print(f"Starting valuation console on port {port}")
    try:
        subprocess.run(cmd, cwd=str(project_root))
    except KeyboardInterrupt:
        print("\nConsole stopped.")


if __name__ == "__main__":
    main()
