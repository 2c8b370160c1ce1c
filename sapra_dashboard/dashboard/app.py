"""
SAPRA Dashboard - Streamlit launcher.

Run the dashboard with:
    streamlit run sapra_dashboard/dashboard/streamlit_app.py

Or from Python:
    from sapra_dashboard.dashboard import run_dashboard
    run_dashboard()
"""

import logging
import subprocess
import sys
from pathlib import Path

logger = logging.getLogger(__name__)


def get_dashboard_path() -> Path:
    """Get the path to the main streamlit app file."""
    return Path(__file__).parent / "streamlit_app.py"


def build_command(port: int = 8501, open_browser: bool = True) -> list:
    """Command line that starts the Streamlit server."""
    return [
        sys.executable, "-m", "streamlit", "run",
        str(get_dashboard_path()),
        "--server.port", str(port),
        "--server.headless", "false" if open_browser else "true",
        "--browser.gatherUsageStats", "false",
    ]


def run_dashboard(port: int = 8501, open_browser: bool = True) -> int:
    """
    Launch the Streamlit dashboard and block until it exits.

    Args:
        port: Port to run on (default 8501)
        open_browser: Open a browser tab once the server is up

    Returns:
        The Streamlit process exit code.
    """
    cmd = build_command(port, open_browser)
    logger.info(f"Starting dashboard on port {port}")
    logger.debug(f"Command: {' '.join(cmd)}")
    return subprocess.run(cmd).returncode
