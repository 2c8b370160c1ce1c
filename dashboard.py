"""
SAPRA Dashboard Launcher

Serves the SAPRA progress dashboard as a Streamlit app.

Usage:
    streamlit run dashboard.py --server.port 8501
    python run.py --port 8501
"""

import sys
from pathlib import Path

# Ensure the sapra_dashboard package is importable
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from sapra_dashboard.dashboard.streamlit_app import main

main()
