#!/usr/bin/env python3
"""
SAPRA Dashboard - Main CLI Entry Point
======================================

Command-line entry point for the SAPRA progress dashboard.  It has three
modes:

DASHBOARD  (launch_dashboard, default)
    Spawns a Streamlit subprocess running sapra_dashboard/dashboard/
    streamlit_app.py.  The app fetches the four CSV feeds itself.

SUMMARY  (print_summary, --summary)
    Loads the feeds, aggregates the selected scope and prints the totals and
    the per-system (or per-subsystem) breakdown to the terminal.

EXPORT  (run_export, --export DIR)
    Loads the feeds and writes the detail table of the selected scope to an
    Excel workbook in DIR.

The scope is every system by default, or one system / subsystem with
--system ID / --subsystem ID.

Usage:
    python run.py                           # Launch dashboard
    python run.py --summary                 # Totals for all systems
    python run.py --summary --system S01    # Totals for one system
    python run.py --export reports/ --subsystem S01-02
    python run.py --health-check

Feed URLs can be overridden with SAPRA_DATA_URL, SAPRA_ITEMS_URL,
SAPRA_PUNCH_URL and SAPRA_HOLD_URL (local file paths work too).
"""

import argparse
import atexit
import logging
import os
import re
import socket
import subprocess
import sys
import threading
import time
import webbrowser
from pathlib import Path

# Module-level logger for this file
logger = logging.getLogger(__name__)


def sanitize_filename(filename: str) -> str:
    """
    Strip dangerous characters from a filename to make it filesystem-safe.

    Args:
        filename: Original filename string (may contain path separators or
                  special characters).

    Returns:
        A cleaned filename containing only alphanumeric characters, spaces,
        hyphens, underscores, and dots, truncated to 255 chars.
    """
    # basename drops directory components, so "../foo" becomes "foo"
    filename = os.path.basename(filename)
    filename = re.sub(r'[^\w\s\-\.]', '', filename)
    return filename[:255]


# ==========================================
# LOGGING
# ==========================================

def setup_logging(verbose: bool = False):
    """
    Configure the root logger with file and console handlers.

    Every run writes a timestamped log file under logs/.  The file handler
    captures DEBUG; the console shows warnings only (info with --verbose).

    Returns:
        Path: Absolute path to the newly created log file.
    """
    log_dir = Path(__file__).parent / "logs"
    log_dir.mkdir(exist_ok=True)

    timestamp = time.strftime('%Y%m%d_%H%M%S')
    log_file = log_dir / f"sapra_dashboard_{timestamp}.log"

    file_formatter = logging.Formatter(
        '%(asctime)s | %(name)s | %(levelname)s | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    console_formatter = logging.Formatter(
        '%(asctime)s | %(levelname)s | %(message)s',
        datefmt='%H:%M:%S'
    )

    file_handler = logging.FileHandler(log_file)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(file_formatter)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO if verbose else logging.WARNING)
    console_handler.setFormatter(console_formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Avoid duplicate lines if called twice
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    if verbose:
        print(f"\U0001f4dd Verbose logging enabled. Log file: {log_file}")

    return log_file


# ==========================================
# HEALTH CHECK UTILITIES
# ==========================================

def check_required_packages():
    """
    Verify that core Python packages are importable.

    Returns:
        Tuple of (all_installed: bool, missing_packages: list[str]).
        missing_packages contains pip install names, not import names.
    """
    required = {
        'pandas': 'pandas',
        'requests': 'requests',
        'openpyxl': 'openpyxl',
        'plotly': 'plotly',
        'streamlit': 'streamlit',
        'tqdm': 'tqdm',
    }

    missing = []
    for import_name, package_name in required.items():
        try:
            __import__(import_name)
        except ImportError:
            missing.append(package_name)

    return len(missing) == 0, missing


def check_feed(source, timeout: float = 5.0) -> bool:
    """True if a feed URL answers (HEAD 200) or a local feed file exists."""
    if not source.startswith(('http://', 'https://')):
        return Path(source).is_file()

    import requests

    try:
        response = requests.head(source, timeout=timeout, allow_redirects=True)
        return response.status_code == 200
    except requests.RequestException as e:
        logger.debug(f"Feed check failed for {source}: {e}")
        return False


def health_check():
    """
    Run a diagnostic check and print a human-readable report.

    Checks performed:
        1. Python version (>= 3.9 required)
        2. Required Python packages
        3. Reachability of each CSV feed

    Returns:
        bool: True if the Python version, the packages and the main feed
              are OK.  Secondary feeds are informational; the dashboard runs
              without them.
    """
    print()
    print("=" * 60)
    print("  \U0001f3e5 SAPRA DASHBOARD - HEALTH CHECK")
    print("=" * 60)
    print()

    python_version = sys.version_info
    python_ok = python_version >= (3, 9)
    status = "✅" if python_ok else "❌"
    print(f"{status} Python Version: {python_version.major}.{python_version.minor}.{python_version.micro}")
    if not python_ok:
        print("   Required: Python 3.9+")

    packages_ok, missing = check_required_packages()
    status = "✅" if packages_ok else "❌"
    print(f"{status} Required Packages: {'All installed' if packages_ok else f'{len(missing)} missing'}")
    if missing:
        print(f"   Missing: {', '.join(missing)}")
        print(f"   Install with: pip install {' '.join(missing)}")
        # Feed checks need requests
        if 'requests' in missing:
            print("=" * 60)
            return False

    from sapra_dashboard.core.config import FEED_MAIN, get_feed_urls

    main_ok = False
    for feed, source in get_feed_urls().items():
        ok = check_feed(source)
        if feed == FEED_MAIN:
            main_ok = ok
            status = "✅" if ok else "❌"
        else:
            status = "✅" if ok else "⚠️ "
        print(f"{status} Feed '{feed}': {'Reachable' if ok else 'Not accessible'}")
        if not ok:
            print(f"   {source}")

    print()
    print("=" * 60)

    all_critical = python_ok and packages_ok and main_ok
    if all_critical:
        print("  ✅ All critical checks passed!")
    else:
        print("  ❌ Some critical checks failed. Please fix the issues above.")
    print("=" * 60)
    print()

    return all_critical


# ==========================================
# ARGUMENTS
# ==========================================

def parse_args(argv=None):
    """
    Parse and return command-line arguments.

    Supported modes:
        (default)       -- launch the Streamlit dashboard
        --summary       -- print aggregated totals for the scope and exit
        --export DIR    -- write the scope's detail table to DIR and exit
        --health-check  -- run diagnostics and exit

    Returns:
        argparse.Namespace with the parsed flags.
    """
    parser = argparse.ArgumentParser(
        description='SAPRA Dashboard - Project Progress Tracking',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run.py                         Launch dashboard
  python run.py --summary               Print totals for all systems
  python run.py --summary --system S01  Print totals for one system
  python run.py --export out/           Export the full detail table
  python run.py --port 8502             Use custom port for dashboard
        """
    )

    parser.add_argument(
        '--summary',
        action='store_true',
        help='Print aggregated statistics and exit'
    )

    parser.add_argument(
        '--export',
        type=str,
        metavar='DIR',
        help='Write the detail table to an Excel file in DIR and exit'
    )

    parser.add_argument(
        '--name',
        type=str,
        help='File name for --export (default: SAPRA_Report_<scope>_<date>.xlsx)'
    )

    scope = parser.add_mutually_exclusive_group()
    scope.add_argument(
        '--system',
        type=str,
        help='Restrict --summary / --export to one system id'
    )
    scope.add_argument(
        '--subsystem',
        type=str,
        help='Restrict --summary / --export to one subsystem id'
    )

    # Dashboard configuration
    parser.add_argument(
        '--port',
        type=int,
        default=8501,
        help='Port for Streamlit dashboard (default: 8501)'
    )

    parser.add_argument(
        '--no-browser',
        action='store_true',
        help='Do not automatically open browser'
    )

    parser.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Show detailed logging output'
    )

    parser.add_argument(
        '--health-check',
        action='store_true',
        help='Run system health check and exit'
    )

    return parser.parse_args(argv)


# ==========================================
# SUMMARY / EXPORT
# ==========================================

def resolve_scope(args, hierarchy):
    """Selection for the --system / --subsystem flags (AllSystems if neither)."""
    from sapra_dashboard.models import AllSystems, SubsystemScope, SystemScope

    if args.system:
        system_id = args.system.strip()
        system = hierarchy.system(system_id)
        if system is None:
            logger.warning(f"Unknown system id '{system_id}'")
        return SystemScope(system_id, system.name if system else "")
    if args.subsystem:
        subsystem_id = args.subsystem.strip()
        subsystem = hierarchy.subsystem(subsystem_id)
        if subsystem is None:
            logger.warning(f"Unknown subsystem id '{subsystem_id}'")
            return SubsystemScope(subsystem_id)
        return SubsystemScope(subsystem_id, subsystem.system_id, subsystem.name)
    return AllSystems()


def format_summary(scope, hierarchy) -> str:
    """Plain-text totals for ``scope`` plus the one-level-down breakdown."""
    from sapra_dashboard.analysis import aggregate, child_stats
    from sapra_dashboard.core.utils import percent_of
    from sapra_dashboard.dashboard.navigation import view_title

    stats = aggregate(scope, hierarchy)
    lines = [
        view_title(scope, hierarchy),
        "-" * 60,
        f"  Total Items : {stats.total_items:,}",
        f"  Completed   : {stats.done:,} ({percent_of(stats.done, stats.total_items)}%)",
        f"  Pending     : {stats.pending:,} ({percent_of(stats.pending, stats.total_items)}%)",
        f"  Remaining   : {stats.remaining:,} ({percent_of(stats.remaining, stats.total_items)}%)",
        f"  Punch       : {stats.punch:,}",
        f"  Hold Point  : {stats.hold:,}",
    ]

    children = child_stats(scope, hierarchy)
    if children:
        lines.append("-" * 60)
        for _, label, child in children:
            progress = percent_of(child.done, child.total_items)
            lines.append(f"  {label:<40} {child.done:>6,}/{child.total_items:<6,} {progress:>3}%")
    return "\n".join(lines)


def load_state(show_progress: bool = True):
    from sapra_dashboard.data import load_all
    return load_all(show_progress=show_progress)


def load_state_or_report():
    """Load the feeds once for the CLI modes; None (after printing why) on failure."""
    from sapra_dashboard.data import DataLoadError

    try:
        return load_state()
    except DataLoadError as e:
        print(f"❌ {e}")
        return None


def print_summary(args, state=None) -> bool:
    if state is None:
        state = load_state_or_report()
    if state is None:
        return False

    scope = resolve_scope(args, state.hierarchy)
    print()
    print(format_summary(scope, state.hierarchy))
    print()
    return True


def run_export(args, state=None) -> bool:
    from sapra_dashboard.reports import export_table

    if state is None:
        state = load_state_or_report()
    if state is None:
        return False

    scope = resolve_scope(args, state.hierarchy)
    filename = None
    if args.name:
        filename = sanitize_filename(args.name)
        if not filename.lower().endswith('.xlsx'):
            filename += '.xlsx'

    path = export_table(scope, state.data, output_dir=args.export, filename=filename)
    if path is None:
        print("⚠️  No data available to export.")
        return False
    print(f"✅ Report written to {path}")
    return True


# ==========================================
# DASHBOARD
# ==========================================

def port_in_use(port: int) -> bool:
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        return sock.connect_ex(('localhost', port)) == 0
    finally:
        sock.close()


def launch_dashboard(port: int = 8501, open_browser: bool = True):
    """
    Launch the Streamlit dashboard as a managed subprocess.

    Streamlit runs headless; the browser is opened from a daemon thread after
    a short delay.  An atexit handler terminates the subprocess so a crashed
    or interrupted run doesn't leave the port bound.

    Returns:
        bool: True if the dashboard ran and exited cleanly (including Ctrl+C
              shutdown), False on errors.
    """
    from sapra_dashboard.dashboard import get_dashboard_path
    from sapra_dashboard.dashboard.app import build_command

    print()
    print("=" * 60)
    print("  \U0001f310 Launching SAPRA Dashboard")
    print("=" * 60)
    print()

    dashboard_path = get_dashboard_path()
    if not dashboard_path.exists():
        print(f"❌ Error: Dashboard not found at {dashboard_path}")
        return False

    try:
        if port_in_use(port):
            print(f"⚠️  Port {port} is already in use")
            print("   Please use a different port with --port flag")
            return False
    except OSError as e:
        logger.warning(f"Could not check port status: {e}")

    print(f"  \U0001f4ca Starting Streamlit server on port {port}...")
    print(f"  \U0001f517 URL: http://localhost:{port}")
    print()
    print("  Press Ctrl+C to stop the dashboard")
    print("-" * 60)
    sys.stdout.flush()

    cmd = build_command(port, open_browser=False)
    streamlit_process = None

    def cleanup():
        """Terminate the Streamlit subprocess on exit."""
        if streamlit_process and streamlit_process.poll() is None:
            print("\n\U0001f9f9 Cleaning up dashboard process...")
            streamlit_process.terminate()
            try:
                streamlit_process.wait(timeout=5)
            except subprocess.TimeoutExpired:
                print("   Force killing process...")
                streamlit_process.kill()

    atexit.register(cleanup)

    try:
        if open_browser:
            def open_browser_delayed():
                time.sleep(3)
                try:
                    webbrowser.open(f"http://localhost:{port}")
                except webbrowser.Error as e:
                    logger.warning(f"Failed to open browser: {e}")

            threading.Thread(target=open_browser_delayed, daemon=True).start()

        logger.info(f"Running: {' '.join(cmd)}")
        streamlit_process = subprocess.Popen(cmd)
        streamlit_process.wait()
        return streamlit_process.returncode == 0

    except KeyboardInterrupt:
        print("\n\n✅ Dashboard stopped by user.")
        cleanup()
        return True
    except FileNotFoundError:
        print("\n❌ Streamlit not found. Install with: pip install streamlit plotly")
        return False


def main(argv=None):
    """
    Parse CLI args and dispatch to the requested mode.

    Returns:
        Process exit code.
    """
    args = parse_args(argv)
    setup_logging(verbose=args.verbose)

    if args.health_check:
        return 0 if health_check() else 1

    if args.summary or args.export:
        state = load_state_or_report()
        if state is None:
            return 1
        ok = True
        if args.summary:
            ok = print_summary(args, state) and ok
        if args.export:
            ok = run_export(args, state) and ok
        return 0 if ok else 1

    return 0 if launch_dashboard(port=args.port, open_browser=not args.no_browser) else 1


if __name__ == "__main__":
    sys.exit(main())
