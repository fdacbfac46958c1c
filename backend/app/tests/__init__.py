"""Pytest configuration file to put the app directory on the Python path."""

import sys
from pathlib import Path

# Add the app directory to Python path so that 'nexus' imports work uninstalled
app_dir = Path(__file__).parent.parent
if str(app_dir) not in sys.path:
    sys.path.insert(0, str(app_dir))
