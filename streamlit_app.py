"""
Entry point for Streamlit Cloud deployment.

Streamlit Cloud looks for an app in the repository root; this runs the
dashboard from po_reconciler/ui/streamlit_app.py.
"""

import os
import sys
from pathlib import Path

os.environ["STREAMLIT_SERVER_HEADLESS"] = "true"

sys.path.insert(0, str(Path(__file__).parent))

from po_reconciler.ui.streamlit_app import *  # noqa: F401, F403
