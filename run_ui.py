#!/usr/bin/env python
"""
Convenience script to run the Streamlit reconciliation dashboard.

Usage:
    python run_ui.py
"""

import subprocess
import sys
from pathlib import Path

def main():
    """Run the Streamlit UI."""

    app_path = Path(__file__).parent / "po_reconciler" / "ui" / "streamlit_app.py"

    if not app_path.exists():
        print(f"❌ Error: Streamlit app not found at {app_path}")
        sys.exit(1)

    print("🚀 Starting Invoice Reconciliation UI...")
    print(f"📍 App: {app_path}")
    print("")
    print("The UI will open in your browser at: http://localhost:8501")
    print("Press Ctrl+C to stop the server")
    print("")

    try:
        subprocess.run(
            [sys.executable, "-m", "streamlit", "run", str(app_path)],
            check=False
        )
    except KeyboardInterrupt:
        print("\n✅ Streamlit server stopped")
        sys.exit(0)

if __name__ == "__main__":
    main()
