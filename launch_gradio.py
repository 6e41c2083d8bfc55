"""
Launch script for the FarmAssistant Gradio UI

Usage:
    python launch_gradio.py
"""

import sys
import os

# Add project root to path
project_root = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, project_root)

from farm_assistant.launch_gradio import build_ui
from farm_assistant.config.config import BACKEND_URL

if __name__ == "__main__":
    print("=" * 80)
    print("FarmAssistant - Gradio UI")
    print("=" * 80)
    print(f"\nExpecting the Flask backend at {BACKEND_URL}")
    print("Access the UI at: http://localhost:7860")
    print("\nPress Ctrl+C to stop the server\n")
    print("=" * 80)

    build_ui().launch(
        server_name="0.0.0.0",
        server_port=7860,
        share=False,
        show_error=True,
        quiet=False
    )
