"""
Backend startup script for the FarmAssistant Flask application.
Run this script to start the Flask server.
"""
import os
import sys

# Add project root to Python path
project_root = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, project_root)

from farm_assistant.application import create_app
from farm_assistant.config.config import DEBUG, PORT, USE_LIVE_IDENTIFICATION

if __name__ == '__main__':
    print("=" * 60)
    print("Starting FarmAssistant Backend Server")
    print("=" * 60)
    print(f"Server: http://localhost:{PORT}")
    print(f"Health: http://localhost:{PORT}/health")
    print(f"Identification: {'live (Gemini)' if USE_LIVE_IDENTIFICATION else 'mock data'}")
    print(f"Debug Mode: {DEBUG}")
    print("=" * 60)
    print("\nPress CTRL+C to quit\n")

    create_app().run(
        host='0.0.0.0',
        port=PORT,
        debug=DEBUG,
        threaded=True
    )
