"""
Entry point for the StudySpark API service.

Run with:
    python main.py
    studyspark serve --port 3001
"""
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from src.api.main import app, run_server  # noqa: E402,F401

if __name__ == "__main__":
    run_server(reload=True)
