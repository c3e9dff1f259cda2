"""
Convenience entry point for running slotfinder as a module.

Usage: python -m slotfinder [command] [options]
"""

from .cli.app import app

if __name__ == "__main__":
    app()
