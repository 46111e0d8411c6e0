"""
lotmap CLI - Command-line interface for the scheme engine.

Usage:
    lotmap-cli fit data/schemes/sample_floor.json --viewport 390x844
    lotmap-cli render data/schemes/sample_floor.json --output preview.png
    lotmap-cli inspect data/schemes/sample_floor.json
"""

__version__ = "1.0.0"
