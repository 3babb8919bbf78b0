"""
Entry point for running the package as a module.

Usage:
    python -m keyframe_animator --captions captions.srt --voiceover voiceover.mp3
"""

import sys
from .cli import main

if __name__ == "__main__":
    sys.exit(main())
