"""
Entry point for running the app as a module: python -m hr_assistant
"""

import sys
from hr_assistant.cli import main

if __name__ == "__main__":
    sys.exit(main())
