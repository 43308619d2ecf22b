#!/usr/bin/env python3
"""
Tutor Agent - realtime voice tutor for LiveKit rooms

Usage:
    python agent.py dev      # development mode with auto-reload
    python agent.py start    # production mode
    python agent.py console  # talk to the agent in the terminal
"""

from tutor_agent.worker import main

if __name__ == "__main__":
    main()
