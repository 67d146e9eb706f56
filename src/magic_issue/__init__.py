"""Magic Issue.

Races a GitHub repository's issue counter and files an issue the moment the
next issue number equals a chosen "magic number":
- configuration loaded from the environment and `.env`
- structured logging
- a fixed-interval poll loop around a single read/compare/post attempt
"""

__version__ = "0.1.0"

from magic_issue.racer.config import RacerSettings

__all__ = ["__version__", "RacerSettings"]
