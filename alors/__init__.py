"""alors - permission checks and configuration resolution for the coding agent"""

__version__ = "0.1.0"
