# src/taskbuddy/__init__.py

"""TaskBuddy: a personal task tracker with local snapshot persistence."""

__version__ = "0.1.0"
