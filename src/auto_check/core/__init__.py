"""Collaborator contracts for the change pipeline."""

from auto_check.core.interfaces import IEventSource, IIgnoreMatcher, IProcessLauncher, MatchResult

__all__ = [
    "IEventSource",
    "IIgnoreMatcher",
    "IProcessLauncher",
    "MatchResult",
]
