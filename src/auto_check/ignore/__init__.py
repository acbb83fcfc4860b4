"""Ignore-rule matching for watched paths."""

from auto_check.ignore.ignore_filter import BUILTIN_IGNORES, IgnoreFilter

__all__ = ["BUILTIN_IGNORES", "IgnoreFilter"]
