"""
.gitignore-style filtering of changed paths.

Uses the pathspec library for GitIgnore-compliant pattern matching. The
version-control metadata directory is always ignored, whatever the rules file
says.
"""

import logging
from pathlib import Path

import pathspec

from auto_check.core.interfaces import IIgnoreMatcher, MatchResult
from auto_check.models.exceptions import IgnoreRulesError

logger = logging.getLogger(__name__)

BUILTIN_IGNORES = [".git/"]


class IgnoreFilter(IIgnoreMatcher):
    """
    Ignore matcher built once from the base directory's ignore-rules file.

    Patterns are evaluated in file order and the last matching pattern decides:
    a plain pattern ignores the path, a ``!`` pattern whitelists it.
    """

    def __init__(self, base_dir: Path, ignore_file: str = ".gitignore"):
        """
        Load the ignore rules.

        Args:
            base_dir: Absolute base directory the rules are relative to
            ignore_file: Name of the rules file inside ``base_dir``

        Raises:
            IgnoreRulesError: If the rules file exists but cannot be read or parsed
        """
        self.base_dir = base_dir
        self.ignore_file = base_dir / ignore_file
        self._builtin = pathspec.PathSpec.from_lines("gitwildmatch", BUILTIN_IGNORES)
        self._spec = self._load_rules()

    def _load_rules(self) -> pathspec.PathSpec:
        if not self.ignore_file.exists():
            logger.debug("No ignore rules file at %s", self.ignore_file)
            return pathspec.PathSpec.from_lines("gitwildmatch", [])

        try:
            lines = self.ignore_file.read_text(encoding="utf-8").splitlines()
        except (OSError, UnicodeDecodeError) as e:
            raise IgnoreRulesError(
                f"Could not read ignore rules: {e}", path=str(self.ignore_file), underlying_error=e
            ) from e

        try:
            spec = pathspec.PathSpec.from_lines("gitwildmatch", lines)
        except ValueError as e:
            raise IgnoreRulesError(
                f"Invalid ignore pattern: {e}", path=str(self.ignore_file), underlying_error=e
            ) from e

        count = sum(1 for pattern in spec.patterns if pattern.include is not None)
        logger.info("Loaded %d ignore patterns from %s", count, self.ignore_file)
        return spec

    def matched(self, relative_path: Path | str, is_dir: bool = False) -> MatchResult:
        """
        Match a relative path against the built-in and loaded rules.

        Args:
            relative_path: Path relative to the base directory
            is_dir: Whether the path names a directory

        Returns:
            IGNORED, WHITELISTED or NO_MATCH
        """
        path_str = Path(relative_path).as_posix()
        if path_str in ("", "."):
            return MatchResult.NO_MATCH
        if is_dir:
            path_str += "/"

        if self._builtin.match_file(path_str):
            return MatchResult.IGNORED

        result = MatchResult.NO_MATCH
        for pattern in self._spec.patterns:
            if pattern.include is None:
                continue
            if pattern.match_file(path_str) is not None:
                result = MatchResult.IGNORED if pattern.include else MatchResult.WHITELISTED
        return result

    def is_ignored(self, relative_path: Path | str, is_dir: bool = False) -> bool:
        """Check whether a relative path is suppressed by the rules."""
        return self.matched(relative_path, is_dir=is_dir) is MatchResult.IGNORED
