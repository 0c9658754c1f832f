"""Rule discovery from a rules directory.

Every ``*.py`` file under the rules directory is loaded as an isolated module.
A module contributes the rules it passes to :func:`editgate.register` while
importing, followed by any exported values (``__all__`` if defined, else public
module attributes) that satisfy the rule contract.
A file that fails to load is logged and skipped; one broken rule file never
disables the others.
"""

import fnmatch
import importlib.util
import logging
import os
import re
import sys
from collections.abc import Iterator
from pathlib import Path
from types import ModuleType

from .rule import RuleRegistry, ValidationRule, is_validation_rule

logger = logging.getLogger(__name__)

MODULE_NAMESPACE = "editgate_rules"

DEFAULT_EXCLUDE_FILES = [
    "test_*.py",
    "*_test.py",
    "*.test.py",
    "*.spec.py",
    "conftest.py",
]

DEFAULT_EXCLUDE_DIRS = [
    "node_modules",
    ".venv",
    "venv",
    "site-packages",
    "__pycache__",
]


class RuleDiscovery:
    """Locate and load validation rules from a directory tree."""

    def __init__(self, rules_dir: Path, exclude_patterns: list[str] | None = None):
        """Initialize rule discovery.

        Args:
            rules_dir: Directory containing rule modules
            exclude_patterns: Extra glob patterns, matched against the POSIX
                path relative to ``rules_dir``, to skip during discovery
        """
        self.rules_dir = Path(rules_dir)
        self.exclude_patterns = exclude_patterns or []

    def discover(self) -> list[ValidationRule]:
        """Load all rules under the rules directory.

        Returns:
            Rules in lexicographic order of their relative file paths, and
            in contribution order within a file. Empty if the directory is
            missing or unreadable.
        """
        try:
            rule_files = self.find_rule_files()
        except OSError as e:
            logger.error(f"Error loading rules from {self.rules_dir}: {e}")
            return []

        rules: list[ValidationRule] = []
        for rule_file in rule_files:
            try:
                rules.extend(self._load_rules_from(rule_file))
            except (Exception, SystemExit) as e:
                logger.warning(f"Failed to load rule from {rule_file}: {type(e).__name__}: {e}")

        logger.info(f"Discovered {len(rules)} rules in {len(rule_files)} files under {self.rules_dir}")
        return rules

    def find_rule_files(self) -> list[Path]:
        """Return candidate rule files, sorted by relative POSIX path.

        Raises:
            NotADirectoryError: If the rules directory does not exist
        """
        if not self.rules_dir.is_dir():
            raise NotADirectoryError(f"Rules directory not found: {self.rules_dir}")

        candidates = [
            path for path in self._walk_python_files()
            if not self._is_excluded(path)
        ]
        return sorted(candidates, key=self._relative_posix)

    def _walk_python_files(self) -> Iterator[Path]:
        def _raise(error: OSError) -> None:
            raise error

        for root, dirs, files in os.walk(self.rules_dir, onerror=_raise):
            dirs[:] = [d for d in dirs if d not in DEFAULT_EXCLUDE_DIRS]
            for file in files:
                if file.endswith(".py"):
                    yield Path(root) / file

    def _relative_posix(self, file_path: Path) -> str:
        return file_path.relative_to(self.rules_dir).as_posix()

    def _is_excluded(self, file_path: Path) -> bool:
        """Check if file should be excluded based on patterns."""
        for pattern in DEFAULT_EXCLUDE_FILES:
            if fnmatch.fnmatch(file_path.name, pattern):
                return True

        relative_str = self._relative_posix(file_path)
        for pattern in self.exclude_patterns:
            if fnmatch.fnmatch(relative_str, pattern):
                return True
        return False

    def _module_name(self, file_path: Path) -> str:
        stem = self._relative_posix(file_path)[: -len(".py")]
        return f"{MODULE_NAMESPACE}.{re.sub(r'[^0-9A-Za-z_]', '_', stem)}"

    def _load_rules_from(self, file_path: Path) -> list[ValidationRule]:
        registry = RuleRegistry()
        with registry.collecting():
            module = self._load_module(file_path)

        found: list[ValidationRule] = registry.rules
        seen = {id(rule) for rule in found}
        for value in self._exported_values(module):
            if id(value) in seen:
                continue
            if is_validation_rule(value):
                found.append(value)
                seen.add(id(value))

        if not found:
            logger.debug(f"No rules exported from {file_path}")
        return found

    def _exported_values(self, module: ModuleType) -> list:
        """Values named in ``__all__``, or all public module attributes."""
        names = getattr(module, "__all__", None)
        if names is None:
            return [value for attr, value in vars(module).items() if not attr.startswith("_")]
        return [getattr(module, name) for name in names if hasattr(module, name)]

    def _load_module(self, file_path: Path) -> ModuleType:
        module_name = self._module_name(file_path)
        spec = importlib.util.spec_from_file_location(module_name, file_path)
        if spec is None or spec.loader is None:
            raise ImportError(f"Cannot create module spec for {file_path}")

        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        try:
            spec.loader.exec_module(module)
        except BaseException:
            sys.modules.pop(module_name, None)
            raise
        return module


def load_rules(rules_dir: Path | str, exclude_patterns: list[str] | None = None) -> list[ValidationRule]:
    """Auto-discover and load validation rules from a directory.

    Args:
        rules_dir: Directory containing rule files (e.g. ``.claude/rules``)
        exclude_patterns: Extra glob patterns to skip

    Returns:
        Loaded validation rules, empty if none could be found
    """
    return RuleDiscovery(Path(rules_dir), exclude_patterns).discover()
