"""Install the git hook scripts that feed squash capture."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

HOOK_MARKER = "# Installed by: git squash-tree init"
LOCAL_SUFFIX = ".local"

HOOK_NAMES = ("pre-rebase", "post-rewrite", "post-merge", "prepare-commit-msg", "post-commit")

# post-rewrite receives its commit pairs on stdin; it is buffered so a
# pre-existing hook chained after ours sees the same input.
_STDIN_HOOK = """#!/bin/bash
# squash-tree hook: {name}
{marker}
INPUT=$(cat)
printf '%s\\n' "$INPUT" | git squash-tree hook {name} "$@" >/dev/null 2>&1 || true
LOCAL_HOOK="$(dirname "$0")/{name}{suffix}"
if [ -x "$LOCAL_HOOK" ]; then
    printf '%s\\n' "$INPUT" | "$LOCAL_HOOK" "$@"
    exit $?
fi
exit 0
"""

_ARGS_HOOK = """#!/bin/bash
# squash-tree hook: {name}
{marker}
git squash-tree hook {name} "$@" </dev/null >/dev/null 2>&1 || true
LOCAL_HOOK="$(dirname "$0")/{name}{suffix}"
if [ -x "$LOCAL_HOOK" ]; then
    "$LOCAL_HOOK" "$@"
    exit $?
fi
exit 0
"""


def hook_script(name: str) -> str:
    """Script body for one hook."""
    template = _STDIN_HOOK if name == "post-rewrite" else _ARGS_HOOK
    return template.format(name=name, marker=HOOK_MARKER, suffix=LOCAL_SUFFIX)


@dataclass
class InstalledHook:
    """Result of installing one hook script."""

    name: str
    path: Path
    preserved: bool = False
    skipped: bool = False

    @property
    def description(self) -> str:
        if self.skipped:
            return f"{self.name} (skipped: existing hook and {self.name}{LOCAL_SUFFIX} both present)"
        if self.preserved:
            return f"{self.name} (existing hook kept as {self.name}{LOCAL_SUFFIX})"
        return self.name


class HookInstaller:
    """Writes the squash-tree hook scripts into a hooks directory."""

    def __init__(self, hooks_dir: Path):
        """Initialize the installer.

        Args:
            hooks_dir: Directory git runs hooks from.
        """
        self.hooks_dir = hooks_dir

    def install(self) -> list[InstalledHook]:
        """Write all hook scripts.

        A hook that was not written by squash-tree is renamed to
        ``<name>.local`` and chained from the new script.

        Returns:
            One InstalledHook per script written.
        """
        self.hooks_dir.mkdir(parents=True, exist_ok=True)
        return [self._install_one(name) for name in HOOK_NAMES]

    def _install_one(self, name: str) -> InstalledHook:
        hook_path = self.hooks_dir / name
        preserved = False

        if hook_path.exists() and not self.is_ours(hook_path):
            local_path = self.hooks_dir / f"{name}{LOCAL_SUFFIX}"
            if local_path.exists():
                logger.warning(f"Not replacing {hook_path}: {local_path} already exists")
                return InstalledHook(name=name, path=hook_path, skipped=True)
            hook_path.rename(local_path)
            logger.info(f"Moved existing {name} hook to {local_path}")
            preserved = True

        hook_path.write_text(hook_script(name))
        os.chmod(hook_path, 0o755)
        return InstalledHook(name=name, path=hook_path, preserved=preserved)

    @staticmethod
    def is_ours(hook_path: Path) -> bool:
        """Check whether a hook file was written by squash-tree."""
        try:
            return HOOK_MARKER in hook_path.read_text()
        except (OSError, UnicodeDecodeError):
            return False
