"""Git hook installation for squash-tree."""

from squash_tree.hooks.installer import HOOK_NAMES, HookInstaller, InstalledHook, hook_script

__all__ = ["HOOK_NAMES", "HookInstaller", "InstalledHook", "hook_script"]
