"""Git hook management."""

from cartographer.hooks.installer import install_hook, uninstall_hook

__all__ = ["install_hook", "uninstall_hook"]
