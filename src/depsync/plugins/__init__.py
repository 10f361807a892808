"""Extension layer — plugin system via pluggy.

Discovery: entry points in the ``depsync.plugins`` group.
INVARIANT: Plugin failures are warnings, never errors.
"""

from depsync.plugins.manager import PluginManager

__all__ = ["PluginManager"]
