"""Plugin discovery, loading, and lifecycle dispatch.

Discovery: entry_points (pip-installed) in the ``ctxchain.plugins`` group
via pluggy, plus single-file plugins from a local directory (typically
``.ctxchain/plugins/`` next to ``ctxchain.toml``).
Capabilities: lifecycle hooks and context class registration.
"""

from __future__ import annotations

import importlib.util
import inspect
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

import pluggy

from ctxchain.plugins.hookspecs import PROJECT_NAME, CtxchainHookSpec

if TYPE_CHECKING:
    from ctxchain.domain.context import BaseContext

ENTRY_POINT_GROUP = "ctxchain.plugins"

logger = logging.getLogger(__name__)


class PluginManager:
    """Manages plugin discovery, loading, and hook dispatch."""

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(CtxchainHookSpec)
        self._loaded: bool = False

    def discover_and_load(self, *, local_dir: Path | None = None) -> list[str]:
        """Discover plugins from entry points and an optional local directory.

        Context classes contributed through ``register_context_classes``
        are added to the registry once every plugin is loaded.

        Returns a list of loaded plugin names.
        """
        self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        self._normalize_plugin_instances()
        if local_dir is not None:
            self._discover_local(local_dir)
        for plugin in self._pm.get_plugins():
            self._register_plugin_contexts(plugin, self._plugin_name(plugin))
        self._loaded = True
        return self.list_plugin_names()

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin instance directly."""
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        if self._loaded:
            self._register_plugin_contexts(plugin, resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    def unregister(self, plugin: object) -> None:
        """Unregister a plugin instance."""
        self._pm.unregister(plugin)

    @property
    def is_loaded(self) -> bool:
        """Whether discover_and_load() has been called."""
        return self._loaded

    @property
    def hook(self) -> pluggy.HookRelay:
        """Access the hook relay for dispatching events."""
        return self._pm.hook

    def get_plugins(self) -> list[object]:
        return list(self._pm.get_plugins())

    def list_plugin_names(self) -> list[str]:
        return [self._plugin_name(p) for p in self._pm.get_plugins()]

    # ------------------------------------------------------------------
    # Lifecycle dispatch
    # ------------------------------------------------------------------

    def notify_root_context(self, context: BaseContext) -> list[str]:
        """Fire ``post_root_context``.  Returns warnings instead of raising."""
        return self._dispatch("post_root_context", context=context)

    def notify_context_wrap(self, context: BaseContext, parent: BaseContext) -> list[str]:
        """Fire ``post_context_wrap``.  Returns warnings instead of raising."""
        return self._dispatch("post_context_wrap", context=context, parent=parent)

    def _dispatch(self, hook_name: str, **kwargs: object) -> list[str]:
        try:
            getattr(self._pm.hook, hook_name)(**kwargs)
        except Exception:
            logger.warning("Plugin hook %s failed", hook_name, exc_info=True)
            return [f"Plugin hook {hook_name} failed"]
        return []

    # ------------------------------------------------------------------
    # Local directory discovery
    # ------------------------------------------------------------------

    def _discover_local(self, local_dir: Path) -> None:
        """Scan *local_dir* for single-file Python plugins.

        Each ``*.py`` file (excluding ``_``-prefixed names) is loaded as a
        module. Classes inside the module that carry hookimpl-decorated
        methods are instantiated and registered.

        Errors are logged as warnings but never raised.
        """
        if not local_dir.is_dir():
            return

        for py_file in sorted(local_dir.glob("*.py")):
            if py_file.name.startswith("_"):
                continue
            module_name = f"ctxchain_local_plugin_{py_file.stem}"
            try:
                spec = importlib.util.spec_from_file_location(module_name, py_file)
                if spec is None or spec.loader is None:
                    logger.warning("Could not create module spec for %s", py_file)
                    continue
                module = importlib.util.module_from_spec(spec)
                sys.modules[module_name] = module
                spec.loader.exec_module(module)
            except Exception:
                logger.warning("Failed to load local plugin %s", py_file, exc_info=True)
                sys.modules.pop(module_name, None)
                continue

            for _attr_name, obj in inspect.getmembers(module, inspect.isclass):
                if obj.__module__ != module_name:
                    continue
                if not self._has_hook_impls(obj):
                    continue
                try:
                    self.register_plugin(obj(), name=module_name)
                except Exception:
                    logger.warning(
                        "Failed to instantiate plugin class %s from %s",
                        obj.__name__,
                        py_file,
                        exc_info=True,
                    )

    def _normalize_plugin_instances(self) -> None:
        """Replace registered plugin classes with instantiated objects.

        Entry points may name a class; hooks dispatched against a class
        object leave ``self`` unbound.
        """
        for plugin in list(self._pm.get_plugins()):
            if not inspect.isclass(plugin) or not self._has_hook_impls(plugin):
                continue

            plugin_name = self._plugin_name(plugin)
            self._pm.unregister(plugin)
            try:
                instance = plugin()
            except Exception:
                logger.warning(
                    "Failed to instantiate entry-point plugin %s",
                    plugin_name,
                    exc_info=True,
                )
                continue
            self._pm.register(instance, name=plugin_name)

    @staticmethod
    def _register_plugin_contexts(plugin: object, plugin_name: str) -> None:
        """Add the context classes a single plugin contributes to the registry."""
        from ctxchain.domain.registry import register_context

        hook = getattr(plugin, "register_context_classes", None)
        if hook is None:
            return

        try:
            class_map = hook()
        except Exception:
            logger.warning(
                "Failed to collect context classes from plugin %s",
                plugin_name,
                exc_info=True,
            )
            return

        if class_map is None:
            return
        if not isinstance(class_map, dict):
            logger.warning("Plugin %s returned non-dict context registrations", plugin_name)
            return

        for name, context_cls in class_map.items():
            try:
                register_context(name, context_cls)
            except (TypeError, ValueError):
                logger.warning(
                    "Skipping context registration %r from plugin %s",
                    name,
                    plugin_name,
                    exc_info=True,
                )

    def _plugin_name(self, plugin: object) -> str:
        name = self._pm.get_name(plugin)
        if name:
            return name
        return plugin.__name__ if inspect.isclass(plugin) else plugin.__class__.__name__

    @staticmethod
    def _has_hook_impls(cls: type) -> bool:
        """Check whether *cls* has any methods decorated with ``@hookimpl``.

        Pluggy's ``HookimplMarker("ctxchain")`` sets a ``ctxchain_impl``
        attribute on decorated methods.
        """
        for name in dir(cls):
            if name.startswith("_"):
                continue
            method = getattr(cls, name, None)
            if callable(method) and getattr(method, f"{PROJECT_NAME}_impl", None):
                return True
        return False
