"""Controller registry.

A controller is a record of optional hooks keyed by a string identifier.
The pipeline only ever calls two of them:

- ``change_variations(context, request, response)`` — data phase
- ``change_dom(context, request, response)`` — markup phase

Either may be missing. An unknown identifier, a registered controller
without the hook, and a hook that does nothing all behave the same way.

Controllers can be registered in code or discovered from ``*.py`` files
in the site's ``controllers_dir``::

    # controllers/blog.py
    async def change_variations(context, request, response):
        context.specific["posts"] = await load_posts()

    def change_dom(context, request, response):
        dom = context.virtual_dom()
        dom.title.string = context.specific["title"]
        return dom
"""

from __future__ import annotations

import importlib.util
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

type Hook = Callable[..., Any]
type HookName = Literal["change_variations", "change_dom"]

HOOK_NAMES: tuple[HookName, ...] = ("change_variations", "change_dom")


@dataclass(frozen=True, slots=True)
class Controller:
    """Optional hook references for one controller identifier.

    Attributes:
        name: Registry identifier.
        change_variations: Data-phase hook, or ``None``.
        change_dom: Markup-phase hook, or ``None``.
    """

    name: str
    change_variations: Hook | None = None
    change_dom: Hook | None = None

    def hook(self, name: HookName) -> Hook | None:
        """Return the hook called *name*, or ``None`` when absent."""
        return getattr(self, name)

    @classmethod
    def from_object(cls, name: str, obj: Any) -> Controller:
        """Collect the hooks a module, class instance or namespace defines.

        Non-callable attributes with a hook's name are ignored.
        """
        hooks: dict[str, Hook] = {}
        for hook_name in HOOK_NAMES:
            value = getattr(obj, hook_name, None)
            if callable(value):
                hooks[hook_name] = value
        return cls(name=name, **hooks)


def controller_id(name: str) -> str:
    """Normalize an identifier: ``"blog.py"`` and ``"blog"`` are the same."""
    return name.removesuffix(".py")


class ControllerRegistry:
    """Maps controller identifiers to ``Controller`` records.

    Lookups never fail: ``get()`` returns ``None`` for an unknown or
    empty identifier, and ``hook()`` returns ``None`` when either the
    controller or the hook is missing.
    """

    __slots__ = ("_controllers",)

    def __init__(self, controllers: dict[str, Controller] | None = None) -> None:
        self._controllers: dict[str, Controller] = {}
        for controller in (controllers or {}).values():
            self.add(controller)

    def add(self, controller: Controller) -> Controller:
        """Register (or replace) *controller* under its name."""
        self._controllers[controller_id(controller.name)] = controller
        return controller

    def register(
        self,
        name: str,
        *,
        change_variations: Hook | None = None,
        change_dom: Hook | None = None,
    ) -> Controller:
        """Register hooks under *name*."""
        return self.add(
            Controller(name=name, change_variations=change_variations, change_dom=change_dom)
        )

    def get(self, name: str | None) -> Controller | None:
        if not name:
            return None
        return self._controllers.get(controller_id(name))

    def hook(self, name: str | None, hook_name: HookName) -> Hook | None:
        """The hook *hook_name* of controller *name*, or ``None``."""
        controller = self.get(name)
        if controller is None:
            return None
        return controller.hook(hook_name)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and controller_id(name) in self._controllers

    def __iter__(self) -> Iterator[Controller]:
        return iter(self._controllers.values())

    def __len__(self) -> int:
        return len(self._controllers)

    @classmethod
    def from_directory(cls, directory: str | Path) -> ControllerRegistry:
        """Load every ``*.py`` controller module in *directory*.

        The file stem is the identifier. Files starting with ``_`` are
        skipped. A missing directory yields an empty registry.
        """
        registry = cls()
        root = Path(directory)
        if not root.is_dir():
            return registry
        for item in sorted(root.glob("*.py")):
            if item.name.startswith("_"):
                continue
            module = _load_module(item)
            if module is not None:
                registry.add(Controller.from_object(item.stem, module))
        return registry


def _load_module(path: Path) -> Any:
    """Import a controller file without touching ``sys.path``."""
    spec = importlib.util.spec_from_file_location(f"wren_controller_{path.stem}", path)
    if spec is None or spec.loader is None:
        return None
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module
