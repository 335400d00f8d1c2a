"""Tests for wren.controllers — the hook registry."""

from collections.abc import Callable
from pathlib import Path
from types import SimpleNamespace

from wren.controllers import Controller, ControllerRegistry, controller_id


def _noop(context, request, response) -> None:
    return None


class TestController:
    def test_missing_hook_is_none(self) -> None:
        controller = Controller(name="blog", change_dom=_noop)
        assert controller.hook("change_dom") is _noop
        assert controller.hook("change_variations") is None

    def test_from_object_collects_callables(self) -> None:
        obj = SimpleNamespace(change_variations=_noop, change_dom="not callable", other=_noop)
        controller = Controller.from_object("blog", obj)
        assert controller.change_variations is _noop
        assert controller.change_dom is None

    def test_from_class_with_static_methods(self) -> None:
        class Blog:
            @staticmethod
            def change_dom(context, request, response) -> None:
                return None

        controller = Controller.from_object("blog", Blog)
        assert controller.change_dom is not None
        assert controller.change_variations is None


class TestControllerId:
    def test_strips_py_suffix(self) -> None:
        assert controller_id("blog.py") == "blog"
        assert controller_id("blog") == "blog"


class TestRegistry:
    def test_register_and_lookup(self) -> None:
        registry = ControllerRegistry()
        registry.register("blog", change_dom=_noop)
        assert "blog" in registry
        assert "blog.py" in registry
        assert registry.hook("blog.py", "change_dom") is _noop

    def test_unknown_controller(self) -> None:
        registry = ControllerRegistry()
        assert registry.get("missing") is None
        assert registry.hook("missing", "change_dom") is None

    def test_empty_identifier(self) -> None:
        registry = ControllerRegistry()
        registry.register("", change_dom=_noop)
        assert registry.get(None) is None
        assert registry.get("") is None

    def test_missing_hook(self) -> None:
        registry = ControllerRegistry()
        registry.register("blog", change_variations=_noop)
        assert registry.hook("blog", "change_dom") is None

    def test_add_replaces(self) -> None:
        registry = ControllerRegistry()
        registry.register("blog", change_dom=_noop)
        registry.register("blog")
        assert len(registry) == 1
        assert registry.hook("blog", "change_dom") is None

    def test_iter(self) -> None:
        registry = ControllerRegistry()
        registry.register("a")
        registry.register("b")
        assert [c.name for c in registry] == ["a", "b"]


class TestFromDirectory:
    def test_loads_modules(self, write: Callable[..., Path], site_root: Path) -> None:
        write(
            "controllers/blog.py",
            "def change_variations(context, request, response):\n"
            "    context.specific['loaded'] = True\n",
        )
        write("controllers/_helpers.py", "def change_dom(context, request, response):\n    pass\n")
        write("controllers/notes.txt", "ignored")

        registry = ControllerRegistry.from_directory(site_root / "controllers")

        assert len(registry) == 1
        hook = registry.hook("blog.py", "change_variations")
        assert hook is not None
        context = SimpleNamespace(specific={})
        hook(context, None, None)
        assert context.specific == {"loaded": True}
        assert registry.hook("blog", "change_dom") is None

    def test_missing_directory(self, tmp_path: Path) -> None:
        registry = ControllerRegistry.from_directory(tmp_path / "nope")
        assert len(registry) == 0
