"""
Resourcery Callbacks — before/after/around hook chains per change kind.

Each resource class owns one ``CallbackChain`` per kind (``save``,
``update``, ``replace_fields``, ...). Hooks are declared with decorators in
the class body and collected by the metaclass:

    class PostResource(Resource):

        @before("save")
        def stamp(self):
            self.model.touched = True

        @around("update")
        def audited(self, proceed):
            log.info("updating")
            proceed()

or attached later with ``PostResource.set_callback("save", "after", fn)``.

Running a chain:
    around hooks (first registered is outermost)
      → before hooks (registration order)
      → operation
      → after hooks (registration order)

An around hook that never calls ``proceed`` silently skips everything
inside it.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, List, Tuple, Union

logger = logging.getLogger("resourcery.callbacks")

__all__ = [
    "CALLBACK_KINDS",
    "POSITIONS",
    "CallbackChain",
    "CallbackRegistry",
    "before",
    "after",
    "around",
]

CALLBACK_KINDS: Tuple[str, ...] = (
    "create",
    "update",
    "remove",
    "save",
    "create_to_many_link",
    "replace_to_many_links",
    "create_to_one_link",
    "replace_to_one_link",
    "replace_polymorphic_to_one_link",
    "remove_to_many_link",
    "remove_to_one_link",
    "replace_fields",
)

POSITIONS = ("before", "after", "around")

# A hook is a method name on the resource or a plain callable taking the
# resource (plus ``proceed`` for around hooks).
Hook = Union[str, Callable[..., Any]]


def _invoke(hook: Hook, resource: Any, *args: Any) -> Any:
    if isinstance(hook, str):
        return getattr(resource, hook)(*args)
    return hook(resource, *args)


def _hook_name(hook: Hook) -> str:
    return hook if isinstance(hook, str) else getattr(hook, "__name__", repr(hook))


class CallbackChain:
    """Ordered hooks for a single change kind."""

    def __init__(self, kind: str):
        self.kind = kind
        self.before: List[Hook] = []
        self.after: List[Hook] = []
        self.around: List[Hook] = []

    def add(self, position: str, hook: Hook) -> None:
        if position not in POSITIONS:
            raise ValueError(f"Callback position must be one of {POSITIONS}, got {position!r}")
        hooks = getattr(self, position)
        if hook not in hooks:
            hooks.append(hook)

    def copy(self) -> CallbackChain:
        chain = CallbackChain(self.kind)
        chain.before = list(self.before)
        chain.after = list(self.after)
        chain.around = list(self.around)
        return chain

    def __bool__(self) -> bool:
        return bool(self.before or self.after or self.around)

    def run(self, resource: Any, operation: Callable[[], Any]) -> bool:
        """
        Run ``operation`` inside this chain.

        Returns:
            True if the operation ran, False if an around hook skipped it.
        """
        ran = False

        def core() -> None:
            nonlocal ran
            for hook in self.before:
                _invoke(hook, resource)
            operation()
            ran = True
            for hook in self.after:
                _invoke(hook, resource)

        step = core
        for hook in reversed(self.around):
            step = self._wrap(hook, resource, step)
        step()

        if not ran:
            logger.debug(f"'{self.kind}' callbacks on {type(resource).__name__} skipped the operation")
        return ran

    def _wrap(self, hook: Hook, resource: Any, inner: Callable[[], None]) -> Callable[[], None]:
        def step() -> None:
            calls = 0

            def proceed() -> None:
                nonlocal calls
                calls += 1
                if calls > 1:
                    raise RuntimeError(
                        f"around_{self.kind} hook {_hook_name(hook)} called proceed() more than once"
                    )
                inner()

            _invoke(hook, resource, proceed)

        return step

    def __repr__(self) -> str:
        return (
            f"<CallbackChain '{self.kind}' before={len(self.before)} "
            f"around={len(self.around)} after={len(self.after)}>"
        )


class CallbackRegistry:
    """All chains of one resource class."""

    def __init__(self, kinds: Iterable[str] = CALLBACK_KINDS):
        self._chains: Dict[str, CallbackChain] = {kind: CallbackChain(kind) for kind in kinds}

    def chain(self, kind: str) -> CallbackChain:
        try:
            return self._chains[kind]
        except KeyError:
            raise ValueError(f"Unknown callback kind {kind!r}") from None

    def add(self, kind: str, position: str, hook: Hook) -> None:
        self.chain(kind).add(position, hook)

    def copy(self) -> CallbackRegistry:
        registry = CallbackRegistry(())
        registry._chains = {kind: chain.copy() for kind, chain in self._chains.items()}
        return registry

    def run(self, kind: str, resource: Any, operation: Callable[[], Any]) -> bool:
        return self.chain(kind).run(resource, operation)


# ── Declaration decorators ───────────────────────────────────────────────────


def _marker(position: str, kinds: Tuple[str, ...]) -> Callable[[Callable], Callable]:
    for kind in kinds:
        if kind not in CALLBACK_KINDS:
            raise ValueError(f"Unknown callback kind {kind!r}")

    def _decorator(fn: Callable) -> Callable:
        marks = list(getattr(fn, "__resource_callbacks__", []))
        marks.extend((kind, position) for kind in kinds)
        fn.__resource_callbacks__ = marks
        return fn

    return _decorator


def before(*kinds: str):
    """Run the decorated method before the given change kinds."""
    return _marker("before", kinds)


def after(*kinds: str):
    """Run the decorated method after the given change kinds."""
    return _marker("after", kinds)


def around(*kinds: str):
    """Wrap the given change kinds; the method receives ``proceed``."""
    return _marker("around", kinds)
