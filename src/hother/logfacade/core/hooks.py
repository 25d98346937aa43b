"""
Hooks that inspect and mutate records before they are written.
"""

import copy
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from hother.logfacade.core.level import Level
from hother.logfacade.utils.logging import get_logger


def _copy_value(value: Any) -> Any:
    try:
        return copy.deepcopy(value)
    except (TypeError, copy.Error):
        return value


@dataclass
class HookEntry:
    """
    The parts of a record a hook may mutate.

    Attributes:
        data: All the fields set by the user, including caller fields
        level: Level the record is logged at
        message: The formatted message
        context: Context attached with ``with_context``, if any
    """

    data: dict[str, Any] = field(default_factory=dict)
    level: Level = Level.INFO
    message: str = ""
    context: Any = None

    def copy(self) -> "HookEntry":
        """
        Copy with independent field values.

        Values are deep-copied so a discarded copy cannot leak nested
        changes. Values that cannot be copied (locks, sockets) are shared.
        """
        return HookEntry(
            data={key: _copy_value(value) for key, value in self.data.items()},
            level=self.level,
            message=self.message,
            context=self.context,
        )


@runtime_checkable
class Hook(Protocol):
    """
    Extension invoked on every record before it is written.

    ``fire`` returns True to have its mutations of the entry adopted and
    False to have them discarded. Raising discards them too; the failure is
    reported on stderr and logging continues.
    """

    def fire(self, entry: HookEntry) -> bool:
        """Inspect or mutate ``entry``."""
        ...


class HookFunc:
    """Adapt a plain function to the Hook interface."""

    def __init__(self, func: Callable[[HookEntry], bool]):
        self.func = func

    def fire(self, entry: HookEntry) -> bool:
        """Redirect the call to the wrapped function."""
        return self.func(entry)

    def __repr__(self) -> str:
        return f"HookFunc({getattr(self.func, '__qualname__', self.func)!r})"


def as_hook(hook: Hook | Callable[[HookEntry], bool]) -> Hook:
    """Return ``hook`` as a Hook, wrapping plain callables in a HookFunc."""
    if isinstance(hook, Hook):
        return hook
    if callable(hook):
        return HookFunc(hook)
    raise TypeError(f"Expected a Hook or a callable, got {type(hook).__name__}")


def run_hooks(hooks: Iterable[Hook], entry: HookEntry) -> HookEntry:
    """
    Run hooks in registration order.

    Each hook works on a copy of the current record. The copy replaces the
    record only when the hook reports a change.

    Args:
        hooks: Hooks to fire
        entry: The record before any hook ran

    Returns:
        The record after the last hook
    """
    current = entry
    for hook in hooks:
        candidate = current.copy()
        try:
            changed = hook.fire(candidate)
        except Exception as e:
            get_logger(__name__).error(
                "Failed to fire hook",
                hook=repr(hook),
                error=str(e),
                error_type=type(e).__name__,
            )
            continue
        if changed:
            current = candidate
    return current


class ContextFieldsHook:
    """
    Copy values out of the entry context into fields.

    Works with any mapping context, including a ``contextvars.Context``
    snapshot, whose keys are the context variables themselves.

    Example:
        request_id = contextvars.ContextVar("request_id")
        hook = ContextFieldsHook({request_id: "request_id"})
        logger = Logger(with_hook(hook))
        logger.with_context(contextvars.copy_context()).info("handled")
    """

    def __init__(self, mapping: Mapping[Any, str]):
        """
        Args:
            mapping: Context key to field name
        """
        self.mapping = dict(mapping)

    def fire(self, entry: HookEntry) -> bool:
        context = entry.context
        if context is None or not hasattr(context, "__getitem__"):
            return False

        changed = False
        for key, field_name in self.mapping.items():
            if key in context:
                entry.data[field_name] = context[key]
                changed = True
        return changed


class RedactionHook:
    """Replace the values of sensitive fields."""

    def __init__(self, keys: Iterable[str], replacement: str = "[REDACTED]"):
        self.keys = frozenset(keys)
        self.replacement = replacement

    def fire(self, entry: HookEntry) -> bool:
        matched = self.keys.intersection(entry.data)
        for key in matched:
            entry.data[key] = self.replacement
        return bool(matched)
