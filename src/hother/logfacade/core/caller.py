"""
Resolution of the call site that issued a log record.
"""

import sys
import threading
from dataclasses import dataclass
from types import FrameType

# Restrict the lookback to avoid runaway lookups.
MAXIMUM_CALLER_DEPTH = 25

# Frames of this package that always precede user code: the resolver is
# called from Entry._log, which is called from a leveled method.
KNOWN_FACADE_FRAMES = 2

# Package identifier of the facade, cached at first use.
_own_package: str | None = None
_minimum_caller_depth = 0
_init_lock = threading.Lock()

# Report the last frame inside the facade instead of the caller. Tests only.
report_caller_in_package = False


@dataclass(frozen=True, slots=True)
class CallerFrame:
    """Source location of the code that issued a log record."""

    file: str
    line: int
    function: str

    @property
    def location(self) -> str:
        """``file:line`` as attached to records."""
        return f"{self.file}:{self.line}"


def package_name(qualified_name: str) -> str:
    """
    Return the package part of a fully-qualified function name.

    The package is everything up to the first ``.`` after the last ``/``
    (or after the start of the string when there is no ``/``). Without such
    a ``.`` the whole string is the package.

    Examples:
        >>> package_name("github.com/myorg/my-repo.something.func1")
        'github.com/myorg/my-repo'
        >>> package_name("myrepo.myfile.MyFunc")
        'myrepo'
        >>> package_name("hother/logfacade/core.entry.Entry.info")
        'hother/logfacade/core'
        >>> package_name("simplepkg")
        'simplepkg'
    """
    start = qualified_name.rfind("/") + 1
    dot = qualified_name.find(".", start)
    if dot == -1:
        return qualified_name
    return qualified_name[:dot]


def qualified_function_name(frame: FrameType) -> str:
    """
    Build the fully-qualified name of the function running in ``frame``.

    The package path uses ``/`` separators and the rest uses ``.``, so
    ``hother.logfacade.core.entry.Entry.info`` becomes
    ``hother/logfacade/core.entry.Entry.info``.
    """
    module = frame.f_globals.get("__name__") or "__main__"
    package = frame.f_globals.get("__package__") or ""
    if package and module.startswith(package + "."):
        head = package.replace(".", "/") + module[len(package):]
    else:
        head = module.replace(".", "/")
    return f"{head}.{frame.f_code.co_qualname}"


def frame_to_caller(frame: FrameType) -> CallerFrame:
    """Describe the code running in ``frame`` as a CallerFrame."""
    module = frame.f_globals.get("__name__") or "__main__"
    return CallerFrame(
        file=frame.f_code.co_filename,
        line=frame.f_lineno,
        function=f"{module}.{frame.f_code.co_qualname}",
    )


def _init_own_package() -> None:
    global _own_package, _minimum_caller_depth

    with _init_lock:
        if _own_package is not None:
            return

        own_package = None
        frame: FrameType | None = sys._getframe(0)
        for _ in range(MAXIMUM_CALLER_DEPTH):
            if frame is None:
                break
            if frame.f_code.co_name == resolve_caller.__name__:
                own_package = package_name(qualified_function_name(frame))
                break
            frame = frame.f_back

        if own_package is None:
            # Resolver not found on the stack; fall back to its module.
            own_package = package_name(qualified_function_name(sys._getframe(0)))

        # Readers skip the lock once the package is set, so it goes last.
        _minimum_caller_depth = KNOWN_FACADE_FRAMES
        _own_package = own_package


def resolve_caller() -> CallerFrame | None:
    """
    Return the first frame on the stack that is outside the facade.

    Returns:
        The resolved call site, or None if none was found within
        ``MAXIMUM_CALLER_DEPTH`` frames
    """
    if _own_package is None:
        _init_own_package()

    try:
        frame: FrameType | None = sys._getframe(_minimum_caller_depth)
    except ValueError:
        return None

    previous: FrameType | None = None
    for _ in range(MAXIMUM_CALLER_DEPTH):
        if frame is None:
            break
        # If the caller isn't part of this package, we're done
        if package_name(qualified_function_name(frame)) != _own_package:
            if report_caller_in_package:
                return frame_to_caller(previous) if previous is not None else None
            return frame_to_caller(frame)
        previous = frame
        frame = frame.f_back

    return None
