"""Flag lookup used by the conditional template engine.

The engine never inspects the caller's data directly.  Everything it needs
is a ``lookup(name) -> bool`` that answers ``False`` for names it does not
know.  Two adapters cover the shapes the orchestrator works with:

* ``MappingFlagSet`` -- an open ``{name: bool}`` mapping, typically built from
  a declared list of wizard options.
* ``AttributeFlagSet`` -- a closed record (a pydantic model, a dataclass, any
  object) whose boolean attributes are the flags.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class FlagSet(Protocol):
    """Read-only ``name -> bool`` lookup."""

    def lookup(self, name: str) -> bool:
        ...


class MappingFlagSet:
    """FlagSet backed by a plain mapping.

    The mapping is copied at construction time so later mutation of the
    caller's dict cannot change the outcome of a render in progress.
    Non-boolean values are ignored (they resolve to ``False``).
    """

    def __init__(self, values: Mapping[str, Any] | None = None) -> None:
        self._values: dict[str, bool] = {
            str(k): v for k, v in (values or {}).items() if isinstance(v, bool)
        }

    def lookup(self, name: str) -> bool:
        return self._values.get(name, False)

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __len__(self) -> int:
        return len(self._values)

    def as_dict(self) -> dict[str, bool]:
        """Return a copy of the underlying ``{name: value}`` mapping."""
        return dict(self._values)

    def __repr__(self) -> str:
        return f"MappingFlagSet({self._values!r})"


class AttributeFlagSet:
    """FlagSet backed by the boolean attributes of a record object.

    Only attributes whose value is a real ``bool`` count as flags; anything
    else (strings, ints, methods, missing names) reads as ``False``.
    Underscore-prefixed names are never looked up.
    """

    def __init__(self, record: Any) -> None:
        self._record = record

    def lookup(self, name: str) -> bool:
        if not name or name.startswith("_"):
            return False
        value = getattr(self._record, name, None)
        return value if isinstance(value, bool) else False

    def __repr__(self) -> str:
        return f"AttributeFlagSet({type(self._record).__name__})"


def as_flag_set(source: Any) -> FlagSet:
    """Adapt *source* to the ``FlagSet`` protocol.

    Accepts an existing FlagSet, a mapping, ``None`` (no flags at all), or
    any other object, which is treated as a closed record.
    """
    if source is None:
        return MappingFlagSet()
    if isinstance(source, FlagSet):
        return source
    if isinstance(source, Mapping):
        return MappingFlagSet(source)
    return AttributeFlagSet(source)
