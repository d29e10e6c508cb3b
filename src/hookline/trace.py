"""Per-call trace log shared between an outer call and the calls nested in it.

The outermost invocation owns the trace. Nested calls started from its hooks
receive a view of it (see :meth:`TraceContext.inherit`) and append their own
events to the same stack, so the owner sees one ordered call tree when it
dumps the trace at ``pop``.
"""

import sys
import time
from dataclasses import dataclass, field
from typing import TextIO

# Key under which a trace travels inside a verb's params dict
TRACE_KEY = "__trace"


@dataclass(frozen=True)
class TraceEvent:
    """A single lifecycle event.

    Attributes:
        name: Event name (push, call, pop)
        time: Seconds elapsed since the trace started
    """

    name: str
    time: float


@dataclass
class TraceContext:
    """Ordered, append-only timing log for one outer call.

    Attributes:
        start: perf_counter() value taken when the outermost call started
        stack: Events in the order they happened, shared with nested calls
        inherited: True when this view was propagated from an enclosing call
    """

    start: float = field(default_factory=time.perf_counter)
    stack: list[TraceEvent] = field(default_factory=list)
    inherited: bool = False

    def insert(self, name: str) -> TraceEvent:
        event = TraceEvent(name=name, time=time.perf_counter() - self.start)
        self.stack.append(event)
        return event

    def inherit(self) -> "TraceContext":
        """Return a view for a nested call.

        The view shares ``start`` and the ``stack`` list with this trace, so
        events appended by the nested call land in the owner's log.
        """
        return TraceContext(start=self.start, stack=self.stack, inherited=True)

    def format(self) -> str:
        lines = ["--------------"]
        lines.extend(f"{event.name} {event.time * 1000:.3f}ms" for event in self.stack)
        lines.append("==============")
        return "\n".join(lines)

    def dump(self, stream: TextIO | None = None) -> None:
        """Write the formatted stack to the diagnostic stream (stderr)."""
        stream = stream or sys.stderr
        stream.write(self.format() + "\n")
