"""Cycle detection over a name-keyed call graph."""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence


def detect_cycles(
    call_graph: Mapping[str, Sequence[str]],
) -> list[list[str]]:
    """Return every cycle met by a depth-first scan of *call_graph*.

    Each cycle is the path from the re-entered function to the caller
    that closed it; a self-call yields a one-element cycle. Callees
    with no entry of their own are leaves. Fully explored functions
    are never re-entered, so the scan is O(V + E).

    The DFS is iterative and shares one path list (push on enter,
    pop on exit), so long call chains cannot exhaust the stack.
    """
    cycles: list[list[str]] = []
    visited: set[str] = set()
    on_stack: set[str] = set()
    path: list[str] = []

    for root in call_graph:
        if root in visited:
            continue
        visited.add(root)
        on_stack.add(root)
        path.append(root)
        frames: list[tuple[str, Iterator[str]]] = [
            (root, iter(call_graph.get(root, ())))
        ]

        while frames:
            node, neighbors = frames[-1]
            descended = False
            for neighbor in neighbors:
                if neighbor not in visited:
                    visited.add(neighbor)
                    on_stack.add(neighbor)
                    path.append(neighbor)
                    frames.append(
                        (neighbor, iter(call_graph.get(neighbor, ())))
                    )
                    descended = True
                    break
                if neighbor in on_stack:
                    cycles.append(path[path.index(neighbor):])
            if not descended:
                frames.pop()
                path.pop()
                on_stack.discard(node)

    return cycles


def has_cycle(call_graph: Mapping[str, Sequence[str]]) -> bool:
    return bool(detect_cycles(call_graph))
