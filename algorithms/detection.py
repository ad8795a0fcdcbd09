"""
Deadlock Detection Algorithm for the Round-Robin & Deadlock Simulator.

Projects the resource-allocation graph onto a wait-for graph and finds every
process lying on a cycle of it (single-instance resources).
"""

import numpy as np
from typing import Iterable, List, Sequence, Tuple

from models.system_state import ResourceGraph

UNVISITED = 0
ON_STACK = 1
FINISHED = 2

WaitForEdge = Tuple[str, str]


def project_wait_for(graph: ResourceGraph) -> List[WaitForEdge]:
    """
    Derive wait-for edges from pending requests.

    For every (P, R) in request order, if R is held by some Q != P the edge
    P -> Q is emitted. Free resources and self-held resources produce no edge.

    Args:
        graph: Current resource graph

    Returns:
        List of (waiting process, holding process) edges
    """
    allocation = graph.allocation
    edges = []
    for req in graph.requests:
        holder = allocation.get(req.rid)
        if holder is not None and holder != req.pid:
            edges.append((req.pid, holder))
    return edges


def wait_for_matrix(graph: ResourceGraph) -> np.ndarray:
    """
    Wait-for graph as a [P][P] boolean adjacency matrix.

    W[p][q] is True iff p requests some resource held by q and p != q.
    Computed as Request x Allocation^T with the diagonal cleared.
    """
    waits = (graph.request_matrix @ graph.allocation_matrix.T) > 0
    np.fill_diagonal(waits, False)
    return waits


def find_cycle_members(nodes: Sequence[str], edges: Iterable[WaitForEdge]) -> List[str]:
    """
    Find every node that lies on at least one cycle.

    Depth-first search with three-state coloring (unvisited / on-stack /
    finished) and an explicit stack, so recursion depth is never a limit.
    Every node is tried as a root once, so disconnected cycles are found.
    Adjacency is stored CSR-style in arrays over integer node indices.

    When a node closes its strongly connected component, the stack segment
    from that node to the top is popped and, if it holds more than one node
    (or the node waits on itself), every node in it is marked as in a cycle.
    The result is the union over all cycles.

    Time Complexity: O(V+E)

    Args:
        nodes: Node ids; output order follows this order
        edges: Directed (from, to) edges; endpoints missing from nodes are added

    Returns:
        Ids of nodes on a cycle, in node order
    """
    names = list(nodes)
    index = {name: i for i, name in enumerate(names)}
    sources, targets = [], []
    for u, v in edges:
        for name in (u, v):
            if name not in index:
                index[name] = len(names)
                names.append(name)
        sources.append(index[u])
        targets.append(index[v])

    n = len(names)
    if n == 0:
        return []

    sources = np.array(sources, dtype=int)
    targets = np.array(targets, dtype=int)

    # CSR adjacency; stable sort keeps each node's edges in input order
    order = np.argsort(sources, kind="stable")
    adj_targets = targets[order]
    offsets = np.zeros(n + 1, dtype=int)
    offsets[1:] = np.cumsum(np.bincount(sources, minlength=n))

    self_loop = np.zeros(n, dtype=bool)
    self_loop[sources[sources == targets]] = True

    color = np.zeros(n, dtype=np.int8)
    discovery = np.full(n, -1, dtype=int)
    low = np.zeros(n, dtype=int)
    stack_pos = np.full(n, -1, dtype=int)
    in_cycle = np.zeros(n, dtype=bool)

    stack: List[int] = []
    counter = 0

    for root in range(n):
        if color[root] != UNVISITED:
            continue

        color[root] = ON_STACK
        discovery[root] = low[root] = counter
        counter += 1
        stack_pos[root] = len(stack)
        stack.append(root)
        frames = [[root, offsets[root]]]

        while frames:
            frame = frames[-1]
            u, ptr = frame
            if ptr < offsets[u + 1]:
                frame[1] = ptr + 1
                v = adj_targets[ptr]
                if color[v] == UNVISITED:
                    color[v] = ON_STACK
                    discovery[v] = low[v] = counter
                    counter += 1
                    stack_pos[v] = len(stack)
                    stack.append(v)
                    frames.append([v, offsets[v]])
                elif color[v] == ON_STACK:
                    low[u] = min(low[u], discovery[v])
                continue

            frames.pop()
            if frames:
                parent = frames[-1][0]
                low[parent] = min(low[parent], low[u])

            if low[u] == discovery[u]:
                start = stack_pos[u]
                segment = stack[start:]
                del stack[start:]
                color[segment] = FINISHED
                if len(segment) > 1 or self_loop[u]:
                    in_cycle[segment] = True

    return [names[i] for i in range(n) if in_cycle[i]]


def detect_deadlock(graph: ResourceGraph) -> Tuple[bool, List[str]]:
    """
    Detect deadlock as cycles in the wait-for graph.

    Stateless: nothing is cached between calls, so it is safe to run after
    every graph mutation.

    Four Deadlock Conditions Manifested:
    - Mutual Exclusion: each resource has at most one holder
    - Hold and Wait: a holder may also have pending requests
    - No Preemption: resources are only freed by release()
    - Circular Wait: a cycle in the wait-for graph

    Args:
        graph: Current resource graph

    Returns:
        Tuple of (deadlock_exists, deadlocked process ids in process order)
    """
    deadlocked = find_cycle_members(graph.processes, project_wait_for(graph))
    return len(deadlocked) > 0, deadlocked
