"""
Projectivity of Complete Fans
=============================

A complete fan F is polytopal iff it is the (outer) normal fan of a
polytope P. Then:

    maximal cone  C_v   <->  vertex v of P
    wall          C_v & C_u  <->  edge [v, u] of P
    ridge (codim 2)      <->  2-face of P

EDGE RECORDS:
    For a wall W = C_a & C_b with inner normal h of C_a (h.x >= 0 on C_a,
    h.x = 0 on W), the edge of P goes from v_a to v_b along -h:

        v_b - v_a = lambda_W * (-h),     lambda_W > 0

CYCLE CONDITION:
    Around every ridge R the incident maximal cones form a cycle
    C_0, C_1, ..., C_{k-1}, C_0 linked by walls. The edge vectors around the
    corresponding 2-face of P sum to zero:

        sum_i  s_i * lambda_i * d_i = 0       (s_i = +1 along the record, -1 against)

DECISION:
    Feasible lengths = {lambda >= 0} & {cycle equations}. F is polytopal
    iff this cone has a point with every lambda strictly positive. The sum
    of its extreme rays is such a point whenever one exists.

RECONSTRUCTION:
    Place v_0 at the origin and walk the adjacency graph of maximal cones
    with a queue, adding or subtracting lambda * d along each edge record.

Incomplete fans, malformed walls and broken cycles give False, never an
exception.
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Tuple

from ..builders.cone import Cone
from ..builders.fan import Fan
from ..builders.polyhedron import Polyhedron, convex_hull
from ..operators.double_description import extreme_rays
from ..operators.exact import IntVector, dot
from ..spec.errors import InputError
from ..spec.structures import columns_matrix

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EdgeRecord:
    """Wall between two maximal cones, seen as an edge of the would-be polytope."""
    index: int
    source: int
    target: int
    wall: Cone
    direction: IntVector


def _edge_records(F: Fan) -> Optional[List[EdgeRecord]]:
    """One record per wall; None if some wall is not shared by exactly two cones."""
    cones = F.max_cones
    incident: Dict[Cone, List[int]] = {}
    for i, C in enumerate(cones):
        for W in C.faces(1):
            incident.setdefault(W, []).append(i)

    records = []
    for W in sorted(incident, key=lambda c: c.key()):
        owners = incident[W]
        if len(owners) != 2:
            _logger.debug("Wall %r lies in %d maximal cones", W, len(owners))
            return None
        if len(W.hyperplane_list) != 1:
            return None
        h = W.hyperplane_list[0]
        a, b = owners
        if dot(h, cones[a].interior_vector()) < 0:
            h = tuple(-x for x in h)
        direction = tuple(-x for x in h)
        records.append(EdgeRecord(len(records), a, b, W, direction))
    return records


def _cyclic_order(members: List[int],
                  edge_of: Dict[FrozenSet[int], EdgeRecord]) -> Optional[List[Tuple[EdgeRecord, int]]]:
    """
    Order the maximal cones around a ridge greedily into a closed cycle.

    Returns:
        (edge record, index of the cone it is departed from) in cycle
        order, or None if no cycle exists
    """
    start = members[0]
    remaining = set(members[1:])
    current = start
    path = []
    while remaining:
        nxt = next((j for j in sorted(remaining) if frozenset((current, j)) in edge_of), None)
        if nxt is None:
            return None
        path.append((current, nxt))
        remaining.discard(nxt)
        current = nxt
    if frozenset((current, start)) not in edge_of:
        return None
    path.append((current, start))
    return [(edge_of[frozenset(step)], step[0]) for step in path]


def _cycle_equations(F: Fan, records: List[EdgeRecord]) -> Optional[List[Tuple[int, ...]]]:
    cones = F.max_cones
    n = F.ambient_dim
    m = len(records)
    edge_of = {frozenset((e.source, e.target)): e for e in records}

    rows = []
    for R in F.faces(2):
        members = [i for i, C in enumerate(cones) if R in C.faces(2)]
        cycle = _cyclic_order(members, edge_of)
        if cycle is None:
            _logger.debug("No cycle of maximal cones around ridge %r", R)
            return None
        for coord in range(n):
            row = [0] * m
            for e, departed in cycle:
                sign = 1 if departed == e.source else -1
                row[e.index] += sign * e.direction[coord]
            if any(row):
                rows.append(tuple(row))
    return rows


def _reconstruct(F: Fan, records: List[EdgeRecord], lengths: IntVector) -> Polyhedron:
    n = F.ambient_dim
    adjacency: Dict[int, List[EdgeRecord]] = {}
    for e in records:
        adjacency.setdefault(e.source, []).append(e)
        adjacency.setdefault(e.target, []).append(e)

    position = {0: (0,) * n}
    queue = deque([0])
    while queue:
        i = queue.popleft()
        for e in adjacency.get(i, []):
            step = tuple(lengths[e.index] * d for d in e.direction)
            if e.source == i:
                j, p = e.target, tuple(x + y for x, y in zip(position[i], step))
            else:
                j, p = e.source, tuple(x - y for x, y in zip(position[i], step))
            if j not in position:
                position[j] = p
                queue.append(j)

    vertices = sorted(set(position.values()))
    return convex_hull(columns_matrix(vertices, n))


def is_polytopal(F: Fan) -> bool:
    """
    Test whether a fan is the normal fan of a polytope.

    The answer is cached in F.cache['is_polytopal']; on success the
    reconstructed polytope is cached in F.cache['polytope'].

    Returns:
        bool
    """
    if 'is_polytopal' in F.cache:
        return F.cache['is_polytopal']

    result = _decide(F)
    F.cache['is_polytopal'] = result is not None
    if result is not None:
        F.cache['polytope'] = result
    _logger.info("is_polytopal(%r) = %s", F, result is not None)
    return result is not None


def _decide(F: Fan) -> Optional[Polyhedron]:
    if not F.is_complete:
        return None
    if len(F) == 1:
        # the whole space: normal fan of a point
        return convex_hull(columns_matrix([(0,) * F.ambient_dim], F.ambient_dim))

    records = _edge_records(F)
    if records is None:
        return None
    rows = _cycle_equations(F, records)
    if rows is None:
        return None

    m = len(records)
    identity = [tuple(1 if i == j else 0 for j in range(m)) for i in range(m)]
    feasible, _ = extreme_rays(identity, rows, m)
    lengths = tuple(sum((r[i] for r in feasible), 0) for i in range(m))
    _logger.debug("Edge-length cone: %d edges, %d equations, %d extreme rays",
                  m, len(rows), len(feasible))
    if not all(x > 0 for x in lengths):
        return None
    return _reconstruct(F, records, lengths)


def polytope(F: Fan) -> Polyhedron:
    """
    A polytope whose normal fan is F.

    Raises:
        InputError: if F is not polytopal
    """
    if not is_polytopal(F):
        raise InputError("The fan is not the normal fan of a polytope")
    return F.cache['polytope']
