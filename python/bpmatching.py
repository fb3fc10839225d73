"""
Algorithm for finding a maximum cardinality matching in bipartite graphs.
"""

from __future__ import annotations

import collections
from collections.abc import Sequence


class MatchingError(Exception):
    """Raised when verification of the matching fails."""


def maximum_cardinality_matching(
        adjacency: Sequence[Sequence[int]],
        num_right: int
        ) -> list[int]:
    """Compute a maximum-cardinality matching in the bipartite graph
    given by "adjacency".

    The graph consists of a set of left vertices and a set of right
    vertices. Edges run only between a left vertex and a right vertex.
    Left vertices are indexed 0 .. len(adjacency)-1.
    Right vertices are indexed 0 .. num_right-1.

    The graph is specified as a list of edge lists, one for each left vertex.
    The edge list of a left vertex contains the indices of the right vertices
    adjacent to it. Edge lists may be empty, unsorted, or contain duplicates.
    Right vertices without incident edges are allowed and remain unmatched.

    This function uses the Hopcroft-Karp algorithm.
    It takes time O(m * sqrt(n)), where "n" is the number of vertices
    and "m" is the number of edges.
    This function uses O(n + m) memory.

    The result is deterministic. If the graph has several maximum matchings,
    the same one is returned every time for the same input.

    Parameters:
        adjacency: List of edge lists, one edge list per left vertex,
            each a list of right vertex indices.
        num_right: Number of right vertices.

    Returns:
        List with one element per left vertex.
        Element "x" is the index of the right vertex matched to left
        vertex "x", or -1 if left vertex "x" is unmatched.

    Raises:
        ValueError: If the input does not satisfy the constraints.
        TypeError: If the input contains invalid data types.
    """

    # Check that the input meets all constraints.
    _check_input_types(adjacency, num_right)
    _check_input_graph(adjacency, num_right)

    # Special case for graphs without left vertices.
    if not adjacency:
        return []

    # Initialize graph representation.
    graph = _GraphInfo(adjacency, num_right)

    # Initialize the matching algorithm.
    ctx = _MatchingContext(graph)

    # Improve the solution until no further improvement is possible.
    #
    # Each successful pass through this loop increases the number
    # of matched edges by at least 1.
    #
    # This loop runs through at most O(sqrt(n)) iterations.
    # Each iteration takes time O(n + m).
    while ctx.run_stage():
        pass

    # Verify that the matching is optimal.
    # Verification is a redundant step; if the matching algorithm is correct,
    # verification will always pass.
    _verify_optimum(graph, ctx.left_mate, ctx.right_mate)

    return list(ctx.left_mate)


def minimum_vertex_cover(
        adjacency: Sequence[Sequence[int]],
        num_right: int
        ) -> tuple[list[int], list[int]]:
    """Compute a minimum vertex cover of the bipartite graph
    given by "adjacency".

    The graph is specified in the same way as for
    "maximum_cardinality_matching()".

    By Koenig's theorem, the size of a minimum vertex cover of a bipartite
    graph is equal to the size of a maximum matching. The cover is derived
    from a maximum matching by following alternating paths from
    the unmatched left vertices.

    This function takes time O(m * sqrt(n)).

    Parameters:
        adjacency: List of edge lists, one edge list per left vertex,
            each a list of right vertex indices.
        num_right: Number of right vertices.

    Returns:
        Tuple "(left_cover, right_cover)" of sorted lists of left vertex
        indices and right vertex indices that together cover every edge.

    Raises:
        ValueError: If the input does not satisfy the constraints.
        TypeError: If the input contains invalid data types.
    """

    left_mate = maximum_cardinality_matching(adjacency, num_right)

    right_mate = num_right * [-1]
    for (x, y) in enumerate(left_mate):
        if y != -1:
            right_mate[y] = x

    graph = _GraphInfo(adjacency, num_right)
    (left_cover, right_cover, _free_reached) = _koenig_cover(
        graph, left_mate, right_mate)
    return (left_cover, right_cover)


def _check_input_types(
        adjacency: Sequence[Sequence[int]],
        num_right: int
        ) -> None:
    """Check that the input consists of valid data types.

    This function takes time O(n + m).

    Raises:
        TypeError: If the input contains invalid data types.
    """

    if isinstance(num_right, bool) or (not isinstance(num_right, int)):
        raise TypeError('"num_right" must be an integer')

    if not isinstance(adjacency, (list, tuple)):
        raise TypeError('"adjacency" must be a list')

    for edges in adjacency:
        if not isinstance(edges, (list, tuple)):
            raise TypeError("Each edge list must be a list of integers")
        for y in edges:
            if isinstance(y, bool) or (not isinstance(y, int)):
                raise TypeError("Right vertex indices must be integers")


def _check_input_graph(
        adjacency: Sequence[Sequence[int]],
        num_right: int
        ) -> None:
    """Check that all vertex indices are within range.

    Duplicate edges are allowed; they do not affect the result.

    This function takes time O(n + m).

    Raises:
        ValueError: If the input does not satisfy the constraints.
    """

    if num_right < 0:
        raise ValueError('"num_right" must be non-negative')

    for (x, edges) in enumerate(adjacency):
        for y in edges:
            if (y < 0) or (y >= num_right):
                raise ValueError(
                    f"Right vertex index {y} of left vertex {x}"
                    f" out of range 0 .. {num_right - 1}")


class _GraphInfo:
    """Representation of the input graph.

    These data remain unchanged while the algorithm runs.
    """

    def __init__(
            self,
            adjacency: Sequence[Sequence[int]],
            num_right: int
            ) -> None:
        """Initialize the graph representation.

        This function takes time O(n + m).
        """

        # Left vertices are indexed by integers in range 0 .. num_left-1.
        # Right vertices are indexed by integers in range 0 .. num_right-1.
        self.num_left: int = len(adjacency)
        self.num_right: int = num_right

        # Each left vertex is incident to zero or more edges.
        #
        # "adjacent[x]" is the list of right vertex indices adjacent
        # to the left vertex with index "x", in the order of the input.
        #
        # Right vertices have no adjacency list; they are only reached
        # by scanning the adjacency lists of left vertices.
        self.adjacent: list[list[int]] = [list(edges) for edges in adjacency]


class _MatchingContext:
    """Holds all data used by the matching algorithm.

    It contains a partial solution of the matching problem,
    and the layering of the graph computed in the current stage.
    """

    def __init__(self, graph: _GraphInfo) -> None:
        """Set up the initial state of the matching algorithm."""

        num_left = graph.num_left
        num_right = graph.num_right

        # Reference to the input graph.
        # The graph does not change while the algorithm runs.
        self.graph = graph

        # Each vertex is either single (unmatched) or matched to
        # a vertex on the other side of the graph.
        #
        # If left vertex "x" is matched to right vertex "y",
        # "left_mate[x] == y" and "right_mate[y] == x".
        # If a vertex is single, its mate is -1.
        #
        # Initially all vertices are single.
        self.left_mate: list[int] = num_left * [-1]
        self.right_mate: list[int] = num_right * [-1]

        # Layer distance that stands for "unreachable".
        # A layer contains at least one left vertex, therefore
        # no reachable layer exceeds "num_left".
        self.inf_dist: int = num_left + 1

        # "left_dist[x]" is the length of the shortest alternating path
        # from any single left vertex to left vertex "x", counting only
        # unmatched edges.
        #
        # Vertices that are unreachable, or that were found to be useless
        # during the current stage, have distance "inf_dist".
        self.left_dist: list[int] = num_left * [self.inf_dist]

        # "free_dist" is the length of the shortest augmenting path,
        # i.e. the distance from a single left vertex to any single
        # right vertex.
        self.free_dist: int = self.inf_dist

        # Number of stages that augmented the matching.
        self.num_stages: int = 0

    def bfs_layering(self) -> bool:
        """Compute the layered graph of shortest augmenting paths.

        Run a breadth-first search that starts simultaneously from all
        single left vertices and alternates between unmatched edges
        (left to right) and matched edges (right to left).

        An edge from left vertex "x" to right vertex "y" is usable
        in the current stage if "y" is single and
        "free_dist == left_dist[x] + 1", or if "y" is matched to "z" and
        "left_dist[z] == left_dist[x] + 1".

        This function takes time O(n + m).

        Returns:
            True if at least one augmenting path exists.
        """

        adjacent = self.graph.adjacent
        left_mate = self.left_mate
        right_mate = self.right_mate
        left_dist = self.left_dist
        inf_dist = self.inf_dist

        queue: collections.deque[int] = collections.deque()

        # Put all single left vertices in the queue, at distance 0.
        for x in range(self.graph.num_left):
            if left_mate[x] == -1:
                left_dist[x] = 0
                queue.append(x)
            else:
                left_dist[x] = inf_dist

        self.free_dist = inf_dist

        while queue:
            x = queue.popleft()

            # Do not extend paths beyond the shortest augmenting path.
            if left_dist[x] >= self.free_dist:
                continue

            for y in adjacent[x]:
                z = right_mate[y]
                if z == -1:
                    # Found a single right vertex; this ends an
                    # augmenting path.
                    if self.free_dist == inf_dist:
                        self.free_dist = left_dist[x] + 1
                elif left_dist[z] == inf_dist:
                    left_dist[z] = left_dist[x] + 1
                    queue.append(z)

        return self.free_dist != inf_dist

    def augment_path(self, root: int) -> bool:
        """Try to find a shortest augmenting path that starts at
        the single left vertex "root", and augment the matching along it.

        Run a depth-first search through the layered graph, following only
        edges that advance exactly one layer. The search is iterative
        so that long augmenting paths do not hit the recursion limit.

        Left vertices from which no augmenting path can be completed
        are removed from the layered graph. This ensures that augmenting
        paths found in the same stage are vertex-disjoint.

        Returns:
            True if the matching was augmented.
        """

        adjacent = self.graph.adjacent
        right_mate = self.right_mate
        left_dist = self.left_dist

        # Each frame holds a left vertex on the current alternating path
        # and the position of the next edge to scan from that vertex.
        # The path leaves the vertex through the edge just before
        # that position.
        stack: list[list[int]] = [[root, 0]]

        while stack:
            frame = stack[-1]
            x = frame[0]
            edges = adjacent[x]
            next_dist = left_dist[x] + 1

            descend = False
            while frame[1] < len(edges):
                y = edges[frame[1]]
                frame[1] += 1
                z = right_mate[y]
                if z == -1:
                    if self.free_dist == next_dist:
                        # Reached a single right vertex.
                        self.flip_path(stack)
                        return True
                elif left_dist[z] == next_dist:
                    stack.append([z, 0])
                    descend = True
                    break

            if not descend:
                # No augmenting path through this vertex.
                left_dist[x] = self.inf_dist
                stack.pop()

        return False

    def flip_path(self, stack: list[list[int]]) -> None:
        """Augment the matching along the path held in the DFS stack.

        Every left vertex on the path becomes matched to the right vertex
        through which the path leaves it. This implicitly removes the
        previously matched edges of the path from the matching.
        """

        adjacent = self.graph.adjacent
        for (x, pos) in stack:
            y = adjacent[x][pos - 1]
            self.left_mate[x] = y
            self.right_mate[y] = x

    def run_stage(self) -> bool:
        """Run one stage of the matching algorithm.

        The stage first computes the layered graph of shortest augmenting
        paths. It then augments the matching along a maximal set of
        vertex-disjoint shortest augmenting paths, thereby increasing
        the number of matched edges by at least 1.
        If no augmenting path exists, the matching must already be maximum.

        This function takes time O(n + m).

        Returns:
            True if the matching was successfully augmented.
            False if no further improvement is possible.
        """

        if not self.bfs_layering():
            return False

        # Start a path search from every single left vertex, in order.
        num_augmented = 0
        for x in range(self.graph.num_left):
            if self.left_mate[x] == -1:
                if self.augment_path(x):
                    num_augmented += 1

        # At least one shortest augmenting path is always found.
        assert num_augmented > 0

        self.num_stages += 1
        return True


def _koenig_cover(
        graph: _GraphInfo,
        left_mate: list[int],
        right_mate: list[int]
        ) -> tuple[list[int], list[int], list[int]]:
    """Derive a vertex cover from a matching.

    Follow alternating paths from all single left vertices.
    The cover consists of the left vertices that are not reached,
    plus the right vertices that are reached.

    If the matching is maximum, no single right vertex is reached and
    the cover is a minimum vertex cover.

    This function takes time O(n + m).

    Returns:
        Tuple "(left_cover, right_cover, free_reached)" where
        "free_reached" lists the single right vertices that were reached.
    """

    left_reached = graph.num_left * [False]
    right_reached = graph.num_right * [False]
    free_reached: list[int] = []

    queue: collections.deque[int] = collections.deque()
    for x in range(graph.num_left):
        if left_mate[x] == -1:
            left_reached[x] = True
            queue.append(x)

    while queue:
        x = queue.popleft()
        for y in graph.adjacent[x]:
            if not right_reached[y]:
                right_reached[y] = True
                z = right_mate[y]
                if z == -1:
                    free_reached.append(y)
                elif not left_reached[z]:
                    left_reached[z] = True
                    queue.append(z)

    left_cover = [x for x in range(graph.num_left) if not left_reached[x]]
    right_cover = [y for y in range(graph.num_right) if right_reached[y]]
    return (left_cover, right_cover, free_reached)


def _verify_optimum(
        graph: _GraphInfo,
        left_mate: list[int],
        right_mate: list[int]
        ) -> None:
    """Verify that the optimum solution has been found.

    Check that the matching is consistent, then construct a vertex cover
    with the same size as the matching. By Koenig's theorem, this proves
    that the matching is maximum.

    This function takes time O(n + m).

    Raises:
        MatchingError: If the solution is not optimal.
    """

    num_left = graph.num_left
    num_right = graph.num_right

    if (len(left_mate) != num_left) or (len(right_mate) != num_right):
        raise MatchingError("Matching does not fit the graph")

    # Check that each matched edge actually exists in the graph,
    # and that both sides agree on the matching.
    num_matched = 0
    for x in range(num_left):
        y = left_mate[x]
        if y == -1:
            continue
        if (y < 0) or (y >= num_right):
            raise MatchingError(f"Left vertex {x} matched to bad index {y}")
        if right_mate[y] != x:
            raise MatchingError(f"Asymmetric matching of left vertex {x}")
        if y not in graph.adjacent[x]:
            raise MatchingError(f"Matched edge ({x}, {y}) does not exist")
        num_matched += 1

    for y in range(num_right):
        x = right_mate[y]
        if x == -1:
            continue
        if (x < 0) or (x >= num_left) or (left_mate[x] != y):
            raise MatchingError(f"Asymmetric matching of right vertex {y}")

    (left_cover, right_cover, free_reached) = _koenig_cover(
        graph, left_mate, right_mate)

    # Check that there is no augmenting path.
    if free_reached:
        raise MatchingError(
            f"Augmenting path to right vertex {free_reached[0]}")

    # Check that the cover touches every edge.
    in_left_cover = num_left * [False]
    for x in left_cover:
        in_left_cover[x] = True
    in_right_cover = num_right * [False]
    for y in right_cover:
        in_right_cover[y] = True

    for x in range(num_left):
        if not in_left_cover[x]:
            for y in graph.adjacent[x]:
                if not in_right_cover[y]:
                    raise MatchingError(f"Edge ({x}, {y}) is not covered")

    # Check that the cover is as small as the matching.
    if len(left_cover) + len(right_cover) != num_matched:
        raise MatchingError("Vertex cover is larger than the matching")

    # Optimum solution confirmed.
