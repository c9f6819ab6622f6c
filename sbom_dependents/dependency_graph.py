"""
Reverse dependency analysis for SBOM dependency graphs.

Loads a Graphviz DOT graph where an edge ``A -> B`` means "A depends on B"
and finds every package that transitively depends on a target package,
together with its minimum distance from the target.
"""

import logging
import sys
from collections.abc import Iterable
from pathlib import Path
from typing import NamedTuple

import networkx as nx
import pydot

logger = logging.getLogger(__name__)

# Synthetic top node that SBOM generators hang every package from
DEFAULT_ROOT_NODE = "RPM-Packages"

# DOT keywords used for default attribute statements, never real nodes
_DOT_KEYWORDS = frozenset({"node", "edge", "graph"})


class PackageNotFoundError(LookupError):
    """Raised when the target package has no exact match in the graph."""

    def __init__(self, package_name: str):
        self.package_name = package_name
        super().__init__(
            f"{package_name} package is Not Found in your SBOM DOT File."
        )


class GraphParseError(ValueError):
    """Raised when DOT input cannot be parsed into a graph."""


class DependentInfo(NamedTuple):
    """A package that depends on the target, directly or transitively."""

    name: str
    depth: int  # 1 for direct dependents, 2+ for transitive


def normalize_node_name(name: str) -> str:
    """Strip the surrounding quote characters of a DOT node ID."""
    return name.strip('"')


class SbomGraph:
    """
    Read-only view over a parsed SBOM dependency graph.

    Node names are canonicalized once when the graph is built, so lookups
    and traversals work on canonical names only.
    """

    def __init__(self) -> None:
        self._graph = nx.MultiDiGraph()
        self._edge_count = 0

    @classmethod
    def from_edges(
        cls,
        edges: Iterable[tuple[str, str]],
        nodes: Iterable[str] = (),
    ) -> "SbomGraph":
        """
        Build a graph from raw node names and (source, destination) pairs.

        Args:
            edges: Edges in declaration order; "source depends on destination".
            nodes: Extra node names, including isolated ones.

        Returns:
            SbomGraph with canonicalized names.
        """
        graph = cls()
        for name in nodes:
            graph._add_node(name)
        for source, destination in edges:
            graph._add_edge(source, destination)
        return graph

    def _add_node(self, name: str) -> str:
        canonical = normalize_node_name(name)
        if canonical not in self._graph:
            self._graph.add_node(canonical)
        return canonical

    def _add_edge(self, source: str, destination: str) -> None:
        src = self._add_node(source)
        dst = self._add_node(destination)
        # Declaration order is kept on the edge; MultiDiGraph groups
        # parallel edges by predecessor when iterating.
        self._graph.add_edge(src, dst, order=self._edge_count)
        self._edge_count += 1

    @property
    def nodes(self) -> list[str]:
        return list(self._graph.nodes)

    @property
    def edges(self) -> list[tuple[str, str]]:
        ordered = sorted(self._graph.edges(data="order"), key=lambda e: e[2])
        return [(src, dst) for src, dst, _ in ordered]

    def __len__(self) -> int:
        return self._graph.number_of_nodes()

    def __contains__(self, name: object) -> bool:
        return name in self._graph

    def find_exact_package(self, package_name: str) -> str | None:
        """
        Look up a node by its exact, case-sensitive canonical name.

        Args:
            package_name: Name to look for.

        Returns:
            The canonical node name, or None if no node matches.
        """
        if package_name in self._graph:
            return package_name
        return None

    def direct_predecessors(self, node_name: str) -> list[str]:
        """
        Get the source of every edge pointing at a node.

        Duplicate edges yield duplicate names; callers deduplicate.

        Args:
            node_name: Canonical name of the destination node.

        Returns:
            Source names in edge declaration order.
        """
        if node_name not in self._graph:
            return []
        in_edges = sorted(
            self._graph.in_edges(node_name, data="order"), key=lambda e: e[2]
        )
        return [src for src, _, _ in in_edges]


def _endpoint_names(endpoint) -> list[str]:
    """Expand a pydot edge endpoint (node ID or subgraph) into node IDs."""
    if isinstance(endpoint, str):
        return [endpoint]
    if isinstance(endpoint, pydot.Graph):
        endpoint = endpoint.obj_dict
    return list(endpoint["nodes"])


def _collect_dot_statements(
    dot_graph: pydot.Graph,
    nodes: list[str],
    edges: list[tuple[int, str, str]],
) -> None:
    for node in dot_graph.get_node_list():
        name = node.get_name()
        # Only the bare keywords are default attribute statements
        if name not in _DOT_KEYWORDS:
            nodes.append(name)

    for edge in dot_graph.get_edge_list():
        sequence = edge.get_sequence()
        for source in _endpoint_names(edge.get_source()):
            for destination in _endpoint_names(edge.get_destination()):
                edges.append((sequence, source, destination))

    for subgraph in dot_graph.get_subgraph_list():
        _collect_dot_statements(subgraph, nodes, edges)


def parse_dot(text: str) -> SbomGraph:
    """
    Parse DOT source into an SbomGraph.

    Nodes are taken from node statements and edge endpoints, including
    those inside subgraphs. Only the first graph of the input is used.

    Args:
        text: DOT source.

    Returns:
        Parsed SbomGraph.

    Raises:
        GraphParseError: If the text is not a valid DOT graph.
    """
    try:
        graphs = pydot.graph_from_dot_data(text)
    except Exception as e:
        raise GraphParseError(f"Could not parse DOT graph data: {e}") from e
    if not graphs:
        raise GraphParseError("Could not parse DOT graph data")

    nodes: list[str] = []
    edges: list[tuple[int, str, str]] = []
    _collect_dot_statements(graphs[0], nodes, edges)

    # pydot numbers statements across subgraphs in parse order
    edges.sort(key=lambda e: e[0])
    graph = SbomGraph.from_edges(
        [(source, destination) for _, source, destination in edges],
        nodes=nodes,
    )
    logger.debug(
        "Parsed DOT graph: %d nodes, %d edges", len(graph), len(edges)
    )
    return graph


def load_dot_graph(path: str | Path) -> SbomGraph:
    """
    Load an SBOM dependency graph from a DOT file.

    Args:
        path: Path to the DOT file, or "-" to read standard input.

    Returns:
        Parsed SbomGraph.

    Raises:
        OSError: If the file cannot be read.
        GraphParseError: If the file is not valid UTF-8 or not a valid DOT graph.
    """
    try:
        if str(path) == "-":
            logger.debug("Reading DOT graph from stdin")
            text = sys.stdin.read()
        else:
            path = Path(path).resolve()
            logger.debug("Reading DOT graph from %s", path)
            with open(path, encoding="utf-8") as f:
                text = f.read()
    except UnicodeDecodeError as e:
        raise GraphParseError(f"{path} is not valid UTF-8: {e}") from e
    return parse_dot(text)


def find_direct_dependents(graph: SbomGraph, package_name: str) -> list[str]:
    """
    Get the packages that depend on a package directly.

    Args:
        graph: Graph to search.
        package_name: Canonical name of the depended-upon package.

    Returns:
        Unique dependent names in edge declaration order.
    """
    seen: set[str] = set()
    dependents = []
    for name in graph.direct_predecessors(package_name):
        if name not in seen:
            seen.add(name)
            dependents.append(name)
    return dependents


def find_dependents_with_depth(
    graph: SbomGraph,
    package_name: str,
    max_depth: int = -1,
    root_node: str | None = DEFAULT_ROOT_NODE,
) -> list[DependentInfo]:
    """
    Find every package that transitively depends on a package.

    The graph is walked backward one full layer at a time, so each
    dependent is recorded at its shortest distance from the target.

    Args:
        graph: Graph to search.
        package_name: Exact, case-sensitive name of the target package.
        max_depth: Deepest layer to report; 0 or negative means unlimited.
        root_node: Synthetic root node never reported as a dependent.
            None or "" disables the exclusion.

    Returns:
        Dependents in discovery order, which is non-decreasing depth.

    Raises:
        PackageNotFoundError: If no node is named package_name.
    """
    target = graph.find_exact_package(package_name)
    if target is None:
        raise PackageNotFoundError(package_name)

    visited = {target}
    if root_node:
        visited.add(root_node)

    result: list[DependentInfo] = []
    frontier = [target]
    depth = 0
    while frontier:
        depth += 1
        if max_depth > 0 and depth > max_depth:
            break

        next_frontier = []
        for node_name in frontier:
            for dependent in find_direct_dependents(graph, node_name):
                if dependent in visited:
                    continue
                visited.add(dependent)
                result.append(DependentInfo(name=dependent, depth=depth))
                next_frontier.append(dependent)

        logger.debug("depth %d: %d new dependents", depth, len(next_frontier))
        frontier = next_frontier

    return result
