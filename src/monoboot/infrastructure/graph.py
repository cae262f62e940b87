"""PackageGraph: intra-repo dependency edges between monorepo packages.

Built once per invocation from a snapshot of Packages and never mutated.
An edge ``A -> B`` means "A depends on B", so B must be bootstrapped
first. Declared dependencies that do not resolve to a sibling, or whose
range the sibling's version does not satisfy, are left out: they are
assumed to be satisfied from the registry.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field

import networkx as nx

from monoboot.domain.package import Package
from monoboot.domain.versions import satisfies


@dataclass
class PackageGraphNode:
    """One package plus the names of the sibling packages it depends on."""

    package: Package
    dependency_names: list[str] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.package.name


class PackageGraph:
    """Nodes in input order plus a name index.

    Filtering is done by building a new graph from a filtered package
    list; edges pointing at excluded packages are then simply dropped.
    """

    def __init__(self, packages: Sequence[Package]) -> None:
        self.nodes: list[PackageGraphNode] = []
        self._index: dict[str, PackageGraphNode] = {}

        for pkg in packages:
            node = PackageGraphNode(pkg)
            self.nodes.append(node)
            # Duplicate names are a caller error; last write wins.
            self._index[pkg.name] = node

        for node in self.nodes:
            for dep_name, spec in node.package.all_dependencies.items():
                target = self._index.get(dep_name)
                if target is None:
                    continue
                if satisfies(target.package.version, spec):
                    node.dependency_names.append(dep_name)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def __getitem__(self, name: str) -> PackageGraphNode:
        return self._index[name]

    def get(self, name: str) -> PackageGraphNode | None:
        """Return the node for *name*, or None if it is not part of this graph."""
        return self._index.get(name)

    @property
    def names(self) -> list[str]:
        return [node.name for node in self.nodes]

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __iter__(self) -> Iterator[PackageGraphNode]:
        return iter(self.nodes)

    def __len__(self) -> int:
        return len(self.nodes)

    def dependents_of(self, name: str) -> list[str]:
        """Names of packages with an edge pointing at *name*, in node order."""
        return [node.name for node in self.nodes if name in node.dependency_names]

    # ------------------------------------------------------------------
    # Analysis
    # ------------------------------------------------------------------

    def to_networkx(self) -> nx.DiGraph:
        """Export as a DiGraph with ``A -> B`` for "A depends on B"."""
        g = nx.DiGraph()
        for node in self.nodes:
            g.add_node(node.name, version=node.package.version)
        for node in self.nodes:
            for dep in node.dependency_names:
                g.add_edge(node.name, dep)
        return g

    def find_cycles(self, names: Iterable[str] | None = None) -> list[list[str]]:
        """Return dependency cycles among *names* (default: all nodes).

        Each cycle is a strongly connected component with more than one
        member, or a single package depending on itself. Members are
        sorted and cycles are ordered by their first member.
        """
        g = self.to_networkx()
        if names is not None:
            g = g.subgraph(names)
        cycles: list[list[str]] = []
        for component in nx.strongly_connected_components(g):
            if len(component) > 1:
                cycles.append(sorted(component))
            else:
                (only,) = component
                if g.has_edge(only, only):
                    cycles.append([only])
        return sorted(cycles)
