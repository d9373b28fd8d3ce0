"""Dependency graph builder with per-edge binding usage, using NetworkX.

Walks from entry modules, resolves every import to a project file, records
which exported bindings each importer actually references, and recurses into
each newly discovered module exactly once.
"""
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set

import networkx as nx

from .exports import ExportTable, NAMESPACE
from .import_tracker import ImportRecord, ImportTracker, collect_references
from .parser import LanguageParser, has_parse_errors
from .resolver import ImportResolver

logger = logging.getLogger(__name__)


@dataclass
class DependencyGraph:
    """Result of one graph-building run."""
    # Modules and assets to extract, in discovery order
    files: List[str]
    # Module path -> binding names required by its importers
    used_bindings: Dict[str, Set[str]]
    # Modules consumed as a whole (namespace, require, dynamic import, export *)
    fully_used: Set[str]
    # Module path -> names it exports
    exports: Dict[str, Set[str]] = field(default_factory=dict)
    # Edge (importer, imported) with attribute `names`
    graph: nx.DiGraph = field(default_factory=nx.DiGraph)
    # Extraction entry modules, never narrowed by what their importers use
    entries: Set[str] = field(default_factory=set)

    def importers_of(self, path: str) -> List[str]:
        if path not in self.graph:
            return []
        return sorted(self.graph.predecessors(path))

    def cycles(self) -> List[List[str]]:
        """Import cycles among the extracted modules."""
        return [sorted(cycle) for cycle in nx.simple_cycles(self.graph)]


class DependencyGraphBuilder:
    """Build the import graph reachable from a set of entry modules.

    All traversal state belongs to the instance and is reset by each
    build_graph() call, so separate runs never share it.
    """

    def __init__(self, project_root: str | Path = ".", resolver: Optional[ImportResolver] = None):
        """Initialize graph builder.

        Args:
            project_root: Root directory of the project being extracted
            resolver: Import resolver (defaults to one honouring tsconfig aliases)
        """
        self.project_root = Path(project_root).resolve()
        self.resolver = resolver or ImportResolver.from_project(self.project_root)
        self.tracker = ImportTracker()
        self.export_table = ExportTable()
        self._reset()

    def _reset(self):
        self.graph = nx.DiGraph()
        self.files: Dict[str, None] = {}
        self.visited: Set[str] = set()
        self.used_bindings: Dict[str, Set[str]] = {}
        self.fully_used: Set[str] = set()
        self.exports: Dict[str, Set[str]] = {}
        self.unreadable: Set[str] = set()

    def build_graph(self, entry_files: Iterable[str]) -> DependencyGraph:
        """Walk the import graph depth-first from the entry files.

        Args:
            entry_files: Project-relative paths of the entry modules

        Returns:
            DependencyGraph with the dependency set and the used-bindings table
        """
        self._reset()
        entry_files = list(entry_files)

        for entry in entry_files:
            if entry in self.unreadable:
                continue
            self._add_file(entry)
            self._process_file(entry)

        logger.info("Dependency graph: %d file(s), %d edge(s)",
                    len(self.files), self.graph.number_of_edges())

        return DependencyGraph(
            files=list(self.files),
            used_bindings=self.used_bindings,
            fully_used=self.fully_used,
            exports=self.exports,
            graph=self.graph,
            entries={entry for entry in entry_files if entry in self.files},
        )

    def _add_file(self, path: str):
        self.files.setdefault(path, None)
        self.graph.add_node(path)

    def _process_file(self, path: str):
        """Parse one module, record the bindings it uses, and recurse into its imports."""
        if path in self.visited:
            return
        self.visited.add(path)

        parser = LanguageParser.from_file_extension(path)
        if not parser:
            # Stylesheets, images, JSON: copied as-is, never parsed
            return

        try:
            source_code = (self.project_root / path).read_bytes()
        except OSError as e:
            logger.warning("Skipping unreadable file %s: %s", path, e)
            # Contributes neither an edge nor a dependency entry
            self.unreadable.add(path)
            self.files.pop(path, None)
            self.graph.remove_node(path)
            self.used_bindings.pop(path, None)
            self.fully_used.discard(path)
            return

        tree = parser.parse_source(source_code)
        if has_parse_errors(tree):
            logger.warning("Could not parse %s; its imports are not followed", path)
            return

        root = tree.root_node
        self.exports[path] = self.export_table.analyze_exports(root)

        records = self.tracker.analyze_imports(root)
        references = collect_references(root)

        for record in records:
            target = self.resolver.resolve(path, record.specifier)
            if target is None:
                logger.debug("%s: '%s' is external, no edge", path, record.specifier)
                continue
            if target in self.unreadable:
                continue

            names = self._record_usage(target, record, references)
            self._add_file(target)
            if self.graph.has_edge(path, target):
                self.graph.edges[path, target]['names'].update(names)
            else:
                self.graph.add_edge(path, target, names=set(names))
            logger.debug("%s -> %s %s", path, target, sorted(names))

            self._process_file(target)

    def _record_usage(self, target: str, record: ImportRecord, references: Set[str]) -> Set[str]:
        """Add the names `record` pulls from `target` to the used-bindings table."""
        names: Set[str] = set(record.required)

        for local, imported in record.bindings.items():
            if imported != NAMESPACE and local in references:
                names.add(imported)

        if record.is_namespace:
            self.fully_used.add(target)
            names.add(NAMESPACE)

        used = self.used_bindings.setdefault(target, set())
        used.update(name for name in names if name != NAMESPACE)
        return names
