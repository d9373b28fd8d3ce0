"""Component extraction pipeline.

scan -> find entry files -> dependency graph -> output directory ->
pruned copies -> package.json -> README
"""
import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .analyzer.component_finder import ComponentFinder
from .analyzer.graph_builder import DependencyGraph, DependencyGraphBuilder
from .analyzer.resolver import ImportResolver
from .analyzer.scanner import ProjectScanner, ProjectStructure
from .config import Config, get_config
from .reaper.manifest import ExtractionLedger
from .reaper.materializer import FileMaterializer
from .reaper.scaffold import write_package_json, write_readme

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "extraction-manifest.json"


class ComponentNotFoundError(LookupError):
    """No project file matches the requested component."""


@dataclass
class ExtractionResult:
    component: str
    entry_files: List[str]
    graph: DependencyGraph
    output_dir: Path
    ledger: ExtractionLedger
    dry_run: bool = False

    @property
    def files(self) -> List[str]:
        """Files written (or, for a dry run, the files that would be written)."""
        return self.graph.files if self.dry_run else self.ledger.files


class ComponentExtractor:
    """Extract a component and the code it reaches into a standalone tree."""

    def __init__(self, project_root: str | Path = ".", config: Optional[Config] = None):
        """Initialize extractor.

        Args:
            project_root: Root directory of the React project
            config: Settings (defaults to the process-wide config)
        """
        self.project_root = Path(project_root).resolve()
        self.config = config or get_config()
        self.resolver = ImportResolver.from_project(self.project_root, self.config.source_root)
        self.finder = ComponentFinder(self.project_root)

    def scan_project(self, output_dir: Optional[Path] = None) -> ProjectStructure:
        scanner = ProjectScanner(self.project_root, self.config.excluded_dirs, output_dir)
        return scanner.scan()

    def list_components(self, kind: str = "all") -> List[str]:
        return self.finder.list_components(self.scan_project(), kind)

    def extract_component(self, component_name: str, output_dir: Optional[str | Path] = None,
                          dry_run: bool = False, write_manifest: Optional[bool] = None) -> ExtractionResult:
        """Extract `component_name` into `output_dir`.

        The entry set is resolved before anything on disk is touched, so a
        missing component never costs an existing output directory.

        Raises:
            ComponentNotFoundError: If no file matches the component name
            ValueError: If the output directory would contain the project itself
        """
        output_dir = Path(output_dir or self.config.output_dir).resolve()

        structure = self.scan_project(output_dir)
        entry_files = self.finder.find(component_name, structure)
        if not entry_files:
            raise ComponentNotFoundError(f"Component not found: {component_name}")

        graph = DependencyGraphBuilder(self.project_root, self.resolver).build_graph(entry_files)
        ledger = ExtractionLedger(component_name)
        result = ExtractionResult(component_name, entry_files, graph, output_dir, ledger, dry_run)

        if dry_run:
            return result

        self.prepare_output_directory(output_dir)
        FileMaterializer(self.project_root, ledger=ledger).materialize(graph, output_dir)

        write_package_json(self.project_root, output_dir)
        write_readme(component_name, output_dir, ledger.files, self.project_root)

        if write_manifest is None:
            write_manifest = self.config.write_manifest
        if write_manifest:
            ledger.write(output_dir / MANIFEST_FILENAME)

        logger.info("Extracted %d file(s) to %s", len(ledger), output_dir)
        return result

    def prepare_output_directory(self, output_dir: Path):
        """Clear and recreate the output directory.

        Raises:
            ValueError: If output_dir is the project root or one of its ancestors
        """
        output_dir = Path(output_dir).resolve()
        if output_dir == self.project_root or output_dir in self.project_root.parents:
            raise ValueError(f"Refusing to clear {output_dir}: it contains the project")

        if output_dir.exists():
            shutil.rmtree(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        logger.info("Created output directory %s", output_dir)
