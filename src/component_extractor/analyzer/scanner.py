"""Project structure scan - classifies files into components, pages, utils, styles and assets."""
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

from .parser import SOURCE_EXTENSIONS

logger = logging.getLogger(__name__)

STYLE_EXTENSIONS = ('.css', '.scss', '.sass', '.less')
ASSET_EXTENSIONS = ('.png', '.jpg', '.jpeg', '.gif', '.svg', '.ico')


@dataclass
class ProjectStructure:
    """Project-relative POSIX paths grouped by role."""
    components: List[str] = field(default_factory=list)
    pages: List[str] = field(default_factory=list)
    utils: List[str] = field(default_factory=list)
    styles: List[str] = field(default_factory=list)
    assets: List[str] = field(default_factory=list)
    config: List[str] = field(default_factory=list)

    @property
    def candidates(self) -> List[str]:
        """Files that may define a component, page or helper."""
        return self.components + self.pages + self.utils


class ProjectScanner:
    """Walk a project tree and classify what it finds."""

    EXCLUDED_DIRS = {'node_modules', '.git', 'dist', 'build', '.next'}

    def __init__(self, project_root: str | Path = ".", excluded_dirs: Iterable[str] = (),
                 output_dir: Optional[str | Path] = None):
        """Initialize scanner.

        Args:
            project_root: Root directory of project
            excluded_dirs: Extra directory names to skip
            output_dir: Extraction output directory, never scanned
        """
        self.project_root = Path(project_root).resolve()
        self.excluded_dirs = self.EXCLUDED_DIRS | set(excluded_dirs)
        self.output_dir = Path(output_dir).resolve() if output_dir else None

    def scan(self) -> ProjectStructure:
        logger.info("Scanning project structure under %s", self.project_root)
        structure = ProjectStructure()
        self._scan_directory(self.project_root, "", structure)
        return structure

    def _scan_directory(self, directory: Path, relative: str, structure: ProjectStructure):
        try:
            items = sorted(os.listdir(directory))
        except OSError as e:
            logger.warning("Cannot scan directory %s: %s", directory, e)
            return

        for item in items:
            full_path = directory / item
            relative_item = f"{relative}/{item}" if relative else item

            if full_path.is_dir():
                if item in self.excluded_dirs or self._is_output_dir(full_path):
                    continue
                if 'config' in item.lower():
                    structure.config.append(relative_item)
                self._scan_directory(full_path, relative_item, structure)
            elif full_path.is_file():
                self._classify_file(item, relative, relative_item, structure)

    def _classify_file(self, item: str, relative: str, relative_item: str, structure: ProjectStructure):
        ext = os.path.splitext(item)[1].lower()
        parent = relative.lower()

        if ext in SOURCE_EXTENSIONS:
            if 'component' in parent:
                structure.components.append(relative_item)
            elif 'page' in parent:
                structure.pages.append(relative_item)
            elif 'util' in parent:
                structure.utils.append(relative_item)
        elif ext in STYLE_EXTENSIONS:
            structure.styles.append(relative_item)
        elif ext in ASSET_EXTENSIONS:
            structure.assets.append(relative_item)

    def _is_output_dir(self, path: Path) -> bool:
        return self.output_dir is not None and path.resolve() == self.output_dir
