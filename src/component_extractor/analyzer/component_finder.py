"""Name-based component lookup.

Regex matching here only proposes entry files; binding names used for
pruning always come from the syntax tree.
"""
import logging
import re
from pathlib import Path
from typing import List, Set

from .scanner import ProjectStructure

logger = logging.getLogger(__name__)

# Capitalised definitions: function Button / const Button / export { Button }
COMPONENT_DEFINITION_PATTERNS = [
    re.compile(r'(export\s+)?(default\s+)?(function|const|class)\s+([A-Z][a-zA-Z0-9]*)'),
    re.compile(r'export\s+{\s*([A-Z][a-zA-Z0-9]*)\s*}'),
]


def definition_patterns(component_name: str) -> List[re.Pattern]:
    name = re.escape(component_name)
    return [
        re.compile(rf'(export\s+)?(default\s+)?(function|const|class)\s+{name}\b', re.IGNORECASE),
        re.compile(rf'export\s+{{\s*{name}\s*}}', re.IGNORECASE),
        re.compile(rf'export\s+default\s+{name}', re.IGNORECASE),
    ]


class ComponentFinder:
    """Find the files that make up a named component."""

    def __init__(self, project_root: str | Path = "."):
        self.project_root = Path(project_root).resolve()

    def find(self, component_name: str, structure: ProjectStructure) -> List[str]:
        """Entry files for `component_name`: file-name matches and content matches.

        Args:
            component_name: Name to look for (case-insensitive)
            structure: Result of ProjectScanner.scan()

        Returns:
            Project-relative paths in scan order
        """
        logger.info("Looking up component files for %s", component_name)
        patterns = definition_patterns(component_name)
        wanted = component_name.lower()
        found = []

        for path in structure.candidates:
            if wanted in Path(path).stem.lower():
                found.append(path)
                continue

            try:
                content = (self.project_root / path).read_text(encoding='utf-8')
            except (OSError, UnicodeDecodeError) as e:
                logger.warning("Cannot read %s: %s", path, e)
                continue

            if any(pattern.search(content) for pattern in patterns):
                found.append(path)

        logger.info("Found %d file(s) for %s", len(found), component_name)
        return found

    def list_components(self, structure: ProjectStructure, kind: str = "all") -> List[str]:
        """Sorted names of the components defined under component and/or page directories.

        Args:
            structure: Result of ProjectScanner.scan()
            kind: "components", "pages" or "all"
        """
        if kind == "components":
            files = structure.components
        elif kind == "pages":
            files = structure.pages
        else:
            files = structure.components + structure.pages

        components: Set[str] = set()
        for path in files:
            try:
                content = (self.project_root / path).read_text(encoding='utf-8')
            except (OSError, UnicodeDecodeError):
                continue

            for pattern in COMPONENT_DEFINITION_PATTERNS:
                for match in pattern.finditer(content):
                    name = match.group(match.lastindex)
                    if name and len(name) > 1:
                        components.add(name)

        return sorted(components)
