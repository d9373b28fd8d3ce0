import json
import logging
import posixpath
from pathlib import Path
from typing import Dict, List, Optional

logger = logging.getLogger(__name__)


class ImportResolver:
    """
    Resolves import specifiers to project-relative file paths.
    Paths are POSIX strings relative to the project root ('src/utils/validation.js').
    """

    # Probe order matters: the first candidate present on disk wins
    EXTENSIONS = ('', '.js', '.jsx', '.ts', '.tsx')
    INDEX_EXTENSIONS = ('.js', '.jsx', '.ts', '.tsx')

    def __init__(self, project_root: Path, source_root: str = 'src',
                 path_aliases: Optional[Dict[str, str]] = None):
        self.root = Path(project_root).resolve()
        self.source_root = source_root.strip('/') or '.'
        # Normalized aliases: {"@app": "src"}
        self.aliases = dict(path_aliases or {})

    @classmethod
    def from_project(cls, project_root: Path, source_root: str = 'src') -> 'ImportResolver':
        """Build a resolver that honours tsconfig/jsconfig path aliases."""
        return cls(project_root, source_root, load_path_aliases(Path(project_root)))

    def resolve(self, from_file: str, specifier: str) -> Optional[str]:
        """
        Determines the project file an import specifier refers to.

        Args:
            from_file: Project-relative path of the importing module.
            specifier: The string used in the import statement (e.g. './utils', '../api').

        Returns:
            Project-relative path, or None when nothing on disk matches (external packages).
        """
        if not specifier:
            return None

        # Bundler query/hash suffixes ('./logo.svg?url') are not part of the path
        specifier = specifier.split('?', 1)[0].split('#', 1)[0]
        if not specifier:
            return None

        if specifier in ('.', '..') or specifier.startswith(('./', '../')):
            base = posixpath.join(posixpath.dirname(from_file), specifier)
        elif specifier.startswith('/'):
            base = specifier.lstrip('/')
        else:
            base = self._apply_alias(specifier)
            if base is None:
                base = posixpath.join(self.source_root, specifier)

        base = posixpath.normpath(base)
        if base == '..' or base.startswith('../'):
            # Escapes the project root
            return None

        return self._probe(base)

    def _apply_alias(self, specifier: str) -> Optional[str]:
        # Longest alias first so '@/components' beats '@'
        for alias in sorted(self.aliases, key=len, reverse=True):
            if specifier == alias:
                return self.aliases[alias]
            if specifier.startswith(alias + '/'):
                remainder = specifier[len(alias) + 1:]
                return posixpath.join(self.aliases[alias], remainder)
        return None

    def _probe(self, base: str) -> Optional[str]:
        """
        Probes for file existence using JS resolution rules:
        1. Base path as-is, then with each source extension
        2. Directory index files
        """
        if base != '.':
            for ext in self.EXTENSIONS:
                candidate = base + ext
                if (self.root / candidate).is_file():
                    return candidate

        for ext in self.INDEX_EXTENSIONS:
            candidate = posixpath.normpath(posixpath.join(base, f"index{ext}"))
            if (self.root / candidate).is_file():
                return candidate

        return None


def load_path_aliases(project_root: Path) -> Dict[str, str]:
    """Read compilerOptions.paths from tsconfig.json / jsconfig.json.

    {"@app/*": ["src/app/*"]} becomes {"@app": "src/app"}. Only the first
    target of each alias is used. Files that are missing or not plain JSON
    (comments, trailing commas) contribute nothing.
    """
    aliases: Dict[str, str] = {}

    for name in ('tsconfig.json', 'jsconfig.json'):
        config_path = project_root / name
        if not config_path.is_file():
            continue
        try:
            data = json.loads(config_path.read_text(encoding='utf-8'))
        except (OSError, ValueError) as e:
            logger.debug("Ignoring %s: %s", config_path, e)
            continue

        options = data.get('compilerOptions') or {}
        base_url = (options.get('baseUrl') or '.').strip('/') or '.'
        paths: Dict[str, List[str]] = options.get('paths') or {}

        for alias, targets in paths.items():
            if not targets:
                continue
            clean_alias = alias.replace('/*', '')
            clean_target = targets[0].replace('/*', '')
            aliases.setdefault(clean_alias, posixpath.normpath(posixpath.join(base_url, clean_target)))

    return aliases
