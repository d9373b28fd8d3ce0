"""Tree-sitter parser for JavaScript / TypeScript source modules."""
from pathlib import Path
from typing import Dict, Optional
from tree_sitter import Language, Parser, Tree
import tree_sitter_javascript as tsjavascript
import tree_sitter_typescript as tstypescript


# Extensions whose files are parsed, resolved and pruned as source modules
SOURCE_EXTENSIONS = ('.js', '.jsx', '.ts', '.tsx')


class LanguageParser:
    """Grammar-aware parser using tree-sitter v0.25+ API."""

    SUPPORTED_LANGUAGES = {
        '.js': 'javascript',
        '.jsx': 'javascript',
        '.mjs': 'javascript',
        '.cjs': 'javascript',
        '.ts': 'typescript',
        '.mts': 'typescript',
        '.cts': 'typescript',
        '.tsx': 'tsx',
    }

    # One Parser per grammar; building a Language is not free
    _parsers: Dict[str, Parser] = {}

    def __init__(self, language: str):
        """Initialize parser for given language (javascript, typescript, tsx).

        Args:
            language: One of 'javascript', 'typescript', 'tsx'

        Raises:
            ValueError: If language is not supported
        """
        self.language = language
        self.parser = self._create_parser()

    def _create_parser(self) -> Parser:
        """Factory method using tree-sitter v0.25+ API.

        CRITICAL: Uses Parser(Language(capsule)) syntax with latest tree-sitter.

        Returns:
            Configured Parser instance

        Raises:
            ValueError: If language is not supported
        """
        cached = self._parsers.get(self.language)
        if cached is not None:
            return cached

        if self.language == 'javascript':
            lang = Language(tsjavascript.language())
        elif self.language == 'typescript':
            lang = Language(tstypescript.language_typescript())
        elif self.language == 'tsx':
            # JSX inside TypeScript needs the dedicated tsx grammar
            lang = Language(tstypescript.language_tsx())
        else:
            raise ValueError(f"Unsupported language: {self.language}")

        parser = Parser(lang)
        self._parsers[self.language] = parser
        return parser

    def parse_source(self, source_code: bytes | str) -> Tree:
        """Parse in-memory source and return the tree-sitter Tree."""
        if isinstance(source_code, str):
            source_code = source_code.encode('utf-8')
        return self.parser.parse(source_code)

    @classmethod
    def from_file_extension(cls, file_path: str | Path) -> Optional['LanguageParser']:
        """Create parser based on file extension.

        Args:
            file_path: Path to determine language from

        Returns:
            LanguageParser instance, or None if extension not supported
        """
        extension = Path(file_path).suffix.lower()

        language = cls.SUPPORTED_LANGUAGES.get(extension)
        if language:
            return cls(language)
        return None


def is_source_file(file_path: str | Path) -> bool:
    """True when the file is a module the analyzer can parse."""
    return Path(file_path).suffix.lower() in LanguageParser.SUPPORTED_LANGUAGES


def has_parse_errors(tree: Tree) -> bool:
    """Tree-sitter recovers from bad input instead of raising; error nodes are the failure signal."""
    return tree.root_node.has_error
