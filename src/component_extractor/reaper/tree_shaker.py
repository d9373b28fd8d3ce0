"""Reachability-based pruning of JS/TS modules.

Drops top-level declarations and export entries that are not reachable from
the bindings a module's importers use, by splicing byte ranges of the
original source. Everything that survives keeps its exact text, comments
and formatting.
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from tree_sitter import Node

from ..analyzer.exports import (
    DECLARATION_TYPES,
    DEFAULT,
    VARIABLE_TYPES,
    declaration_name,
    declarator_names,
    declarators,
    export_specifiers,
    find_child,
    is_default_export,
)
from ..analyzer.graph_builder import DependencyGraph
from ..analyzer.import_tracker import collect_references, node_text
from ..analyzer.parser import LanguageParser, has_parse_errors

logger = logging.getLogger(__name__)

# (start_byte, end_byte, replacement)
Edit = Tuple[int, int, bytes]


@dataclass
class ShakeResult:
    content: str
    pruned: bool = False
    removed: List[str] = field(default_factory=list)
    skipped_reason: Optional[str] = None


class DeclarationIndex:
    """Top-level name -> nodes whose references that name pulls in."""

    def __init__(self):
        self.entries: Dict[str, List[Node]] = {}
        # Exported alias -> local name (export { local as alias })
        self.aliases: Dict[str, str] = {}
        # Identifiers referenced by top-level code that always survives
        self.seeds: Set[str] = set()

    def add(self, name: str, node: Node):
        self.entries.setdefault(name, []).append(node)

    def closure(self, used: Set[str]) -> Set[str]:
        """Fixed point of `used` plus seeds under "a live declaration makes its references live"."""
        live = set(used) | self.seeds
        worklist = list(live)

        while worklist:
            name = worklist.pop()
            pulled = set()
            for node in self.entries.get(name, []):
                pulled |= collect_references(node)
            if name in self.aliases:
                pulled.add(self.aliases[name])

            for ref in pulled:
                if ref not in live:
                    live.add(ref)
                    worklist.append(ref)

        return live


class TreeShaker:
    """
    Prunes one module at a time against the used-bindings table of a
    DependencyGraph. Every failure degrades to returning the original text.
    """

    def prune(self, path: str, content: str, graph: DependencyGraph) -> str:
        """Pruned text of `path` (the original text when pruning is not possible)."""
        return self.shake_module(path, content, graph).content

    def shake_module(self, path: str, content: str, graph: DependencyGraph) -> ShakeResult:
        """Shake `path` against the tables of `graph`; entry modules are kept whole."""
        if path in graph.entries:
            return ShakeResult(content, skipped_reason="entry module")
        return self.shake(
            path,
            content,
            graph.used_bindings.get(path, set()),
            fully_used=path in graph.fully_used,
        )

    def shake(self, path: str, content: str, used: Set[str], fully_used: bool = False) -> ShakeResult:
        parser = LanguageParser.from_file_extension(path)
        if not parser:
            return ShakeResult(content, skipped_reason="not a source module")

        if fully_used:
            return ShakeResult(content, skipped_reason="used as a whole")

        if not used:
            # Side-effect imports and unreferenced imports: no names to narrow to
            return ShakeResult(content, skipped_reason="no narrowed usage")

        source_bytes = content.encode("utf-8")
        tree = parser.parse_source(source_bytes)
        if has_parse_errors(tree):
            logger.warning("Could not parse %s; keeping original content", path)
            return ShakeResult(content, skipped_reason="parse failure")

        try:
            return self._shake_tree(tree.root_node, source_bytes, used)
        except Exception as e:
            logger.warning("Pruning failed for %s; keeping original content: %s", path, e)
            return ShakeResult(content, skipped_reason="rewrite failure")

    # ------------------------------------------------------------------
    # Index
    # ------------------------------------------------------------------

    def build_index(self, root: Node) -> DeclarationIndex:
        index = DeclarationIndex()

        for statement in root.named_children:
            node_type = statement.type

            if node_type in ('comment', 'import_statement'):
                continue

            if node_type in DECLARATION_TYPES:
                self._index_declaration(index, statement)
            elif node_type in VARIABLE_TYPES:
                self._index_variables(index, statement)
            elif node_type == 'export_statement':
                self._index_export(index, statement)
            else:
                # Side-effecting top-level code always survives
                index.seeds |= collect_references(statement)

        return index

    def _index_declaration(self, index: DeclarationIndex, declaration: Node):
        name = declaration_name(declaration)
        if name:
            index.add(name, declaration)
        else:
            index.seeds |= collect_references(declaration)

    def _index_variables(self, index: DeclarationIndex, declaration: Node):
        for declarator in declarators(declaration):
            names = declarator_names(declarator)
            if not names:
                index.seeds |= collect_references(declarator)
            for name in names:
                index.add(name, declarator)

    def _index_export(self, index: DeclarationIndex, statement: Node):
        if statement.child_by_field_name('source') is not None:
            # Re-exports are never pruned and reference nothing local
            return

        declaration = statement.child_by_field_name('declaration')
        value = statement.child_by_field_name('value')
        clause = find_child(statement, 'export_clause')

        if declaration is not None:
            if declaration.type in VARIABLE_TYPES:
                self._index_variables(index, declaration)
            elif declaration.type in DECLARATION_TYPES and declaration_name(declaration):
                self._index_declaration(index, declaration)
                if is_default_export(statement):
                    index.add(DEFAULT, declaration)
            else:
                index.seeds |= collect_references(declaration)
        elif value is not None:
            if value.type == 'identifier':
                index.add(DEFAULT, value)
            else:
                # export default connect(mapState)(Profile)
                index.seeds |= collect_references(value)
        elif clause is not None:
            for _, local, exported in export_specifiers(clause):
                if local != exported:
                    index.aliases[exported] = local
        else:
            index.seeds |= collect_references(statement)

    # ------------------------------------------------------------------
    # Rewrite
    # ------------------------------------------------------------------

    def _shake_tree(self, root: Node, source_bytes: bytes, used: Set[str]) -> ShakeResult:
        index = self.build_index(root)
        live = index.closure(used)

        edits: List[Edit] = []
        removed: List[str] = []

        for statement in root.named_children:
            node_type = statement.type

            if node_type in DECLARATION_TYPES:
                name = declaration_name(statement)
                if name and name not in live:
                    edits.append(self._removal(statement, source_bytes))
                    removed.append(name)

            elif node_type in VARIABLE_TYPES:
                self._filter_variables(statement, statement, live, source_bytes, edits, removed)

            elif node_type == 'export_statement':
                self._filter_export(statement, live, source_bytes, edits, removed)

        if not edits:
            return ShakeResult(source_bytes.decode("utf-8"))

        modified = bytearray(source_bytes)
        # Apply in DESCENDING order to preserve offsets
        for start, end, replacement in reversed(self._merge_edits(edits)):
            modified[start:end] = replacement

        return ShakeResult(
            bytes(modified).decode("utf-8"),
            pruned=True,
            removed=list(dict.fromkeys(removed)),
        )

    def _filter_variables(self, declaration: Node, statement: Node, live: Set[str],
                          source_bytes: bytes, edits: List[Edit], removed: List[str]):
        """Drop dead declarators; the whole `statement` goes when none survive."""
        all_declarators = declarators(declaration)
        kept = []
        for declarator in all_declarators:
            names = declarator_names(declarator)
            if not names or any(name in live for name in names):
                kept.append(declarator)
            else:
                removed.extend(names)

        if not kept:
            edits.append(self._removal(statement, source_bytes))
        elif len(kept) < len(all_declarators):
            edits.append((declaration.start_byte, declaration.end_byte,
                          self._rebuild_declaration(declaration, kept).encode("utf-8")))

    def _filter_export(self, statement: Node, live: Set[str], source_bytes: bytes,
                       edits: List[Edit], removed: List[str]):
        if statement.child_by_field_name('source') is not None:
            return

        declaration = statement.child_by_field_name('declaration')
        value = statement.child_by_field_name('value')
        clause = find_child(statement, 'export_clause')

        if declaration is not None:
            if declaration.type in VARIABLE_TYPES:
                self._filter_variables(declaration, statement, live, source_bytes, edits, removed)
            elif declaration.type in DECLARATION_TYPES:
                name = declaration_name(declaration)
                if not name:
                    return
                needed = name in live or (is_default_export(statement) and DEFAULT in live)
                if not needed:
                    edits.append(self._removal(statement, source_bytes))
                    removed.append(name)

        elif value is not None:
            if value.type == 'identifier' and node_text(value) not in live:
                edits.append(self._removal(statement, source_bytes))
                removed.append(DEFAULT)

        elif clause is not None:
            specifiers = export_specifiers(clause)
            kept = [node for node, _, exported in specifiers if exported in live]
            if not kept:
                edits.append(self._removal(statement, source_bytes))
            elif len(kept) < len(specifiers):
                text = "{ " + ", ".join(node_text(node) for node in kept) + " }"
                edits.append((clause.start_byte, clause.end_byte, text.encode("utf-8")))
            removed.extend(exported for _, _, exported in specifiers if exported not in live)

    @staticmethod
    def _merge_edits(edits: List[Edit]) -> List[Edit]:
        """Union of overlapping removal ranges, sorted by start byte ascending."""
        ordered = sorted(edits, key=lambda edit: (edit[0], edit[1]))
        merged = [ordered[0]]
        for start, end, replacement in ordered[1:]:
            last_start, last_end, last_replacement = merged[-1]
            if start < last_end and not replacement and not last_replacement:
                merged[-1] = (last_start, max(last_end, end), b"")
            else:
                merged.append((start, end, replacement))
        return merged

    @staticmethod
    def _rebuild_declaration(declaration: Node, kept: List[Node]) -> str:
        # let / const / var keyword
        keyword = node_text(declaration.children[0])
        text = f"{keyword} " + ", ".join(node_text(declarator) for declarator in kept)
        if declaration.children[-1].type == ';':
            text += ";"
        return text

    # ------------------------------------------------------------------
    # Ranges
    # ------------------------------------------------------------------

    def _removal(self, statement: Node, source_bytes: bytes) -> Edit:
        start = statement.start_byte

        # Doc comments directly above the declaration go with it
        previous = statement.prev_sibling
        current = statement
        while (previous is not None and previous.type == 'comment'
               and previous.end_point[0] >= current.start_point[0] - 1
               and self._starts_line(source_bytes, previous.start_byte)):
            start = previous.start_byte
            current = previous
            previous = previous.prev_sibling

        if self._starts_line(source_bytes, start):
            start = self._line_start(source_bytes, start)

        start, end = self._extend_range_for_newline(source_bytes, start, statement.end_byte)
        return (start, end, b"")

    @staticmethod
    def _line_start(source_bytes: bytes, offset: int) -> int:
        return source_bytes.rfind(b"\n", 0, offset) + 1

    def _starts_line(self, source_bytes: bytes, offset: int) -> bool:
        """True when only whitespace precedes `offset` on its line."""
        return source_bytes[self._line_start(source_bytes, offset):offset].strip() == b""

    def _extend_range_for_newline(self, source_bytes: bytes, start: int, end: int) -> Tuple[int, int]:
        """
        Adjusts the end index to consume a trailing newline if present, and
        one following blank line when the removal already sits after a blank
        line, so no run of empty lines is left behind.
        """
        length = len(source_bytes)

        def newline_at(offset: int) -> int:
            if offset < length and source_bytes[offset] == 13:  # \r
                offset += 1
            if offset < length and source_bytes[offset] == 10:  # \n
                return offset + 1
            return -1

        # Trailing spaces after the statement
        current = end
        while current < length and source_bytes[current] in (32, 9):
            current += 1

        after_line = newline_at(current)
        if after_line == -1:
            return (start, end)

        prefix = source_bytes[:start]
        blank_before = prefix.endswith((b"\n\n", b"\n\r\n"))
        if start == 0 or blank_before:
            after_blank = newline_at(after_line)
            if after_blank != -1:
                return (start, after_blank)
            if blank_before and after_line >= length:
                # Last statement of the file: drop the blank line above instead
                return (start - (2 if prefix.endswith(b"\r\n") else 1), after_line)

        return (start, after_line)
