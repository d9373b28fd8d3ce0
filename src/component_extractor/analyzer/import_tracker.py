from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from tree_sitter import Node

# Node types whose text may reference a binding. property_identifier is
# excluded: `obj.foo` and `{ foo: 1 }` never name a top-level `foo`.
REFERENCE_NODE_TYPES = {'identifier', 'type_identifier', 'shorthand_property_identifier'}


@dataclass
class ImportRecord:
    """One reference from a module to another module."""
    specifier: str
    kind: str  # import, side_effect, reexport, require, dynamic
    # local name -> imported name ('default' for default imports)
    bindings: Dict[str, str] = field(default_factory=dict)
    # Imported names needed regardless of local usage (re-exports)
    required: Set[str] = field(default_factory=set)
    # Whole-module usage that cannot be narrowed to names
    is_namespace: bool = False
    line_number: int = 0


def node_text(node: Node) -> str:
    return node.text.decode('utf-8', errors='replace')


def strip_quotes(text: str) -> str:
    return text.strip('"\'`')


def string_value(node: Node) -> Optional[str]:
    """Literal value of a string node, or None for templates with substitutions."""
    if node.type == 'string':
        return strip_quotes(node_text(node))
    if node.type == 'template_string':
        if any(child.type == 'template_substitution' for child in node.named_children):
            return None
        return strip_quotes(node_text(node))
    return None


class ImportTracker:
    def analyze_imports(self, root_node: Node) -> List[ImportRecord]:
        """
        Collects every module reference in a tree: ES imports, re-exports,
        CommonJS require() calls and dynamic import() calls.
        """
        records: List[ImportRecord] = []

        # Stack for traversal
        stack = [root_node]

        while stack:
            node = stack.pop()

            # 1. ESM Import Statements
            if node.type == 'import_statement':
                record = self._parse_import_statement(node)
                if record:
                    records.append(record)
                continue

            # 2. Re-exports (export ... from 'mod')
            if node.type == 'export_statement':
                source_node = node.child_by_field_name('source')
                if source_node:
                    record = self._parse_reexport(node, source_node)
                    if record:
                        records.append(record)
                    continue

            # 3. require('mod') and import('mod') anywhere in the module
            elif node.type == 'call_expression':
                record = self._parse_call(node)
                if record:
                    records.append(record)

            # Reverse to process in source order
            stack.extend(reversed(node.named_children))

        return records

    def _parse_import_statement(self, node: Node) -> Optional[ImportRecord]:
        source_node = node.child_by_field_name('source')
        if not source_node:
            return None
        specifier = string_value(source_node)
        if specifier is None:
            return None

        record = ImportRecord(specifier=specifier, kind='import',
                              line_number=node.start_point[0] + 1)

        import_clause = None
        for child in node.named_children:
            if child.type == 'import_clause':
                import_clause = child
                break

        if import_clause is None:
            # import './styles.css'
            record.kind = 'side_effect'
            return record

        # import x, { y } from 'mod' / import * as ns from 'mod' / import x from 'mod'
        for child in import_clause.named_children:
            # Default Import
            if child.type == 'identifier':
                record.bindings[node_text(child)] = 'default'

            # Namespace Import: * as identifier
            elif child.type == 'namespace_import':
                record.is_namespace = True
                for ns_child in child.named_children:
                    if ns_child.type == 'identifier':
                        record.bindings[node_text(ns_child)] = '*'

            # Named Imports: { x, y as z }
            elif child.type == 'named_imports':
                for specifier in child.named_children:
                    if specifier.type != 'import_specifier':
                        continue
                    name_node = specifier.child_by_field_name('name')
                    alias_node = specifier.child_by_field_name('alias')
                    if name_node is None:
                        continue
                    original = strip_quotes(node_text(name_node))
                    local = node_text(alias_node) if alias_node else original
                    record.bindings[local] = original

        return record

    def _parse_reexport(self, node: Node, source_node: Node) -> Optional[ImportRecord]:
        specifier = string_value(source_node)
        if specifier is None:
            return None

        record = ImportRecord(specifier=specifier, kind='reexport',
                              line_number=node.start_point[0] + 1)

        for child in node.children:
            # export * from 'mod' / export * as ns from 'mod'
            if child.type in ('*', 'namespace_export'):
                record.is_namespace = True
            # export { a, b as c } from 'mod'
            elif child.type == 'export_clause':
                for specifier_node in child.named_children:
                    if specifier_node.type != 'export_specifier':
                        continue
                    name_node = specifier_node.child_by_field_name('name')
                    if name_node is not None:
                        record.required.add(strip_quotes(node_text(name_node)))

        return record

    def _parse_call(self, node: Node) -> Optional[ImportRecord]:
        function_node = node.child_by_field_name('function')
        args_node = node.child_by_field_name('arguments')
        if function_node is None or args_node is None or args_node.named_child_count == 0:
            return None

        if function_node.type == 'import':
            kind = 'dynamic'
        elif function_node.type == 'identifier' and node_text(function_node) == 'require':
            kind = 'require'
        else:
            return None

        specifier = string_value(args_node.named_children[0])
        if specifier is None:
            return None

        # CommonJS export objects and lazy chunks are used as a whole
        return ImportRecord(specifier=specifier, kind=kind, is_namespace=True,
                            line_number=node.start_point[0] + 1)


def collect_references(node: Node) -> Set[str]:
    """Names of every identifier-like node under `node`, skipping import statements."""
    names: Set[str] = set()
    stack = [node]

    while stack:
        current = stack.pop()
        if current.type == 'import_statement':
            continue
        if current.type in REFERENCE_NODE_TYPES:
            names.add(node_text(current))
        stack.extend(current.named_children)

    return names
