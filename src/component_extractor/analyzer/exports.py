"""Export table and declaration helpers for JS/TS module syntax trees."""
from typing import List, Optional, Set, Tuple

from tree_sitter import Node

from .import_tracker import node_text, strip_quotes

# Top-level declarations that bind exactly one name
DECLARATION_TYPES = {
    'function_declaration',
    'generator_function_declaration',
    'class_declaration',
    'abstract_class_declaration',
    'interface_declaration',
    'type_alias_declaration',
    'enum_declaration',
}

# let / const / var
VARIABLE_TYPES = {'lexical_declaration', 'variable_declaration'}

DEFAULT = 'default'
NAMESPACE = '*'


def declaration_name(node: Node) -> Optional[str]:
    """Bound name of a function/class/type declaration (None when anonymous)."""
    name_node = node.child_by_field_name('name')
    return node_text(name_node) if name_node is not None else None


def pattern_names(node: Optional[Node]) -> List[str]:
    """Names bound by a declarator target: `x`, `{ a, b: c }`, `[d, ...e]`."""
    if node is None:
        return []

    node_type = node.type
    if node_type in ('identifier', 'shorthand_property_identifier_pattern'):
        return [node_text(node)]
    if node_type in ('assignment_pattern', 'object_assignment_pattern'):
        # Default values on the right are references, not bindings
        return pattern_names(node.child_by_field_name('left'))
    if node_type == 'pair_pattern':
        return pattern_names(node.child_by_field_name('value'))
    if node_type in ('object_pattern', 'array_pattern', 'rest_pattern'):
        names = []
        for child in node.named_children:
            names.extend(pattern_names(child))
        return names
    return []


def declarators(node: Node) -> List[Node]:
    """variable_declarator children of a lexical/variable declaration."""
    return [child for child in node.named_children if child.type == 'variable_declarator']


def declarator_names(declarator: Node) -> List[str]:
    return pattern_names(declarator.child_by_field_name('name'))


def export_specifiers(clause: Node) -> List[Tuple[Node, str, str]]:
    """(specifier node, local name, exported name) for each entry of an export clause."""
    specifiers = []
    for child in clause.named_children:
        if child.type != 'export_specifier':
            continue
        name_node = child.child_by_field_name('name')
        if name_node is None:
            continue
        alias_node = child.child_by_field_name('alias')
        local = strip_quotes(node_text(name_node))
        exported = strip_quotes(node_text(alias_node)) if alias_node is not None else local
        specifiers.append((child, local, exported))
    return specifiers


def find_child(node: Node, node_type: str) -> Optional[Node]:
    for child in node.children:
        if child.type == node_type:
            return child
    return None


def is_default_export(node: Node) -> bool:
    return node.type == 'export_statement' and find_child(node, 'default') is not None


class ExportTable:
    """
    Structural scan of a module's export forms.

    Names are the ones importers see: the alias of `export { a as b }`,
    'default' for default exports, '*' for `export * from`. A re-exported
    name is recorded as belonging to the re-exporting module.
    """

    def analyze_exports(self, root_node: Node) -> Set[str]:
        exports: Set[str] = set()

        for statement in root_node.named_children:
            if statement.type != 'export_statement':
                continue

            declaration = statement.child_by_field_name('declaration')
            value = statement.child_by_field_name('value')
            clause = find_child(statement, 'export_clause')

            if is_default_export(statement):
                exports.add(DEFAULT)

            if declaration is not None:
                exports.update(self._declaration_exports(declaration))
            elif value is not None:
                # export default Foo
                if value.type == 'identifier':
                    exports.add(node_text(value))
            elif clause is not None:
                exports.update(exported for _, _, exported in export_specifiers(clause))
            else:
                namespace = find_child(statement, 'namespace_export')
                if namespace is not None:
                    # export * as ns from 'mod'
                    exports.update(node_text(child) for child in namespace.named_children)
                elif find_child(statement, '*') is not None:
                    exports.add(NAMESPACE)

        return exports

    def _declaration_exports(self, declaration: Node) -> List[str]:
        if declaration.type in VARIABLE_TYPES:
            names = []
            for declarator in declarators(declaration):
                names.extend(declarator_names(declarator))
            return names

        name = declaration_name(declaration)
        return [name] if name else []
