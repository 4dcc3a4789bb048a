import re
from dataclasses import dataclass
from typing import Optional

from tree_sitter import Node


@dataclass
class ImportInfo:
    source_module: str
    # None for side effect imports, e.g. "import './styles.css'"
    local_name: Optional[str] = None


@dataclass
class StyleAccess:
    identifier: str
    selector: str


SIMPLE_ESCAPES = {
    'n': '\n',
    't': '\t',
    'r': '\r',
    'b': '\b',
    'f': '\f',
    'v': '\v',
    '0': '\0',
}

JS_ESCAPE_RE = re.compile(
    r'\\(?:x([0-9a-fA-F]{2})|u\{([0-9a-fA-F]+)\}|u([0-9a-fA-F]{4})|(\r\n|[\s\S]))'
)


def decode_js_escape(sequence: str) -> str:
    """Value of one escape sequence, e.g. ``\\x41`` -> ``A``, ``\\'`` -> ``'``."""
    match = JS_ESCAPE_RE.fullmatch(sequence)
    if not match:
        return sequence

    hex_byte, code_point, code_unit, char = match.groups()
    if hex_byte or code_unit:
        return chr(int(hex_byte or code_unit, 16))
    if code_point:
        value = int(code_point, 16)
        return chr(value) if value <= 0x10FFFF else '\ufffd'
    if char in ('\n', '\r\n', '\r', '\u2028', '\u2029'):
        # Line continuation
        return ''
    return SIMPLE_ESCAPES.get(char, char)


def string_value(node: Node) -> str:
    """Runtime value of a string literal node, with escapes decoded."""
    parts = []
    for child in node.named_children:
        if child.type == 'escape_sequence':
            parts.append(decode_js_escape(node_text(child)))
        elif child.type == 'string_fragment':
            parts.append(node_text(child))
    return ''.join(parts)


def node_text(node: Node) -> str:
    return node.text.decode('utf-8')


class JSImportTracker:
    """Recognizes style imports and style property accesses on single syntax nodes.

    Both checks look at one node at a time so they can run from a single
    traversal of the tree.
    """

    def analyze_import(self, node: Node) -> Optional[ImportInfo]:
        """Map an ESM import statement to its source and first local binding.

        Handles:
            import styles from './a.css'         (default)
            import * as styles from './a.css'    (namespace)
            import { root as styles } from ...   (named, first specifier wins)
            import './a.css'                     (side effect, no binding)

        Returns:
            ImportInfo, or None if ``node`` is not an import statement
        """
        if node.type != 'import_statement':
            return None

        source_node = node.child_by_field_name('source')
        if not source_node:
            return None

        info = ImportInfo(source_module=string_value(source_node))

        import_clause = next(
            (child for child in node.named_children if child.type == 'import_clause'),
            None,
        )
        if not import_clause:
            return info

        for child in import_clause.named_children:
            # Case: Default Import (e.g., import x from 'mod')
            if child.type == 'identifier':
                info.local_name = node_text(child)
                return info

            # Case: Namespace Import (e.g., import * as ns from 'mod')
            if child.type == 'namespace_import':
                for ns_child in child.named_children:
                    if ns_child.type == 'identifier':
                        info.local_name = node_text(ns_child)
                        return info

            # Case: Named Imports (e.g., import { x, y as z } from 'mod')
            if child.type == 'named_imports':
                for specifier in child.named_children:
                    if specifier.type != 'import_specifier':
                        continue
                    alias_node = specifier.child_by_field_name('alias')
                    name_node = alias_node or specifier.child_by_field_name('name')
                    if name_node:
                        info.local_name = node_text(name_node)
                        return info

        return info

    def analyze_access(self, node: Node) -> Optional[StyleAccess]:
        """Match ``ident.member`` and ``ident['literal']`` property accesses.

        Computed keys built from variables or template strings are not
        statically known and yield None.
        """
        if node.type == 'member_expression':
            key_node = node.child_by_field_name('property')
            if not key_node or key_node.type != 'property_identifier':
                return None
            selector = node_text(key_node)
        elif node.type == 'subscript_expression':
            key_node = node.child_by_field_name('index')
            if not key_node or key_node.type != 'string':
                return None
            selector = string_value(key_node)
        else:
            return None

        if not selector:
            return None

        object_node = node.child_by_field_name('object')
        if not object_node or object_node.type != 'identifier':
            return None

        return StyleAccess(identifier=node_text(object_node), selector=selector)
