"""CSS module selector extraction.

Collects the names a CSS module exports to component code: every class
selector and id selector outside ``:global(...)``. Keyframe, container and
other custom identifiers are not selectors and never appear in the result.
"""
import re
from pathlib import Path
from typing import Optional, Set
from rich.markup import escape
from tree_sitter import Node, Tree

from .parser import LanguageParser
from ..utils.safe_console import err_console

SELECTOR_NODE_TYPES = {
    'class_selector': 'class_name',
    'id_selector': 'id_name',
}

# Pseudo-classes whose arguments are left unscoped by CSS Modules
GLOBAL_PSEUDO_CLASSES = {'global'}

# Statements whose prelude the grammar may not fully understand
# (media range syntax, named containers, ...). Errors there leave selectors intact.
AT_RULE_TYPES = {
    'at_rule',
    'charset_statement',
    'import_statement',
    'keyframes_statement',
    'media_statement',
    'namespace_statement',
    'postcss_statement',
    'scope_statement',
    'supports_statement',
}

# \HH..HHHHHH with one optional whitespace terminator, or \ followed by any char
CSS_ESCAPE_RE = re.compile(r'\\(?:([0-9a-fA-F]{1,6})[ \t\n\f]?|\r\n|(.))', re.DOTALL)

MAX_CODE_POINT = 0x10FFFF


class CssParseError(Exception):
    """Malformed stylesheet, with a 1-based location when one is known."""

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column


def extract_selectors(css_path: str | Path) -> Set[str]:
    """Return every selector name exported by the CSS module at ``css_path``.

    A missing or unreadable file is known to have no selectors. A file that
    fails to parse is reported on the diagnostics console and also yields an
    empty set; it never aborts the run.
    """
    css_path = Path(css_path)

    # TODO: resolve stylesheets imported from node_modules packages
    tree = LanguageParser('css').parse_file(css_path)
    if tree is None:
        return set()

    try:
        return collect_selectors(tree)
    except CssParseError as e:
        report_parse_error(css_path, e)
        return set()


def parse_css_selectors(source_code: str | bytes) -> Set[str]:
    """Parse stylesheet source and collect its exported selector names.

    Raises:
        CssParseError: If the source contains syntax errors
    """
    return collect_selectors(LanguageParser('css').parse_source(source_code))


def collect_selectors(tree: Tree) -> Set[str]:
    """Exported selector names of a parsed stylesheet.

    Raises:
        CssParseError: If a selector list is broken or a block is never closed
    """
    root = tree.root_node

    if root.has_error:
        error = _find_fatal_error(root)
        if error:
            raise error

    selectors = set()
    stack = [root]

    while stack:
        node = stack.pop()

        if node.type == 'pseudo_class_selector' and _pseudo_class_name(node) in GLOBAL_PSEUDO_CLASSES:
            # Only the selector the pseudo-class is attached to stays local
            for child in node.named_children:
                if child.type != 'arguments':
                    stack.append(child)
            continue

        name_type = SELECTOR_NODE_TYPES.get(node.type)
        if name_type:
            name = _child_text(node, name_type)
            if name:
                selectors.add(decode_css_escapes(name))

        stack.extend(node.named_children)

    return selectors


def decode_css_escapes(text: str) -> str:
    """Resolve CSS escapes: ``sm\\:hidden`` -> ``sm:hidden``, ``\\31 0`` -> ``10``."""
    def replace(match: re.Match) -> str:
        hex_digits, char = match.group(1), match.group(2)
        if hex_digits:
            code_point = int(hex_digits, 16)
            if code_point == 0 or code_point > MAX_CODE_POINT or 0xD800 <= code_point <= 0xDFFF:
                return '�'
            return chr(code_point)
        # Escaped newline is a line continuation
        if char is None or char in '\n\f':
            return ''
        return char

    return CSS_ESCAPE_RE.sub(replace, text)


def report_parse_error(css_path: Path, error: CssParseError) -> None:
    """Print a CSS parse diagnostic to stderr."""
    location = ''
    if error.line is not None:
        location = f" [dim](line {error.line}, col {error.column})[/dim]"

    err_console.print(
        f"[bold red]⚠ CSS Parse Error[/bold red] in [cyan]{escape(str(css_path))}[/cyan]{location}: "
        f"[yellow]{escape(error.message or 'Unknown error')}[/yellow]",
        highlight=False,
    )


def _find_fatal_error(root: Node) -> Optional[CssParseError]:
    """First ERROR or MISSING node that makes the selectors unreliable, if any."""
    stack = [root]

    while stack:
        node = stack.pop()

        if node.is_missing or node.type == 'ERROR':
            if _is_fatal(node):
                return _to_parse_error(node)
            continue

        if node.type == 'block' and not _is_closed(node):
            return CssParseError("Missing '}'", *_end_position(node))

        if node.has_error:
            stack.extend(reversed(node.children))

    return None


def _is_fatal(node: Node) -> bool:
    """Unclosed blocks and errors in selector preludes are fatal.

    Errors inside at-rule preludes or inside declaration blocks are not.
    """
    if node.is_missing and node.type == '}':
        return True

    child, parent = node, node.parent
    while parent is not None:
        if parent.type in ('selectors', 'rule_set'):
            return True
        if parent.type == 'block' or parent.type in AT_RULE_TYPES:
            return False
        if parent.type == 'stylesheet':
            # Recovery can hoist a broken at-rule prelude to the top level
            return not child.text.lstrip().startswith(b'@')
        child, parent = parent, parent.parent

    return True


def _is_closed(block: Node) -> bool:
    last = block.children[-1] if block.children else None
    return last is not None and last.type == '}' and not last.is_missing


def _end_position(node: Node) -> tuple:
    line, column = node.end_point
    return line + 1, column + 1


def _to_parse_error(node: Node) -> CssParseError:
    line, column = node.start_point

    if node.is_missing:
        return CssParseError(f"Missing '{node.type}'", line + 1, column + 1)

    snippet = node.text.decode('utf-8', errors='replace').strip().splitlines()
    detail = f": {snippet[0][:40]}" if snippet else ''
    return CssParseError(f"Unexpected token{detail}", line + 1, column + 1)


def _pseudo_class_name(node: Node) -> Optional[str]:
    # tree-sitter-css aliases the pseudo-class name as class_name
    name = _child_text(node, 'class_name')
    return name.lower() if name else None


def _child_text(node: Node, child_type: str) -> Optional[str]:
    """Text of the last direct child of ``child_type``."""
    for child in reversed(node.named_children):
        if child.type == child_type:
            return child.text.decode('utf-8')
    return None
