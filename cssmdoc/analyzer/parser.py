"""Tree-sitter parser for component sources and stylesheets."""
from pathlib import Path
from typing import Iterator, Optional
from tree_sitter import Language, Node, Parser, Tree
import tree_sitter_css as tscss
import tree_sitter_javascript as tsjavascript
import tree_sitter_typescript as tstypescript


class LanguageParser:
    """Multi-language parser using tree-sitter v0.22+ API."""

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

    def __init__(self, language: str):
        """Initialize parser for given language (javascript, typescript, tsx, css).

        Args:
            language: One of 'javascript', 'typescript', 'tsx', 'css'

        Raises:
            ValueError: If language is not supported
        """
        self.language = language
        self.parser = self._create_parser()

    def _create_parser(self) -> Parser:
        """Factory method using the Parser(Language(capsule)) API.

        Returns:
            Configured Parser instance

        Raises:
            ValueError: If language is not supported
        """
        if self.language == 'javascript':
            # The javascript grammar includes JSX
            lang = Language(tsjavascript.language())
        elif self.language == 'typescript':
            lang = Language(tstypescript.language_typescript())
        elif self.language == 'tsx':
            lang = Language(tstypescript.language_tsx())
        elif self.language == 'css':
            lang = Language(tscss.language())
        else:
            raise ValueError(f"Unsupported language: {self.language}")

        return Parser(lang)

    def parse_source(self, source_code: str | bytes) -> Tree:
        """Parse in-memory source and return the tree-sitter Tree."""
        if isinstance(source_code, str):
            source_code = source_code.encode('utf-8')
        return self.parser.parse(source_code)

    def parse_file(self, file_path: str | Path) -> Optional[Tree]:
        """Parse file and return tree-sitter Tree.

        Args:
            file_path: Path to source file to parse

        Returns:
            Parsed Tree object, or None if the file is missing or unreadable
        """
        file_path = Path(file_path)

        if not file_path.is_file():
            return None

        try:
            source_code = file_path.read_bytes()
        except OSError:
            return None
        return self.parser.parse(source_code)

    @classmethod
    def language_for(cls, file_path: str | Path, default: str = 'javascript') -> str:
        """Grammar name for a component file, based on its extension.

        Unknown extensions fall back to ``default``.
        """
        return cls.SUPPORTED_LANGUAGES.get(Path(file_path).suffix.lower(), default)


def walk(node: Node) -> Iterator[Node]:
    """Yield ``node`` and every named descendant exactly once, in document order."""
    stack = [node]

    while stack:
        current = stack.pop()
        yield current
        # Reverse so that siblings come off the stack left to right
        stack.extend(reversed(current.named_children))
