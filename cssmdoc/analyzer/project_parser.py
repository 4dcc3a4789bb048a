"""Cross-reference engine: CSS module selectors vs. component usages.

Works in three steps:
1. Discovery - collect component files under the project root
2. Walk - one pass over each file's syntax tree, binding style imports to
   module paths and tallying property accesses on those bindings
3. Reduction - fold the per-file tallies into per-module counters and,
   in reverse mode, collect selectors that no module defines
"""
import os
from contextlib import nullcontext
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn

from .css_extractor import extract_selectors
from .js_import_tracker import JSImportTracker
from .parser import LanguageParser, walk
from ..config import Config
from ..utils.safe_console import err_console

# Never descend into installed packages
EXCLUDED_DIRS = {'node_modules'}


@dataclass
class StyleModule:
    """A CSS module and how often each of its selectors is referenced."""
    path: str
    selectors: Dict[str, int] = field(default_factory=dict)
    used_by: List[str] = field(default_factory=list)


@dataclass
class SourceBinding:
    """A local import name in one component file and its tallied accesses."""
    module_path: str
    selectors: Dict[str, int] = field(default_factory=dict)


@dataclass
class UndefinedSelectorEntry:
    module_path: str
    selectors: List[str] = field(default_factory=list)


@dataclass
class ParseResult:
    usage: Dict[str, StyleModule] = field(default_factory=dict)
    undefined: Dict[str, UndefinedSelectorEntry] = field(default_factory=dict)


def normalize_exts(exts: Iterable[str]) -> List[str]:
    """Strip leading dots and drop duplicates, keeping order."""
    result = []
    for ext in exts:
        ext = ext.strip().lstrip('.')
        if ext and ext not in result:
            result.append(ext)
    return result


def is_ignored(path: str | Path, ignore: Iterable[str], root: Optional[Path] = None) -> bool:
    """True if ``path`` or one of its ancestor directories ends with an ignore entry.

    Ancestors are only considered below ``root`` when it is given, so an
    entry never matches the directories that contain the project itself.
    """
    patterns = [p.rstrip('/\\') for p in ignore if p and p.rstrip('/\\')]
    if not patterns:
        return False

    path = Path(path)
    candidates = [str(path)]
    for parent in path.parents:
        if root is not None and root not in parent.parents:
            break
        candidates.append(str(parent))

    return any(
        candidate.endswith(pattern) or candidate.endswith(os.path.normpath(pattern))
        for candidate in candidates
        for pattern in patterns
    )


class ProjectParser:
    """Builds the selector usage model for one project.

    All state lives on the instance and is scoped to a single ``parse()``
    call; create a new parser for every run.
    """

    def __init__(self, project_root: str | Path, config: Config, show_progress: bool = False):
        """Initialize project parser.

        Args:
            project_root: Root directory of the component project
            config: Run options (style globs, extensions, ignore list, reverse mode)
            show_progress: Draw a transient progress bar on stderr
        """
        self.project_root = Path(project_root).resolve()
        self.config = config
        self.show_progress = show_progress
        self.import_tracker = JSImportTracker()
        self._parsers: Dict[str, LanguageParser] = {}

    def parse(self) -> ParseResult:
        """Run discovery, walk every component file, then reduce.

        Returns:
            ParseResult with per-module usage and (reverse mode) undefined selectors

        Raises:
            OSError: If a discovered component file cannot be read
        """
        files = self.discover_files()

        usage: Dict[str, StyleModule] = {}
        bindings: Dict[str, Dict[str, SourceBinding]] = {}

        if self.show_progress:
            progress_ctx = Progress(
                SpinnerColumn(),
                TextColumn("[bold blue]{task.description}"),
                BarColumn(),
                TaskProgressColumn(),
                console=err_console,
                transient=True,
            )
        else:
            progress_ctx = nullcontext()

        with progress_ctx as progress:
            if self.show_progress:
                task = progress.add_task("Scanning components...", total=len(files))

            for file_path in files:
                self.parse_file(file_path, usage, bindings)
                if self.show_progress:
                    progress.advance(task)

        undefined = self.count_selectors_usage(bindings, usage)

        return ParseResult(usage=usage, undefined=undefined)

    def discover_files(self) -> List[Path]:
        """Collect component files matching the configured extensions.

        Returns:
            Sorted, de-duplicated list of absolute paths
        """
        found = set()

        for ext in normalize_exts(self.config.exts):
            for file_path in self.project_root.rglob(f'*.{ext}'):
                if not file_path.is_file():
                    continue
                relative_parts = file_path.relative_to(self.project_root).parts
                if any(part in EXCLUDED_DIRS for part in relative_parts):
                    continue
                if is_ignored(file_path, self.config.ignore, self.project_root):
                    continue
                found.add(file_path)

        return sorted(found)

    def parse_file(self, file_path: Path, usage: Dict[str, StyleModule],
                   bindings: Dict[str, Dict[str, SourceBinding]]) -> None:
        """Walk one component file, updating ``usage`` and ``bindings`` in place."""
        source_code = file_path.read_text(encoding='utf-8')
        tree = self._parser_for(file_path).parse_source(source_code)
        file_key = str(file_path)

        for node in walk(tree.root_node):
            if node.type == 'import_statement':
                self.handle_style_import(node, file_path, usage, bindings)
            elif node.type in ('member_expression', 'subscript_expression'):
                self.count_selector_usage(node, bindings.get(file_key))

    def handle_style_import(self, node, file_path: Path, usage: Dict[str, StyleModule],
                            bindings: Dict[str, Dict[str, SourceBinding]]) -> None:
        info = self.import_tracker.analyze_import(node)
        if not info or not self.is_style_path(info.source_module):
            return

        module_path = os.path.normpath(os.path.join(file_path.parent, info.source_module))

        if is_ignored(module_path, self.config.ignore, self.project_root):
            return

        file_key = str(file_path)

        if module_path in usage:
            usage[module_path].used_by.append(file_key)
        else:
            usage[module_path] = StyleModule(
                path=module_path,
                selectors={selector: 0 for selector in sorted(extract_selectors(module_path))},
                used_by=[file_key],
            )

        file_bindings = bindings.setdefault(file_key, {})

        # Side effect imports register usage but bind no name
        if info.local_name is None:
            return

        if info.local_name not in file_bindings:
            file_bindings[info.local_name] = SourceBinding(module_path=module_path)

    def count_selector_usage(self, node, file_bindings: Optional[Dict[str, SourceBinding]]) -> None:
        if not file_bindings:
            return

        access = self.import_tracker.analyze_access(node)
        if not access:
            return

        binding = file_bindings.get(access.identifier)
        if binding is None:
            return

        binding.selectors[access.selector] = binding.selectors.get(access.selector, 0) + 1

    def count_selectors_usage(self, bindings: Dict[str, Dict[str, SourceBinding]],
                              usage: Dict[str, StyleModule]) -> Dict[str, UndefinedSelectorEntry]:
        """Fold binding tallies into module counters.

        Returns:
            Undefined selectors per component file (empty unless reverse mode)
        """
        undefined: Dict[str, UndefinedSelectorEntry] = {}

        for file_key, file_bindings in bindings.items():
            for binding in file_bindings.values():
                module = usage.get(binding.module_path)
                if module is None:
                    continue

                for selector, count in binding.selectors.items():
                    if selector in module.selectors:
                        module.selectors[selector] += count
                    elif self.config.reverse:
                        entry = undefined.setdefault(
                            file_key, UndefinedSelectorEntry(module_path=binding.module_path)
                        )
                        entry.selectors.append(selector)

        return undefined

    def is_style_path(self, import_path: str) -> bool:
        return any(import_path.endswith(glob) for glob in self.config.style_globs)

    def _parser_for(self, file_path: Path) -> LanguageParser:
        language = LanguageParser.language_for(file_path)
        if language not in self._parsers:
            self._parsers[language] = LanguageParser(language)
        return self._parsers[language]


def parse_project(project_root: str | Path, config: Config, show_progress: bool = False) -> ParseResult:
    """Analyze ``project_root`` and return the selector usage model."""
    return ProjectParser(project_root, config, show_progress=show_progress).parse()
