"""Reduction of the usage model into unused/undefined selector tables."""
from dataclasses import dataclass
from typing import Dict, List, Tuple, TypeVar
from rich.markup import escape
from rich.table import Table

from ..analyzer.project_parser import StyleModule, UndefinedSelectorEntry
from ..utils.safe_console import table_box

T = TypeVar('T')


@dataclass
class UnusedStats:
    total_unused_selectors: int = 0


@dataclass
class UndefinedStats:
    total_undefined_selectors: int = 0


def get_all_unused_selectors(usage: Dict[str, StyleModule]) -> Dict[str, List[str]]:
    """Selectors with a zero counter, grouped by CSS module path.

    Modules without unused selectors are left out.
    """
    unused_selectors: Dict[str, List[str]] = {}

    for css_file_path, module in usage.items():
        for selector_name, count in module.selectors.items():
            if count == 0:
                unused_selectors.setdefault(css_file_path, []).append(selector_name)

    return unused_selectors


def sort_by_selector_count(entries: Dict[str, T], count_of) -> List[Tuple[str, T]]:
    """Entries ordered by descending selector count; ties keep insertion order."""
    return sorted(entries.items(), key=lambda item: count_of(item[1]), reverse=True)


def sorted_unused_selectors(unused_selectors: Dict[str, List[str]]) -> List[Tuple[str, List[str]]]:
    return sort_by_selector_count(unused_selectors, len)


def sorted_undefined_selectors(
    undefined_selectors: Dict[str, UndefinedSelectorEntry],
) -> List[Tuple[str, UndefinedSelectorEntry]]:
    return sort_by_selector_count(undefined_selectors, lambda entry: len(entry.selectors))


def format_unused_selectors(unused_selectors: Dict[str, List[str]]) -> Tuple[Table, UnusedStats]:
    """Build the unused selectors table and its totals."""
    table = Table(box=table_box(), show_lines=True)
    table.add_column("CSS file path", style="cyan", overflow="fold")
    table.add_column("Unused selectors", style="yellow")

    stats = UnusedStats()

    for css_file_path, selectors in sorted_unused_selectors(unused_selectors):
        table.add_row(escape(css_file_path), escape("\n".join(selectors)))
        stats.total_unused_selectors += len(selectors)

    return table, stats


def format_undefined_selectors(
    undefined_selectors: Dict[str, UndefinedSelectorEntry],
) -> Tuple[Table, UndefinedStats]:
    """Build the undefined selectors table and its totals."""
    table = Table(box=table_box(), show_lines=True)
    table.add_column("JSX file path", style="cyan", overflow="fold")
    table.add_column("CSS file path", style="cyan", overflow="fold")
    table.add_column("Undefined selectors", style="red")

    stats = UndefinedStats()

    for jsx_file_path, entry in sorted_undefined_selectors(undefined_selectors):
        table.add_row(escape(jsx_file_path), escape(entry.module_path), escape("\n".join(entry.selectors)))
        stats.total_undefined_selectors += len(entry.selectors)

    return table, stats
