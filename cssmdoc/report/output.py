"""Report rendering (cli tables, JSON, Markdown) and writing."""
import io
import json
from pathlib import Path
from typing import Any, Dict, List, Optional
from rich.console import Console

from ..analyzer.project_parser import ParseResult
from .format import (
    format_undefined_selectors,
    format_unused_selectors,
    get_all_unused_selectors,
    sorted_undefined_selectors,
    sorted_unused_selectors,
)

SUPPORTED_FORMATS = ['cli', 'json', 'md']

EXTENSION_FORMATS = {
    '.json': 'json',
    '.md': 'md',
}

# Wide enough that absolute paths rarely wrap in the table
CLI_REPORT_WIDTH = 160


class UnsupportedOutputFormatError(ValueError):
    """Raised for an explicit output format outside SUPPORTED_FORMATS."""

    def __init__(self, output_format: str):
        super().__init__(f"Unsupported output format: {output_format}")
        self.output_format = output_format


def resolve_output_format(output: Optional[str] = None, output_format: Optional[str] = None) -> str:
    """Pick the report format.

    Priority:
    1. Explicit ``output_format`` (case-insensitive)
    2. Extension of the ``output`` path (.json, .md)
    3. 'cli'

    Raises:
        UnsupportedOutputFormatError: If the explicit format is unknown
    """
    if output_format:
        normalized = output_format.lower()
        if normalized in SUPPORTED_FORMATS:
            return normalized
        raise UnsupportedOutputFormatError(output_format)

    if output:
        return EXTENSION_FORMATS.get(Path(output).suffix.lower(), 'cli')

    return 'cli'


def build_report_output(parse_result: ParseResult, output: Optional[str] = None,
                        output_format: Optional[str] = None, reverse: bool = False) -> str:
    """Render the parse result in the resolved format.

    Raises:
        UnsupportedOutputFormatError: If the explicit format is unknown
    """
    report_format = resolve_output_format(output, output_format)

    if report_format == 'json':
        return json.dumps(build_json_report(parse_result, reverse), indent=2)

    if report_format == 'md':
        return build_markdown_report(parse_result, reverse)

    return build_cli_report(parse_result, reverse)


def build_cli_report(parse_result: ParseResult, reverse: bool = False) -> str:
    unused_table, unused_stats = format_unused_selectors(get_all_unused_selectors(parse_result.usage))

    buffer = io.StringIO()
    console = Console(file=buffer, width=CLI_REPORT_WIDTH, color_system=None,
                      legacy_windows=False, highlight=False)
    console.print(unused_table)

    if reverse:
        undefined_table, undefined_stats = format_undefined_selectors(parse_result.undefined)
        console.print(undefined_table)
        console.print(f"Total undefined selectors: {undefined_stats.total_undefined_selectors}")

    console.print(f"Total unused selectors: {unused_stats.total_unused_selectors}")

    return buffer.getvalue().rstrip('\n')


def build_json_report(parse_result: ParseResult, include_undefined_selectors: bool) -> Dict[str, Any]:
    unused_selectors = sorted_unused_selectors(get_all_unused_selectors(parse_result.usage))

    report: Dict[str, Any] = {
        'unusedSelectors': [
            {'cssFilePath': css_file_path, 'selectors': selectors}
            for css_file_path, selectors in unused_selectors
        ],
        'stats': {
            'totalUnusedSelectors': sum(len(selectors) for _, selectors in unused_selectors),
        },
    }

    if include_undefined_selectors:
        undefined_selectors = sorted_undefined_selectors(parse_result.undefined)
        report['undefinedSelectors'] = [
            {
                'jsxFilePath': jsx_file_path,
                'cssFilePath': entry.module_path,
                'selectors': entry.selectors,
            }
            for jsx_file_path, entry in undefined_selectors
        ]
        report['stats']['totalUndefinedSelectors'] = sum(
            len(entry.selectors) for _, entry in undefined_selectors
        )

    return report


def build_markdown_report(parse_result: ParseResult, include_undefined_selectors: bool) -> str:
    unused_selectors = sorted_unused_selectors(get_all_unused_selectors(parse_result.usage))

    lines: List[str] = [
        '# CSS Modules Doctor Report',
        '',
        '## Unused selectors',
        '',
        '| CSS file path | Unused selectors |',
        '| --- | --- |',
    ]

    if not unused_selectors:
        lines.append('| _None_ | - |')

    for css_file_path, selectors in unused_selectors:
        lines.append(f"| {escape_markdown_cell(css_file_path)} | "
                     f"{escape_markdown_cell('<br />'.join(selectors))} |")

    total_undefined = 0
    if include_undefined_selectors:
        lines.extend([
            '',
            '## Undefined selectors',
            '',
            '| JSX file path | CSS file path | Undefined selectors |',
            '| --- | --- | --- |',
        ])

        undefined_selectors = sorted_undefined_selectors(parse_result.undefined)
        if not undefined_selectors:
            lines.append('| _None_ | _None_ | - |')

        for jsx_file_path, entry in undefined_selectors:
            lines.append(f"| {escape_markdown_cell(jsx_file_path)} | "
                         f"{escape_markdown_cell(entry.module_path)} | "
                         f"{escape_markdown_cell('<br />'.join(entry.selectors))} |")
            total_undefined += len(entry.selectors)

    lines.extend([
        '',
        '## Stats',
        '',
        f"- Total unused selectors: {sum(len(selectors) for _, selectors in unused_selectors)}",
    ])

    if include_undefined_selectors:
        lines.append(f"- Total undefined selectors: {total_undefined}")

    return '\n'.join(lines)


def escape_markdown_cell(value: str) -> str:
    """Escape characters that would break a Markdown table cell."""
    return (
        value.replace('\\', '\\\\')
        .replace('|', '\\|')
        .replace('\r\n', ' ')
        .replace('\n', ' ')
    )


def write_report_output(output: str, output_path: Optional[str | Path] = None) -> None:
    """Print the report, or write it to ``output_path`` creating parent directories.

    Raises:
        OSError: If the directory or file cannot be written
    """
    if not output_path:
        print(output)
        return

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(output, encoding='utf-8')
