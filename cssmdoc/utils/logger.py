"""Terminal-safe output helpers with ASCII fallback for legacy consoles.

Detects the terminal encoding and provides ASCII alternatives for the few
Unicode glyphs used in diagnostics so non-UTF-8 terminals don't crash.
"""
import sys
import locale


# Unicode to ASCII icon mapping for non-UTF-8 terminals
ICON_MAP = {
    # Status icons
    '✓': '[OK]',
    '✗': '[FAIL]',
    '⚠': '[WARN]',

    # Arrows
    '→': '->',
    '←': '<-',

    # Symbols
    '…': '...',
    '•': '*',
}


def detect_terminal_encoding() -> str:
    """Detect the terminal's encoding capability.

    Returns:
        str: Terminal encoding ('utf-8', 'cp1252', 'ascii', etc.)
    """
    # Try stdout encoding first
    if hasattr(sys.stdout, 'encoding') and sys.stdout.encoding:
        return sys.stdout.encoding.lower()

    # Fallback to locale
    try:
        return locale.getpreferredencoding().lower()
    except Exception:
        pass

    # Ultimate fallback
    return 'ascii'


def is_utf8_capable() -> bool:
    """Check if the terminal can handle UTF-8 Unicode characters.

    Returns:
        bool: True if terminal supports UTF-8, False otherwise
    """
    encoding = detect_terminal_encoding()

    # UTF-8 variants that support Unicode
    utf8_encodings = ['utf-8', 'utf8', 'utf_8']

    return encoding in utf8_encodings


def sanitize_for_terminal(text: str) -> str:
    """Replace Unicode icons with ASCII equivalents if terminal doesn't support UTF-8.

    Args:
        text: Text potentially containing Unicode icons

    Returns:
        str: Sanitized text safe for current terminal
    """
    if is_utf8_capable():
        return text

    sanitized = text
    for unicode_char, ascii_replacement in ICON_MAP.items():
        sanitized = sanitized.replace(unicode_char, ascii_replacement)

    return sanitized
