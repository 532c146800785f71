"""Terminal-safe text for progress and error messages.

Falls back to ASCII replacements for the few symbols refaudit prints when
the terminal cannot encode UTF-8 (legacy Windows consoles, some CI logs).
"""
import sys
import locale


# Unicode to ASCII replacements for symbols used in console output
ICON_MAP = {
    '✓': '[OK]',
    '✗': '[FAIL]',
    '⚠': '[WARN]',
    '→': '->',
    '…': '...',
    '•': '*',
}


def detect_terminal_encoding() -> str:
    """Detect the encoding of stderr, where progress goes.

    Returns:
        str: Encoding name, lower-cased ('utf-8', 'cp1252', 'ascii', ...)
    """
    stream = sys.stderr
    if getattr(stream, 'encoding', None):
        return stream.encoding.lower()

    try:
        return locale.getpreferredencoding().lower()
    except (LookupError, ValueError):
        return 'ascii'


def is_utf8_capable() -> bool:
    """Check whether the terminal can show the symbols in ICON_MAP."""
    return detect_terminal_encoding().replace('-', '').replace('_', '') == 'utf8'


def sanitize_for_terminal(text: str) -> str:
    """Replace known symbols with ASCII equivalents on non-UTF-8 terminals.

    Args:
        text: Text potentially containing symbols from ICON_MAP

    Returns:
        str: Text safe for the current terminal
    """
    if is_utf8_capable():
        return text

    for symbol, replacement in ICON_MAP.items():
        text = text.replace(symbol, replacement)
    return text
