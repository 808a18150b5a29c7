"""
string_utils.py - Escaping for text embedded in generated JavaScript

Two literal contexts are supported:
- single-quoted string literals ('...') used for metadata fields
- backtick template literals (`...`) used for rendered post HTML

escape_* output, wrapped in the matching delimiters and evaluated as a
JavaScript literal, yields the original string. unescape_literal is the
inverse used by tests and tooling.
"""

import re

# Characters not allowed raw inside a single-quoted string literal, plus
# both quotes and the backtick so output is safe in any quote style.
_SINGLE_RE = re.compile("[\"'\\\\`\n\r\u2028\u2029]")

_SINGLE_ESCAPES = {
    '"': '\\"',
    "'": "\\'",
    "\\": "\\\\",
    "`": "\\`",
    "\n": "\\n",
    "\r": "\\r",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}

# Template literals keep raw newlines; CR is escaped because the parser
# normalizes CR and CRLF to LF.
_TEMPLATE_RE = re.compile(r"\\|`|\$\{|\r")

_TEMPLATE_ESCAPES = {
    "\\": "\\\\",
    "`": "\\`",
    "${": "\\${",
    "\r": "\\r",
}

_UNESCAPE_RE = re.compile(r"\\(u[0-9a-fA-F]{4}|.)", re.DOTALL)

_SIMPLE_UNESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "b": "\b",
    "f": "\f",
    "v": "\v",
    "0": "\0",
}


def escape_single(value) -> str:
    """Escape value for use inside a '...' string literal."""
    return _SINGLE_RE.sub(lambda m: _SINGLE_ESCAPES[m.group(0)], str(value))


def escape_template(value) -> str:
    """Escape value for use inside a `...` template literal."""
    return _TEMPLATE_RE.sub(lambda m: _TEMPLATE_ESCAPES[m.group(0)], str(value))


def unescape_literal(body: str) -> str:
    """Decode the escape sequences of a string or template literal body."""
    def replace(match: re.Match) -> str:
        seq = match.group(1)
        if len(seq) == 5 and seq[0] == "u":
            return chr(int(seq[1:], 16))
        return _SIMPLE_UNESCAPES.get(seq, seq)

    return _UNESCAPE_RE.sub(replace, body)


def single_literal(value) -> str:
    return f"'{escape_single(value)}'"


def template_literal(value) -> str:
    return f"`{escape_template(value)}`"
