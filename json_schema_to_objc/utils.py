"""
Utility functions for JSON Schema to Objective-C generator.
"""

import re

# Objective-C string literal escapes
_ESCAPES = {"\\": "\\\\", '"': '\\"', "\n": "\\n", "\t": "\\t"}
_ESCAPE_PATTERN = re.compile(r'[\\"\n\t]')


def capitalize_first(text: str) -> str:
    """Uppercase the first character, keeping the rest unchanged.

    Examples:
        "items" -> "Items"
        "relatedUsers" -> "RelatedUsers"
        "" -> ""
    """
    if not text:
        return ""
    return text[0].upper() + text[1:]


def objc_string_literal(text: str) -> str:
    """Quote text as an Objective-C NSString literal.

    Examples:
        'name' -> '@"name"'
        'say "hi"' -> '@"say \\"hi\\""'
    """
    escaped = _ESCAPE_PATTERN.sub(lambda m: _ESCAPES[m.group(0)], text)
    return f'@"{escaped}"'
