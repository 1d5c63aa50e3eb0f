"""
String literal handling
Single-quoted strings are raw; double-quoted strings process escapes
"""

_ESCAPES = {
    "n": "\n",
    "r": "\r",
    "t": "\t",
    "\\": "\\",
    '"': '"',
}


def unquote(token_str: str) -> str:
    """Strip the quotes from a STRING token and process escapes."""
    quote, body = token_str[0], token_str[1:-1]
    if quote == "'":
        return body

    out = []
    chars = iter(body)
    for ch in chars:
        if ch != "\\":
            out.append(ch)
            continue
        escaped = next(chars, "")
        out.append(_ESCAPES.get(escaped, "\\" + escaped))
    return "".join(out)
