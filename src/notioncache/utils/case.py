"""Word splitting and case conversion for slugs and property names.

:func:`kebab_case` turns a title into a URL slug fragment and
:func:`camel_case` turns a property display name into its generated name.
Both split text into words the same way:

* any character that is neither a letter nor a digit separates words;
* a lower-case letter followed by an upper-case one starts a new word
  (``fooBar`` -> ``foo``, ``Bar``);
* a run of capitals followed by a lower-case letter keeps its last capital
  for the next word (``HTTPServer`` -> ``HTTP``, ``Server``);
* letters and digits never share a word (``v2beta`` -> ``v``, ``2``,
  ``beta``).

Accented Latin letters are folded to their base letter first.  Letters
without case (CJK, for instance) are kept and behave like lower-case.
"""

from __future__ import annotations

import unicodedata


def _deburr(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def _char_kind(ch: str) -> str | None:
    if ch.isdigit():
        return "digit"
    if ch.isalpha():
        return "upper" if ch.isupper() else "lower"
    return None


def words(text: str) -> list[str]:
    """Split *text* into words.

    Examples
    --------
    >>> words("Hello, World!")
    ['Hello', 'World']
    >>> words("parseHTTPResponse2")
    ['parse', 'HTTP', 'Response', '2']
    """
    result: list[str] = []
    current: list[str] = []
    prev: str | None = None

    def flush() -> None:
        if current:
            result.append("".join(current))
            current.clear()

    for ch in _deburr(text):
        kind = _char_kind(ch)
        if kind is None:
            flush()
            prev = None
            continue
        if current:
            if (kind == "digit") != (prev == "digit"):
                flush()
            elif kind == "upper" and prev == "lower":
                flush()
            elif kind == "lower" and prev == "upper" and len(current) > 1:
                last = current.pop()
                flush()
                current.append(last)
        current.append(ch)
        prev = kind
    flush()
    return result


def kebab_case(text: str) -> str:
    """Lower-case words joined with hyphens.

    >>> kebab_case("My First Post!")
    'my-first-post'
    """
    return "-".join(word.lower() for word in words(text))


def camel_case(text: str) -> str:
    """First word lower-case, following words capitalised, no separators.

    >>> camel_case("Published at")
    'publishedAt'
    >>> camel_case("HTTP status")
    'httpStatus'
    """
    parts = words(text)
    if not parts:
        return ""
    head, *tail = parts
    return head.lower() + "".join(w[:1].upper() + w[1:].lower() for w in tail)
