"""
Compound selector matching

Supported subset: `tag`, `#id`, `.class`, `[attr]`, `[attr="value"]`, and
comma-separated selector lists. No combinators.
"""

import re
from typing import Callable, List, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from host.element import Element

Predicate = Callable[["Element"], bool]

_TOKEN_RE = re.compile(
    r'''
    (?P<tag>^[a-zA-Z][\w-]*|^\*)
    |\#(?P<id>[\w-]+)
    |\.(?P<cls>[\w-]+)
    |\[\s*(?P<attr>[\w:-]+)\s*(?:=\s*(?:"(?P<dq>[^"]*)"|'(?P<sq>[^']*)'|(?P<bare>[^\]\s]+))\s*)?\]
    ''',
    re.VERBOSE,
)


def _compile_compound(selector: str) -> Predicate:
    pos = 0
    checks: List[Tuple[str, str, object]] = []
    while pos < len(selector):
        match = _TOKEN_RE.match(selector, pos)
        if not match or match.end() == pos:
            raise ValueError(f"Unsupported selector: {selector!r}")
        if match.group("tag"):
            if match.group("tag") != "*":
                checks.append(("tag", match.group("tag").lower(), None))
        elif match.group("id"):
            checks.append(("id", match.group("id"), None))
        elif match.group("cls"):
            checks.append(("cls", match.group("cls"), None))
        else:
            value = match.group("dq")
            if value is None:
                value = match.group("sq")
            if value is None:
                value = match.group("bare")
            checks.append(("attr", match.group("attr"), value))
        pos = match.end()

    def predicate(element: "Element") -> bool:
        for kind, name, value in checks:
            if kind == "tag" and element.tag_name != name:
                return False
            if kind == "id" and element.get_attribute("id") != name:
                return False
            if kind == "cls" and not element.class_list.contains(name):
                return False
            if kind == "attr":
                if not element.has_attribute(name):
                    return False
                if value is not None and element.get_attribute(name) != value:
                    return False
        return True

    return predicate


def _split_list(selector: str) -> List[str]:
    """Split at commas outside brackets and quotes"""
    parts, current = [], []
    bracket, quote = 0, None
    for ch in selector:
        if quote:
            if ch == quote:
                quote = None
        elif ch in "\"'":
            quote = ch
        elif ch == "[":
            bracket += 1
        elif ch == "]":
            bracket -= 1
        elif ch == "," and bracket == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(ch)
    parts.append("".join(current))
    return parts


def compile_selector(selector: str) -> Predicate:
    """
    Compile a selector list into an element predicate

    Raises:
        ValueError: empty selector or unsupported syntax
    """
    parts = [p.strip() for p in _split_list(selector)]
    if not selector.strip() or not all(parts):
        raise ValueError(f"Empty selector: {selector!r}")
    predicates = [_compile_compound(p) for p in parts]
    return lambda element: any(p(element) for p in predicates)
