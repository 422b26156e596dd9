"""
Call-expression scanner for JavaScript/TypeScript sources.

This module finds the call sites of a translation function in source text and
turns their arguments into small syntax descriptors. It is not a full parser:
it only understands enough of the expression grammar to tell literals apart
from values computed at runtime.

Usage Examples:
    Resolve the local alias of an import:
        >>> resolve_alias("import { $translate as t } from 'qwik-speak';", "$translate")
        't'

    Scan the call sites:
        >>> code = "import { $translate as t } from 'qwik-speak';\\nt('app.title');"
        >>> [call.arguments for call in scan_calls(code, "$translate")]
        [(Literal(value='app.title'),)]
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import NamedTuple

from ..utils.core.exceptions import ScanError

logger = logging.getLogger(__name__)

IDENTIFIER_PATTERN = r"[A-Za-z_$][\w$]*"

_TOKEN_RE = re.compile(
    r"""
    (?P<space>\s+)
    | (?P<comment>//[^\n]*|/\*.*?\*/)
    | (?P<number>(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?)
    | (?P<name>[A-Za-z_$][\w$]*)
    | (?P<punct>\.\.\.|\?\.|=>|[()\[\]{},:;.?+\-*/%<>=!&|^~@#])
    """,
    re.VERBOSE | re.DOTALL,
)

_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f", "v": "\v", "0": "\0"}
_OPENERS = {"(": ")", "[": "]", "{": "}"}
_CLOSERS = {")", "]", "}"}
_KEYWORD_LITERALS: dict[str, object] = {
    "true": True,
    "false": False,
    "null": None,
    "undefined": None,
}


@dataclass(frozen=True)
class Literal:
    """A string, number, boolean or null literal."""

    value: str | int | float | bool | None


@dataclass(frozen=True)
class Identifier:
    """A reference whose value is only known at runtime."""

    name: str


@dataclass(frozen=True)
class ArrayExpression:
    """An array literal."""

    elements: tuple[Argument, ...]


@dataclass(frozen=True)
class Property:
    """A single ``key: value`` entry of an object literal."""

    key: str
    value: Argument


@dataclass(frozen=True)
class ObjectExpression:
    """An object literal."""

    properties: tuple[Property, ...]


@dataclass(frozen=True)
class CallExpression:
    """A call site: the callee as written and its argument descriptors."""

    callee: str
    arguments: tuple[Argument, ...]
    line: int = field(default=0, compare=False)


Argument = Literal | Identifier | ArrayExpression | ObjectExpression | CallExpression


class Token(NamedTuple):
    """A lexical token with its span in the source text."""

    kind: str
    value: object
    start: int
    end: int


def resolve_alias(code: str, function_name: str) -> str:
    """
    Return the local name under which a function is imported.

    ``import { $translate as t }`` binds ``$translate`` to ``t``; without a
    rename the function name itself is used.

    Args:
        code: Source text
        function_name: Exported name of the function

    Returns:
        Local name to look for at call sites
    """
    match = re.search(
        rf"(?<![\w$]){re.escape(function_name)}\s+as\s+({IDENTIFIER_PATTERN})", code
    )
    return match.group(1) if match else function_name


def strip_type_arguments(code: str, alias: str) -> str:
    """Remove generic type arguments, e.g. ``t<string>(`` becomes ``t(``."""
    pattern = re.compile(rf"(?<![\w$.'\"`]){re.escape(alias)}<[^()]*?>\(")
    return pattern.sub(lambda _: f"{alias}(", code)


class CallScanner:
    """
    Lazily extract the call sites of one function from source text.

    Call sites that cannot be parsed are skipped and counted in ``skipped``.
    """

    def __init__(self, code: str, function_name: str) -> None:
        """
        Initialize the scanner.

        Args:
            code: Source text
            function_name: Exported name of the function (e.g. ``$translate``)
        """
        self.function_name: str = function_name
        self.alias: str = resolve_alias(code, function_name)
        self.code: str = strip_type_arguments(code, self.alias)
        self.skipped: int = 0

    def scan(self) -> Iterator[CallExpression]:
        """
        Yield every call of the alias in source order.

        Files that never mention the function name yield nothing, so unrelated
        functions sharing the alias' name are not picked up.
        """
        if self.function_name not in self.code:
            return

        # The alias must be followed directly by the parenthesis and not be
        # part of a word or quoted text
        call_re = re.compile(rf"(?<![\w$.'\"`]){re.escape(self.alias)}\(")
        for match in call_re.finditer(self.code):
            open_paren = match.end() - 1
            line = self.code.count("\n", 0, match.start()) + 1
            try:
                tokens = self._tokenize_call(open_paren)
                arguments = _build_arguments(self.code, tokens[1:-1])
            except ScanError as e:
                self.skipped += 1
                logger.debug(f"Skipping call of {self.alias} at line {line}: {e}")
                continue
            yield CallExpression(callee=self.alias, arguments=arguments, line=line)

    def _tokenize_call(self, open_paren: int) -> list[Token]:
        """Tokenize from an opening parenthesis up to its matching close."""
        code = self.code
        pos = open_paren
        tokens: list[Token] = []
        stack: list[str] = []

        while pos < len(code):
            char = code[pos]
            if char in "'\"`":
                value, end = _read_string(code, pos)
                tokens.append(Token("string", value, pos, end))
                pos = end
                continue

            match = _TOKEN_RE.match(code, pos)
            if match is None:
                raise ScanError(f"Unexpected character {char!r}", context=pos)
            kind = match.lastgroup or ""
            text = match.group()
            pos = match.end()

            if kind in ("space", "comment"):
                continue
            if kind == "number":
                tokens.append(Token(kind, _to_number(text), match.start(), pos))
                continue
            tokens.append(Token(kind, text, match.start(), pos))

            if kind != "punct":
                continue
            if text in _OPENERS:
                stack.append(_OPENERS[text])
            elif text in _CLOSERS:
                if not stack or stack.pop() != text:
                    raise ScanError(f"Unbalanced {text!r}", context=match.start())
                if not stack:
                    return tokens

        raise ScanError("Unterminated call expression", context=open_paren)


def scan_calls(code: str, function_name: str) -> Iterator[CallExpression]:
    """Yield the call sites of ``function_name`` in ``code``."""
    return CallScanner(code, function_name).scan()


def _read_string(code: str, start: int) -> tuple[str, int]:
    """
    Read a quoted string or template literal starting at ``start``.

    Template literals keep their ``${...}`` placeholders verbatim.

    Returns:
        The decoded value and the index just past the closing quote
    """
    quote = code[start]
    pos = start + 1
    chars: list[str] = []

    while pos < len(code):
        char = code[pos]
        if char == "\\":
            if pos + 1 >= len(code):
                break
            escaped = code[pos + 1]
            chars.append(_ESCAPES.get(escaped, escaped))
            pos += 2
            continue
        if char == quote:
            return "".join(chars), pos + 1
        if char == "\n" and quote != "`":
            raise ScanError("Unterminated string literal", context=start)
        if quote == "`" and code.startswith("${", pos):
            end = _skip_placeholder(code, pos)
            chars.append(code[pos:end])
            pos = end
            continue
        chars.append(char)
        pos += 1

    raise ScanError("Unterminated string literal", context=start)


def _skip_placeholder(code: str, start: int) -> int:
    """Return the index just past the ``}`` closing a ``${`` placeholder."""
    depth = 0
    pos = start + 1
    while pos < len(code):
        char = code[pos]
        if char in "'\"`":
            _, pos = _read_string(code, pos)
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return pos + 1
        pos += 1
    raise ScanError("Unterminated template placeholder", context=start)


def _to_number(text: str) -> int | float:
    try:
        return int(text)
    except ValueError:
        return float(text)


def _matching(tokens: list[Token], index: int) -> int:
    """Index of the token closing the bracket opened at ``index``."""
    depth = 0
    for i in range(index, len(tokens)):
        token = tokens[i]
        if token.kind != "punct":
            continue
        if token.value in _OPENERS:
            depth += 1
        elif token.value in _CLOSERS:
            depth -= 1
            if depth == 0:
                return i
    raise ScanError("Unbalanced brackets", context=tokens[index].start)


def _split_top_level(tokens: list[Token]) -> list[list[Token]]:
    """Split a token list on the commas that are not nested in brackets."""
    parts: list[list[Token]] = [[]]
    depth = 0
    for token in tokens:
        if token.kind == "punct":
            if token.value in _OPENERS:
                depth += 1
            elif token.value in _CLOSERS:
                depth -= 1
            elif token.value == "," and depth == 0:
                parts.append([])
                continue
        parts[-1].append(token)
    return parts


def _build_arguments(code: str, tokens: list[Token]) -> tuple[Argument, ...]:
    arguments: list[Argument] = []
    for part in _split_top_level(tokens):
        argument = _build(code, part)
        if argument is not None:
            arguments.append(argument)
    return tuple(arguments)


def _raw(code: str, tokens: list[Token]) -> str:
    return code[tokens[0].start : tokens[-1].end]


def _is_punct(token: Token, value: str) -> bool:
    return token.kind == "punct" and token.value == value


def _build(code: str, tokens: list[Token]) -> Argument | None:
    """Turn the tokens of one argument into its descriptor."""
    if not tokens:
        return None

    first = tokens[0]
    if len(tokens) == 1:
        match first.kind:
            case "string":
                return Literal(str(first.value))
            case "number":
                return Literal(first.value)  # pyright: ignore[reportArgumentType]
            case "name" if first.value in _KEYWORD_LITERALS:
                return Literal(_KEYWORD_LITERALS[str(first.value)])  # pyright: ignore[reportArgumentType]
            case "name":
                return Identifier(str(first.value))
            case _:
                return Identifier(_raw(code, tokens))

    if first.kind == "punct" and first.value in ("[", "{") and _matching(tokens, 0) == len(tokens) - 1:
        inner = tokens[1:-1]
        if first.value == "[":
            return ArrayExpression(_build_arguments(code, inner))
        return ObjectExpression(_build_properties(code, inner))

    if first.kind == "name":
        return _build_chain(code, tokens)

    return Identifier(_raw(code, tokens))


def _build_chain(code: str, tokens: list[Token]) -> Argument:
    """Handle ``a.b.c`` member chains and ``a.b(...)`` calls."""
    i = 1
    while i < len(tokens):
        token = tokens[i]
        if (_is_punct(token, ".") or _is_punct(token, "?.")) and i + 1 < len(tokens) and tokens[i + 1].kind == "name":
            i += 2
        elif _is_punct(token, "("):
            close = _matching(tokens, i)
            if close == len(tokens) - 1:
                return CallExpression(
                    callee=_raw(code, tokens[:i]),
                    arguments=_build_arguments(code, tokens[i + 1 : close]),
                    line=code.count("\n", 0, token.start) + 1,
                )
            i = close + 1
        elif _is_punct(token, "["):
            i = _matching(tokens, i) + 1
        else:
            break
    # A member chain or any compound expression: computed at runtime
    return Identifier(_raw(code, tokens))


def _build_properties(code: str, tokens: list[Token]) -> tuple[Property, ...]:
    properties: list[Property] = []
    for part in _split_top_level(tokens):
        if not part:
            continue
        key_token = part[0]
        if len(part) >= 3 and _is_punct(part[1], ":") and key_token.kind in ("name", "string", "number"):
            value = _build(code, part[2:])
            if value is not None:
                properties.append(Property(str(key_token.value), value))
        elif len(part) == 1 and key_token.kind == "name":
            # Shorthand property: { count }
            properties.append(Property(str(key_token.value), Identifier(str(key_token.value))))
        else:
            raw = _raw(code, part)
            properties.append(Property(raw, Identifier(raw)))
    return tuple(properties)
