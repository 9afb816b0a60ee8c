"""Compiles step patterns into matchers.

A pattern is literal text mixed with `{kind}` placeholders, e.g. `pushed {num} items`. The
pattern is translated into a `parse` format string where every placeholder becomes an
anonymous typed field, `{:num}`, and the converter registered for the kind turns the
captured text into a value.

Built-in kinds:

* `int`: `42`, `-7`
* `float`: `1.5`, `.5`, `2e10`
* `num`: an integer or a decimal number, `1.2.3` looks like a number but is rejected
* `word`: any run of non-whitespace characters
* `string`: `"double"` or `'single'` quoted text, quotes stripped and escapes resolved

Literal braces are written as `{{` and `}}`.
"""
from __future__ import annotations

import re

from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

import parse

from melon.errors import PatternCompileError
from melon.text import unquote


Converter = Callable[[str], Any]
TypeDefinition = Union[Converter, Tuple[str, Converter]]

KIND_NAME = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*$')


@parse.with_pattern(r'[-+]?\d+')
def parse_int(text: str) -> int:
    return int(text)


@parse.with_pattern(r'[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?')
def parse_float(text: str) -> float:
    return float(text)


@parse.with_pattern(r'[-+]?(?:\d[\d.]*|\.\d+)(?:[eE][-+]?\d+)?')
def parse_number(text: str) -> Union[int, float]:
    try:
        return int(text)
    except ValueError:
        return float(text)


@parse.with_pattern(r'\S+')
def parse_word(text: str) -> str:
    return text


@parse.with_pattern(r'"(?:[^"\\]|\\.)*"|\'(?:[^\'\\]|\\.)*\'')
def parse_string(text: str) -> str:
    return unquote(text)


BUILTIN_TYPES: Dict[str, Converter] = {
    'int': parse_int,
    'float': parse_float,
    'num': parse_number,
    'word': parse_word,
    'string': parse_string,
}


def make_converter(name: str, definition: TypeDefinition) -> Converter:
    if not KIND_NAME.match(name):
        raise PatternCompileError(f'{{{name}}}', f'"{name}" is not a valid placeholder kind name')

    if isinstance(definition, tuple):
        regex, func = definition

        try:
            groups = re.compile(regex).groups
        except re.error as e:
            raise PatternCompileError(f'{{{name}}}', f'invalid regular expression "{regex}": {e}') from e

        @parse.with_pattern(regex, regex_group_count=groups)
        def convert(text: str) -> Any:
            return func(text)

        return convert

    if not callable(definition):
        raise PatternCompileError(f'{{{name}}}', f'converter for "{name}" is not callable')

    return definition


def translate(pattern: str, kinds: Mapping[str, Converter]) -> Tuple[str, List[str]]:
    """Translate a step pattern into a `parse` format string, returns the format and the
    placeholder kinds in the order they appear.
    """
    buffer: List[str] = []
    placeholders: List[str] = []
    index = 0

    while index < len(pattern):
        char = pattern[index]
        following = pattern[index + 1 : index + 2]

        if char == '{':
            if following == '{':
                buffer.append('{{')
                index += 2
                continue

            end = pattern.find('}', index)
            if end < 0:
                raise PatternCompileError(pattern, f'unclosed "{{" at position {index}')

            kind = pattern[index + 1 : end]

            if '{' in kind:
                raise PatternCompileError(pattern, f'unclosed "{{" at position {index}')

            if len(kind) < 1:
                raise PatternCompileError(pattern, f'empty placeholder at position {index}')

            if not KIND_NAME.match(kind):
                raise PatternCompileError(pattern, f'"{kind}" is not a valid placeholder kind name')

            if kind not in kinds:
                raise PatternCompileError(pattern, f'unknown placeholder kind "{kind}"')

            buffer.append(f'{{:{kind}}}')
            placeholders.append(kind)
            index = end + 1
        elif char == '}':
            if following == '}':
                buffer.append('}}')
                index += 2
                continue

            raise PatternCompileError(pattern, f'unbalanced "}}" at position {index}')
        else:
            buffer.append(char)
            index += 1

    return ''.join(buffer), placeholders


class Matcher:
    pattern: str
    kinds: Tuple[str, ...]
    parser: parse.Parser

    def __init__(self, pattern: str, types: Optional[Mapping[str, Converter]] = None) -> None:
        converters: Dict[str, Converter] = {**BUILTIN_TYPES, **(types or {})}
        format, placeholders = translate(pattern, converters)

        try:
            self.parser = parse.compile(
                format,
                extra_types={kind: converters[kind] for kind in placeholders},
                case_sensitive=True,
            )
        except (ValueError, re.error) as e:
            raise PatternCompileError(pattern, str(e)) from e

        self.pattern = pattern
        self.kinds = tuple(placeholders)

    def match(self, text: str) -> Optional[List[Any]]:
        """Match the complete text, returns the converted values or `None`.

        A converter that raises means the text only looked like a match, e.g. `1.2.3` for `{num}`
        or a name missing from a lookup table.
        """
        try:
            result = self.parser.parse(text)
        except Exception:
            return None

        if result is None:
            return None

        return list(result.fixed)

    def __repr__(self) -> str:
        return f'<{self.__class__.__name__} "{self.pattern}">'


def compile_pattern(pattern: str, types: Optional[Mapping[str, Converter]] = None) -> Matcher:
    return Matcher(pattern, types)
