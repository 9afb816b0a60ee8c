from __future__ import annotations

import re
import unicodedata

from typing import Mapping


ESCAPED = re.compile(r'\\(.)', re.DOTALL)
PLACEHOLDER = re.compile(r'<([^<>]+)>')


def normalize_text(text: str) -> str:
    text = unicodedata.normalize('NFKD', str(text)).encode('ascii', 'ignore').decode('ascii')
    text = re.sub(r'[^\w\s-]', '', text)

    return re.sub(r'[-\s]+', '-', text).strip('-_')


def unquote(text: str) -> str:
    """Strip the surrounding quote characters and resolve backslash escapes, `\\"` becomes `"`
    and `\\\\` becomes `\\`.
    """
    if len(text) >= 2 and text[0] == text[-1] and text[0] in '"\'':
        text = text[1:-1]

    return ESCAPED.sub(lambda match: match.group(1), text)


def substitute_placeholders(text: str, values: Mapping[str, str]) -> str:
    """Replace every `<name>` with the value of `name`, in a single pass so values are never
    substituted again. Unknown names are left as is.
    """
    return PLACEHOLDER.sub(lambda match: values.get(match.group(1), match.group(0)), text)
