# shaderlab/shaders/scanner.py
"""
Interface scanner.

Recovers uniform and vertex-attribute declarations from GLSL source without a
grammar. Each line is inspected on its own; a line that looks like a
declaration but does not parse is skipped rather than reported. Only three
shapes are recognized:

    uniform vec3 _lightDirection[4];
    layout(location = 1) in vec3 _meshNormal;
    attribute vec3 _meshVertex;

Tightening these rules changes which shaders transpile, so keep them loose.
"""

from __future__ import annotations

import re
from typing import Iterator, List, Optional, Tuple

from shaderlab.shaders.types import AttributeDescriptor, ScanResult, UniformDescriptor

UNIFORM_KEYWORD = "uniform"
LAYOUT_KEYWORD = "layout"
ATTRIBUTE_KEYWORD = "attribute"

INTERPOLATION_QUALIFIERS = frozenset(
    {"flat", "smooth", "noperspective", "centroid", "sample", "invariant"}
)
PRECISION_QUALIFIERS = frozenset({"lowp", "mediump", "highp"})

_UNIFORM_SEPARATORS = re.compile(r"[\s;=\[]")
_DECLARATION_SEPARATORS = re.compile(r"[\s;]")
_NAME_SEPARATORS = re.compile(r"[\s;,=\[]")
_UNSIGNED = re.compile(r"[0-9]+")
_LEADING_WORD = re.compile(r"[A-Za-z_]\w*")
_INLINE_BLOCK_COMMENT = re.compile(r"/\*.*?\*/")


def starts_with_keyword(text: str, keyword: str) -> bool:
    """True when `text` begins with `keyword` as a whole word."""
    return re.match(rf"{keyword}\b", text) is not None


def strip_comments(line: str) -> str:
    """Remove `//` and single-line `/* */` comments from one line."""
    line = _INLINE_BLOCK_COMMENT.sub(" ", line)
    cut = line.find("//")
    if cut != -1:
        line = line[:cut]
    return line


def code_lines(source: str) -> Iterator[str]:
    """
    Trimmed lines of `source` with comments removed, including `/* ... */`
    blocks spanning several lines.
    """
    in_block_comment = False
    for raw_line in source.split("\n"):
        line = raw_line
        if in_block_comment:
            end = line.find("*/")
            if end == -1:
                continue
            line = line[end + 2 :]
            in_block_comment = False

        line = strip_comments(line)
        start = line.find("/*")
        if start != -1:
            in_block_comment = True
            line = line[:start]
        yield line.strip()


def after_layout(trimmed: str) -> Optional[str]:
    """Text following `layout(...)`, or None if the parenthesis is unclosed."""
    end = trimmed.find(")")
    if end == -1:
        return None
    return trimmed[end + 1 :].strip()


def interface_qualifier(trimmed: str) -> Tuple[Optional[str], str]:
    """
    Split an `in`/`out` declaration into its storage qualifier and the text
    after it, skipping leading interpolation qualifiers:

        "flat out int id;" -> ("out", " int id;")

    Returns (None, trimmed) for anything else.
    """
    rest = trimmed
    while True:
        match = _LEADING_WORD.match(rest)
        if match is None:
            return None, trimmed
        word = match.group()
        if word in ("in", "out"):
            return word, rest[match.end() :]
        if word not in INTERPOLATION_QUALIFIERS:
            return None, trimmed
        rest = rest[match.end() :].lstrip()


def declared_name(declaration: str) -> Optional[str]:
    """
    Variable name of a declaration body such as `highp vec4 color; // rgba`:
    the token after the type, ignoring comments and precision qualifiers.
    """
    tokens = [
        t
        for t in _NAME_SEPARATORS.split(strip_comments(declaration))
        if t and t not in PRECISION_QUALIFIERS
    ]
    if len(tokens) < 2:
        return None
    return tokens[1]


def _tokens(text: str, separators: re.Pattern) -> List[str]:
    return [t for t in separators.split(text) if t]


def parse_uniform(line: str) -> Optional[UniformDescriptor]:
    """Parse a trimmed `uniform ...` line."""
    tokens = _tokens(line[len(UNIFORM_KEYWORD) :], _UNIFORM_SEPARATORS)
    if len(tokens) < 2:
        return None

    declared_type, name = tokens[0], tokens[1]
    array_length = 0
    if len(tokens) > 2 and tokens[2].endswith("]"):
        bound = tokens[2][:-1].strip()
        # A symbolic bound (e.g. a #define) is treated as non-array.
        if _UNSIGNED.fullmatch(bound):
            array_length = int(bound)

    return UniformDescriptor(
        name=name, declared_type=declared_type, array_length=array_length
    )


def parse_layout_input(line: str) -> Optional[AttributeDescriptor]:
    """Parse a trimmed `layout(location = N) in <type> <name>;` line."""
    start = line.find("=")
    end = line.find(")")
    if start <= len(LAYOUT_KEYWORD) or end <= start:
        return None

    location_text = line[start + 1 : end].strip()
    if not _UNSIGNED.fullmatch(location_text):
        return None

    tokens = _tokens(line[end + 1 :], _DECLARATION_SEPARATORS)
    if "in" not in tokens:
        return None
    index = tokens.index("in")
    if len(tokens) < index + 3:
        return None

    return AttributeDescriptor(
        name=tokens[index + 2],
        declared_type=tokens[index + 1],
        location=int(location_text),
    )


def parse_attribute(line: str) -> Optional[AttributeDescriptor]:
    """Parse a trimmed legacy `attribute <type> <name>;` line."""
    tokens = _tokens(line[len(ATTRIBUTE_KEYWORD) :], _DECLARATION_SEPARATORS)
    if len(tokens) < 2:
        return None
    return AttributeDescriptor(name=tokens[1], declared_type=tokens[0])


def scan(source: str) -> ScanResult:
    """
    Scan shader source for uniforms and vertex attributes.

    Results are in order of first appearance. A name declared again later
    (for instance in both arms of an #ifdef) keeps its first declaration.
    Commented-out declarations are ignored.
    """
    uniforms: List[UniformDescriptor] = []
    attributes: List[AttributeDescriptor] = []

    if not source or not source.strip():
        return ScanResult(uniforms, attributes)

    uniform_names = set()
    attribute_names = set()

    for line in code_lines(source):
        if starts_with_keyword(line, UNIFORM_KEYWORD):
            uniform = parse_uniform(line)
            if uniform is not None and uniform.name not in uniform_names:
                uniform_names.add(uniform.name)
                uniforms.append(uniform)
            continue

        if starts_with_keyword(line, LAYOUT_KEYWORD):
            attribute = parse_layout_input(line)
        elif starts_with_keyword(line, ATTRIBUTE_KEYWORD):
            attribute = parse_attribute(line)
        else:
            continue

        if attribute is not None and attribute.name not in attribute_names:
            attribute_names.add(attribute.name)
            attributes.append(attribute)

    return ScanResult(uniforms, attributes)


def declared_outputs(source: str) -> List[str]:
    """Names of `out` variables, including `layout(...) out` ones, in order."""
    names: List[str] = []
    for line in code_lines(source):
        if starts_with_keyword(line, LAYOUT_KEYWORD):
            line = after_layout(line)
            if line is None:
                continue
        qualifier, declaration = interface_qualifier(line)
        if qualifier != "out":
            continue
        name = declared_name(declaration)
        if name is not None and name not in names:
            names.append(name)
    return names
