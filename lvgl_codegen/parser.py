"""
parser.py — Extract foreign function declarations from bindgen output.

WHY TREE-SITTER:
The input is Rust source produced by bindgen: `extern "C" { ... }` blocks
mixed with structs, type aliases, constants and doc attributes.  Rather than
matching signatures with regexes we parse the whole file with the
tree-sitter Rust grammar, so a malformed file is rejected instead of being
half-read.

The parser produces a list of `ForeignFnDecl` dataclasses that the rest of
the pipeline consumes.  It can also dump them as JSON for debugging.
"""

import json
import re
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional

import tree_sitter_rust as ts_rust
from tree_sitter import Language, Node, Parser

from .ir import ParseError

RUST_LANGUAGE = Language(ts_rust.language())


# ---------------------------------------------------------------------------
# Data classes — the structured representation of what we parsed
# ---------------------------------------------------------------------------


@dataclass
class ForeignParam:
    """A single typed parameter."""

    name: str  # e.g. "arc"
    type: str  # normalised spelling, e.g. "*mut lv_obj_t"


@dataclass
class ForeignFnDecl:
    """A function signature found inside an extern block."""

    name: str  # e.g. "lv_arc_set_bg_end_angle"
    params: list[ForeignParam] = field(default_factory=list)
    return_type: Optional[str] = None  # None when the function returns nothing
    doc: Optional[str] = None
    line: Optional[int] = None


@dataclass
class BindingsAST:
    """The full parsed result for one bindings file."""

    source_path: Optional[str] = None
    functions: list[ForeignFnDecl] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_DOC_ATTR = re.compile(r'^#\[\s*doc\s*=\s*"(.*)"\s*\]$', re.DOTALL)
_ESCAPE = re.compile(r"\\(.)", re.DOTALL)
_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "0": "\0"}


def normalize_spelling(text: str) -> str:
    """
    Canonical spelling of a type, independent of source formatting.

    e.g. "* const  cty :: c_char" -> "*const cty::c_char"
    """
    text = re.sub(r"\s+", " ", text.strip())
    text = re.sub(r"\s*::\s*", "::", text)
    return re.sub(r"\*\s*(const|mut)\b\s*", r"*\1 ", text)


def _unescape(literal: str) -> str:
    return _ESCAPE.sub(lambda m: _ESCAPES.get(m.group(1), m.group(1)), literal)


def _doc_line(attr_text: str) -> Optional[str]:
    """Return the text of a `#[doc = "..."]` attribute, or None."""
    m = _DOC_ATTR.match(attr_text.strip())
    if m is None:
        return None
    line = _unescape(m.group(1))
    # bindgen keeps the space that followed `/**` or `*` in the C comment
    return line[1:] if line.startswith(" ") else line


def _first_error(node: Node) -> Optional[Node]:
    if node.type == "ERROR" or node.is_missing:
        return node
    if not node.has_error:
        return None
    for child in node.children:
        found = _first_error(child)
        if found is not None:
            return found
    return node


class _Source:
    """Source bytes plus the node text accessor."""

    def __init__(self, code: str):
        self.data = code.encode("utf-8")

    def text(self, node: Node) -> str:
        return self.data[node.start_byte : node.end_byte].decode("utf-8")


# ---------------------------------------------------------------------------
# Parsing logic
# ---------------------------------------------------------------------------


def _foreign_blocks(root: Node) -> Iterator[Node]:
    """Yield the declaration list of every top-level extern block."""
    for item in root.children:
        if item.type != "foreign_mod_item":
            continue
        for child in item.children:
            if child.type == "declaration_list":
                yield child


def _convert_params(src: _Source, params_node: Node) -> list[ForeignParam]:
    params = []
    for i, p in enumerate(params_node.named_children):
        # Only typed, named parameters matter; `...` and `self` are dropped.
        if p.type != "parameter":
            continue
        pattern = p.child_by_field_name("pattern")
        typ = p.child_by_field_name("type")
        if pattern is None or typ is None:
            continue
        name = src.text(pattern)
        if name == "_":
            name = f"arg{i}"
        params.append(ForeignParam(name=name, type=normalize_spelling(src.text(typ))))
    return params


def _convert_function(src: _Source, node: Node, doc_lines: List[str]) -> ForeignFnDecl:
    name_node = node.child_by_field_name("name")
    params_node = node.child_by_field_name("parameters")
    ret_node = node.child_by_field_name("return_type")

    return_type = None
    if ret_node is not None:
        return_type = normalize_spelling(src.text(ret_node))
        if return_type == "()":
            return_type = None

    return ForeignFnDecl(
        name=src.text(name_node),
        params=_convert_params(src, params_node) if params_node is not None else [],
        return_type=return_type,
        doc="\n".join(doc_lines) if doc_lines else None,
        line=node.start_point[0] + 1,
    )


def parse_bindings(code: str, source_path: Optional[str] = None) -> BindingsAST:
    """
    Parse bindgen output and return its structured AST.

    Parameters
    ----------
    code        : the Rust source text
    source_path : where the text came from, kept for diagnostics only

    Raises
    ------
    ParseError if the text is not syntactically valid Rust.
    """
    src = _Source(code)
    tree = Parser(RUST_LANGUAGE).parse(src.data)
    root = tree.root_node

    error = _first_error(root)
    if error is not None:
        row, column = error.start_point
        what = f"missing {error.type}" if error.is_missing else "syntax error"
        raise ParseError(f"Invalid declaration syntax: {what}", row + 1, column + 1)

    ast = BindingsAST(source_path=source_path)

    for block in _foreign_blocks(root):
        doc_lines: List[str] = []
        for child in block.named_children:
            if child.type == "attribute_item":
                line = _doc_line(src.text(child))
                if line is not None:
                    doc_lines.append(line)
            elif child.type == "function_signature_item":
                ast.functions.append(_convert_function(src, child, doc_lines))
                doc_lines = []
            elif child.type not in ("line_comment", "block_comment"):
                # statics and types inside the block don't carry our docs over
                doc_lines = []

    return ast


def parse_bindings_file(path: str | Path) -> BindingsAST:
    """Read and parse a bindings file."""
    path = Path(path).resolve()
    if not path.exists():
        raise FileNotFoundError(f"Bindings not found: {path}")
    return parse_bindings(path.read_text(encoding="utf-8"), source_path=str(path))


# ---------------------------------------------------------------------------
# JSON serialisation (intermediate file for debugging)
# ---------------------------------------------------------------------------


def ast_to_json(ast: BindingsAST, pretty: bool = True) -> str:
    """Serialize the parsed AST to JSON."""
    return json.dumps(asdict(ast), indent=2 if pretty else None)


def dump_ast_json(ast: BindingsAST, out_path: str | Path) -> Path:
    """Write the AST JSON to a file and return the path."""
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(ast_to_json(ast))
    return out_path
