"""
codegen.py — Emit Rust wrapper code for the extracted widgets

For every widget this produces a `define_object!` invocation plus an impl
block holding one safe method per native function that could be mapped.
Anything that cannot be mapped is returned as `Unsupported` and left out,
without affecting its siblings.

The generated code relies on a hand-written runtime crate providing
`define_object!`, `NativeObject`, `Widget`, `Obj`, `LvResult`, `LvError`
and `display::get_scr_act`.
"""

import logging
import textwrap
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from .ir import (
    Argument,
    CodegenConfig,
    CodegenContext,
    Declaration,
    SkipReason,
    Unsupported,
    Widget,
)
from .type_mapper import RustTypeInfo, TypeMapper

logger = logging.getLogger(__name__)

INDENT = "    "

HEADER = "// This file was generated by lvgl-codegen. Do not edit.\n"

RUST_KEYWORDS = frozenset(
    """
    as async await break const continue crate dyn else enum extern false fn for
    if impl in let loop match mod move mut pub ref return self Self static
    struct super trait true type unsafe use where while abstract become box do
    final macro override priv try typeof unsized virtual yield
    """.split()
)

# These cannot be written as raw identifiers either.
_NON_RAW_KEYWORDS = frozenset(("crate", "self", "Self", "super"))


def rust_ident(name: str) -> str:
    """Make a native name usable as a Rust identifier."""
    if name in _NON_RAW_KEYWORDS:
        return f"{name}_"
    if name in RUST_KEYWORDS:
        return f"r#{name}"
    return name


def _doc_comment(doc: Optional[str]) -> List[str]:
    if not doc:
        return []
    return [f"/// {line}" if line else "///" for line in doc.split("\n")]


# ---------------------------------------------------------------------------
# Generated fragments
# ---------------------------------------------------------------------------


@dataclass
class GeneratedMethod:
    """One emitted method (or the create/new pair for a constructor)."""

    name: str  # e.g. "set_bg_end_angle"
    native_name: str  # e.g. "lv_arc_set_bg_end_angle"
    code: str  # unindented Rust source
    is_constructor: bool = False


@dataclass
class WidgetUnit:
    """The generated code for a single widget."""

    widget: Widget
    code: str
    methods: List[GeneratedMethod] = field(default_factory=list)
    skipped: List[Unsupported] = field(default_factory=list)

    @property
    def display_name(self) -> str:
        return self.widget.display_name


# ---------------------------------------------------------------------------
# Emitters
# ---------------------------------------------------------------------------


class MethodEmitter:
    """
    Turns one declaration owned by a widget into a wrapper method.

    Constructors (`lv_<widget>_create`) get a dedicated template; every
    other declaration is forwarded through the type mapper.
    """

    def __init__(self, config: CodegenConfig, type_mapper: TypeMapper):
        self.config = config
        self.type_mapper = type_mapper

    def method_name(self, widget: Widget, decl: Declaration) -> str:
        return decl.name.removeprefix(self.config.widget_prefix(widget.name))

    def emit(self, widget: Widget, decl: Declaration) -> Union[GeneratedMethod, Unsupported]:
        name = self.method_name(widget, decl)
        if name == "create":
            return self._emit_constructor(decl)

        ret = self.type_mapper.map_return_type(decl.ret)
        if isinstance(ret, Unsupported):
            return Unsupported(ret.reason, decl.name, ret.item)

        # Every argument but the receiver has to map
        params: List[str] = []
        call_args: List[str] = [self._receiver_handle(decl.args[0])]
        for arg in decl.args[1:]:
            info = self.type_mapper.map_arg_type(arg.type)
            if isinstance(info, Unsupported):
                return Unsupported(info.reason, decl.name, f"{arg.name}: {info.item}")
            ident = rust_ident(arg.name)
            params.append(f"{ident}: {info.rust_type}")
            call_args.append(info.value_usage(ident))

        return GeneratedMethod(
            name=name,
            native_name=decl.name,
            code=self._render_method(decl, name, params, call_args, ret),
        )

    @staticmethod
    def _receiver(arg: Argument) -> str:
        return "&self" if arg.type.is_const else "&mut self"

    @staticmethod
    def _receiver_handle(arg: Argument) -> str:
        if arg.type.is_const:
            return "self.core.raw().as_ptr()"
        return "self.core.raw().as_mut()"

    def _render_method(
        self,
        decl: Declaration,
        name: str,
        params: List[str],
        call_args: List[str],
        ret: Optional[RustTypeInfo],
    ) -> str:
        signature = ", ".join([self._receiver(decl.args[0])] + params)
        returns = f" -> {ret.rust_type}" if ret is not None else ""
        call = f"{self.config.sys_crate}::{decl.name}({', '.join(call_args)})"
        if ret is None:
            # the unit result of the block is the method's result
            call += ";"

        lines = _doc_comment(decl.doc)
        lines += [
            f"pub fn {rust_ident(name)}({signature}){returns} {{",
            f"{INDENT}unsafe {{",
            f"{INDENT * 2}{call}",
            f"{INDENT}}}",
            "}",
        ]
        return "\n".join(lines)

    def _emit_constructor(self, decl: Declaration) -> GeneratedMethod:
        native = f"{self.config.sys_crate}::{decl.name}"
        lines = _doc_comment(decl.doc)
        lines += [
            "pub fn create(parent: &mut impl crate::NativeObject) -> crate::LvResult<Self> {",
            f"{INDENT}unsafe {{",
            f"{INDENT * 2}let ptr = {native}(parent.raw().as_mut());",
            f"{INDENT * 2}if let Some(raw) = core::ptr::NonNull::new(ptr) {{",
            f"{INDENT * 3}let core = <crate::Obj as crate::Widget>::from_raw(raw).unwrap();",
            f"{INDENT * 3}Ok(Self {{ core }})",
            f"{INDENT * 2}}} else {{",
            f"{INDENT * 3}Err(crate::LvError::InvalidReference)",
            f"{INDENT * 2}}}",
            f"{INDENT}}}",
            "}",
            "",
            "pub fn new() -> crate::LvResult<Self> {",
            f"{INDENT}let mut parent = crate::display::get_scr_act()?;",
            f"{INDENT}Self::create(&mut parent)",
            "}",
        ]
        return GeneratedMethod(
            name="create",
            native_name=decl.name,
            code="\n".join(lines),
            is_constructor=True,
        )


class WidgetEmitter:
    """Emits the type declaration and impl block of a widget."""

    def __init__(self, config: CodegenConfig, type_mapper: TypeMapper):
        self.config = config
        self.methods = MethodEmitter(config, type_mapper)

    def emit(self, widget: Widget) -> Union[WidgetUnit, Unsupported]:
        # The generic object is hand-written in the runtime crate
        if widget.name == self.config.base_widget:
            return Unsupported(SkipReason.BASE_WIDGET, widget.name)

        unit = WidgetUnit(widget=widget, code="")
        for decl in widget.methods:
            result = self.methods.emit(widget, decl)
            if isinstance(result, Unsupported):
                logger.debug("Skipping %s", result)
                unit.skipped.append(result)
            else:
                unit.methods.append(result)

        unit.code = self._render(widget.display_name, unit.methods)
        return unit

    @staticmethod
    def _render(type_name: str, methods: List[GeneratedMethod]) -> str:
        head = f"define_object!({type_name});\n\nimpl<'a> {type_name}<'a> {{"
        if not methods:
            return head + "}\n"
        body = "\n\n".join(textwrap.indent(m.code, INDENT) for m in methods)
        return f"{head}\n{body}\n}}\n"


# ---------------------------------------------------------------------------
# Module generation
# ---------------------------------------------------------------------------


class CodeGenerator:
    """Generates the wrapper module for every widget of a context."""

    def __init__(self, ctx: CodegenContext, type_mapper: Optional[TypeMapper] = None):
        self.ctx = ctx
        self.type_mapper = type_mapper or TypeMapper(ctx.config)
        self.emitter = WidgetEmitter(ctx.config, self.type_mapper)
        self.skipped_widgets: List[Unsupported] = []

    def generate_units(self) -> List[WidgetUnit]:
        """One unit per emitted widget, in widget order."""
        units = []
        self.skipped_widgets = []
        for widget in self.ctx.all_widgets():
            result = self.emitter.emit(widget)
            if isinstance(result, Unsupported):
                logger.debug("Skipping widget %s", result)
                self.skipped_widgets.append(result)
                continue
            units.append(result)
        return units

    def generate_module(self) -> str:
        """The complete generated Rust source."""
        units = self.generate_units()
        return "\n".join([HEADER] + [unit.code for unit in units])


def write_output(code: str, out_path: str | Path) -> Path:
    """Write generated code to a file and return the path."""
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(code)
    return out_path
