"""
ir.py — Intermediate Representation for lvgl-codegen

This module defines the typed model that sits between parsing and code
generation. The declaration loader fills it, the widget extractor groups it,
and the emitters only ever read it.

The IR consists of:
  - TypeSpec / Argument / Declaration: immutable native function signatures
  - Widget: an inferred LVGL object kind and the declarations it owns
  - Unsupported: the explicit "cannot generate this" outcome
  - CodegenContext: the result handed from the orchestrator to the emitters
"""

import re
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, List, Optional, Tuple


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class CodegenError(ValueError):
    """Base class for fatal generator errors."""


class ParseError(CodegenError):
    """The declaration text is not valid Rust FFI syntax."""

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        self.line = line
        self.column = column
        if line is not None:
            message = f"{message} (line {line}, column {column})"
        super().__init__(message)


# ---------------------------------------------------------------------------
# Skip outcome
# ---------------------------------------------------------------------------


class SkipReason(Enum):
    """Why a construct produced no output."""

    UNSUPPORTED_ARG_TYPE = auto()
    UNSUPPORTED_RETURN_TYPE = auto()
    BASE_WIDGET = auto()


@dataclass(frozen=True)
class Unsupported:
    """
    A local, non-fatal "this construct cannot be generated" result.

    It is returned, never raised, so callers filter it explicitly and the
    reason stays available for diagnostics.
    """

    reason: SkipReason
    item: str  # declaration or widget name
    detail: str = ""

    def __str__(self) -> str:
        text = f"{self.item}: {self.reason.name.lower()}"
        return f"{text} ({self.detail})" if self.detail else text


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------

_STR_POINTEE = re.compile(r"^\*const (?:(?:::)?[A-Za-z_][A-Za-z0-9_]*::)*c_char$")


@dataclass(frozen=True)
class TypeSpec:
    """A raw type spelling, e.g. "u16", "*mut lv_obj_t", "*const cty::c_char"."""

    spelling: str

    @property
    def is_const(self) -> bool:
        return self.spelling.startswith(("const ", "*const "))

    @property
    def is_str(self) -> bool:
        """True for a pointer to a narrow C character type."""
        return _STR_POINTEE.match(self.spelling) is not None

    def __str__(self) -> str:
        return self.spelling


@dataclass(frozen=True)
class Argument:
    """A single native function parameter."""

    name: str
    type: TypeSpec


@dataclass(frozen=True)
class Declaration:
    """A native function signature taken from an extern block."""

    name: str  # e.g. "lv_arc_set_bg_end_angle"
    args: Tuple[Argument, ...] = ()
    ret: Optional[TypeSpec] = None  # None for functions returning nothing
    doc: Optional[str] = None

    def is_method(self, handle_type: str) -> bool:
        """A method takes an object handle as its first parameter."""
        if not self.args:
            return False
        return handle_type in self.args[0].type.spelling


# ---------------------------------------------------------------------------
# Widgets
# ---------------------------------------------------------------------------


def to_pascal_case(name: str) -> str:
    """e.g. "arc" -> "Arc", "color_picker" -> "ColorPicker" """
    return "".join(part.capitalize() for part in name.split("_") if part)


@dataclass(frozen=True)
class Widget:
    """An LVGL widget inferred from a `lv_<name>_create` function."""

    name: str
    methods: Tuple[Declaration, ...] = ()

    @property
    def display_name(self) -> str:
        return to_pascal_case(self.name)


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------


@dataclass
class CodegenConfig:
    """Knobs describing the native library and the runtime crate."""

    lib_prefix: str = "lv_"
    sys_crate: str = "lvgl_sys"
    handle_type: str = "lv_obj_t"
    base_widget: str = "obj"
    str_type: str = "&cstr_core::CStr"

    def widget_prefix(self, widget_name: str) -> str:
        """The native name prefix shared by all methods of a widget."""
        return f"{self.lib_prefix}{widget_name}_"


# ---------------------------------------------------------------------------
# Context - what the orchestrator hands to the emitters
# ---------------------------------------------------------------------------


@dataclass
class CodegenContext:
    """
    Holds the loaded declarations and the extracted widgets.

    Both lists are ordered: declarations in input order, widgets by name.
    """

    config: CodegenConfig
    declarations: List[Declaration] = field(default_factory=list)
    widgets: List[Widget] = field(default_factory=list)

    def all_declarations(self) -> List[Declaration]:
        return list(self.declarations)

    def all_widgets(self) -> List[Widget]:
        return list(self.widgets)

    def get_widget(self, name: str) -> Optional[Widget]:
        """Look up a widget by its library name."""
        for widget in self.widgets:
            if widget.name == name:
                return widget
        return None

    def function_names(self) -> List[str]:
        """Names of every loaded declaration, in input order."""
        return [decl.name for decl in self.declarations]

    def methods_by_widget(self) -> Dict[str, List[str]]:
        return {w.name: [m.name for m in w.methods] for w in self.widgets}
