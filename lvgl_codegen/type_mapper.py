"""
type_mapper.py — Map native type spellings to Rust wrapper types

This module decides how a native parameter or return type shows up in the
generated wrapper. It handles:
  - Primitive widths and bool, passed by value
  - C strings, exposed as a borrowed CStr
  - Library aggregates, exposed as a reference to their wrapper type

The table is closed: a spelling that is not registered is unsupported and
the method using it is skipped. There is deliberately no structural
fallback.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, Optional, Union

from .ir import CodegenConfig, SkipReason, TypeSpec, Unsupported


class TypeRuleKind(Enum):
    """How a mapped value crosses the wrapper boundary."""

    VALUE = auto()  # passed as-is
    STR = auto()  # borrowed C string, forwarded as a raw pointer
    REFERENCE = auto()  # borrowed wrapper of a library aggregate


@dataclass(frozen=True)
class TypeRule:
    """One entry of the mapping table."""

    rust_type: str  # e.g. "u16"; for REFERENCE the wrapper name, e.g. "Style"
    kind: TypeRuleKind = TypeRuleKind.VALUE

    @classmethod
    def value(cls, rust_type: str) -> "TypeRule":
        return cls(rust_type, TypeRuleKind.VALUE)

    @classmethod
    def string(cls) -> "TypeRule":
        return cls("", TypeRuleKind.STR)

    @classmethod
    def reference(cls, wrapper: str) -> "TypeRule":
        return cls(wrapper, TypeRuleKind.REFERENCE)


@dataclass(frozen=True)
class RustTypeInfo:
    """
    How a native type appears in generated code.

    Fields
    ------
    rust_type : the type written in the wrapper signature
    kind      : the rule kind it came from
    """

    rust_type: str
    kind: TypeRuleKind = TypeRuleKind.VALUE

    @property
    def is_str(self) -> bool:
        return self.kind is TypeRuleKind.STR

    def value_usage(self, ident: str) -> str:
        """The expression forwarding `ident` to the native call."""
        if self.is_str:
            return f"{ident}.as_ptr()"
        return ident


# ---------------------------------------------------------------------------
# The mapping tables
# ---------------------------------------------------------------------------
# Keys are normalised spellings (see parser.normalize_spelling).

DEFAULT_ARG_RULES: Dict[str, TypeRule] = {
    "u16": TypeRule.value("u16"),
    "i32": TypeRule.value("i32"),
    "u8": TypeRule.value("u8"),
    "bool": TypeRule.value("bool"),
    "*const cty::c_char": TypeRule.string(),
    "*const c_char": TypeRule.string(),
    "*const ::std::os::raw::c_char": TypeRule.string(),
    "*const core::ffi::c_char": TypeRule.string(),
    "*const ::core::ffi::c_char": TypeRule.string(),
}

# Return values are never wrapped, so only plain scalars qualify.
RETURN_TYPES = ("bool", "u32", "i32", "u16", "i16", "u8", "i8")


class TypeMapper:
    """
    Maps native spellings to Rust wrapper types.

    Starts from DEFAULT_ARG_RULES; further spellings are added with
    `register`.
    """

    def __init__(self, config: Optional[CodegenConfig] = None):
        self.config = config or CodegenConfig()
        self._rules: Dict[str, TypeRule] = dict(DEFAULT_ARG_RULES)

    def register(self, spelling: str, rule: TypeRule) -> None:
        """Add or replace the mapping for an exact spelling."""
        self._rules[spelling] = rule

    def rule_for(self, spelling: str) -> Optional[TypeRule]:
        return self._rules.get(spelling)

    def map_arg_type(self, typ: TypeSpec) -> Union[RustTypeInfo, Unsupported]:
        """
        Map a parameter type.

        Returns Unsupported when the spelling has no table entry.
        """
        rule = self._rules.get(typ.spelling)
        if rule is None:
            return Unsupported(SkipReason.UNSUPPORTED_ARG_TYPE, typ.spelling)

        if rule.kind is TypeRuleKind.STR:
            return RustTypeInfo(self.config.str_type, TypeRuleKind.STR)
        if rule.kind is TypeRuleKind.REFERENCE:
            return RustTypeInfo(f"&{rule.rust_type}", TypeRuleKind.REFERENCE)
        return RustTypeInfo(rule.rust_type)

    def map_return_type(
        self, typ: Optional[TypeSpec]
    ) -> Union[RustTypeInfo, Unsupported, None]:
        """
        Map a return type.

        None means the native function returns nothing.
        """
        if typ is None:
            return None
        if typ.spelling in RETURN_TYPES:
            return RustTypeInfo(typ.spelling)
        return Unsupported(SkipReason.UNSUPPORTED_RETURN_TYPE, typ.spelling)
