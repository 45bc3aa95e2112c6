"""
Tests for the bindgen output parser.
"""

import pytest

from lvgl_codegen.ir import ParseError
from lvgl_codegen.parser import (
    ast_to_json,
    normalize_spelling,
    parse_bindings,
    parse_bindings_file,
)


def test_can_load_bindgen_fns():
    code = """
extern "C" {
    #[doc = " Return with the screen of an object"]
    #[doc = " @param obj pointer to an object"]
    #[doc = " @return pointer to a screen"]
    pub fn lv_obj_get_screen(obj: *const lv_obj_t) -> *mut lv_obj_t;
}
"""
    ast = parse_bindings(code)

    assert len(ast.functions) == 1
    ffn = ast.functions[0]
    assert ffn.name == "lv_obj_get_screen"
    assert ffn.params[0].name == "obj"
    assert ffn.params[0].type == "*const lv_obj_t"
    assert ffn.return_type == "*mut lv_obj_t"
    assert ffn.doc == (
        "Return with the screen of an object\n"
        "@param obj pointer to an object\n"
        "@return pointer to a screen"
    )


def test_keeps_declaration_order_across_blocks():
    code = """
extern "C" {
    pub fn lv_label_create(parent: *mut lv_obj_t) -> *mut lv_obj_t;
}
extern "C" {
    pub fn lv_label_set_text(label: *mut lv_obj_t, text: *const cty::c_char);
    pub fn lv_label_get_recolor(label: *const lv_obj_t) -> bool;
}
"""
    ast = parse_bindings(code)

    assert [f.name for f in ast.functions] == [
        "lv_label_create",
        "lv_label_set_text",
        "lv_label_get_recolor",
    ]
    set_text = ast.functions[1]
    assert [(p.name, p.type) for p in set_text.params] == [
        ("label", "*mut lv_obj_t"),
        ("text", "*const cty::c_char"),
    ]
    assert set_text.return_type is None


def test_ignores_items_outside_extern_blocks():
    code = """
pub type lv_coord_t = i16;
#[repr(C)]
#[derive(Debug, Copy, Clone)]
pub struct _lv_obj_t {
    _unused: [u8; 0],
}
pub type lv_obj_t = _lv_obj_t;
pub const LV_COLOR_DEPTH: u32 = 16;
extern "C" {
    pub fn lv_obj_del(obj: *mut lv_obj_t);
}
"""
    ast = parse_bindings(code)

    assert [f.name for f in ast.functions] == ["lv_obj_del"]


def test_drops_variadic_parameters():
    code = """
extern "C" {
    pub fn lv_label_set_text_fmt(label: *mut lv_obj_t, fmt: *const cty::c_char, ...);
}
"""
    ast = parse_bindings(code)

    assert [p.name for p in ast.functions[0].params] == ["label", "fmt"]


def test_unit_return_counts_as_none():
    ast = parse_bindings('extern "C" { pub fn lv_init() -> (); }')

    assert ast.functions[0].return_type is None
    assert ast.functions[0].params == []


def test_doc_attribute_escapes():
    code = r"""
extern "C" {
    #[doc = " Say \"hi\""]
    pub fn lv_obj_clean(obj: *mut lv_obj_t);
}
"""
    ast = parse_bindings(code)

    assert ast.functions[0].doc == 'Say "hi"'


def test_docs_do_not_leak_to_next_function():
    code = """
extern "C" {
    #[doc = " Documented"]
    pub fn lv_obj_clean(obj: *mut lv_obj_t);
    pub fn lv_obj_invalidate(obj: *const lv_obj_t);
}
"""
    ast = parse_bindings(code)

    assert ast.functions[0].doc == "Documented"
    assert ast.functions[1].doc is None


def test_malformed_input_raises():
    code = """
extern "C" {
    pub fn lv_broken(obj: *mut lv_obj_t;
}
"""
    with pytest.raises(ParseError) as excinfo:
        parse_bindings(code)

    assert excinfo.value.line is not None


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        parse_bindings_file(tmp_path / "nope.rs")


def test_parse_file_records_path(tmp_path):
    path = tmp_path / "bindings.rs"
    path.write_text('extern "C" { pub fn lv_init(); }\n')

    ast = parse_bindings_file(path)

    assert ast.source_path == str(path.resolve())
    assert '"name": "lv_init"' in ast_to_json(ast)


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("u16", "u16"),
        ("* const cty :: c_char", "*const cty::c_char"),
        ("*mut   lv_obj_t", "*mut lv_obj_t"),
        ("*const ::std::os::raw::c_char", "*const ::std::os::raw::c_char"),
        ("*mut *const lv_obj_t", "*mut *const lv_obj_t"),
    ],
)
def test_normalize_spelling(raw, expected):
    assert normalize_spelling(raw) == expected
