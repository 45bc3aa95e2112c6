"""
End-to-end tests for `python -m lvgl_codegen`.
"""

from pathlib import Path

from lvgl_codegen.__main__ import main

TESTS_DIR = Path(__file__).resolve().parent
SUBSET = TESTS_DIR / "bindings" / "lvgl_subset.rs"


def test_cli_writes_wrappers(tmp_path, capsys):
    out_dir = tmp_path / "generated"

    rc = main([str(SUBSET), "-o", str(out_dir), "--emit-ir"])

    assert rc == 0
    expected = (TESTS_DIR / "expected" / "lvgl_subset" / "widgets.rs").read_text()
    assert (out_dir / "widgets.rs").read_text() == expected
    assert (out_dir / "ast.json").exists()

    ir_dump = (out_dir / "ir.txt").read_text()
    assert "Arc (arc): 4 method(s)" in ir_dump
    assert "- lv_arc_get_angles: unsupported_return_type (*mut lv_obj_t)" in ir_dump
    assert "(skipped) obj: base_widget" in ir_dump

    stdout = capsys.readouterr().out
    assert "Warning: Skipped lv_label_set_long_mode: unsupported_arg_type" in stdout


def test_cli_parse_failure_writes_nothing(tmp_path, capsys):
    bad = tmp_path / "bad.rs"
    bad.write_text('extern "C" { pub fn lv_arc_create(parent: *mut lv_obj_t; }\n')
    out_dir = tmp_path / "generated"

    rc = main([str(bad), "-o", str(out_dir)])

    assert rc == 1
    assert not out_dir.exists()
    assert "Invalid declaration syntax" in capsys.readouterr().err


def test_cli_nothing_to_generate(tmp_path):
    only_obj = tmp_path / "obj.rs"
    only_obj.write_text(
        'extern "C" { pub fn lv_obj_create(parent: *mut lv_obj_t) -> *mut lv_obj_t; }\n'
    )

    rc = main([str(only_obj), "-o", str(tmp_path / "generated")])

    assert rc == 1
    assert not (tmp_path / "generated" / "widgets.rs").exists()
