"""
__main__.py — CLI entry point for lvgl-codegen.

Usage:
    python -m lvgl_codegen path/to/bindings.rs [-o output_dir]

This is the single command that does everything:
  1. Parses the bindgen output with tree-sitter
  2. Dumps the intermediate JSON AST (for debugging)
  3. Loads the declarations and infers the widgets
  4. Generates the wrapper code for every widget
  5. Writes the generated .rs file
"""

import argparse
import logging
import sys
from pathlib import Path

from .codegen import CodeGenerator, write_output
from .ir import CodegenConfig, ParseError
from .ir_builder import IRBuilder
from .ir_printer import IRPrinter
from .parser import dump_ast_json, parse_bindings_file


def main(argv: list[str] | None = None) -> int:
    defaults = CodegenConfig()
    parser = argparse.ArgumentParser(
        prog="lvgl-codegen",
        description="Generate safe Rust widget wrappers from LVGL bindgen output.",
    )
    parser.add_argument(
        "bindings",
        type=Path,
        help="Path to the bindgen generated Rust file (.rs)",
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path("generated"),
        help="Output directory (default: generated/)",
    )
    parser.add_argument(
        "--prefix",
        default=defaults.lib_prefix,
        help=f"Native function prefix (default: {defaults.lib_prefix})",
    )
    parser.add_argument(
        "--sys-crate",
        default=defaults.sys_crate,
        help=f"Crate holding the raw bindings (default: {defaults.sys_crate})",
    )
    parser.add_argument(
        "--handle-type",
        default=defaults.handle_type,
        help=f"Object handle type marking methods (default: {defaults.handle_type})",
    )
    parser.add_argument(
        "--emit-ir",
        action="store_true",
        help="Also write a human readable dump of the IR (ir.txt)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log every skipped declaration",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s: [%(name)s] %(message)s",
    )

    bindings: Path = args.bindings.resolve()
    out_dir: Path = args.output
    config = CodegenConfig(
        lib_prefix=args.prefix,
        sys_crate=args.sys_crate,
        handle_type=args.handle_type,
    )

    # Step 1: PARSE
    print(f"[1/5] Parsing {bindings.name} ...")
    try:
        ast = parse_bindings_file(bindings)
    except (ParseError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(f"\tFound {len(ast.functions)} function(s)")

    # Step 2: Dump JSON AST
    json_path = dump_ast_json(ast, out_dir / "ast.json")
    print(f"[2/5] AST written to {json_path}")

    # Step 3: BUILD IR
    print(f"[3/5] Building IR ...")
    ctx = IRBuilder(config).build(ast)
    print(
        f"\tLoaded {len(ctx.all_declarations())} declaration(s), "
        f"found {len(ctx.all_widgets())} widget(s)"
    )

    # Step 4: CODEGEN
    print(f"[4/5] Generating code ...")
    codegen = CodeGenerator(ctx)
    units = codegen.generate_units()
    skipped = [s for unit in units for s in unit.skipped]
    for s in skipped:
        print(f"\tWarning: Skipped {s}")
    generated = sum(len(unit.methods) for unit in units)
    print(f"\tGenerated {generated} method(s) for {len(units)} widget(s)")

    if not units:
        print("Nothing to generate. Exiting.")
        return 1

    # Step 5: WRITE
    rs_path = write_output(codegen.generate_module(), out_dir / "widgets.rs")
    print(f"[5/5] Wrappers written to {rs_path}")

    if args.emit_ir:
        ir_path = write_output(IRPrinter(ctx, codegen).print_all(), out_dir / "ir.txt")
        print(f"\tIR dump → {ir_path}")

    print()
    print(f"Done! Generated {len(units)} widget(s).")
    print(f"Next steps:")
    print(f" 1. Copy {rs_path} into the lvgl crate (src/widgets/generated.rs)")
    print(f" 2. Run `cargo build`")

    return 0


if __name__ == "__main__":
    sys.exit(main())
