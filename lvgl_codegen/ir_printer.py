"""
ir_printer.py — Pretty-print IR for debugging

This utility provides human-readable output of the IR structure.
Useful for:
  - Seeing which functions were grouped under which widget
  - Finding out why a method did not show up in the generated code
  - Implementing the --emit-ir flag
"""

from typing import List, Optional

from .codegen import CodeGenerator
from .ir import CodegenContext, Declaration


class IRPrinter:
    """
    Pretty-prints IR to text format.

    Output format:
      Declarations:
        lv_arc_set_bg_end_angle(arc: *mut lv_obj_t, end: u16)

      Widgets:
        Arc (arc): 3 method(s)
          + set_bg_end_angle
          - lv_arc_get_angles: unsupported_return_type (*mut lv_obj_t)
    """

    def __init__(self, ctx: CodegenContext, generator: Optional[CodeGenerator] = None):
        self.ctx = ctx
        self.generator = generator or CodeGenerator(ctx)

    def print_all(self) -> str:
        """Print entire IR to string."""
        lines: List[str] = []

        lines.append("=" * 70)
        lines.append(f"IR for prefix {self.ctx.config.lib_prefix!r}")
        lines.append("=" * 70)
        lines.append("")

        lines.append("Declarations:")
        lines.append("-" * 70)
        for decl in self.ctx.all_declarations():
            lines.append(f"  {self._format_declaration(decl)}")
        lines.append("")

        lines.append("Widgets:")
        lines.append("-" * 70)
        units = self.generator.generate_units()
        for unit in units:
            lines.append(
                f"  {unit.display_name} ({unit.widget.name}): "
                f"{len(unit.widget.methods)} method(s)"
            )
            for method in unit.methods:
                lines.append(f"    + {method.name}")
            for skipped in unit.skipped:
                lines.append(f"    - {skipped}")
        for skipped in self.generator.skipped_widgets:
            lines.append(f"  (skipped) {skipped}")
        if not units and not self.generator.skipped_widgets:
            lines.append("  (none)")
        lines.append("")

        return "\n".join(lines)

    @staticmethod
    def _format_declaration(decl: Declaration) -> str:
        params = ", ".join(f"{a.name}: {a.type}" for a in decl.args)
        ret = f" -> {decl.ret}" if decl.ret is not None else ""
        return f"{decl.name}({params}){ret}"


def print_ir(ctx: CodegenContext) -> str:
    """Convenience function to print IR context."""
    printer = IRPrinter(ctx)
    return printer.print_all()
