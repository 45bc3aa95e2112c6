"""
ir_builder.py — Build IR from parsed bindings

This module converts the tree-sitter-specific parser output (BindingsAST)
into the IR. It:
  - Drops every function outside the library prefix
  - Turns raw signatures into immutable Declaration records
  - Runs the widget extractor over them
  - Populates the CodegenContext
"""

import logging
from typing import List, Optional

from .ir import Argument, CodegenConfig, CodegenContext, Declaration, TypeSpec
from .parser import BindingsAST, ForeignFnDecl, parse_bindings
from .widgets import extract_widgets

logger = logging.getLogger(__name__)


class IRBuilder:
    """
    Converts a parsed AST to IR.

    Strategy:
      1. Keep only functions carrying the library prefix, in input order
      2. Convert parameter and return spellings to TypeSpecs
      3. Group the declarations into widgets
    """

    def __init__(self, config: Optional[CodegenConfig] = None):
        self.config = config or CodegenConfig()

    def build(self, ast: BindingsAST) -> CodegenContext:
        """
        Build the complete IR from a parsed AST.

        Returns
        -------
        CodegenContext ready for code generation
        """
        declarations = self.load_declarations(ast)
        widgets = extract_widgets(declarations, self.config)
        logger.info(
            "Loaded %d declaration(s), found %d widget(s)",
            len(declarations),
            len(widgets),
        )
        return CodegenContext(config=self.config, declarations=declarations, widgets=widgets)

    def load_declarations(self, ast: BindingsAST) -> List[Declaration]:
        """Convert every prefixed function; everything else is unrelated code."""
        declarations = []
        for func in ast.functions:
            if not func.name.startswith(self.config.lib_prefix):
                logger.debug("Ignoring %s (outside prefix %r)", func.name, self.config.lib_prefix)
                continue
            declarations.append(self._convert_function(func))
        return declarations

    @staticmethod
    def _convert_function(func: ForeignFnDecl) -> Declaration:
        return Declaration(
            name=func.name,
            args=tuple(Argument(name=p.name, type=TypeSpec(p.type)) for p in func.params),
            ret=TypeSpec(func.return_type) if func.return_type is not None else None,
            doc=func.doc,
        )


def build_context(code: str, config: Optional[CodegenConfig] = None) -> CodegenContext:
    """
    Parse bindings text and run the loader and the widget extractor.

    Raises ParseError when the text is malformed; nothing is returned then.
    """
    return IRBuilder(config).build(parse_bindings(code))
