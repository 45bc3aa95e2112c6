"""
widgets.py — Infer LVGL widgets from function naming conventions

A widget exists wherever the library exposes `lv_<name>_create(parent)`.
Every other function named `lv_<name>_...` whose first parameter is an
object handle becomes one of that widget's methods.
"""

import logging
import re
from typing import Dict, List, Optional, Sequence

from .ir import CodegenConfig, Declaration, Widget

logger = logging.getLogger(__name__)


def get_widget_names(declarations: Sequence[Declaration], prefix: str) -> List[str]:
    """
    Names of the widgets created by single-argument `<prefix><name>_create`.

    A create function taking more arguments never defines a widget.
    Names are unique and kept in first-seen order.
    """
    create_func = re.compile(rf"^{re.escape(prefix)}([^_]+)_create$")

    names: List[str] = []
    for decl in declarations:
        m = create_func.match(decl.name)
        if m is None or len(decl.args) != 1:
            continue
        if m.group(1) not in names:
            names.append(m.group(1))
    return names


def find_owner(
    decl: Declaration, widget_names: Sequence[str], config: CodegenConfig
) -> Optional[str]:
    """
    The widget a declaration belongs to, or None.

    When several widget prefixes match, the longest widget name wins so that
    every declaration has at most one owner.
    """
    if not decl.is_method(config.handle_type):
        return None

    owner = None
    for name in widget_names:
        if decl.name.startswith(config.widget_prefix(name)):
            if owner is None or len(name) > len(owner):
                owner = name
    return owner


def extract_widgets(declarations: Sequence[Declaration], config: CodegenConfig) -> List[Widget]:
    """
    Group declarations into widgets.

    Widgets come out sorted by name and methods keep their input order, so
    the same input always yields the same grouping.
    """
    widget_names = get_widget_names(declarations, config.lib_prefix)

    grouped: Dict[str, List[Declaration]] = {name: [] for name in widget_names}
    for decl in declarations:
        owner = find_owner(decl, widget_names, config)
        if owner is not None:
            grouped[owner].append(decl)

    widgets = [Widget(name=name, methods=tuple(grouped[name])) for name in sorted(grouped)]
    for widget in widgets:
        logger.debug("Widget %s: %d method(s)", widget.name, len(widget.methods))
    return widgets
