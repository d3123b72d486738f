"""Conditional template directive engine.

Quick usage::

    from svcgen.engine import render

    text = render(template_text, {"UseREST": True, "UseGRPC": False})
"""

from svcgen.engine.expression import ExpressionSyntaxError, evaluate, parse, tokenize
from svcgen.engine.flags import AttributeFlagSet, FlagSet, MappingFlagSet, as_flag_set
from svcgen.engine.render import (
    BlockFrame,
    DirectiveBlockProcessor,
    collapse_blank_lines,
    render,
)

__all__ = [
    "AttributeFlagSet",
    "BlockFrame",
    "DirectiveBlockProcessor",
    "ExpressionSyntaxError",
    "FlagSet",
    "MappingFlagSet",
    "as_flag_set",
    "collapse_blank_lines",
    "evaluate",
    "parse",
    "render",
    "tokenize",
]
