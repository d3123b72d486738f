"""Conditional block rendering for template files.

Templates mark optional spans with bracket directives::

    services:
      api:
        image: project_name
    [if UseWorkers]
      worker:
        image: project_name-worker
    [else]
      # no background workers
    [endif]

``[if EXPR]`` opens a block whose body is kept only when ``EXPR`` (see
``expression``) is true; ``[else]`` flips to the alternative branch and
``[endif]`` closes the block.  Blocks nest.  Directive keywords are
case-insensitive.

The processor works character by character so directives may also sit inline
(``port: [if UseGRPC]9090[else]8080[endif]``).  A line whose only occupant was
a directive disappears completely, including its indentation and line break.
Finally, runs of blank lines left behind by removed blocks are collapsed to a
single blank line.

Rendering never raises.  Unknown flags are false, stray ``[else]``/``[endif]``
directives are ignored and an ``[if`` without a closing bracket is copied
through literally.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .expression import evaluate
from .flags import FlagSet, as_flag_set

_HORIZONTAL_WS = " \t\r"
_DIRECTIVE_PAD = " \t"


@dataclass
class BlockFrame:
    """One open ``[if]`` block on the processor stack."""

    condition: str
    is_true: bool
    in_else: bool = False

    @property
    def permits_output(self) -> bool:
        # if-branch needs a true condition, else-branch a false one
        return self.is_true != self.in_else


class DirectiveBlockProcessor:
    """Streams template text and drops everything outside active branches.

    A processor holds the flag set it evaluates against; each ``render`` call
    starts from an empty block stack, so one instance can render any number
    of files.
    """

    def __init__(self, flags: Any = None) -> None:
        self.flags: FlagSet = as_flag_set(flags)
        self._reset()

    def _reset(self) -> None:
        self.stack: list[BlockFrame] = []
        self._visible = True
        self._out: list[str] = []
        self._pending_ws: list[str] = []
        self._trim = False
        self._line_has_content = False
        self._line_had_directive = False

    # -- Public API --------------------------------------------------------

    def render(self, content: str) -> str:
        """Return *content* with directives resolved and removed."""
        self._reset()
        i = 0
        n = len(content)
        while i < n:
            if content[i] == "[":
                end = self._consume_directive(content, i)
                if end is not None:
                    i = end
                    continue
            self._emit(content[i])
            i += 1
        self._finish_line()
        return collapse_blank_lines("".join(self._out))

    # -- Directives --------------------------------------------------------

    def _consume_directive(self, content: str, start: int) -> int | None:
        """Apply the directive opening at *start*.

        Returns the index just past the closing bracket, or ``None`` when the
        text at *start* is not a complete directive.
        """
        n = len(content)
        i = _skip(content, start + 1, _DIRECTIVE_PAD)
        word_end = i
        while word_end < n and content[word_end].isalpha():
            word_end += 1
        keyword = content[i:word_end].lower()

        if keyword == "if":
            if word_end < n and content[word_end] not in _DIRECTIVE_PAD + "]":
                return None
            close = content.find("]", word_end)
            if close == -1:
                return None
            condition = content[word_end:close].strip()
            self._push(condition)
            self._after_directive()
            return close + 1

        if keyword in ("else", "endif"):
            close = _skip(content, word_end, _DIRECTIVE_PAD)
            if close >= n or content[close] != "]":
                return None
            if keyword == "else":
                self._enter_else()
            else:
                self._pop()
            self._after_directive()
            return close + 1

        return None

    def _push(self, condition: str) -> None:
        self.stack.append(BlockFrame(condition, evaluate(condition, self.flags)))
        self._update_visibility()

    def _enter_else(self) -> None:
        if self.stack:
            self.stack[-1].in_else = True
            self._update_visibility()

    def _pop(self) -> None:
        if self.stack:
            self.stack.pop()
            self._update_visibility()

    def _update_visibility(self) -> None:
        self._visible = all(frame.permits_output for frame in self.stack)

    def _after_directive(self) -> None:
        self._trim = True
        self._line_had_directive = True

    # -- Output ------------------------------------------------------------

    def _emit(self, ch: str) -> None:
        if not self._visible:
            return
        if self._trim and ch in _HORIZONTAL_WS:
            return
        self._trim = False

        if ch == "\n":
            keep = self._keep_line
            self._finish_line()
            if keep:
                self._out.append("\n")
            self._line_has_content = False
            self._line_had_directive = False
            return

        if ch in _HORIZONTAL_WS and not self._line_has_content:
            # Indentation is held back until we know the line survives.
            self._pending_ws.append(ch)
            return

        if ch not in _HORIZONTAL_WS:
            self._line_has_content = True
        self._flush_pending()
        self._out.append(ch)

    @property
    def _keep_line(self) -> bool:
        return self._line_has_content or not self._line_had_directive

    def _finish_line(self) -> None:
        if self._keep_line:
            self._flush_pending()
        else:
            self._pending_ws.clear()

    def _flush_pending(self) -> None:
        if self._pending_ws:
            self._out.extend(self._pending_ws)
            self._pending_ws.clear()


def _skip(text: str, i: int, chars: str) -> int:
    while i < len(text) and text[i] in chars:
        i += 1
    return i


def collapse_blank_lines(text: str) -> str:
    """Collapse every run of blank (whitespace-only) lines to one blank line.

    Idempotent: ``collapse_blank_lines(collapse_blank_lines(t))`` equals
    ``collapse_blank_lines(t)``.
    """
    kept: list[str] = []
    prev_blank = False
    for line in text.split("\n"):
        blank = not line.strip()
        if blank and prev_blank:
            continue
        kept.append(line)
        prev_blank = blank
    return "\n".join(kept)


def render(content: str, flags: Any = None) -> str:
    """Resolve ``[if]``/``[else]``/``[endif]`` blocks in *content*.

    *flags* may be a ``FlagSet``, a mapping or a record object.  Never raises.
    """
    return DirectiveBlockProcessor(flags).render(content)
