"""Pull the trailing comment block that forms an inline template.

Given a file's text and the line of an inline call, the block is the run
of comment lines directly below the call:

    ```python
    def fix_indentation(self):
        return self.mako()
        # <div class="indented_slightly">
        #   % for i in range(2, 5):
        #     ${i} times
        #   % endfor
        # </div>
    ```

The marker and one following space are stripped from each line, then the
smallest common indentation is removed so the block can be indented to
match the surrounding code without leaking that indentation into output.

"""

from __future__ import annotations

DEFAULT_MARKER = "#"


def comment_block(lines: list[str], start_line: int, marker: str = DEFAULT_MARKER) -> list[str]:
    """Return the comment lines after 1-based ``start_line``, markers stripped.

    Scanning stops at the first blank line or the first line that does not
    begin with ``marker`` once leading whitespace is removed.
    """
    block: list[str] = []
    width = len(marker)
    for raw in lines[start_line:]:
        stripped = raw.lstrip()
        if not stripped.startswith(marker):
            break
        body = stripped[width:]
        if body.startswith(" "):
            body = body[1:]
        block.append(body)
    return block


def dedent(lines: list[str]) -> list[str]:
    """Remove the minimum leading-whitespace width from every line.

    Whitespace-only lines do not take part in the minimum; they come out
    empty.
    """
    widths = [len(line) - len(line.lstrip()) for line in lines if line.strip()]
    if not widths:
        return ["" for _ in lines]
    cut = min(widths)
    return [line[cut:] if line.strip() else "" for line in lines]


def extract(file_text: str, start_line: int, marker: str = DEFAULT_MARKER) -> str:
    """Extract the inline template body following ``start_line``.

    Args:
        file_text: Full source file text.
        start_line: 1-based line number of the inline call.
        marker: Line-comment marker (``#`` for Python sources).

    Returns:
        The template body, or ``""`` when no comment line follows the call
        (including a call on the file's last line).

    Example:
        >>> src = "x = p.jinja()\\n    #   Hello\\n    #     {{ name }}\\ny = 1\\n"
        >>> extract(src, 1)
        'Hello\\n  {{ name }}'
    """
    lines = file_text.splitlines()
    if start_line < 1 or start_line >= len(lines):
        return ""
    return "\n".join(dedent(comment_block(lines, start_line, marker)))
