"""Shared hypothesis strategies for Coda property-based testing.

Provides strategies that generate inputs at two levels:

- **Blocks**: Template body lines and the indentation they are embedded with
- **Text engine**: Placeholder names and values for the ``$`` engine

These are building blocks -- individual test modules compose them into
property-specific strategies.
"""

from __future__ import annotations

from hypothesis import strategies as st

# ---------------------------------------------------------------------------
# Block strategies
# ---------------------------------------------------------------------------

# One line of template body: no line breaks, no trailing whitespace, and
# never whitespace-only (those lines come out empty after dedent).
body_line = (
    st.text(
        # Cc covers \r, \n and the other characters splitlines() breaks on.
        alphabet=st.characters(blacklist_categories=("Cs", "Zl", "Zp", "Cc")),
        min_size=1,
        max_size=60,
    )
    .map(str.rstrip)
    .filter(lambda s: s.strip() != "")
)

# Relative indentation of a line within its block.
relative_indent = st.integers(min_value=0, max_value=8)

# Body lines with their relative indentation; at least one line sits at
# indentation 0 so the block's own common indentation is zero.
indented_body = st.lists(
    st.tuples(relative_indent, body_line.map(str.lstrip).filter(bool)),
    min_size=1,
    max_size=12,
).map(lambda rows: [(0, rows[0][1]), *rows[1:]])

# Indentation of the comment markers in the host file.
code_indent = st.integers(min_value=0, max_value=16)

# Extra padding between the marker and the template text.
comment_padding = st.integers(min_value=0, max_value=6)

# Python source lines that are not comments and not blank.
code_line = st.sampled_from(
    [
        "x = 1",
        "return value",
        "def helper(self):",
        "pass",
        "print('#')",
        "y = {'a': 1}",
    ]
)

# ---------------------------------------------------------------------------
# Text engine strategies
# ---------------------------------------------------------------------------

# Placeholder names the text engine accepts, minus the caller's own names.
placeholder_name = st.from_regex(r"[a-z_][a-z0-9_]{0,12}", fullmatch=True).filter(
    lambda name: name not in ("this", "self")
)

# Values substituted into text templates, including markup-significant text.
placeholder_value = st.one_of(
    st.integers(min_value=-10_000, max_value=10_000),
    st.text(
        alphabet=st.characters(blacklist_categories=("Cs",)),
        max_size=40,
    ),
    st.sampled_from(["<b>", "&amp;", '"quoted"', "'single'", "<script>"]),
)

# Literal text that never forms a placeholder.
dollar_free_text = st.text(
    alphabet=st.characters(blacklist_categories=("Cs",), blacklist_characters="$"),
    max_size=60,
)
