"""Error messages -- failures inside comment blocks point at their call.

A comment block has no Python frame of its own, so every error carries
the CallSite (file, line, engine) of the call that rendered it, a
snippet of the call and its block, and, for nested renders, the chain of
inline renders that led there.

Run:
    python app.py
    NO_COLOR=1 python app.py   # plain text
"""

from coda import (
    Inline,
    InlineTemplateError,
    TemplateCache,
    TemplateCompileError,
    TemplateRenderError,
    UnknownEngineError,
    default_registry,
    inline,
)

cache = TemplateCache(default_registry())


@inline("jinja", "mako", cache=cache)
class OrderPresenter(Inline):
    def __init__(self, total, count):
        self.total = total
        self.count = count

    def page(self):
        return self.jinja()
        # <section>{{ this.average() }}</section>

    def average(self):
        return self.mako()
        # Average: ${this.total / this.count}

    def broken(self):
        return self.jinja()
        # {% for item in %}
        # {% endfor %}

    def typo(self):
        return self.render_inline("jinga")
        # {{ this.total }}


order = OrderPresenter(total=100, count=0)


def capture(render) -> InlineTemplateError:
    try:
        render()
    except InlineTemplateError as e:
        return e
    raise AssertionError("expected an inline template error")


render_error = capture(order.page)
compile_error = capture(order.broken)
engine_error = capture(order.typo)

assert isinstance(render_error, TemplateRenderError)
assert isinstance(compile_error, TemplateCompileError)
assert isinstance(engine_error, UnknownEngineError)


def main() -> None:
    for error in (render_error, compile_error, engine_error):
        print("=" * 80)
        print(error.format_compact())
        print()
        print(error)
        print()


if __name__ == "__main__":
    main()
