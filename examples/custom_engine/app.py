"""Custom engines -- register any compile function under a name.

A compile function takes the comment block's text and returns an object
with ``render(context) -> str``. Here a ``format`` engine renders
``str.format`` fields, escaping each value through MarkupSafe the same
way the built-in engines do.

Run:
    python app.py
"""

from string import Formatter

from markupsafe import escape

from coda import Inline, TemplateCache, default_registry, inline


class EscapingFormatter(Formatter):
    def format_field(self, value, format_spec):
        return str(escape(super().format_field(value, format_spec)))


class FormatTemplate:
    """A ``str.format`` template rendered against the inline namespace."""

    formatter = EscapingFormatter()

    def __init__(self, text):
        # Parse once so bad fields fail at compile time.
        list(self.formatter.parse(text))
        self.text = text

    def render(self, context):
        return self.formatter.vformat(self.text, (), context.namespace())


registry = default_registry()
registry.register("format", FormatTemplate)
cache = TemplateCache(registry)


@inline("format", "text", cache=cache)
class Invoice(Inline):
    def __init__(self, customer, total):
        self.customer = customer
        self.total = total

    def summary(self):
        return self.format()
        # {this.customer}: {this.total:>8.2f}

    def greeting(self, note):
        return self.text(note=note)
        # Dear $this.customer, $note


invoice = Invoice("Ada & Co", 1234.5)
summary = invoice.summary()
greeting = invoice.greeting("<thanks>")


def main() -> None:
    print(f"Engines: {', '.join(registry.names())}")
    print(summary)
    print(greeting)


if __name__ == "__main__":
    main()
