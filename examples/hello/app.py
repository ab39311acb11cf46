"""Hello World -- the simplest coda example.

A method renders the comment block right below its own call. No templates
directory, no template strings.

Run:
    python app.py
"""

from coda import Inline, TemplateCache, default_registry, inline

cache = TemplateCache(default_registry())


@inline("jinja", cache=cache)
class Greeter(Inline):
    def hello(self, name):
        return self.jinja(name=name)
        # Hello, {{ name }}!


greeter = Greeter()

output = greeter.hello("World")


def main() -> None:
    print(output)
    print()

    # Multiple renders, one compile
    for name in ["Coda", "Jinja", "<Python>"]:
        print(greeter.hello(name))


if __name__ == "__main__":
    main()
