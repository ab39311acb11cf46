"""Per-call-site caching -- compile once, render many times.

Each inline call is keyed by (file, line, engine). The first render reads
the file and compiles the block; later renders only ``stat`` the file and
reuse the compiled template. ``reset()`` drops everything, and a cache
built with ``auto_reload=False`` skips the ``stat`` entirely.

Run:
    python app.py
"""

from coda import Inline, TemplateCache, default_registry, inline

cache = TemplateCache(default_registry())


@inline("jinja", "mako", cache=cache)
class Dashboard(Inline):
    def __init__(self, title, stats):
        self.title = title
        self.stats = stats

    def header(self):
        return self.jinja()
        # <h1>{{ this.title }}</h1>

    def table(self):
        return self.mako()
        # <table>
        # % for key, value in sorted(this.stats.items()):
        #   <tr><td>${key}</td><td>${value}</td></tr>
        # % endfor
        # </table>

    def page(self):
        return self.jinja()
        # {{ this.header() }}
        # {{ this.table() }}


first = Dashboard("Dashboard", {"users": 1200, "revenue": "$45K"})
second = Dashboard("Dashboard", {"users": 9999, "revenue": "$99K"})

first_output = first.page()
second_output = second.page()
stats_after_two = cache.stats()

cache.reset()
third_output = first.page()
stats_after_reset = cache.stats()

# Production: no stat per render.
production_cache = TemplateCache(default_registry(), auto_reload=False)


def main() -> None:
    print("=== First render ===")
    print(first_output)
    print(f"\n{stats_after_two['compiles']} compiles, {stats_after_two['hits']} hits")

    print("\n=== Second presenter (cached templates, new data) ===")
    print(second_output)

    print("\n=== After reset ===")
    print(f"{stats_after_reset['compiles']} compiles, {len(cache)} entries")


if __name__ == "__main__":
    main()
