"""Concurrent rendering -- 8 threads sharing one cache.

All threads render the same call site at once. The cache compiles it
exactly once; every other thread waits on that call site's lock and then
reuses the result. Each render builds its own context, so there is no
cross-contamination between simultaneous renders.

Run:
    python app.py
"""

import threading
from concurrent.futures import ThreadPoolExecutor

from coda import Inline, TemplateCache, default_registry, inline

cache = TemplateCache(default_registry())


@inline("jinja", cache=cache)
class PagePresenter(Inline):
    def __init__(self, page_id, title, tags):
        self.page_id = page_id
        self.title = title
        self.tags = tags

    def render(self):
        return self.jinja()
        # <article id="page-{{ this.page_id }}">
        #   <h1>{{ this.title }}</h1>
        #   <ul>
        #   {%- for tag in this.tags %}
        #     <li>{{ tag }}</li>
        #   {%- endfor %}
        #   </ul>
        # </article>


pages = [PagePresenter(i, f"Page {i}", [f"tag-{i}-a", f"tag-{i}-b", f"tag-{i}-c"]) for i in range(8)]

barrier = threading.Barrier(len(pages))


def render_page(page: PagePresenter) -> str:
    """Render a single page -- called from a worker thread."""
    barrier.wait()
    return page.render()


with ThreadPoolExecutor(max_workers=8) as pool:
    results = list(pool.map(render_page, pages))

output = "\n".join(results)
stats = cache.stats()


def main() -> None:
    print(f"Rendered {len(results)} pages across 8 threads ({stats['compiles']} compile):\n")
    for i, html in enumerate(results):
        print(f"--- Thread {i} ---")
        print(html)
        print()


if __name__ == "__main__":
    main()
