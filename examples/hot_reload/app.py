"""Hot reload -- edits to a presenter's file show up on the next render.

The presenter module is written to a temporary directory and imported
from there, then edited on disk. The cache compares the file's size and
mtime on every render and recompiles blocks whose file changed.

Run:
    python app.py
"""

import importlib.util
import os
import tempfile
from pathlib import Path

from coda import TemplateCache, default_registry

PRESENTER_SOURCE = '''\
from coda import Inline, inline


@inline("jinja")
class Banner(Inline):
    def show(self):
        return self.jinja(message="deployed")
        # <div class="banner">{{ message | upper }}</div>
'''

workdir = Path(tempfile.mkdtemp(prefix="coda-hot-reload-"))
presenter_path = workdir / "banner.py"
presenter_path.write_text(PRESENTER_SOURCE)

spec = importlib.util.spec_from_file_location("banner", presenter_path)
assert spec is not None and spec.loader is not None
banner_module = importlib.util.module_from_spec(spec)
spec.loader.exec_module(banner_module)

cache = TemplateCache(default_registry())
banner_module.Banner.inline_cache = cache
banner = banner_module.Banner()

before = banner.show()

# Edit the comment block in place; bump mtime so the change is seen even
# on filesystems with coarse timestamps.
presenter_path.write_text(PRESENTER_SOURCE.replace("| upper", "| title"))
st = presenter_path.stat()
os.utime(presenter_path, ns=(st.st_atime_ns, st.st_mtime_ns + 1_000_000_000))

after = banner.show()
stats = cache.stats()


def main() -> None:
    print(f"Presenter file: {presenter_path}")
    print(f"Before edit: {before}")
    print(f"After edit:  {after}")
    print(f"Reloads: {stats['reloads']}")


if __name__ == "__main__":
    main()
