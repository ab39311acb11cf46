"""Presenter rendered by the benchmarks; the same profile in every engine."""

from __future__ import annotations

from coda import Inline, binding, inline


@inline("jinja", "mako", "text")
class ProfilePresenter(Inline):
    def __init__(self, name: str, bio: str, posts: list[dict[str, str]]):
        self.name = name
        self.bio = bio
        self.posts = posts

    @classmethod
    def sample(cls, posts: int = 5) -> ProfilePresenter:
        return cls(
            "alice",
            "Software engineer <&>",
            [{"title": f"Post {i}", "content": f"Content {i}"} for i in range(posts)],
        )

    def minimal_jinja(self):
        return self.jinja(name="World")
        # Hello {{ name }}!

    def minimal_mako(self):
        return self.mako(name="World")
        # Hello ${name}!

    def minimal_text(self):
        return self.text(name="World")
        # Hello $name!

    def profile_jinja(self):
        return self.jinja()
        # <div class="profile">
        #   <h1>{{ this.name | title }}</h1>
        #   <p>{{ this.bio }}</p>
        #   {%- for post in this.posts %}
        #   <article><h2>{{ post.title }}</h2><p>{{ post.content }}</p></article>
        #   {%- endfor %}
        # </div>

    def profile_mako(self):
        return self.mako()
        # <div class="profile">
        #   <h1>${this.name.title()}</h1>
        #   <p>${this.bio}</p>
        # % for post in this.posts:
        #   <article><h2>${post['title']}</h2><p>${post['content']}</p></article>
        # % endfor
        # </div>

    def captured_scope(self):
        greeting = "Hello"  # noqa: F841
        return self.jinja(binding())
        # {{ greeting }} {{ this.name }}
