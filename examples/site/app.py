"""A small site -- layout wrapping, partials, mixins and async data.

``home.html`` wraps itself in ``layout.html``; the layout pulls the page
title and navigation from mixins the page defines. Posts are loaded by
an async function awaited from ``<script in-template>``.

Run:
    python app.py
"""

import asyncio
from pathlib import Path

from asynchtml import RenderOptions, Template

templates_dir = Path(__file__).parent / "templates"

POSTS = [
    {"title": "Hello <World>", "body": "First post & counting."},
    {"title": "Second", "body": "More news."},
]


async def load_posts():
    await asyncio.sleep(0)
    return POSTS


def summary(post):
    return f"<p>{post['body']}</p>"


context = {
    "site_name": "My Site",
    "nav_items": [
        {"url": "/", "label": "Home"},
        {"url": "/about", "label": "About"},
    ],
    "load_posts": load_posts,
    "summary": summary,
}

home = Template.from_file(templates_dir / "home.html")

raw_output = home.render(context, RenderOptions(minify=False))
output = home.render(context)


def main() -> None:
    print(output)


if __name__ == "__main__":
    main()
