"""Tests for the site example."""


class TestSiteApp:
    """Verify wrapping, partials and mixins in a small site."""

    def test_title_from_page_mixin(self, example_app) -> None:
        assert "<title>Welcome | My Site</title>" in example_app.raw_output

    def test_nav_from_partial_inside_mixin(self, example_app) -> None:
        assert '<a href="/">Home</a>' in example_app.raw_output
        assert '<a href="/about">About</a>' in example_app.raw_output

    def test_cards_escape_titles(self, example_app) -> None:
        assert "<h2>Hello &lt;World&gt;</h2>" in example_app.raw_output
        assert "<p>First post & counting.</p>" in example_app.raw_output

    def test_badge(self, example_app) -> None:
        assert '<span class="badge">2 posts</span>' in example_app.raw_output

    def test_layout_wraps_page(self, example_app) -> None:
        raw = example_app.raw_output
        assert raw.index("<main>") < raw.index("<h1>My Site</h1>") < raw.index("</main>")
        assert "No posts yet." not in raw

    def test_minified_output(self, example_app) -> None:
        assert len(example_app.output) < len(example_app.raw_output)
        assert "Rendered by asynchtml" in example_app.output
