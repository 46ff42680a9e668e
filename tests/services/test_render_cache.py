from app.services.render_cache import RenderCache


def test_get_or_render_caches_by_path_and_content():
    cache = RenderCache()
    calls = []

    def render(text):
        calls.append(text)
        return f"<p>{text}</p>"

    assert cache.get_or_render("posts/a.md", "hi", render) == "<p>hi</p>"
    assert cache.get_or_render("posts/a.md", "hi", render) == "<p>hi</p>"
    assert cache.get_or_render("posts/a.md", "changed", render) == "<p>changed</p>"
    assert calls == ["hi", "changed"]


def test_least_recently_used_entry_is_evicted():
    cache = RenderCache(max_size=2)
    cache.set("a", "x", "A")
    cache.set("b", "x", "B")
    cache.get("a", "x")

    cache.set("c", "x", "C")

    assert cache.get("b", "x") is None
    assert cache.get("a", "x") == "A"
    assert cache.get("c", "x") == "C"
    assert len(cache) == 2


def test_invalidate_drops_every_version_of_a_path():
    cache = RenderCache()
    cache.set("a", "v1", "1")
    cache.set("a", "v2", "2")
    cache.set("b", "v1", "B")

    cache.invalidate(["a", "unknown"])

    assert cache.get("a", "v1") is None
    assert cache.get("a", "v2") is None
    assert cache.get("b", "v1") == "B"


def test_clear_empties_cache():
    cache = RenderCache()
    cache.set("a", "x", "A")

    cache.clear()

    assert len(cache) == 0
