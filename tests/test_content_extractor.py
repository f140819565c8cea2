from __future__ import annotations

from dive.config import settings
from dive.tools import content_extractor


def _page(body: str) -> str:
    return f"<html><head><title>T</title></head><body>{body}</body></html>"


def test_extract_removes_noise_before_reading_text():
    html = _page(
        "<header>Site header</header>"
        "<nav>Main menu</nav>"
        "<script>var tracking = 1;</script>"
        "<style>.x { color: red }</style>"
        "<div class='sidebar'>Sidebar links</div>"
        "<div class='ad'>Buy now</div>"
        "<article>The actual story text.<aside>Related reading</aside></article>"
        "<footer>Copyright</footer>"
    )

    text = content_extractor.extract(html, max_chars=1000)

    assert text == "The actual story text."
    for noise in ("Site header", "Main menu", "tracking", "color", "Sidebar", "Buy now", "Related", "Copyright"):
        assert noise not in text


def test_extract_prefers_article_over_later_selectors():
    html = _page(
        "<main>Main element text</main>"
        "<div class='content'>Content class text</div>"
        "<article>Article text</article>"
    )

    assert content_extractor.extract(html, max_chars=1000) == "Article text"


def test_extract_uses_role_main_before_content_classes():
    html = _page(
        "<div class='post-content'>Post body</div>"
        "<div role='main'>Landmark body</div>"
    )

    assert content_extractor.extract(html, max_chars=1000) == "Landmark body"


def test_extract_joins_all_matches_of_winning_selector():
    html = _page("<article>First.</article><p>between</p><article>Second.</article>")

    assert content_extractor.extract(html, max_chars=1000) == "First.Second."


def test_extract_uses_generic_content_class_as_last_selector():
    html = _page("<div class='main-content'>Generic container</div><p>Other</p>")

    assert content_extractor.extract(html, max_chars=1000) == "Generic container"


def test_extract_falls_back_to_body_text():
    html = _page("<div><p>Paragraph one.</p></div>")

    assert content_extractor.extract(html, max_chars=1000) == "Paragraph one."


def test_extract_falls_back_to_body_when_selected_region_is_empty():
    html = _page("<article><script>ignored()</script></article><p>Body text</p>")

    assert content_extractor.extract(html, max_chars=1000) == "Body text"


def test_extract_handles_fragment_without_body():
    assert content_extractor.extract("just some text", max_chars=1000) == "just some text"


def test_extract_normalizes_whitespace():
    html = _page("<article>\n\n  Line one\n\n\n\nLine   two   \n  </article>")

    text = content_extractor.extract(html, max_chars=1000)

    assert text == "Line one\nLine two"
    assert "  " not in text
    assert "\n\n" not in text


def test_extract_keeps_single_newlines():
    html = _page("<article>alpha\nbeta</article>")

    assert content_extractor.extract(html, max_chars=1000) == "alpha\nbeta"


def test_extract_truncates_to_cap():
    html = _page("<article>" + ("word " * 1000) + "</article>")

    text = content_extractor.extract(html, max_chars=50)

    assert len(text) == 50


def test_extract_defaults_to_configured_cap(monkeypatch):
    monkeypatch.setattr(settings, "extractor_max_chars", 30)
    html = _page("<article>" + ("x" * 500) + "</article>")

    assert len(content_extractor.extract(html)) == 30


def test_extract_is_idempotent():
    html = _page(
        "<nav>menu</nav><article>Stable output <b>every</b> time.</article>"
    )

    assert content_extractor.extract(html) == content_extractor.extract(html)


def test_extract_tolerates_nested_noise():
    html = _page(
        "<header><nav><div class='ad'>nested ad</div></nav></header>"
        "<main>Kept</main>"
    )

    assert content_extractor.extract(html, max_chars=100) == "Kept"


def test_extract_keeps_content_inside_page_wide_form():
    body = "Useful sentence about the topic. " * 20
    html = _page(f'<form id="form1"><div class="content">{body}</div></form>')

    text = content_extractor.extract(html, max_chars=2000)

    assert text.startswith("Useful sentence about the topic.")
    assert len(text) > 100


def test_extract_keeps_aria_hidden_app_root():
    html = _page(
        '<div id="app" aria-hidden="true"><main>Article behind an open dialog.</main></div>'
        '<div role="dialog">Subscribe?</div>'
    )

    assert content_extractor.extract(html, max_chars=1000) == "Article behind an open dialog."
