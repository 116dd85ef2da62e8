from core.preview import (
    EMPTY_PLACEHOLDER, render_markdown, render_preview, to_fragments, plain_text,
)


def test_empty_body_shows_placeholder():
    html = render_markdown("   ")
    assert EMPTY_PLACEHOLDER in html
    assert "md-placeholder" in html


def test_block_elements_get_classes():
    html = render_markdown("# Title\n\nSome paragraph.\n\n- a\n- b\n\n> quoted")

    assert '<h1 class="md-spacing">Title</h1>' in html
    assert '<p class="md-spacing">Some paragraph.</p>' in html
    assert '<ul class="md-spacing">' in html
    assert 'class="md-quote"' in html


def test_inline_and_fenced_code_are_distinguished():
    html = render_markdown("Use `pip` here.\n\n```python\nprint(1)\n```")

    assert 'class="md-code"' in html
    assert "md-codeblock" in html
    assert html.count("md-code\"") == 1


def test_external_links_open_in_new_tab():
    html = render_markdown("[site](https://example.com) and [local](/about)")

    assert 'target="_blank"' in html
    assert 'rel="noopener noreferrer"' in html
    assert html.count('target="_blank"') == 1


def test_gfm_features():
    body = (
        "| a | b |\n|---|---|\n| 1 | 2 |\n\n"
        "~~gone~~\n\n"
        "- [x] done\n- [ ] todo\n\n"
        "visit https://vibewrite.dev"
    )
    html = render_markdown(body)

    assert "<table" in html
    assert "<del>gone</del>" in html
    assert 'type="checkbox"' in html
    assert 'href="https://vibewrite.dev"' in html


def test_raw_html_is_not_trusted_for_title():
    html = render_preview("<script>x</script>", "body", ["news"])

    assert "<script>" not in html.split("</h1>")[0]
    assert '<span class="badge">news</span>' in html


def test_fragments_style_markdown():
    frags = to_fragments(render_markdown("# Head\n\n**bold** and *it*\n\n> q"))
    styles = {style for style, _ in frags}

    assert any("md.header" in s for s in styles)
    assert any("md.bold" in s for s in styles)
    assert any("md.italic" in s for s in styles)
    assert any("md.quote" in s for s in styles)
    assert not "".join(text for _, text in frags).endswith("\n")


def test_fragments_render_lists_and_tasks():
    text = "".join(t for _, t in to_fragments(render_markdown("- [x] shipped\n- plain")))

    assert "[x]" in text
    assert "• plain" in text


def test_plain_text_drops_markup():
    assert plain_text(render_markdown("**hi** there")) == "hi there"
