"""
Tests for the HTML math renderer

Backends are fakes from conftest so dispatch, splicing and the fallback chain
can be checked without the real typesetters.
"""

import asyncio

from bs4 import BeautifulSoup

from typst_math import HtmlMathRenderer, RenderOptions
from typst_math.domain.errors import TypstRenderError
from typst_math.infrastructure.html import collect_math_elements

from tests.helpers import FakeLatexBackend, FakeTypstBackend


def soup(markup):
    return BeautifulSoup(markup, "html.parser")


def run(renderer, tree):
    return asyncio.run(renderer.transform(tree))


def make_renderer(latex, typst, **options):
    return HtmlMathRenderer(
        options=RenderOptions(**options), latex_backend=latex, typst_backend=typst
    )


# =============================================================================
# Detection
# =============================================================================


def test_collects_nodes_in_document_order():
    tree = soup(
        '<p><span class="math-inline">a</span></p>'
        '<pre><code class="language-math">b</code></pre>'
        '<div class="math-display">c</div>'
        "<code>not math</code>"
    )
    found = collect_math_elements(tree)
    assert [m.element.get_text() for m in found] == ["a", "b", "c"]
    assert [m.display_mode for m in found] == [False, True, True]
    assert found[1].splice_target.name == "pre"
    assert [m.replaces_target for m in found] == [False, True, False]


def test_inline_code_marker_keeps_inline_mode():
    tree = soup('<p><code class="language-math math-inline">x</code></p>')
    (found,) = collect_math_elements(tree)
    assert found.display_mode is False
    assert found.splice_target is found.element


# =============================================================================
# Dispatch and splicing
# =============================================================================


def test_typst_inline_span_keeps_element(latex_backend, typst_backend_fake):
    tree = soup('<p>a <span class="math-inline">sum_(i=1)^n i</span> b</p>')
    run(make_renderer(latex_backend, typst_backend_fake), tree)

    span = tree.find("span", class_="math-inline")
    assert span is not None
    assert span.find("span", class_="typst-inline") is not None
    assert typst_backend_fake.calls == [("sum_(i=1)^n i", False)]
    assert latex_backend.calls == []
    assert tree.p.get_text() == "a  b"


def test_latex_display_div_uses_latex_backend(latex_backend, typst_backend_fake):
    tree = soup('<div class="math-display">\\int_0^\\pi \\sin(x) dx = 2</div>')
    run(make_renderer(latex_backend, typst_backend_fake), tree)

    assert latex_backend.calls == [("\\int_0^\\pi \\sin(x) dx = 2", True)]
    assert tree.div.find("span", attrs={"data-mode": "display"}) is not None
    assert typst_backend_fake.calls == []


def test_pre_wrapper_is_replaced_in_place(latex_backend, typst_backend_fake):
    tree = soup(
        "<p>before</p>"
        '<pre><code class="language-math">integral_0^1 x dif x</code></pre>'
        "<p>after</p>"
    )
    run(make_renderer(latex_backend, typst_backend_fake), tree)

    assert tree.find("pre") is None
    assert tree.find("code") is None
    names = [child.name for child in tree.contents]
    assert names == ["p", "span", "p"]
    assert typst_backend_fake.calls == [("integral_0^1 x dif x", True)]


def test_code_without_pre_is_replaced_itself(latex_backend, typst_backend_fake):
    tree = soup('<p>x <code class="language-math math-inline">a/b</code> y</p>')
    run(make_renderer(latex_backend, typst_backend_fake), tree)

    assert tree.find("code") is None
    assert tree.p.find("span", class_="typst-math") is not None
    assert typst_backend_fake.calls == [("a/b", False)]


def test_existing_tag_is_reused(latex_backend, typst_backend_fake):
    tree = soup('<span class="math-inline" data-math-type="latex">x + y</span>')
    run(make_renderer(latex_backend, typst_backend_fake), tree)

    assert latex_backend.calls == [("x + y", False)]
    assert typst_backend_fake.calls == []


def test_unknown_tag_falls_back_to_classifier(latex_backend, typst_backend_fake):
    tree = soup('<span class="math-inline" data-math-type="asciimath">x + y</span>')
    run(make_renderer(latex_backend, typst_backend_fake), tree)

    assert typst_backend_fake.calls == [("x + y", False)]


def test_whitespace_is_preserved(latex_backend, typst_backend_fake):
    tree = soup('<div class="math-display">\n  a  +\n  b \n</div>')
    run(make_renderer(latex_backend, typst_backend_fake), tree)

    assert typst_backend_fake.calls == [("\n  a  +\n  b \n", True)]


def test_text_of_nested_markup_is_used(latex_backend, typst_backend_fake):
    tree = soup('<span class="math-inline">\\frac<b>{1}</b>{2}</span>')
    run(make_renderer(latex_backend, typst_backend_fake), tree)

    assert latex_backend.calls == [("\\frac{1}{2}", False)]


def test_nested_math_elements_render_once(latex_backend, typst_backend_fake):
    tree = soup(
        '<div class="math-display">x<span class="math-inline">y</span></div>'
    )
    run(make_renderer(latex_backend, typst_backend_fake), tree)

    assert typst_backend_fake.calls == [("xy", True)]


def test_transform_returns_same_tree(latex_backend, typst_backend_fake):
    tree = soup("<p>no math</p>")
    assert run(make_renderer(latex_backend, typst_backend_fake), tree) is tree
    assert str(tree) == "<p>no math</p>"


def test_transform_accepts_an_element(latex_backend, typst_backend_fake):
    tree = soup('<section><span class="math-inline">x</span></section>')
    run(make_renderer(latex_backend, typst_backend_fake), tree.section)

    assert typst_backend_fake.calls == [("x", False)]


# =============================================================================
# Backend readiness
# =============================================================================


def test_backend_is_made_ready_before_rendering(latex_backend, typst_backend_fake):
    tree = soup('<span class="math-inline">a</span><span class="math-inline">b</span>')
    run(make_renderer(latex_backend, typst_backend_fake), tree)

    assert typst_backend_fake.ready_calls == 1
    assert typst_backend_fake.events == ["ready", "render", "render"]


def test_backend_is_made_ready_even_without_math(latex_backend, typst_backend_fake):
    run(make_renderer(latex_backend, typst_backend_fake), soup("<p>text</p>"))
    assert typst_backend_fake.ready_calls == 1


# =============================================================================
# Failure handling
# =============================================================================


def test_typst_failure_falls_back_to_latex(latex_backend, failing_typst_backend):
    tree = soup('<span class="math-inline">foo(</span>')
    run(make_renderer(latex_backend, failing_typst_backend), tree)

    assert failing_typst_backend.calls == [("foo(", False)]
    assert latex_backend.calls == [("foo(", False)]
    assert tree.find("span", class_="latex-math") is not None
    assert tree.find("span", class_="math-error") is None


def test_fallback_disabled_shows_error(latex_backend, failing_typst_backend):
    tree = soup('<span class="math-inline">foo(</span>')
    run(make_renderer(latex_backend, failing_typst_backend, fallback_to_latex=False), tree)

    outer = tree.find("span", class_="math-inline")
    assert len(outer.contents) == 1
    error = outer.contents[0]
    assert error["class"] == ["math-error"]
    assert error["style"] == "color: #cc0000;"
    assert error.get_text() == "unknown variable: foo"
    assert latex_backend.calls == []


def test_failed_fallback_shows_original_error(failing_latex_backend, failing_typst_backend):
    tree = soup('<span class="math-inline">foo(</span>')
    run(make_renderer(failing_latex_backend, failing_typst_backend), tree)

    assert len(failing_latex_backend.calls) == 1
    error = tree.find("span", class_="math-error")
    assert error.get_text() == "unknown variable: foo"


def test_latex_failure_never_retries(failing_latex_backend, typst_backend_fake):
    tree = soup('<span class="math-inline">\\alpha</span>')
    run(make_renderer(failing_latex_backend, typst_backend_fake), tree)

    assert typst_backend_fake.calls == []
    assert tree.find("span", class_="math-error").get_text() == "latex exploded"


def test_error_in_pre_replaces_code_children(latex_backend):
    typst = FakeTypstBackend(error=TypstRenderError("bad"))
    tree = soup('<pre><code class="language-math">oops</code></pre>')
    run(make_renderer(latex_backend, typst, fallback_to_latex=False), tree)

    assert tree.pre is not None
    assert tree.pre.code.contents[0]["class"] == ["math-error"]


def test_error_color_comes_from_latex_options(latex_backend):
    from typst_math import LatexOptions

    typst = FakeTypstBackend(error=TypstRenderError("bad"))
    renderer = HtmlMathRenderer(
        options=RenderOptions(
            fallback_to_latex=False, latex=LatexOptions(error_color="#ff6b6b")
        ),
        latex_backend=latex_backend,
        typst_backend=typst,
    )
    tree = soup('<span class="math-inline">x</span>')
    run(renderer, tree)

    assert tree.find("span", class_="math-error")["style"] == "color: #ff6b6b;"


def test_one_failure_does_not_stop_other_nodes(latex_backend):
    class FlakyTypst(FakeTypstBackend):
        def render(self, text, display_mode=False):
            if text == "bad":
                self.calls.append((text, display_mode))
                raise RuntimeError("cannot compile")
            return super().render(text, display_mode)

    typst = FlakyTypst()
    tree = soup(
        '<span class="math-inline">bad</span><span class="math-inline">good</span>'
    )
    run(make_renderer(latex_backend, typst, fallback_to_latex=False), tree)

    first, second = tree.find_all("span", class_="math-inline")
    assert first.find("span", class_="math-error").get_text() == "cannot compile"
    assert second.find("span", class_="typst-math") is not None


def test_custom_classifier_is_used(latex_backend, typst_backend_fake):
    from typst_math import MathType

    renderer = HtmlMathRenderer(
        latex_backend=latex_backend,
        typst_backend=typst_backend_fake,
        classifier=lambda text: MathType.LATEX,
    )
    run(renderer, soup('<span class="math-inline">x</span>'))

    assert latex_backend.calls == [("x", False)]


def test_default_backends_are_created():
    renderer = HtmlMathRenderer()
    assert renderer.options.fallback_to_latex is True


def test_fake_backends_match_protocols():
    from typst_math.domain.interfaces import ILatexBackend, ITypstBackend

    assert isinstance(FakeLatexBackend(), ILatexBackend)
    assert isinstance(FakeTypstBackend(), ITypstBackend)
