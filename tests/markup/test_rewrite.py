"""Tests for the static HTML rewrite passes."""

from __future__ import annotations

from genpreview.markup.rewrite import (
    resolve_expressions,
    style_object_to_css,
    to_static_html,
)


def test_class_name_becomes_class() -> None:
    assert to_static_html('<div className="a"><h1>Hi</h1></div>') == '<div class="a"><h1>Hi</h1></div>'


def test_html_for_becomes_for() -> None:
    assert to_static_html('<label htmlFor="email">Email</label>') == '<label for="email">Email</label>'


def test_literal_children_are_inlined_and_other_expressions_dropped() -> None:
    assert to_static_html('<p>{"Hello"} {name}</p>') == "<p>Hello </p>"


def test_literal_children_are_escaped() -> None:
    assert resolve_expressions('<code>{"a < b {c}"}</code>') == "<code>a &lt; b &#123;c&#125;</code>"


def test_markup_expressions_become_placeholders() -> None:
    markup = "<ul>{items.map((item) => <li key={item.id}>{item.name}</li>)}</ul>"

    assert to_static_html(markup) == "<ul><!-- dynamic content --></ul>"


def test_comment_expressions_are_dropped() -> None:
    assert to_static_html("<div>{/* note */}<span>x</span></div>") == "<div><span>x</span></div>"


def test_attribute_expressions_resolve_to_static_values() -> None:
    markup = (
        '<a href={"/about"} tabIndex={0} hidden={true} disabled={false} '
        "title={t} {...rest}>About</a>"
    )

    assert to_static_html(markup) == '<a href="/about" tabIndex="0" hidden>About</a>'


def test_event_handlers_are_stripped() -> None:
    markup = '<button onClick="alert(1)" onmouseover="x()" type="button">Open</button>'

    assert to_static_html(markup) == '<button type="button">Open</button>'


def test_event_handlers_are_stripped_in_any_case() -> None:
    markup = '<button OnClick="alert(1)" ONMOUSEOVER="steal()" class="btn">Buy the product now</button>'

    assert to_static_html(markup) == '<button class="btn">Buy the product now</button>'


def test_framework_attributes_are_stripped() -> None:
    markup = '<li key="a" ref={listRef} suppressHydrationWarning>Item</li>'

    assert to_static_html(markup) == "<li>Item</li>"


def test_fragments_are_removed() -> None:
    markup = '<><h1>A</h1><React.Fragment key="x"><p>B</p></React.Fragment><Fragment>C</Fragment></>'

    assert to_static_html(markup) == "<h1>A</h1><p>B</p>C"


def test_components_are_aliased_to_elements() -> None:
    markup = (
        '<Link href="/shop" className="btn">Shop</Link>'
        '<Image src="/a.png" alt="A" width={40} />'
        '<Hero title="x"><p>Hi</p></Hero>'
        "<Spacer />"
    )

    assert to_static_html(markup) == (
        '<a href="/shop" class="btn">Shop</a>'
        '<img src="/a.png" alt="A" width="40">'
        '<div title="x"><p>Hi</p></div>'
    )


def test_namespaced_motion_components_keep_their_element() -> None:
    markup = '<motion.div initial={{ opacity: 0 }} className="hero">Hi</motion.div>'

    assert to_static_html(markup) == '<div class="hero">Hi</div>'


def test_literal_style_objects_become_inline_css() -> None:
    markup = '<div style={{ backgroundColor: "red", padding: 8, opacity: 0.5 }}>x</div>'

    assert to_static_html(markup) == (
        '<div style="background-color: red; padding: 8px; opacity: 0.5">x</div>'
    )


def test_computed_style_objects_are_dropped() -> None:
    assert to_static_html("<div style={{ color: theme.primary }}>x</div>") == "<div>x</div>"


def test_style_object_to_css_handles_quoted_keys() -> None:
    assert style_object_to_css("'--accent': '#fff', WebkitTransform: 'none'") == (
        "--accent: #fff; -webkit-transform: none"
    )


def test_self_closing_non_void_elements_are_expanded() -> None:
    assert to_static_html('<div className="spacer" /><br />') == '<div class="spacer"></div><br/>'


def test_scripts_and_script_urls_are_neutralised() -> None:
    markup = '<a href="javascript:void(0)">x</a><script>alert(1)</script>'

    assert to_static_html(markup) == '<a href="#">x</a>'


def test_unterminated_expression_drops_the_remainder() -> None:
    markup = "<div><p>Hello there</p>{items.map((i) => ("

    assert to_static_html(markup) == "<div><p>Hello there</p>"


def test_whitespace_is_collapsed() -> None:
    assert to_static_html("<div>\n   <p>Hi   there</p>\n</div>") == "<div> <p>Hi there</p> </div>"


def test_no_code_leaks_into_output() -> None:
    markup = """
<section className="p-4" onClick={() => track("hero")}>
  {user ? <Welcome user={user} /> : null}
  <h2>{`Hello ${user.name}`}</h2>
  {count > 1 && "Many"}
  <p>{format(price)}</p>
</section>
"""

    html = to_static_html(markup)

    for fragment in ("=>", "${", "{", "}", "onClick", "track", "format("):
        assert fragment not in html
    assert html.startswith('<section class="p-4">')
