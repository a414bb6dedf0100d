import pytest

from yarr.content.htmlutil import (
    ElementMatch,
    MultiMatch,
    Node,
    NodeType,
    absolute_url,
    any_match,
    attr,
    closest,
    extract_text,
    find_nodes,
    inner_html,
    new_matcher,
    parse_html,
    query,
    render_html,
    text,
    url_domain,
)


def test_query():
    node = parse_html("""
        <!DOCTYPE html>
        <html lang="en">
        <head>
            <meta charset="UTF-8">
            <title></title>
        </head>
        <body>
            <div>
                <p>test</p>
            </div>
        </body>
        </html>
    """)
    nodes = query(node, "p")
    assert len(nodes) == 1
    assert nodes[0].type is NodeType.ELEMENT
    assert nodes[0].data == "p"


def test_query_multi():
    node = parse_html("""
        <!DOCTYPE html>
        <html lang="en">
        <head>
            <meta charset="UTF-8">
            <title></title>
        </head>
        <body>
            <p>foo</p>
            <div>
                <p>bar</p>
                <span>baz</span>
            </div>
        </body>
        </html>
    """)
    nodes = query(node, "p , span")
    assert [n.data for n in nodes] == ["p", "p", "span"]
    assert all(n.type is NodeType.ELEMENT for n in nodes)
    assert [text(n) for n in nodes] == ["foo", "bar", "baz"]


def test_closest():
    doc = parse_html("""
        <!DOCTYPE html>
        <html lang="en">
        <head>
            <meta charset="UTF-8">
            <title></title>
        </head>
        <body>
            <div class="foo">
                <p><a class="bar" href=""></a></p>
            </div>
        </body>
        </html>
    """)
    link = query(doc, "a")
    assert link and attr(link[0], "class") == "bar"
    wrap = closest(link[0], "div")
    assert wrap is not None
    assert attr(wrap, "class") == "foo"


def test_closest_without_match():
    doc = parse_html("<p><b>x</b></p>")
    assert closest(query(doc, "b")[0], "table") is None


@pytest.mark.parametrize(
    "want, base",
    [
        ("hello", "<div>hello</div>"),
        ("hello world", "<div>hello</div> world"),
        ("helloworld", "<div>hello</div>world"),
        ("hello world", "hello <div>world</div>"),
        ("helloworld", "hello<div>world</div>"),
        ("hello world!", "hello <div>world</div>!"),
        ("hello world !", "hello <div>   world\r\n </div>!"),
    ],
)
def test_extract_text(want, base):
    assert extract_text(base) == want


def test_extract_text_unescapes_entities():
    assert extract_text("a &amp; b") == "a & b"


def test_text_joins_stripped_text_nodes():
    doc = parse_html("<p> a <b> b </b></p>")
    assert text(query(doc, "p")[0]) == "a b"


def test_inner_html_and_render():
    doc = parse_html('<div id="x"><p>a &amp; b</p><br></div>')
    div = query(doc, "div")[0]
    assert inner_html(div) == "<p>a &amp; b</p><br/>"
    assert render_html(div) == '<div id="x"><p>a &amp; b</p><br/></div>'


def test_render_escapes_attribute_quotes():
    node = Node(NodeType.ELEMENT, "span", [("title", 'say "hi"')])
    assert render_html(node) == '<span title="say &#34;hi&#34;"></span>'


def test_attr_is_case_insensitive():
    node = Node(NodeType.ELEMENT, "a", [("HREF", "x")])
    assert attr(node, "href") == "x"
    assert attr(node, "title") == ""


def test_new_matcher_rejects_unsupported():
    with pytest.raises(ValueError):
        new_matcher(".")


def test_element_match_star_matches_elements_only():
    matcher = ElementMatch("*")
    assert matcher.match(Node(NodeType.ELEMENT, "div")) is True
    assert matcher.match(Node(NodeType.TEXT, "div")) is False


def test_multi_match():
    multi = MultiMatch()
    multi.add(ElementMatch("p"))
    multi.add(ElementMatch("span"))
    assert multi.match(Node(NodeType.ELEMENT, "span")) is True
    assert multi.match(Node(NodeType.ELEMENT, "div")) is False


def test_append_and_remove_child():
    parent = Node(NodeType.ELEMENT, "div")
    child = Node(NodeType.TEXT, "x")
    parent.append_child(child)
    assert parent.children() == [child]
    assert child.parent is parent
    parent.remove_child(child)
    assert parent.children() == []
    assert child.parent is None
    with pytest.raises(ValueError):
        parent.remove_child(child)


def test_find_nodes_breadth_first():
    doc = parse_html("<div><p>1</p></div><p>2</p>")
    found = find_nodes(doc, lambda n: n.type is NodeType.TEXT)
    assert [n.data for n in found] == ["2", "1"]


def test_absolute_url():
    assert absolute_url("/feed.xml", "http://example.com") == "http://example.com/feed.xml"
    assert absolute_url("../img.png", "http://example.org/a/b/") == "http://example.org/a/img.png"
    assert absolute_url("//cdn.example.org/x", "https://example.org/") == "https://cdn.example.org/x"
    assert absolute_url("/x", "http://example.com/%zz") == ""


def test_url_domain():
    assert url_domain("https://user@www.example.com:8080/x") == "www.example.com:8080"
    assert url_domain("http://[::1") == "http://[::1"


def test_any_match():
    assert any_match(["a", "b"], "b", lambda x, y: x == y) is True
    assert any_match(["a", "b"], "c", lambda x, y: x == y) is False