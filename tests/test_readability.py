import io

from yarr.content.readability import extract_content

PARA1 = (
    "The first paragraph of the story talks, at length, about many things, "
    "and keeps going for quite a while so that it is long."
)
PARA2 = (
    "The second paragraph continues the story, adding detail, nuance, and "
    "more words so that it also counts as real content here."
)

PAGE = f"""
<html><head><title>t</title><style>body {{ color: red; }}</style></head>
<body>
<div id="sidebar"><p>Sidebar stuff, with commas, that is long enough to count here.</p></div>
<div class="article"><p>{PARA1}</p><p>{PARA2}</p></div>
<script>alert("x")</script>
</body></html>
"""


def test_extracts_article_paragraphs():
    result = extract_content(PAGE)
    assert PARA1 in result
    assert PARA2 in result
    assert result.startswith("<div><div>")
    assert result.endswith("</div>")


def test_drops_sidebar_scripts_and_styles():
    result = extract_content(PAGE)
    assert "Sidebar" not in result
    assert "alert" not in result
    assert "color: red" not in result


def test_falls_back_to_body():
    assert extract_content("<p>short</p>") == "<div><div><p>short</p></div></div>"


def test_misused_div_becomes_paragraph():
    page = (
        '<html><body><div class="content">A plain text block, with commas, '
        "that has no block children at all.</div></body></html>"
    )
    result = extract_content(page)
    assert '<p class="content">' in result
    assert "<div class" not in result


def test_file_like_and_bytes_inputs_match_string():
    expected = extract_content(PAGE)
    assert extract_content(io.StringIO(PAGE)) == expected
    assert extract_content(PAGE.encode("utf-8")) == expected