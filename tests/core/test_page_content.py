"""Page content extraction tests — title, meta description, body text."""

from arguably.core.page_content import PageContent, extract_page_content

_HTML = """
<html><head>
<title> Climate Report &amp; Data </title>
<meta name="description" content="Annual figures">
<style>body { color: red; }</style>
<script>var tracking = "ignore me";</script>
</head>
<body><h1>Findings</h1>
<p>Temperatures   rose
by 1.1 degrees.</p></body></html>
"""


def test_extracts_title_and_description():
    page = extract_page_content(_HTML)
    assert page.success
    assert page.title == "Climate Report & Data"
    assert page.description == "Annual figures"


def test_strips_scripts_styles_and_tags():
    page = extract_page_content(_HTML)
    assert "ignore me" not in page.text
    assert "color: red" not in page.text
    assert "<p>" not in page.text
    assert "Findings Temperatures rose by 1.1 degrees." in page.text


def test_truncates_long_text():
    page = extract_page_content("<p>" + "x" * 50 + "</p>", max_chars=10)
    assert page.text == "x" * 10 + "..."


def test_missing_title_is_empty():
    page = extract_page_content("<p>just text</p>")
    assert page.title == ""
    assert page.description == ""


def test_failed_carries_error():
    page = PageContent.failed("timeout")
    assert not page.success
    assert page.error == "timeout"
    assert page.text == ""


def test_description_keeps_apostrophes():
    page = extract_page_content(
        '<meta name="description" content="It\'s the official report">'
    )
    assert page.description == "It's the official report"


def test_description_with_content_before_name():
    page = extract_page_content(
        '<head><meta content="Quarterly &quot;core&quot; figures" name="Description"></head>'
    )
    assert page.description == 'Quarterly "core" figures'


def test_title_not_repeated_in_body_text():
    page = extract_page_content(
        "<html><head><title>Headline</title></head><body><p>Only body</p></body></html>"
    )
    assert page.title == "Headline"
    assert page.text == "Only body"


def test_malformed_markup_does_not_raise():
    page = extract_page_content("<div><p>unclosed <b>bold</div> tail")
    assert page.success
    assert "unclosed bold" in page.text
