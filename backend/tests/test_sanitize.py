import pytest

from moneybox.services.sanitize import sanitize_html, sanitize_input


@pytest.mark.parametrize("html, expected", [
    ("<p>Save <b>more</b></p>", "<p>Save <b>more</b></p>"),
    ("<p>a</p><script>alert('x')</script>", "<p>a</p>"),
    ('<img src="x.png" onerror="steal()">', '<img src="x.png">'),
    ("<img src=x onerror=alert(1)>", "<img src=x>"),
    ("<b onmouseover=steal() class=hi>x</b>", "<b class=hi>x</b>"),
    ("<p>Questions = answers</p>", "<p>Questions = answers</p>"),
    ('<a href="javascript:alert(1)">go</a>', '<a href="alert(1)">go</a>'),
    ('<iframe src="evil"></iframe><u>ok</u>', "<u>ok</u>"),
    ("<html><body><i>x</i></body></html>", "<i>x</i>"),
    ('<input type="text"><link rel="x"><em>y</em>', "<em>y</em>"),
    ('<img src="data:image/png;base64,AAA">', '<img src="data:image/png;base64,AAA">'),
    ('<a href="data:text/html,boom">d</a>', '<a href="text/html,boom">d</a>'),
])
def test_sanitize_html(html, expected):
    assert sanitize_html(html) == expected


@pytest.mark.parametrize("value", [None, ""])
def test_sanitize_html_empty(value):
    assert sanitize_html(value) == ""


def test_sanitize_input_strips_control_chars_and_whitespace():
    assert sanitize_input("  Cash\x00 ISA\x07 ") == "Cash ISA"
    assert sanitize_input("line\nbreak\ttab") == "line\nbreak\ttab"
    assert sanitize_input("   ") == ""
    assert sanitize_input(None) == ""
