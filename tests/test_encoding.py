import pytest
from finalhandler.encoding import (
    create_html_document, encode_url, escape_html)


@pytest.mark.parametrize('url,expected', [
    ('/foo', '/foo'),
    ('/foo bar', '/foo%20bar'),
    ('/foo%20bar', '/foo%20bar'),
    ('/foo%2', '/foo%252'),
    ('/100%', '/100%25'),
    ('/%zz', '/%25zz'),
    ('/foo%20§', '/foo%20%C2%A7'),
    ("/<la'me>", "/%3Cla'me%3E"),
    ('/a"b', '/a%22b'),
    ('/[::1]/?q=1&r=2#top', '/[::1]/?q=1&r=2#top'),
    ('/~user/$x,y;z', '/~user/$x,y;z'),
    ('/日本', '/%E6%97%A5%E6%9C%AC'),
])
def test_encode_url(url, expected):
    assert encode_url(url) == expected


def test_escape_html():
    assert escape_html('<a href="x">Tom & Jerry\'s</a>') == (
        '&lt;a href=&quot;x&quot;&gt;Tom &amp; Jerry&#39;s&lt;/a&gt;')
    assert escape_html('plain') == 'plain'


def test_document_line_breaks():
    document = create_html_document('first\nsecond')
    assert '<pre>first<br>second</pre>' in document


def test_document_double_spaces():
    document = create_html_document('a  b   c    d')
    assert '<pre>a &nbsp;b &nbsp; c &nbsp; &nbsp;d</pre>' in document


def test_document_escapes_before_formatting():
    document = create_html_document('<b>\n  x</b>')
    assert '<pre>&lt;b&gt;<br> &nbsp;x&lt;/b&gt;</pre>' in document


def test_document():
    assert create_html_document('Not Found') == (
        '<!DOCTYPE html>\n'
        '<html lang="en">\n'
        '<head>\n'
        '<meta charset="utf-8">\n'
        '<title>Error</title>\n'
        '</head>\n'
        '<body>\n'
        '<pre>Not Found</pre>\n'
        '</body>\n'
        '</html>\n')
