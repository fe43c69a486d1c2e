import re
from urllib.parse import quote


# Characters left as-is when encoding a URL: everything a browser would
# keep in a URL, including brackets and already percent-encoded sequences.
URL_SAFE = "!#$&'()*+,/:;=?@[]%"

LONE_PERCENT = re.compile(r'%(?![0-9A-Fa-f]{2})')

HTML_ESCAPES = str.maketrans({
    '&': '&amp;',
    '<': '&lt;',
    '>': '&gt;',
    '"': '&quot;',
    "'": '&#39;',
})


def encode_url(url: str) -> str:
    """Percent-encode a URL without double-encoding valid escapes.

    Invalid `%` sequences are encoded as `%25`, characters outside of
    the URL character set are encoded as UTF-8 octets.
    """
    return quote(LONE_PERCENT.sub('%25', url), safe=URL_SAFE)


def escape_html(text: str) -> str:
    return text.translate(HTML_ESCAPES)


def create_html_document(message: str) -> str:
    body = escape_html(message) \
        .replace('\n', '<br>') \
        .replace('  ', ' &nbsp;')

    return (
        '<!DOCTYPE html>\n'
        '<html lang="en">\n'
        '<head>\n'
        '<meta charset="utf-8">\n'
        '<title>Error</title>\n'
        '</head>\n'
        '<body>\n'
        f'<pre>{body}</pre>\n'
        '</body>\n'
        '</html>\n'
    )
