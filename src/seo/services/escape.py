# src/seo/services/escape.py
import html


def escape_html(value: str) -> str:
    """
    Escapes the five HTML-significant characters:
    & -> &amp;  < -> &lt;  > -> &gt;  " -> &quot;  ' -> &#x27;
    """
    return html.escape(value, quote=True)
