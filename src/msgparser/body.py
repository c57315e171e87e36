"""Conversions between the body representations a message may carry."""

import io
import logging

import compressed_rtf
import html2text
from rtfparse.parser import Rtf_Parser
from rtfparse.renderers.html_decapsulator import HTML_Decapsulator

logger = logging.getLogger(__name__)


def decompress_rtf(data):
    """Decompress an RTF_COMPRESSED value to Rich Text Format bytes."""
    try:
        return compressed_rtf.decompress(data)
    except Exception as e:
        logger.warning("Could not decompress RTF body: {}".format(str(e)))
        return None


def html_from_rtf(rtf):
    """
    De-encapsulate HTML stored in a rich text container.
    Returns None when the RTF was not produced from HTML.
    """
    if b"\\fromhtml" not in rtf[:1024]:
        return None

    try:
        rtf_blob = io.BytesIO(rtf)
        parsed = Rtf_Parser(rtf_file=rtf_blob).parse_file()
        html_stream = io.StringIO()
        HTML_Decapsulator().render(parsed, html_stream)
        return html_stream.getvalue()
    except Exception as e:
        logger.warning("Could not extract HTML from RTF body: {}".format(str(e)))
        return None


def text_from_html(html):
    return html2text.html2text(html)
