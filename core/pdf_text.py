# core/pdf_text.py
from typing import List, Tuple
import fitz
from util.timing import timed
import logging

logger = logging.getLogger(__name__)


def extract_pages_texts(file_bytes: bytes) -> List[Tuple[int, str]]:
    """
    Return [(page_number, page_text)] for the whole PDF.
    If parsing fails, returns [].
    """
    try:
        out: List[Tuple[int, str]] = []
        with timed(logger, "pdf.open"):
            with fitz.open(stream=file_bytes, filetype="pdf") as doc:
                pages = doc.page_count
                with timed(logger, "pdf.parse", pages=pages):
                    for i in range(pages):
                        page = doc.load_page(i)
                        txt = (page.get_text("text") or "").strip()
                        out.append((i + 1, txt))
        logger.info("pdf.pages count=%d", len(out))
        return out
    except Exception:
        # do not log payloads
        logger.error("pdf.parse.error", exc_info=True)
        return []


def extract_submission_text(file_bytes: bytes) -> str:
    """
    Whole-document text with pages separated by a blank line, so page
    breaks also count as paragraph breaks for style analysis.
    Empty pages are skipped; returns "" when nothing is extractable.
    """
    pages = extract_pages_texts(file_bytes)
    return "\n\n".join(txt for _, txt in pages if txt)
