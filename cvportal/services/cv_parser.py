import logging
import os

import fitz  # PyMuPDF
import docx

logger = logging.getLogger(__name__)

PDF_MEDIA_TYPE = "application/pdf"
DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
TEXT_MEDIA_TYPE = "text/plain"

MEDIA_TYPES_BY_EXTENSION = {
    ".pdf": PDF_MEDIA_TYPE,
    ".docx": DOCX_MEDIA_TYPE,
    ".txt": TEXT_MEDIA_TYPE,
}
ALLOWED_MEDIA_TYPES = frozenset(MEDIA_TYPES_BY_EXTENSION.values())
EXTENSIONS_BY_MEDIA_TYPE = {media: ext for ext, media in MEDIA_TYPES_BY_EXTENSION.items()}

FALLBACK_TEXT = "Text could not be extracted - file name: {filename}"


def media_type_for(file_path):
    """Guess the media type of a stored CV from its extension."""
    _, ext = os.path.splitext(file_path or "")
    return MEDIA_TYPES_BY_EXTENSION.get(ext.lower())


def download_extension(original_filename, media_type, stored_path=None):
    """
    Extension for a CV download name.

    Stored names can lose the extension when the original name has no ASCII
    characters, so the uploaded name and the media type are tried first.
    """
    for path in (original_filename, stored_path):
        ext = os.path.splitext(path or "")[1].lower()
        if ext in MEDIA_TYPES_BY_EXTENSION:
            return ext
    return EXTENSIONS_BY_MEDIA_TYPE.get(media_type, ".pdf")


def _extract_pdf(file_path):
    doc = fitz.open(file_path)
    all_blocks = []
    try:
        for page in doc:
            all_blocks.extend(page.get_text("blocks"))
    finally:
        doc.close()

    # reading order: top to bottom, then left to right
    all_blocks.sort(key=lambda b: (b[1], b[0]))
    return "\n".join(block[4] for block in all_blocks)


def _extract_docx(file_path):
    document = docx.Document(file_path)
    return "\n".join(para.text for para in document.paragraphs)


def _extract_plain(file_path):
    with open(file_path, "r", encoding="utf-8", errors="replace") as f:
        return f.read()


_EXTRACTORS = {
    PDF_MEDIA_TYPE: _extract_pdf,
    DOCX_MEDIA_TYPE: _extract_docx,
    TEXT_MEDIA_TYPE: _extract_plain,
}


def extract_text(file_path, media_type=None):
    """
    Extract plain text from a PDF, DOCX or TXT file.

    Returns an empty string for missing files and unsupported types.
    Errors raised by the underlying readers propagate.
    """
    if not os.path.exists(file_path):
        logger.warning("File not found: %s", file_path)
        return ""

    media_type = media_type or media_type_for(file_path)
    extractor = _EXTRACTORS.get(media_type)
    if extractor is None:
        logger.warning("Unsupported media type %r for %s", media_type, file_path)
        return ""

    return extractor(file_path)


def extract_cv_text(file_path, media_type, original_filename):
    """
    Extract CV text without ever failing.

    When extraction raises or yields only whitespace, a fallback string naming
    the original file is returned instead, so callers always get a non-empty
    string.
    """
    try:
        text = extract_text(file_path, media_type)
    except Exception:
        logger.exception("Text extraction failed for %s", original_filename)
        text = ""

    if not text or not text.strip():
        logger.info("No text extracted from %s, using file name as fallback", original_filename)
        return FALLBACK_TEXT.format(filename=original_filename)

    return text
