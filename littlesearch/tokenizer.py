"""
Document reader, tokenizer and keyword normalizer for the search engine.
Splits raw text into whitespace-delimited words and turns each word into a
canonical keyword (lowercase, alphabetic only, not a noise word) or rejects it.
HTML documents are reduced to their visible text before tokenizing.
"""

import logging
import warnings
from pathlib import Path
from bs4 import BeautifulSoup, XMLParsedAsHTMLWarning, MarkupResemblesLocatorWarning
warnings.filterwarnings("ignore", category=XMLParsedAsHTMLWarning)
warnings.filterwarnings("ignore", category=MarkupResemblesLocatorWarning)

from nltk import download as _nltk_download
from nltk.tokenize import WhitespaceTokenizer

logger = logging.getLogger(__name__)

_WHITESPACE = WhitespaceTokenizer()

# Trailing punctuation stripped from a word before the keyword test
PUNCTUATION = frozenset(".,?:;!")
OPENING_BRACKETS = frozenset("({")
CLOSING_BRACKETS = frozenset(")}")

HTML_SUFFIXES = (".html", ".htm")


def get_keyword(word: str, noise_words: frozenset[str] | set[str] = frozenset()) -> str | None:
    """
    Return word as a keyword if it passes the keyword test, otherwise None.

    A keyword is any word that, after dropping one leading "(" or "{", one
    trailing ")" or "}", and any trailing punctuation (. , ? : ; !), consists
    only of alphabetic letters and is not a noise word. Case-insensitive.
    """
    if not word:
        return None
    word = word.strip().lower()
    if not word:
        return None

    if word[0] in OPENING_BRACKETS:
        word = word[1:]
    if word and word[-1] in CLOSING_BRACKETS:
        word = word[:-1]

    while word and not word[-1].isalpha():
        if word[-1] not in PUNCTUATION:
            return None
        word = word[:-1]

    if not word:
        return None
    if not word.isalpha():
        return None
    if word in noise_words:
        return None
    return word


def tokenize(text: str) -> list[str]:
    """Split text into raw whitespace-delimited words (punctuation kept)."""
    if not text:
        return []
    return _WHITESPACE.tokenize(text)


def extract_text_from_html(html_content: str) -> str:
    """
    Extract visible text from HTML content, stripping tags and scripts.
    """
    soup = BeautifulSoup(html_content, "lxml")
    for element in soup(["script", "style"]):
        element.decompose()
    return soup.get_text(separator=" ", strip=True)


def read_text_file(filepath: Path) -> str:
    """
    Read file content, handling common encodings.
    """
    filepath = Path(filepath)
    if not filepath.is_file():
        raise FileNotFoundError(f"Source not found: {filepath}")
    for encoding in ("utf-8", "cp1252"):
        try:
            return filepath.read_text(encoding=encoding)
        except UnicodeDecodeError:
            continue
    # latin-1 maps every byte
    return filepath.read_text(encoding="latin-1")


def read_document(filepath: Path) -> str:
    """Read a document as plain text; HTML files are reduced to visible text."""
    content = read_text_file(filepath)
    if Path(filepath).suffix.lower() in HTML_SUFFIXES:
        return extract_text_from_html(content)
    return content


def load_noise_words(filepath: Path) -> frozenset[str]:
    """
    Load noise words from a file (whitespace separated, usually one per line).
    Words are case-folded so lookups match normalized keywords.
    """
    words = frozenset(w.lower() for w in tokenize(read_text_file(filepath)))
    logger.debug("Loaded %d noise words from %s", len(words), filepath)
    return words


def nltk_noise_words(language: str = "english") -> frozenset[str]:
    """
    Noise words from NLTK's stopwords corpus, downloaded quietly when missing.
    """
    from nltk.corpus import stopwords

    try:
        words = stopwords.words(language)
    except LookupError:
        _nltk_download("stopwords", quiet=True)
        words = stopwords.words(language)
    return frozenset(w.lower() for w in words)
