"""
Index builder: constructs the keyword index from a corpus of documents.
Each document is scanned into a per-document keyword -> occurrence map, which
is then merged into the global index with ordered insertion so that every
keyword's occurrence list stays in descending order of frequency.
"""

import logging
from collections import Counter
from pathlib import Path
from typing import Iterable

from .tokenizer import get_keyword, load_noise_words, read_document, read_text_file, tokenize
from .posting import InvertedIndex, Occurrence

logger = logging.getLogger(__name__)


def load_keywords(
    document: str,
    tokens: Iterable[str],
    noise_words: frozenset[str] | set[str] = frozenset(),
) -> dict[str, Occurrence]:
    """
    Count keywords in one document's token stream.
    Returns keyword -> Occurrence(document, in-document count); words that
    fail the keyword test contribute nothing.
    """
    counts = Counter(
        keyword
        for keyword in (get_keyword(token, noise_words) for token in tokens)
        if keyword is not None
    )
    return {keyword: Occurrence(document, tf) for keyword, tf in counts.items()}


def load_keywords_from_file(
    doc_file: Path,
    noise_words: frozenset[str] | set[str] = frozenset(),
    *,
    document: str | None = None,
) -> dict[str, Occurrence]:
    """
    Scan a document file and count its keywords. The document identifier is
    `document` if given, else the path as given.
    Raises FileNotFoundError if the file is missing.
    """
    text = read_document(Path(doc_file))
    keywords = load_keywords(document or str(doc_file), tokenize(text), noise_words)
    logger.debug("%s: %d distinct keywords", doc_file, len(keywords))
    return keywords


def merge_keywords(doc_keywords: dict[str, Occurrence], index: InvertedIndex) -> bool:
    """
    Merge one document's keywords into the index. A new keyword gets a
    single-element list; an existing keyword's list gets the occurrence
    inserted at its place by descending frequency.

    A document already in the index is skipped; returns False in that case.
    """
    documents = {occ.document for occ in doc_keywords.values()}
    with index.lock.write_locked():
        repeated = [doc for doc in documents if index.has_document(doc)]
        if repeated:
            logger.warning("Skipping already indexed document(s): %s", ", ".join(sorted(repeated)))
            return False
        for keyword, occ in doc_keywords.items():
            index.add_occurrence(keyword, occ)
    return True


def read_document_list(docs_file: Path) -> list[str]:
    """
    Read the list of document names, one per entry (whitespace separated).
    Names are kept as listed; a name listed again is dropped.
    """
    documents: list[str] = []
    seen: set[str] = set()
    for name in tokenize(read_text_file(Path(docs_file))):
        if name in seen:
            logger.warning("%s lists %s more than once", docs_file, name)
            continue
        seen.add(name)
        documents.append(name)
    return documents


def resolve_document(name: str | Path, base_dir: Path | None = None) -> Path:
    """
    Path to read for a listed document name. Relative names that do not exist
    from the working directory are looked up under base_dir.
    """
    path = Path(name)
    if base_dir is not None and not path.is_absolute() and not path.exists():
        candidate = Path(base_dir) / path
        if candidate.exists():
            return candidate
    return path


def make_index(
    docs_file: Path,
    noise_words_file: Path,
    *,
    index: InvertedIndex | None = None,
) -> InvertedIndex:
    """
    Index all keywords in all documents listed in docs_file.
    Noise words are loaded first; documents are merged in list order and
    identified by their names as listed.
    Raises FileNotFoundError if any input file is missing, aborting the build.
    """
    docs_file = Path(docs_file)
    noise_words = load_noise_words(Path(noise_words_file))
    return index_files(
        read_document_list(docs_file),
        noise_words,
        index=index,
        base_dir=docs_file.parent,
    )


def index_files(
    doc_files: Iterable[str | Path],
    noise_words: frozenset[str] | set[str] = frozenset(),
    *,
    index: InvertedIndex | None = None,
    base_dir: Path | None = None,
) -> InvertedIndex:
    """
    Merge the keywords of each document file into the index, in order.
    Each document is identified by its name as given; files are read from
    resolve_document(name, base_dir).
    """
    index = index if index is not None else InvertedIndex()
    num_docs = 0
    for doc in doc_files:
        keywords = load_keywords_from_file(
            resolve_document(doc, base_dir), noise_words, document=str(doc)
        )
        if merge_keywords(keywords, index):
            num_docs += 1
    logger.info("Indexed %d documents, %d keywords", num_docs, len(index))
    return index


def build_index(
    documents: Iterable[tuple[str, str]],
    noise_words: frozenset[str] | set[str] = frozenset(),
) -> InvertedIndex:
    """
    Build an index in memory from (document_id, text) pairs, in the given order.
    A repeated document_id is skipped.
    """
    index = InvertedIndex()
    num_docs = 0
    for document, text in documents:
        if merge_keywords(load_keywords(document, tokenize(text), noise_words), index):
            num_docs += 1
    logger.info("Indexed %d documents, %d keywords", num_docs, len(index))
    return index
