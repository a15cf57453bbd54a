"""
Search component: "keyword1 OR keyword2" queries over the keyword index.

A document matches if either keyword occurs in it. Results are ordered by
descending frequency, ties go to the first keyword, each document appears
once, and at most TOP_K documents are returned.

Usage (from repo root):
    python -m littlesearch.search_cli --docs docs.txt --noise noisewords.txt
    python -m littlesearch.search_cli --docs docs.txt --noise noisewords.txt --query deep world
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from .index_builder import index_files, make_index, read_document_list
from .posting import InvertedIndex, Occurrence
from .tokenizer import nltk_noise_words

TOP_K = 5


def merge_top(
    occs1: Sequence[Occurrence],
    occs2: Sequence[Occurrence],
    limit: int = TOP_K,
) -> List[str]:
    """
    Walk two descending-frequency occurrence lists from their heads and
    collect up to `limit` distinct documents, highest frequency first.
    On equal frequency the first list wins. A document already collected is
    skipped without counting toward the limit.
    """
    result: List[str] = []
    seen: set[str] = set()
    i = j = 0
    while len(result) < limit and (i < len(occs1) or j < len(occs2)):
        if j >= len(occs2):
            occ = occs1[i]
            i += 1
        elif i >= len(occs1):
            occ = occs2[j]
            j += 1
        elif occs1[i].frequency >= occs2[j].frequency:
            occ = occs1[i]
            i += 1
        else:
            occ = occs2[j]
            j += 1
        if occ.document in seen:
            continue
        seen.add(occ.document)
        result.append(occ.document)
    return result


def top5search(
    index: InvertedIndex,
    kw1: str,
    kw2: str,
    limit: int = TOP_K,
) -> Optional[List[str]]:
    """
    Documents in which kw1 or kw2 occurs, in descending order of frequency,
    limited to `limit` entries (at most TOP_K). Returns None if neither
    keyword is indexed. Raises ValueError for a negative limit.
    """
    if limit < 0:
        raise ValueError(f"limit must be non-negative, got {limit}")
    limit = min(limit, TOP_K)
    kw1 = kw1.strip().lower()
    kw2 = kw2.strip().lower()
    with index.lock.read_locked():
        occs1 = index.get_postings(kw1)
        occs2 = index.get_postings(kw2)
        if occs1 is None and occs2 is None:
            return None
        if occs2 is None:
            return [o.document for o in occs1[:limit]]
        if occs1 is None:
            return [o.document for o in occs2[:limit]]
        return merge_top(occs1, occs2, limit)


def top_k_arg(value: str) -> int:
    """argparse type for --top: an integer between 0 and TOP_K."""
    try:
        k = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}")
    if not 0 <= k <= TOP_K:
        raise argparse.ArgumentTypeError(f"must be between 0 and {TOP_K}, got {k}")
    return k


def build_index_from_args(args: argparse.Namespace) -> InvertedIndex:
    """Build the index from the document list and the chosen noise words."""
    if args.nltk_stopwords:
        return index_files(
            read_document_list(args.docs), nltk_noise_words(), base_dir=args.docs.parent
        )
    return make_index(args.docs, args.noise)


def print_results(kw1: str, kw2: str, results: Optional[List[str]]) -> None:
    if results is None:
        print(f"Neither {kw1!r} nor {kw2!r} is indexed.")
        return
    if not results:
        print("No documents matched the query.")
        return
    print(f"Top {len(results)} results:")
    for rank, doc in enumerate(results, start=1):
        print(f"{rank:2d}. {doc}")


def run_search_loop(index: InvertedIndex, top_k: int = TOP_K) -> None:
    """
    Interactive command-line search loop.
    """
    print(f"Indexed {len(index)} keywords.")
    print("Enter two keywords per query (OR semantics). Empty line or Ctrl+C to exit.")

    while True:
        try:
            raw_query = input("query> ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            break
        if not raw_query:
            break

        words = raw_query.split()
        if len(words) != 2:
            print("Enter exactly two keywords.")
            continue

        kw1, kw2 = words
        print_results(kw1, kw2, top5search(index, kw1, kw2, limit=top_k))


def main(argv: Iterable[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Two-keyword OR search over a document corpus.")
    parser.add_argument(
        "--docs",
        type=Path,
        default=Path("docs.txt"),
        help="File listing the document files to index, one per line.",
    )
    parser.add_argument(
        "--noise",
        type=Path,
        default=Path("noisewords.txt"),
        help="File listing noise words, one per line.",
    )
    parser.add_argument(
        "--nltk-stopwords",
        action="store_true",
        help="Use NLTK's English stopwords as noise words instead of --noise.",
    )
    parser.add_argument(
        "--query",
        nargs=2,
        metavar=("KW1", "KW2"),
        default=None,
        help="Answer a single query and exit.",
    )
    parser.add_argument(
        "--top",
        type=top_k_arg,
        default=TOP_K,
        help=f"Number of top results to show (0-{TOP_K}).",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    args = parser.parse_args(list(argv) if argv is not None else None)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    try:
        index = build_index_from_args(args)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.query:
        kw1, kw2 = args.query
        print_results(kw1, kw2, top5search(index, kw1, kw2, limit=args.top))
    else:
        run_search_loop(index, top_k=args.top)
    return 0


if __name__ == "__main__":
    sys.exit(main())
