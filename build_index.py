"""
Build the keyword index and print index analytics.

Usage:
    python build_index.py --docs docs.txt --noise noisewords.txt

docs.txt lists the document files (one per line, relative to docs.txt or the
working directory); noisewords.txt lists noise words, one per line.

Output:
  - Analytics table printed to console
  - Optionally, the index as JSON ({keyword: [[document, frequency], ...]})
    with --dump, for inspection
"""

import json
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent))

from littlesearch.index_builder import make_index


def main(argv=None) -> int:
    import argparse
    parser = argparse.ArgumentParser(description="Build the keyword index and print analytics")
    parser.add_argument(
        "--docs",
        type=Path,
        default=Path("docs.txt"),
        help="File listing document files (default: docs.txt)",
    )
    parser.add_argument(
        "--noise",
        type=Path,
        default=Path("noisewords.txt"),
        help="File listing noise words (default: noisewords.txt)",
    )
    parser.add_argument(
        "--dump",
        type=Path,
        default=None,
        help="Write the index as JSON to this path",
    )
    args = parser.parse_args(argv)

    try:
        index = make_index(args.docs, args.noise)
    except FileNotFoundError as e:
        print(f"Error: {e}")
        return 1

    index_dict = index.to_dict()
    num_docs = sum(1 for _doc in index.documents())
    num_occurrences = sum(len(occs) for occs in index_dict.values())

    print("\n" + "=" * 50)
    print("INDEX ANALYTICS")
    print("=" * 50)
    print()
    print("| Metric                        | Value |")
    print("|-------------------------------|-------|")
    print(f"| Documents with keywords       | {num_docs} |")
    print(f"| Unique keywords               | {len(index)} |")
    print(f"| Keyword occurrences           | {num_occurrences} |")
    print()

    if args.dump:
        args.dump.parent.mkdir(parents=True, exist_ok=True)
        with open(args.dump, "w", encoding="utf-8") as f:
            json.dump(index_dict, f, indent=2, ensure_ascii=False)
        print(f"Index saved to: {args.dump}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
