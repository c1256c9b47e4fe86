"""
Word count example.
Counts the ten most frequent words of a text file and reports any chunks
whose counts were lost.

Usage:
    python examples/wordcount.py path/to/input.txt [folds]
"""

import sys
import logging

from wordfold import SourceReadError, run_pipeline


def main():
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    if len(sys.argv) < 2:
        print(__doc__)
        return 1

    folds = int(sys.argv[2]) if len(sys.argv) > 2 else 5

    try:
        result = run_pipeline(sys.argv[1], folds=folds, top_k=10)
    except SourceReadError as e:
        print(f"Error: {e}")
        return 1

    for word, count in result.top_words:
        print(f"{word}: {count}")

    if not result.complete:
        print(f"Incomplete: chunks {result.dropped_chunks} were not counted")
    return 0


if __name__ == "__main__":
    sys.exit(main())
