# huffman_cli.py

"""
Compress a text file with Huffman coding and report the result

How to run:
  python huffman_cli.py input.txt
  python huffman_cli.py input.txt --codes
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Dict, Hashable, List, Optional

import huffman as huff


SHOW_STRINGS_BELOW = 100 # only echo input/encoded/decoded for short inputs


def read_input(path: Path) -> str:
    with path.open("r", encoding="utf-8") as f:
        lines = [line.rstrip("\n") for line in f]
    return "\n".join(lines).strip()


def format_code_table(code_map: Dict[Hashable, str]) -> List[str]:
    items = sorted(code_map.items(), key=lambda kv: (len(kv[1]), repr(kv[0])))
    return [f"{symbol!r}: {code}" for symbol, code in items]


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Huffman-encode a text file and report the compression ratio.")
    ap.add_argument("filename", type=str, help="Path to the input text file")
    ap.add_argument("--codes", action="store_true", help="Also print the code table")
    args = ap.parse_args(argv)

    try:
        text = read_input(Path(args.filename))
    except FileNotFoundError as e:
        print(f"File not found: {e}")
        return 1

    if not text:
        print(f"Nothing to encode: {args.filename} is empty", file=sys.stderr)
        return 1

    result = huff.compress_text(text)
    decoded = result.decode()

    if len(text) < SHOW_STRINGS_BELOW:
        print("Input string: " + text)
        print("Encoded string: " + result.encoded)
        print("Decoded string: " + decoded)

    if args.codes:
        print("Code table:")
        for line in format_code_table(result.codes):
            print("  " + line)

    print(f"Decoded equals input: {decoded == text}")
    print(f"Compression ratio: {result.ratio}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
