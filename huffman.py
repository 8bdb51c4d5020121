import heapq
import itertools
from dataclasses import dataclass
from typing import Dict, Hashable, Iterable, List, Optional


FALLBACK_CODE = "0" # code for the only symbol of a one-leaf tree


class HuffmanError(Exception):
    """Base class for codec errors."""


class InvalidInputError(HuffmanError, ValueError):
    """Frequency table cannot produce a tree (empty, or a count below 1)."""


class SymbolNotFoundError(HuffmanError, KeyError):
    """Symbol being encoded has no entry in the code table."""


class DecodeError(HuffmanError, ValueError):
    """Bitstring does not describe a valid walk through the tree."""


class HuffmanNode: # Node for Huffman tree
    __slots__ = ("symbol", "frequency", "left", "right", "order")

    def __init__(self, symbol, frequency, left=None, right=None, order=0):
        self.symbol = symbol    # None for internal nodes
        self.frequency = frequency
        self.left = left
        self.right = right
        self.order = order      # creation order, breaks frequency ties

    def is_leaf(self) -> bool:
        return self.left is None and self.right is None

    def __lt__(self, other):
        # heapq only needs <; equal frequencies resolve to the older node
        return (self.frequency, self.order) < (other.frequency, other.order)

    def __repr__(self):
        if self.is_leaf():
            return f"HuffmanNode({self.symbol!r}, {self.frequency})"
        return f"HuffmanNode(<internal>, {self.frequency})"


def count_frequencies(symbols: Iterable[Hashable]) -> Dict[Hashable, int]:
    ft: Dict[Hashable, int] = {}
    for s in symbols:
        ft[s] = ft.get(s, 0) + 1
    return ft


def merge_frequencies(*tables: Dict[Hashable, int]) -> Dict[Hashable, int]:
    """
    Sum frequency tables counted over independent shards of one input
    """
    merged: Dict[Hashable, int] = {}
    for table in tables:
        for symbol, frequency in table.items():
            merged[symbol] = merged.get(symbol, 0) + frequency
    return merged


def build_huffman_tree(frequency_table: Dict[Hashable, int]) -> HuffmanNode: # frequency_table: dict of symbol -> frequency
    if not frequency_table:
        raise InvalidInputError("cannot build a Huffman tree from an empty frequency table")

    counter = itertools.count()
    priority_queue = []
    for symbol, frequency in frequency_table.items():
        if frequency < 1:
            raise InvalidInputError(f"symbol {symbol!r} has non-positive frequency {frequency}")
        priority_queue.append(HuffmanNode(symbol, frequency, order=next(counter)))
    heapq.heapify(priority_queue)

    # Build the tree
    while len(priority_queue) > 1:
        left = heapq.heappop(priority_queue)
        right = heapq.heappop(priority_queue)
        merged_node = HuffmanNode(None, left.frequency + right.frequency, left, right, order=next(counter))
        heapq.heappush(priority_queue, merged_node) # add the merged node back to the priority queue

    return priority_queue[0] # root of the tree


def generate_huffman_codes(root: HuffmanNode) -> Dict[Hashable, str]: # root: root of the Huffman tree
    # One-leaf tree: the natural path is empty, which cannot be decoded
    if root.is_leaf():
        return {root.symbol: FALLBACK_CODE}

    codes: Dict[Hashable, str] = {}
    stack = [(root, "")]
    while stack:
        node, current_code = stack.pop()
        if node.is_leaf():
            codes[node.symbol] = current_code
            continue
        # right first so the left subtree is visited first
        stack.append((node.right, current_code + "1"))
        stack.append((node.left, current_code + "0"))

    return codes # return the mapping of symbols to their corresponding Huffman codes


def huffman_encode(symbols: Iterable[Hashable], code_map: Dict[Hashable, str]) -> str: # symbols: input to encode, code_map: dict of symbol -> Huffman code
    parts = []
    for s in symbols:
        try:
            parts.append(code_map[s])
        except KeyError:
            raise SymbolNotFoundError(s) from None
    return "".join(parts)


def huffman_decode(bitstring: str, root: HuffmanNode) -> List[Hashable]: # bitstring: the encoded string of '0's and '1's, root: root of the Huffman tree
    decoded: List[Hashable] = []

    if root.is_leaf():
        for position, bit in enumerate(bitstring):
            if bit != FALLBACK_CODE:
                raise DecodeError(f"unexpected bit {bit!r} at position {position} for a single-symbol tree")
            decoded.append(root.symbol)
        return decoded

    current_node = root
    for position, bit in enumerate(bitstring):
        if bit == "0":
            current_node = current_node.left
        elif bit == "1":
            current_node = current_node.right
        else:
            raise DecodeError(f"invalid bit {bit!r} at position {position}")

        if current_node.is_leaf(): # reached a leaf
            decoded.append(current_node.symbol)
            current_node = root # reset to the root for the next symbol

    if current_node is not root:
        raise DecodeError("bitstring ended in the middle of a code")

    return decoded


def huffman_decode_text(bitstring: str, root: HuffmanNode) -> str:
    return "".join(huffman_decode(bitstring, root))


def compression_ratio(encoded: str, symbol_count: int) -> float:
    # bits out over 8 bits per input symbol
    if symbol_count == 0:
        return 0.0
    return len(encoded) / (symbol_count * 8)


def weighted_code_length(frequency_table: Dict[Hashable, int], code_map: Dict[Hashable, str]) -> int:
    return sum(frequency * len(code_map[symbol]) for symbol, frequency in frequency_table.items())


def is_prefix_free(code_map: Dict[Hashable, str]) -> bool:
    # after sorting, a prefix always sorts directly before some code it prefixes
    codes = sorted(code_map.values())
    for a, b in zip(codes, codes[1:]):
        if b.startswith(a):
            return False
    return True


@dataclass
class HuffmanResult:
    frequencies: Dict[Hashable, int]
    root: HuffmanNode
    codes: Dict[Hashable, str]
    encoded: str
    symbol_count: int

    @property
    def ratio(self) -> float:
        return compression_ratio(self.encoded, self.symbol_count)

    def decode(self) -> str:
        return huffman_decode_text(self.encoded, self.root)


def compress_text(text: str, frequencies: Optional[Dict[Hashable, int]] = None) -> HuffmanResult:
    """
    Run the whole forward pipeline on text

    A precomputed frequency table (e.g. merged from shards) may be passed in;
    it must cover every character of the text.
    """
    ft = frequencies if frequencies is not None else count_frequencies(text)
    root = build_huffman_tree(ft)
    codes = generate_huffman_codes(root)
    encoded = huffman_encode(text, codes)
    return HuffmanResult(
        frequencies=ft,
        root=root,
        codes=codes,
        encoded=encoded,
        symbol_count=len(text),
    )
