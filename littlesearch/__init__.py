"""Keyword index and two-keyword search package."""

from .posting import Occurrence, InvertedIndex
from .index_builder import build_index, make_index, merge_keywords
from .search_cli import top5search
from .tokenizer import get_keyword, tokenize
