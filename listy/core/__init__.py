"""Core data model, reply parsing, and merge logic.

WHY: The core package holds the pieces of the pipeline with no I/O at
all: the Category record, the sanitizer/parser for model replies, and
the merge engine. They are pure and synchronous, so they are trivial to
test and safe to call from the event loop.

RULES:
- No network or timer code here
- Category is the contract shared by every other package
"""

from listy.core.ir import Category
from listy.core.merge import merge_categories
from listy.core.parser import extract_payload, parse_categories

__all__ = ["Category", "extract_payload", "merge_categories", "parse_categories"]
