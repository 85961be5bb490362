"""
Rust Parser Module.

Wraps the tree-sitter Rust grammar. Tree-sitter always produces a
tree, recovering from bad input with ERROR and missing nodes; this
wrapper turns any such recovery into a SourceParseError so that only
well-formed programs reach feature extraction.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from resemble.analysis.taxonomy import ATTRIBUTE_KINDS, COMMENT_KINDS, ITEM_KINDS
from resemble.core.config import ParserConfig
from resemble.core.exceptions import ParserUnavailableError, SourceParseError

logger = logging.getLogger(__name__)

# Tree-sitter imports
try:
    import tree_sitter_rust as ts_rust
    from tree_sitter import Language, Parser
    TREE_SITTER_AVAILABLE = True
except ImportError:
    TREE_SITTER_AVAILABLE = False
    logger.warning("tree-sitter-rust not available, Rust sources cannot be parsed")

# File-level constructs accepted besides items
TOP_LEVEL_KINDS = ITEM_KINDS | ATTRIBUTE_KINDS | COMMENT_KINDS | {
    "macro_invocation",
    "empty_statement",
    "shebang",
}

SNIPPET_LENGTH = 20


class RustParser:
    """
    Tree-sitter based parser for Rust source code.

    The underlying tree-sitter parser is created on first use. A
    RustParser holds mutable parser state and should not be shared
    between threads.
    """

    def __init__(self, config: Optional[ParserConfig] = None):
        self.config = config or ParserConfig()
        self._parser = None
        self._language = None

    def _initialize_parser(self) -> None:
        """Initialize tree-sitter parser with Rust grammar."""
        if not TREE_SITTER_AVAILABLE:
            raise ParserUnavailableError(
                "install the tree-sitter and tree-sitter-rust packages"
            )

        try:
            self._language = Language(ts_rust.language())
            self._parser = Parser(self._language)
        except Exception as e:
            logger.error(f"Failed to initialize Rust parser: {e}")
            raise ParserUnavailableError(str(e)) from e

    def parse(self, source: Union[str, bytes], path: Optional[str] = None):
        """
        Parse Rust source text into a syntax tree.

        Args:
            source: Source code as text or UTF-8 bytes.
            path: Optional path the source was read from, used in errors.

        Returns:
            The tree-sitter Tree of a well-formed program.

        Raises:
            SourceParseError: If the source is not valid Rust syntax.
        """
        if self._parser is None:
            self._initialize_parser()

        content = source.encode("utf-8") if isinstance(source, str) else source
        tree = self._parser.parse(content)
        root = tree.root_node

        if root.has_error:
            description = self._describe_error(root)
            logger.debug(f"Parse error in {path or '<source>'}: {description}")
            raise SourceParseError(path, description)

        if self.config.reject_top_level_statements:
            self._check_top_level(root, path)

        return tree

    def parse_file(self, file_path: Union[str, Path]):
        """
        Read and parse a Rust source file.

        Args:
            file_path: Path to the source file.

        Returns:
            The tree-sitter Tree of the file.
        """
        file_path = Path(file_path)
        try:
            content = file_path.read_text(encoding=self.config.encoding)
        except UnicodeDecodeError as e:
            raise SourceParseError(
                str(file_path),
                f"file is not valid {self.config.encoding} text ({e.reason})",
            ) from e

        return self.parse(content, path=str(file_path))

    def _describe_error(self, root) -> str:
        """Describe the first ERROR or missing node in source order."""
        node = self._find_first_error(root)
        if node is None:
            return "syntax error"

        line, column = node.start_point[0] + 1, node.start_point[1] + 1
        if node.is_missing:
            return f"missing '{node.type}' at line {line}, column {column}"

        snippet = self._get_node_text(node)
        if len(snippet) > SNIPPET_LENGTH:
            snippet = snippet[:SNIPPET_LENGTH] + "..."
        return f"syntax error at line {line}, column {column} near '{snippet}'"

    def _find_first_error(self, root):
        """Find the first ERROR or missing node in source order."""
        stack = [root]
        while stack:
            node = stack.pop()
            if node.type == "ERROR" or node.is_missing:
                return node
            stack.extend(
                child for child in reversed(node.children)
                if child.has_error or child.is_missing
            )
        return None

    def _check_top_level(self, root, path: Optional[str]) -> None:
        """Reject file-level constructs that are not items."""
        for child in root.named_children:
            if child.type in TOP_LEVEL_KINDS:
                continue
            if child.type == "expression_statement" and self._is_macro_statement(child):
                continue

            line, column = child.start_point[0] + 1, child.start_point[1] + 1
            raise SourceParseError(
                path,
                f"expected item at line {line}, column {column}, found {child.type}",
            )

    def _is_macro_statement(self, node) -> bool:
        """Check whether an expression statement wraps only a macro call."""
        named = [c for c in node.named_children if c.type not in COMMENT_KINDS]
        return len(named) == 1 and named[0].type == "macro_invocation"

    def _get_node_text(self, node) -> str:
        """Extract text content from a tree-sitter node."""
        return node.text.decode("utf-8", errors="replace") if node.text else ""
