"""
Syntax-tree feature extraction.

Walks a tree-sitter Rust syntax tree and counts every node that
belongs to the feature taxonomy. The walk is depth-first, visits each
node once (parent before children, siblings in source order) and never
stops at a counted node, so counts are additive across nesting: a loop
holding ten calls adds one loop and ten calls.

The category of a node depends on where it sits, not only on its kind:
an identifier is a path expression in `x + 1`, a binding pattern in
`let x`, a path type in `let _: x` and nothing at all in `fn x()`. Each
visit therefore carries a role (expression, type, pattern, path or
item) that the parent assigns to the child.

The walk keeps its own stack of pending (node, role) pairs instead of
recursing, so nesting depth is bounded by memory rather than by the
interpreter's recursion limit.
"""

import logging
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple, Union

from resemble.analysis.parser import RustParser
from resemble.analysis.taxonomy import (
    ATTRIBUTE,
    ATTRIBUTE_KINDS,
    BLOCK,
    BLOCK_OWNER_KINDS,
    COMMENT_KINDS,
    EXPR_LIT,
    EXPR_MACRO,
    EXPR_METHOD_CALL,
    EXPR_OTHER,
    EXPR_PATH,
    EXPRESSION_VARIANTS,
    IGNORED_KINDS,
    ITEM_KINDS,
    LITERAL_KINDS,
    MACRO,
    PAT_IDENT,
    PAT_OTHER,
    PAT_WILD,
    PATTERN_PASSTHROUGH_KINDS,
    PATTERN_VARIANTS,
    STMT_EXPR,
    STMT_ITEM,
    STMT_LOCAL,
    STMT_MACRO,
    TYPE_ARRAY,
    TYPE_INFER,
    TYPE_OTHER,
    TYPE_PATH,
    TYPE_REFERENCE,
    TYPE_SLICE,
    TYPE_VARIANTS,
)
from resemble.core.config import FeatureConfig

logger = logging.getLogger(__name__)

# Positional roles assigned by a parent to its children
ROLE_ITEM = "item"
ROLE_EXPR = "expr"
ROLE_TYPE = "type"
ROLE_PAT = "pat"
ROLE_PATH = "path"
ROLE_STMT = "stmt"
ROLE_SKIP = "skip"

# Role of a child reached through a field, whatever the parent
FIELD_ROLES: Dict[str, str] = {
    "value": ROLE_EXPR,
    "condition": ROLE_EXPR,
    "left": ROLE_EXPR,
    "right": ROLE_EXPR,
    "function": ROLE_EXPR,
    "length": ROLE_EXPR,
    "type": ROLE_TYPE,
    "return_type": ROLE_TYPE,
    "element": ROLE_TYPE,
    "default_type": ROLE_TYPE,
    "pattern": ROLE_PAT,
    "name": ROLE_PATH,
    "trait": ROLE_PATH,
    "alias": ROLE_PATH,
    "path": ROLE_PATH,
    "bounds": ROLE_PATH,
    "field": ROLE_SKIP,
    "label": ROLE_SKIP,
    "macro": ROLE_SKIP,
    "operator": ROLE_SKIP,
    "type_arguments": ROLE_ITEM,
    "type_parameters": ROLE_ITEM,
    "parameters": ROLE_ITEM,
    "arguments": ROLE_ITEM,
    "consequence": ROLE_ITEM,
    "alternative": ROLE_ITEM,
}

# (parent kind, field) pairs that differ from FIELD_ROLES or the default
CHILD_ROLE_OVERRIDES: Dict[Tuple[str, Optional[str]], str] = {
    ("generic_type", "type"): ROLE_PATH,
    ("generic_type_with_turbofish", "type"): ROLE_PATH,
    ("generic_function", "function"): ROLE_PATH,
    ("struct_pattern", "type"): ROLE_PATH,
    ("tuple_struct_pattern", "type"): ROLE_PATH,
    ("higher_ranked_trait_bound", "type"): ROLE_PATH,
    ("constrained_type_parameter", "left"): ROLE_PATH,
    ("where_predicate", "left"): ROLE_TYPE,
    ("closure_parameters", None): ROLE_PAT,
    ("arguments", None): ROLE_EXPR,
    ("base_field_initializer", None): ROLE_EXPR,
    ("else_clause", None): ROLE_EXPR,
    ("range_pattern", None): ROLE_EXPR,
    ("bracketed_type", None): ROLE_TYPE,
    ("bounded_type", None): ROLE_PATH,
    ("removed_trait_bound", None): ROLE_PATH,
    ("trait_bounds", None): ROLE_PATH,
}

# Children still to be visited, each with the role its parent assigned
Pending = List[Tuple[object, str]]


def _iter_children(node) -> Iterator[Tuple[Optional[str], object]]:
    """Yield (field name, child) for every child of a node, in order."""
    cursor = node.walk()
    if not cursor.goto_first_child():
        return
    while True:
        yield cursor.field_name, cursor.node
        if not cursor.goto_next_sibling():
            break


def _is_doc_comment(text: str) -> bool:
    """Check whether a comment is an outer or inner doc comment."""
    if text.startswith("///"):
        return not text.startswith("////")
    if text.startswith("/**"):
        return not text.startswith("/***") and text != "/**/"
    return text.startswith("//!") or text.startswith("/*!")


class FeatureCounter:
    """Label counts accumulated by a single traversal."""

    def __init__(self):
        self._counts: Dict[str, float] = {}

    def bump(self, key: str) -> None:
        """Increment the count for a label."""
        self._counts[key] = self._counts.get(key, 0.0) + 1.0

    @property
    def total(self) -> float:
        return sum(self._counts.values())

    def to_dict(self) -> Dict[str, float]:
        """Return a copy of the counts as a plain dictionary."""
        return dict(self._counts)


class FeatureExtractor:
    """
    Converts Rust syntax trees into feature maps.

    Statements are counted exhaustively (Local, Item, Expr, Macro).
    Expressions, types and patterns keep a fixed list of variants and
    send everything else to their Other bucket. Macros, attributes and
    blocks are counted once per occurrence.

    The extractor is stateless between calls; every extraction owns a
    fresh FeatureCounter. Each `_visit_*` method counts one node and
    returns the children still to be visited, in source order.
    """

    def __init__(self, config: Optional[FeatureConfig] = None):
        self.config = config or FeatureConfig()

    def extract(self, tree) -> Dict[str, float]:
        """
        Extract the feature map of a parsed file.

        Args:
            tree: tree-sitter Tree produced by RustParser.

        Returns:
            Mapping from feature label to occurrence count.
        """
        return self.extract_node(tree.root_node)

    def extract_node(self, node) -> Dict[str, float]:
        """
        Extract the feature map of a subtree, such as a single item.

        Args:
            node: tree-sitter Node to start from.

        Returns:
            Mapping from feature label to occurrence count.
        """
        counter = FeatureCounter()
        stack: Pending = [(node, ROLE_ITEM)]
        while stack:
            current, role = stack.pop()
            pending = self._visit(current, role, counter)
            stack.extend(reversed(pending))

        counts = counter.to_dict()
        logger.debug(
            f"Extracted {len(counts)} labels from {counter.total:.0f} nodes"
        )
        return counts

    def _visit(self, node, role: str, counter: FeatureCounter) -> Pending:
        """Count one node in its role and return its children."""
        kind = node.type

        if kind in COMMENT_KINDS:
            self._visit_comment(node, counter)
            return []

        if not node.is_named:
            if kind == "_" and role == ROLE_PAT:
                counter.bump(PAT_WILD)
            elif kind == "_" and role == ROLE_TYPE:
                counter.bump(TYPE_INFER)
            return []

        if kind in IGNORED_KINDS:
            return []
        if kind in ATTRIBUTE_KINDS:
            return self._visit_attribute(node, counter)
        if kind == "macro_invocation":
            self._visit_macro(node, role, counter)
            return []
        if kind == "macro_definition":
            counter.bump(MACRO)
            return []
        if kind == "block":
            return self._visit_block(node, role, counter)
        if kind == "type_arguments":
            return self._visit_type_arguments(node)

        if role == ROLE_EXPR:
            return self._visit_expression(node, counter)
        if role == ROLE_TYPE:
            return self._visit_type(node, counter)
        if role == ROLE_PAT:
            return self._visit_pattern(node, counter)
        if role == ROLE_PATH:
            return self._visit_path(node)
        return self._visit_item(node, counter)

    def _children(self, node, default_role: str) -> Pending:
        """Pair every child with the role its position implies."""
        pending = []
        for field, child in _iter_children(node):
            role = self._child_role(node, field, child, default_role)
            if role != ROLE_SKIP:
                pending.append((child, role))
        return pending

    def _child_role(self, parent, field: Optional[str], child, default_role: str) -> str:
        """Decide the role of a child from its parent kind and field."""
        if child.type == "block":
            if parent.type in BLOCK_OWNER_KINDS:
                return ROLE_ITEM
            return ROLE_EXPR

        override = CHILD_ROLE_OVERRIDES.get((parent.type, field))
        if override is not None:
            return override

        if field == "body":
            if parent.type == "closure_expression":
                return ROLE_EXPR
            return ROLE_ITEM

        return FIELD_ROLES.get(field, default_role)

    def _visit_comment(self, node, counter: FeatureCounter) -> None:
        """Doc comments desugar to `#[doc = "..."]` attributes."""
        if not self.config.count_doc_comments:
            return
        text = node.text.decode("utf-8", errors="replace") if node.text else ""
        if _is_doc_comment(text):
            counter.bump(ATTRIBUTE)
            counter.bump(EXPR_LIT)

    def _visit_attribute(self, node, counter: FeatureCounter) -> Pending:
        """Count an attribute; only a `name = value` form has an expression."""
        counter.bump(ATTRIBUTE)
        pending = []
        for child in node.named_children:
            if child.type != "attribute":
                continue
            value = child.child_by_field_name("value")
            if value is not None:
                pending.append((value, ROLE_EXPR))
        return pending

    def _visit_macro(self, node, role: str, counter: FeatureCounter) -> None:
        """Count a macro invocation; its token tree is opaque."""
        counter.bump(MACRO)
        if role == ROLE_EXPR:
            counter.bump(EXPR_MACRO)
        elif role == ROLE_PAT:
            counter.bump(PAT_OTHER)
        elif role == ROLE_TYPE:
            counter.bump(TYPE_OTHER)

    def _visit_block(self, node, role: str, counter: FeatureCounter) -> Pending:
        """Count a block and classify each of its statements."""
        counter.bump(BLOCK)
        if role == ROLE_EXPR:
            counter.bump(EXPR_OTHER)

        pending = []
        for child in node.named_children:
            kind = child.type
            if kind in COMMENT_KINDS or kind in ATTRIBUTE_KINDS or kind in ("label", "empty_statement"):
                pending.append((child, ROLE_ITEM))
            elif kind == "let_declaration":
                counter.bump(STMT_LOCAL)
                pending.append((child, ROLE_ITEM))
            elif kind == "expression_statement":
                pending.extend(self._visit_expression_statement(child, counter))
            elif kind == "macro_invocation":
                counter.bump(STMT_MACRO)
                pending.append((child, ROLE_STMT))
            elif kind in ITEM_KINDS:
                counter.bump(STMT_ITEM)
                pending.append((child, ROLE_ITEM))
            else:
                # Trailing expression of the block
                counter.bump(STMT_EXPR)
                pending.append((child, ROLE_EXPR))
        return pending

    def _visit_expression_statement(self, node, counter: FeatureCounter) -> Pending:
        """A macro call in statement position is a macro statement."""
        named = [c for c in node.named_children if c.type not in COMMENT_KINDS]
        is_macro = len(named) == 1 and named[0].type == "macro_invocation"
        counter.bump(STMT_MACRO if is_macro else STMT_EXPR)

        pending = []
        for child in node.children:
            if child.type in COMMENT_KINDS:
                pending.append((child, ROLE_ITEM))
            else:
                pending.append((child, ROLE_STMT if is_macro else ROLE_EXPR))
        return pending

    def _visit_expression(self, node, counter: FeatureCounter) -> Pending:
        """Count an expression node."""
        kind = node.type

        if kind == "call_expression":
            callee = self._method_callee(node)
            if callee is not None:
                counter.bump(EXPR_METHOD_CALL)
                return self._visit_method_call(node, callee)

        if kind == "array_expression" and node.child_by_field_name("length") is not None:
            # `[x; n]` repeat expression
            counter.bump(EXPR_OTHER)
        else:
            counter.bump(EXPRESSION_VARIANTS.get(kind, EXPR_OTHER))

        if kind in LITERAL_KINDS or kind in ("identifier", "self"):
            return []
        if kind == "scoped_identifier":
            return self._children(node, ROLE_PATH)
        return self._children(node, ROLE_EXPR)

    def _method_callee(self, node):
        """Return the callee of `receiver.method(..)`, or None for plain calls."""
        function = node.child_by_field_name("function")
        if function is None:
            return None

        access = function
        if function.type == "generic_function":
            access = function.child_by_field_name("function")
        if access is None or access.type != "field_expression":
            return None

        member = access.child_by_field_name("field")
        if member is None or member.type != "field_identifier":
            return None
        return function

    def _visit_method_call(self, node, callee) -> Pending:
        """Receiver, turbofish and arguments of a method call."""
        pending = []
        access = callee
        if callee.type == "generic_function":
            access = callee.child_by_field_name("function")
            for child in callee.named_children:
                if child.type == "type_arguments":
                    pending.append((child, ROLE_TYPE))

        receiver = access.child_by_field_name("value")
        if receiver is not None:
            pending.insert(0, (receiver, ROLE_EXPR))

        for field, child in _iter_children(node):
            if field == "function":
                continue
            role = self._child_role(node, field, child, ROLE_EXPR)
            if role != ROLE_SKIP:
                pending.append((child, role))
        return pending

    def _visit_type(self, node, counter: FeatureCounter) -> Pending:
        """Count a type node."""
        kind = node.type

        if kind == "type_identifier" and node.text == b"_":
            counter.bump(TYPE_INFER)
            return []

        if kind == "qualified_type":
            # `<T as Trait>` only wraps the self type
            return self._children(node, ROLE_TYPE)

        if kind == "array_type":
            has_length = node.child_by_field_name("length") is not None
            counter.bump(TYPE_ARRAY if has_length else TYPE_SLICE)
        elif kind == "function_type" and node.child_by_field_name("trait") is not None:
            counter.bump(TYPE_PATH)
        else:
            counter.bump(TYPE_VARIANTS.get(kind, TYPE_OTHER))

        if kind in ("type_identifier", "primitive_type"):
            return []
        if kind == "function_type":
            return self._visit_function_type(node)
        return self._children(node, ROLE_TYPE)

    def _visit_function_type(self, node) -> Pending:
        """Parameter and return types of `fn(..)` or `Fn(..)`."""
        pending = []
        for field, child in _iter_children(node):
            if field == "parameters":
                for _, param in _iter_children(child):
                    if param.type == "parameter":
                        param_type = param.child_by_field_name("type")
                        if param_type is not None:
                            pending.append((param_type, ROLE_TYPE))
                    elif param.is_named:
                        pending.append((param, ROLE_TYPE))
            elif field == "return_type":
                pending.append((child, ROLE_TYPE))
            elif field == "trait":
                pending.append((child, ROLE_PATH))
        return pending

    def _visit_type_arguments(self, node) -> Pending:
        """Generic arguments: types, const values, bindings and bounds."""
        pending = []
        for child in node.children:
            kind = child.type
            if kind in LITERAL_KINDS or kind == "block":
                pending.append((child, ROLE_EXPR))
            elif kind == "trait_bounds":
                pending.append((child, ROLE_PATH))
            elif kind == "type_binding":
                pending.append((child, ROLE_ITEM))
            else:
                pending.append((child, ROLE_TYPE))
        return pending

    def _visit_pattern(self, node, counter: FeatureCounter) -> Pending:
        """Count a pattern node."""
        kind = node.type

        if kind == "self":
            return []
        if kind in PATTERN_PASSTHROUGH_KINDS:
            return self._children(node, ROLE_PAT)

        counter.bump(PATTERN_VARIANTS.get(kind, PAT_OTHER))

        if kind in LITERAL_KINDS or kind == "identifier":
            return []
        if kind == "scoped_identifier":
            return self._children(node, ROLE_PATH)
        if kind == "struct_pattern":
            return self._visit_struct_pattern(node, counter)
        if kind == "captured_pattern":
            # `name @ subpattern` is one binding around the subpattern
            binding = node.named_children[0] if node.named_children else None
            return [
                (child, ROLE_PAT)
                for child in node.children
                if binding is None or child.id != binding.id
            ]
        return self._children(node, ROLE_PAT)

    def _visit_struct_pattern(self, node, counter: FeatureCounter) -> Pending:
        """Fields of `Name { a, b: pat, .. }`."""
        pending = []
        for field, child in _iter_children(node):
            if field == "type":
                pending.append((child, ROLE_PATH))
            elif child.type == "field_pattern":
                subpattern = child.child_by_field_name("pattern")
                if subpattern is None:
                    # Shorthand `Name { a }` binds `a`
                    counter.bump(PAT_IDENT)
                else:
                    pending.append((subpattern, ROLE_PAT))
            elif child.type in COMMENT_KINDS or child.type in ATTRIBUTE_KINDS:
                pending.append((child, ROLE_ITEM))
        return pending

    def _visit_path(self, node) -> Pending:
        """Paths and names count nothing but may carry generic arguments."""
        if node.type == "function_type":
            return self._visit_function_type(node)
        return self._children(node, ROLE_PATH)

    def _visit_item(self, node, counter: FeatureCounter) -> Pending:
        """Descend through declarations and other structural nodes."""
        kind = node.type

        if kind == "let_declaration":
            if node.child_by_field_name("type") is not None:
                # `let x: T` binds a typed pattern around `x`
                counter.bump(PAT_OTHER)
        elif kind == "expression_statement":
            # File-level `name!(..);` is a macro item
            return [
                (child, ROLE_STMT if child.type == "macro_invocation" else ROLE_EXPR)
                for child in node.children
            ]
        elif kind == "self_parameter":
            self._visit_self_parameter(node, counter)
            return []
        elif kind == "shorthand_field_initializer":
            # `Name { a }` reads the variable `a`
            counter.bump(EXPR_PATH)
            return [
                (child, ROLE_ITEM)
                for child in node.named_children
                if child.type in ATTRIBUTE_KINDS
            ]

        return self._children(node, ROLE_ITEM)

    def _visit_self_parameter(self, node, counter: FeatureCounter) -> None:
        """`self` has type `Self`; `&self` and `&mut self` have `&Self`."""
        if any(child.type == "&" for child in node.children):
            counter.bump(TYPE_REFERENCE)
        counter.bump(TYPE_PATH)


def count_source(
    source: Union[str, bytes],
    parser: Optional[RustParser] = None,
    config: Optional[FeatureConfig] = None,
) -> Dict[str, float]:
    """
    Parse Rust source text and return its feature map.

    Args:
        source: Rust source code.
        parser: Optional parser to reuse.
        config: Optional feature extraction configuration.

    Returns:
        Mapping from feature label to occurrence count.
    """
    parser = parser or RustParser()
    tree = parser.parse(source)
    return FeatureExtractor(config).extract(tree)


def parse_and_count(
    path: Union[str, Path],
    parser: Optional[RustParser] = None,
    config: Optional[FeatureConfig] = None,
) -> Dict[str, float]:
    """
    Parse a Rust source file and return a map of syntax node counts.

    Args:
        path: Path to the Rust source file.
        parser: Optional parser to reuse.
        config: Optional feature extraction configuration.

    Returns:
        Mapping from feature label to occurrence count.
    """
    parser = parser or RustParser()
    tree = parser.parse_file(path)
    return FeatureExtractor(config).extract(tree)
