"""
Feature taxonomy for Rust syntax trees.

Defines the label vocabulary of a feature map and the tables that map
tree-sitter-rust node kinds onto it. The vocabulary is fixed: changing
a label or moving a node kind between buckets changes the feature
space and makes new fingerprints incomparable with old ones.

Three category policies coexist:
    - statement: exhaustive, every variant named, no Other bucket
    - expression, type, pattern: partial, uncommon kinds go to Other
    - macro, attribute, block: occurrence only, a single label each
"""

from enum import Enum
from typing import Dict, FrozenSet


class Category(Enum):
    """Coarse syntactic role of a counted node."""
    STATEMENT = "Stmt"
    EXPRESSION = "Expr"
    TYPE = "Type"
    PATTERN = "Pat"
    MACRO = "Macro"
    ATTRIBUTE = "Attribute"
    BLOCK = "Block"


OTHER = "Other"


def label(category: Category, variant: str = None) -> str:
    """Build a feature label such as ``Expr::Call`` or ``Block``."""
    if variant is None:
        return category.value
    return f"{category.value}::{variant}"


# Statement (exhaustive)
STMT_LOCAL = label(Category.STATEMENT, "Local")
STMT_ITEM = label(Category.STATEMENT, "Item")
STMT_EXPR = label(Category.STATEMENT, "Expr")
STMT_MACRO = label(Category.STATEMENT, "Macro")

# Occurrence only
MACRO = label(Category.MACRO)
ATTRIBUTE = label(Category.ATTRIBUTE)
BLOCK = label(Category.BLOCK)

EXPR_OTHER = label(Category.EXPRESSION, OTHER)
TYPE_OTHER = label(Category.TYPE, OTHER)
PAT_OTHER = label(Category.PATTERN, OTHER)

EXPR_IF = label(Category.EXPRESSION, "If")
EXPR_FOR_LOOP = label(Category.EXPRESSION, "ForLoop")
EXPR_WHILE = label(Category.EXPRESSION, "While")
EXPR_LOOP = label(Category.EXPRESSION, "Loop")
EXPR_MATCH = label(Category.EXPRESSION, "Match")
EXPR_CALL = label(Category.EXPRESSION, "Call")
EXPR_METHOD_CALL = label(Category.EXPRESSION, "MethodCall")
EXPR_STRUCT = label(Category.EXPRESSION, "Struct")
EXPR_FIELD = label(Category.EXPRESSION, "Field")
EXPR_PATH = label(Category.EXPRESSION, "Path")
EXPR_REFERENCE = label(Category.EXPRESSION, "Reference")
EXPR_RETURN = label(Category.EXPRESSION, "Return")
EXPR_MACRO = label(Category.EXPRESSION, "Macro")
EXPR_LIT = label(Category.EXPRESSION, "Lit")
EXPR_ARRAY = label(Category.EXPRESSION, "Array")
EXPR_TUPLE = label(Category.EXPRESSION, "Tuple")
EXPR_TRY = label(Category.EXPRESSION, "Try")
EXPR_AWAIT = label(Category.EXPRESSION, "Await")
EXPR_CLOSURE = label(Category.EXPRESSION, "Closure")
EXPR_ASSIGN = label(Category.EXPRESSION, "Assign")

TYPE_PATH = label(Category.TYPE, "Path")
TYPE_REFERENCE = label(Category.TYPE, "Reference")
TYPE_ARRAY = label(Category.TYPE, "Array")
TYPE_SLICE = label(Category.TYPE, "Slice")
TYPE_TUPLE = label(Category.TYPE, "Tuple")
TYPE_BARE_FN = label(Category.TYPE, "BareFn")
TYPE_PTR = label(Category.TYPE, "Ptr")
TYPE_INFER = label(Category.TYPE, "Infer")

PAT_IDENT = label(Category.PATTERN, "Ident")
PAT_WILD = label(Category.PATTERN, "Wild")
PAT_STRUCT = label(Category.PATTERN, "Struct")
PAT_TUPLE = label(Category.PATTERN, "Tuple")
PAT_TUPLE_STRUCT = label(Category.PATTERN, "TupleStruct")
PAT_SLICE = label(Category.PATTERN, "Slice")
PAT_PATH = label(Category.PATTERN, "Path")
PAT_LIT = label(Category.PATTERN, "Lit")

STATEMENT_LABELS: FrozenSet[str] = frozenset({
    STMT_LOCAL, STMT_ITEM, STMT_EXPR, STMT_MACRO,
})

EXPRESSION_LABELS: FrozenSet[str] = frozenset({
    EXPR_IF, EXPR_FOR_LOOP, EXPR_WHILE, EXPR_LOOP, EXPR_MATCH, EXPR_CALL,
    EXPR_METHOD_CALL, EXPR_STRUCT, EXPR_FIELD, EXPR_PATH, EXPR_REFERENCE,
    EXPR_RETURN, EXPR_MACRO, EXPR_LIT, EXPR_ARRAY, EXPR_TUPLE, EXPR_TRY,
    EXPR_AWAIT, EXPR_CLOSURE, EXPR_ASSIGN, EXPR_OTHER,
})

TYPE_LABELS: FrozenSet[str] = frozenset({
    TYPE_PATH, TYPE_REFERENCE, TYPE_ARRAY, TYPE_SLICE, TYPE_TUPLE,
    TYPE_BARE_FN, TYPE_PTR, TYPE_INFER, TYPE_OTHER,
})

PATTERN_LABELS: FrozenSet[str] = frozenset({
    PAT_IDENT, PAT_WILD, PAT_STRUCT, PAT_TUPLE, PAT_TUPLE_STRUCT,
    PAT_SLICE, PAT_PATH, PAT_LIT, PAT_OTHER,
})

ALL_LABELS: FrozenSet[str] = (
    STATEMENT_LABELS | EXPRESSION_LABELS | TYPE_LABELS | PATTERN_LABELS
    | frozenset({MACRO, ATTRIBUTE, BLOCK})
)


# Tree-sitter node kinds

LITERAL_KINDS: FrozenSet[str] = frozenset({
    "string_literal",
    "raw_string_literal",
    "char_literal",
    "boolean_literal",
    "integer_literal",
    "float_literal",
    "negative_literal",
})

# Declarations that form a `Stmt::Item` when they appear inside a block
ITEM_KINDS: FrozenSet[str] = frozenset({
    "const_item",
    "static_item",
    "macro_definition",
    "mod_item",
    "foreign_mod_item",
    "struct_item",
    "union_item",
    "enum_item",
    "type_item",
    "function_item",
    "function_signature_item",
    "impl_item",
    "trait_item",
    "associated_type",
    "use_declaration",
    "extern_crate_declaration",
})

ATTRIBUTE_KINDS: FrozenSet[str] = frozenset({
    "attribute_item",
    "inner_attribute_item",
})

COMMENT_KINDS: FrozenSet[str] = frozenset({
    "line_comment",
    "block_comment",
})

DOC_COMMENT_MARKERS: FrozenSet[str] = frozenset({
    "outer_doc_comment_marker",
    "inner_doc_comment_marker",
})

# Wrappers that own a block and count as a single expression themselves
BLOCK_WRAPPER_KINDS: FrozenSet[str] = frozenset({
    "unsafe_block",
    "async_block",
    "const_block",
    "try_block",
    "gen_block",
})

# Nodes whose `body`/`consequence` block is not an expression of its own
BLOCK_OWNER_KINDS: FrozenSet[str] = frozenset({
    "function_item",
    "for_expression",
    "while_expression",
    "loop_expression",
    "if_expression",
}) | BLOCK_WRAPPER_KINDS

# Leaves that carry no feature in any position
IGNORED_KINDS: FrozenSet[str] = frozenset({
    "label",
    "lifetime",
    "mutable_specifier",
    "visibility_modifier",
    "function_modifiers",
    "extern_modifier",
    "token_tree",
    "field_identifier",
    "shorthand_field_identifier",
    "empty_statement",
    "use_declaration",
    "extern_crate_declaration",
    "for_lifetimes",
    "lifetime_parameter",
    "variadic_parameter",
    "escape_sequence",
    "string_content",
})

EXPRESSION_VARIANTS: Dict[str, str] = {
    "if_expression": EXPR_IF,
    "for_expression": EXPR_FOR_LOOP,
    "while_expression": EXPR_WHILE,
    "loop_expression": EXPR_LOOP,
    "match_expression": EXPR_MATCH,
    "call_expression": EXPR_CALL,
    "struct_expression": EXPR_STRUCT,
    "field_expression": EXPR_FIELD,
    "identifier": EXPR_PATH,
    "scoped_identifier": EXPR_PATH,
    "generic_function": EXPR_PATH,
    "self": EXPR_PATH,
    "reference_expression": EXPR_REFERENCE,
    "return_expression": EXPR_RETURN,
    "macro_invocation": EXPR_MACRO,
    "array_expression": EXPR_ARRAY,
    "tuple_expression": EXPR_TUPLE,
    "unit_expression": EXPR_TUPLE,
    "try_expression": EXPR_TRY,
    "await_expression": EXPR_AWAIT,
    "closure_expression": EXPR_CLOSURE,
    "assignment_expression": EXPR_ASSIGN,
}
EXPRESSION_VARIANTS.update({kind: EXPR_LIT for kind in LITERAL_KINDS})

TYPE_VARIANTS: Dict[str, str] = {
    "type_identifier": TYPE_PATH,
    "primitive_type": TYPE_PATH,
    "generic_type": TYPE_PATH,
    "scoped_type_identifier": TYPE_PATH,
    "reference_type": TYPE_REFERENCE,
    "array_type": TYPE_ARRAY,
    "tuple_type": TYPE_TUPLE,
    "unit_type": TYPE_TUPLE,
    "function_type": TYPE_BARE_FN,
    "pointer_type": TYPE_PTR,
    "_": TYPE_INFER,
}

PATTERN_VARIANTS: Dict[str, str] = {
    "identifier": PAT_IDENT,
    "captured_pattern": PAT_IDENT,
    "_": PAT_WILD,
    "struct_pattern": PAT_STRUCT,
    "tuple_pattern": PAT_TUPLE,
    "tuple_struct_pattern": PAT_TUPLE_STRUCT,
    "slice_pattern": PAT_SLICE,
    "scoped_identifier": PAT_PATH,
}
PATTERN_VARIANTS.update({kind: PAT_LIT for kind in LITERAL_KINDS})

# Patterns that only modify a binding (`ref x`, `mut x`) or wrap a guard
PATTERN_PASSTHROUGH_KINDS: FrozenSet[str] = frozenset({
    "ref_pattern",
    "mut_pattern",
    "match_pattern",
})
