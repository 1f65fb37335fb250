"""Syntax tree consumed by the bytecode generator.

Nodes are frozen pydantic models tagged with a ``kind`` discriminator, so
an external parser can hand over a tree either as Python objects or as
JSON (see :func:`parse_ast` / :func:`load_ast_json`).
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class BinaryOperator(str, Enum):
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"


class _Node(BaseModel):
    model_config = ConfigDict(frozen=True)


class NumberLiteral(_Node):
    kind: Literal["number"] = "number"
    value: float


class StringLiteral(_Node):
    kind: Literal["string"] = "string"
    value: str


class BinaryOp(_Node):
    kind: Literal["binary_op"] = "binary_op"
    left: ASTNode
    operator: BinaryOperator
    right: ASTNode


class Variable(_Node):
    kind: Literal["variable"] = "variable"
    name: str


class Assignment(_Node):
    kind: Literal["assignment"] = "assignment"
    name: str
    value: ASTNode


class If(_Node):
    kind: Literal["if"] = "if"
    condition: ASTNode
    then_branch: ASTNode
    else_branch: Optional[ASTNode] = None


class While(_Node):
    kind: Literal["while"] = "while"
    condition: ASTNode
    body: ASTNode


class Block(_Node):
    kind: Literal["block"] = "block"
    statements: tuple[ASTNode, ...] = ()


ASTNode = Annotated[
    Union[
        NumberLiteral,
        StringLiteral,
        BinaryOp,
        Variable,
        Assignment,
        If,
        While,
        Block,
    ],
    Field(discriminator="kind"),
]

for _model in (BinaryOp, Assignment, If, While, Block):
    _model.model_rebuild()

_NODE_ADAPTER: TypeAdapter = TypeAdapter(ASTNode)


def parse_ast(data: Any) -> ASTNode:
    """Validate a plain dict/list structure into an AST node."""
    return _NODE_ADAPTER.validate_python(data)


def load_ast_json(text: str | bytes) -> ASTNode:
    """Validate a JSON document into an AST node."""
    return _NODE_ADAPTER.validate_json(text)


def dump_ast(node: ASTNode) -> dict:
    return node.model_dump(mode="json")
