# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Safe Script Evaluator

AST-based sandbox for script nodes. Scripts are small Python-syntax
programs restricted to a whitelisted subset:

- assignments, `if` blocks, expression statements and a top-level `return`
- arithmetic, comparison and logical operators
- list / tuple / dict literals, indexing and slicing
- safe built-ins (len, str, int, ...) and a few str/dict/list methods
- one injected helper library: `json.encode(value)` / `json.decode(text)`

The script's value is its `return` value, or the value of its last
expression statement.
"""

import ast
import json
import operator
from typing import Any, Dict, List


class ScriptError(ValueError):
    """Script could not be parsed or evaluated"""
    pass


# Allowed operators for safe evaluation
SAFE_OPERATORS = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.FloorDiv: operator.floordiv,
    ast.Mod: operator.mod,
    ast.Pow: operator.pow,
    ast.Eq: operator.eq,
    ast.NotEq: operator.ne,
    ast.Lt: operator.lt,
    ast.LtE: operator.le,
    ast.Gt: operator.gt,
    ast.GtE: operator.ge,
    ast.Not: operator.not_,
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
    ast.In: lambda x, y: x in y,
    ast.NotIn: lambda x, y: x not in y,
    ast.Is: operator.is_,
    ast.IsNot: operator.is_not,
}


# Allowed functions for safe evaluation
SAFE_FUNCTIONS = {
    'len': len,
    'str': str,
    'int': int,
    'float': float,
    'bool': bool,
    'abs': abs,
    'min': min,
    'max': max,
    'round': round,
    'sum': sum,
    'sorted': sorted,
}


# Methods callable on values of these types
SAFE_METHODS = {
    str: {
        "upper", "lower", "strip", "lstrip", "rstrip", "split", "replace",
        "startswith", "endswith", "join", "title", "capitalize", "count", "find",
    },
    dict: {"get", "keys", "values", "items"},
    list: {"index", "count"},
}

MAX_EXPONENT = 1000
MAX_SEQUENCE_REPEAT = 100_000


class JsonHelper:
    """The `json` helper library visible to scripts"""

    @staticmethod
    def encode(value: Any) -> str:
        return json.dumps(value, ensure_ascii=False)

    @staticmethod
    def decode(text: str) -> Any:
        return json.loads(text)


HELPER_METHODS = {"encode", "decode"}


class _Return(Exception):
    def __init__(self, value: Any):
        self.value = value


class ScriptEvaluator(ast.NodeVisitor):
    """
    AST-based safe evaluator for script programs.

    Restricts evaluation to:
    - Basic arithmetic and comparison operators
    - Logical operators (and, or, not)
    - Safe built-in functions and whitelisted methods
    - Variables assigned by the script plus the json helper
    """

    def __init__(self, variables: Dict[str, Any] = None):
        self.variables: Dict[str, Any] = {"json": JsonHelper()}
        self.variables.update(variables or {})

    # -- statements --

    def run(self, tree: ast.Module) -> Any:
        try:
            return self._run_block(tree.body)
        except _Return as r:
            return r.value

    def _run_block(self, statements: List[ast.stmt]) -> Any:
        result = None
        for statement in statements:
            result = self._execute(statement)
        return result

    def _execute(self, statement: ast.stmt) -> Any:
        if isinstance(statement, ast.Expr):
            return self.visit(statement.value)

        if isinstance(statement, ast.Assign):
            if len(statement.targets) != 1 or not isinstance(statement.targets[0], ast.Name):
                raise ScriptError("Only simple assignments are allowed")
            self._assign(statement.targets[0].id, self.visit(statement.value))
            return None

        if isinstance(statement, ast.AugAssign):
            if not isinstance(statement.target, ast.Name):
                raise ScriptError("Only simple assignments are allowed")
            current = self.visit(statement.target)
            self._assign(statement.target.id, self._binary(statement.op, current, self.visit(statement.value)))
            return None

        if isinstance(statement, ast.If):
            branch = statement.body if self.visit(statement.test) else statement.orelse
            return self._run_block(branch)

        if isinstance(statement, ast.Return):
            raise _Return(self.visit(statement.value) if statement.value is not None else None)

        if isinstance(statement, ast.Pass):
            return None

        raise ScriptError(f"Statement not allowed: {type(statement).__name__}")

    def _assign(self, name: str, value: Any) -> None:
        if name == "json" or name in SAFE_FUNCTIONS:
            raise ScriptError(f"Cannot reassign built-in name: {name}")
        self.variables[name] = value

    # -- expressions --

    def visit_Constant(self, node):
        return node.value

    def visit_Name(self, node):
        # Variable reference
        if node.id in self.variables:
            return self.variables[node.id]
        elif node.id in SAFE_FUNCTIONS:
            return SAFE_FUNCTIONS[node.id]
        elif node.id in ("true", "false", "null", "nil"):
            return {"true": True, "false": False}.get(node.id)
        else:
            raise ScriptError(f"Undefined variable: {node.id}")

    def visit_List(self, node):
        return [self.visit(e) for e in node.elts]

    def visit_Tuple(self, node):
        return tuple(self.visit(e) for e in node.elts)

    def visit_Dict(self, node):
        if any(k is None for k in node.keys):
            raise ScriptError("Dict unpacking not allowed")
        return {self.visit(k): self.visit(v) for k, v in zip(node.keys, node.values)}

    def visit_Subscript(self, node):
        return self.visit(node.value)[self.visit(node.slice)]

    def visit_Slice(self, node):
        return slice(
            self.visit(node.lower) if node.lower else None,
            self.visit(node.upper) if node.upper else None,
            self.visit(node.step) if node.step else None,
        )

    def visit_IfExp(self, node):
        return self.visit(node.body) if self.visit(node.test) else self.visit(node.orelse)

    def visit_Attribute(self, node):
        # Only whitelisted methods, never arbitrary attributes
        target = self.visit(node.value)
        if isinstance(target, JsonHelper) and node.attr in HELPER_METHODS:
            return getattr(target, node.attr)
        for value_type, methods in SAFE_METHODS.items():
            if isinstance(target, value_type) and node.attr in methods:
                return getattr(target, node.attr)
        raise ScriptError(f"Attribute not allowed: {node.attr}")

    def visit_BinOp(self, node):
        # Binary operation (e.g., a + b)
        return self._binary(node.op, self.visit(node.left), self.visit(node.right))

    def _binary(self, op, left, right):
        op_type = type(op)

        if op_type not in SAFE_OPERATORS:
            raise ScriptError(f"Operator not allowed: {op_type.__name__}")

        if op_type is ast.Pow and isinstance(right, (int, float)) and abs(right) > MAX_EXPONENT:
            raise ScriptError(f"Exponent too large: {right}")

        if op_type is ast.Mult:
            for seq, count in ((left, right), (right, left)):
                if isinstance(seq, (str, list, tuple)) and isinstance(count, int) and count > MAX_SEQUENCE_REPEAT:
                    raise ScriptError(f"Repetition too large: {count}")

        return SAFE_OPERATORS[op_type](left, right)

    def visit_UnaryOp(self, node):
        # Unary operation (e.g., not x, -y)
        operand = self.visit(node.operand)
        op_type = type(node.op)

        if op_type not in SAFE_OPERATORS:
            raise ScriptError(f"Operator not allowed: {op_type.__name__}")

        return SAFE_OPERATORS[op_type](operand)

    def visit_Compare(self, node):
        # Comparison (e.g., x > 5, a == b)
        left = self.visit(node.left)

        for op, comparator in zip(node.ops, node.comparators):
            right = self.visit(comparator)
            op_type = type(op)

            if op_type not in SAFE_OPERATORS:
                raise ScriptError(f"Operator not allowed: {op_type.__name__}")

            if not SAFE_OPERATORS[op_type](left, right):
                return False

            left = right

        return True

    def visit_BoolOp(self, node):
        # Short-circuit, returning the deciding operand like Python does
        value = None
        for operand in node.values:
            value = self.visit(operand)
            if isinstance(node.op, ast.And) and not value:
                return value
            if isinstance(node.op, ast.Or) and value:
                return value
        return value

    def visit_Call(self, node):
        # Function call
        func = self.visit(node.func)

        if not isinstance(node.func, ast.Attribute) and func not in SAFE_FUNCTIONS.values():
            raise ScriptError(f"Function not allowed: {getattr(node.func, 'id', 'unknown')}")

        if any(isinstance(arg, ast.Starred) for arg in node.args) or any(kw.arg is None for kw in node.keywords):
            raise ScriptError("Argument unpacking not allowed")

        args = [self.visit(arg) for arg in node.args]
        kwargs = {kw.arg: self.visit(kw.value) for kw in node.keywords}

        return func(*args, **kwargs)

    def generic_visit(self, node):
        raise ScriptError(f"Syntax not allowed: {type(node).__name__}")


def evaluate_script(script: str) -> Any:
    """
    Safely evaluate a script.

    Raises:
        ScriptError: If the script is invalid, uses unsafe constructs, or
            fails while running

    Examples:
        >>> evaluate_script("x = 2\\nx * 21")
        42
        >>> evaluate_script('json.decode(\\'{"a": [1, 2]}\\')["a"][1]')
        2
    """
    try:
        tree = ast.parse(script, mode="exec")
    except SyntaxError as e:
        raise ScriptError(f"Invalid script syntax: {e.msg} (line {e.lineno})")

    try:
        return ScriptEvaluator().run(tree)
    except ScriptError:
        raise
    except Exception as e:
        raise ScriptError(f"Script evaluation failed: {type(e).__name__}: {e}")


def stringify_result(value: Any) -> str:
    """Render a script value as node output text"""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, str):
        return value
    return f"unsupported type: {type(value).__name__}"
