"""
Renders Coem AST nodes as parenthesized prefix text.

The printer is used by the CLI and REPL to show what the parser produced, and by
tests as a compact way to assert tree shape.

    let x be true;              ->  (var x true)
    if — x —: say x;.           ->  (if x (block (print x)))
    greet—"bob", friend—;       ->  (expr (call greet "bob" friend))

Dispatch is by node kind: a node of class `Foo` is rendered by `print_foo`.

Raises:
    NotImplementedError: If a node kind has no printer method.
"""

from typing import Any, Iterable

from coem.coem_ast import (
    Assign,
    Binary,
    Block,
    Call,
    ErrorStmt,
    Expression,
    Function,
    If,
    Literal,
    Logical,
    Node,
    Print,
    Return,
    Unary,
    Var,
    Variable,
    While,
)


class AstPrinter:
    """Prints Coem AST nodes.

    Methods:
        print(tree): Renders one node, or a list of statements one per line.
    """

    def print(self, tree: Node | Iterable[Node]) -> str:
        if isinstance(tree, Node):
            return self._visit(tree)
        return "\n".join(self._visit(node) for node in tree)

    def _visit(self, node: Node) -> str:
        meth = getattr(self, f"print_{node.kind}", None)
        if not meth:
            raise NotImplementedError(f"AstPrinter: no printer for {node.kind}")
        return str(meth(node))

    def _wrap(self, name: str, *parts: Any) -> str:
        rendered = [p if isinstance(p, str) else self._visit(p) for p in parts]
        return "(" + " ".join([name, *rendered]) + ")"

    def print_literal(self, node: Literal) -> str:
        if node.value is None:
            return "nothing"
        if node.value is True:
            return "true"
        if node.value is False:
            return "false"
        return f'"{node.value}"'

    def print_variable(self, node: Variable) -> str:
        return node.name.lexeme

    def print_assign(self, node: Assign) -> str:
        return self._wrap("be", node.name.lexeme, node.value)

    def print_logical(self, node: Logical) -> str:
        return self._wrap(node.operator.lexeme, node.left, node.right)

    def print_binary(self, node: Binary) -> str:
        return self._wrap(node.operator.lexeme, node.left, node.right)

    def print_unary(self, node: Unary) -> str:
        return self._wrap(node.operator.lexeme, node.right)

    def print_call(self, node: Call) -> str:
        return self._wrap("call", node.callee, *node.arguments)

    def print_expression(self, node: Expression) -> str:
        return self._wrap("expr", node.expression)

    def print_print(self, node: Print) -> str:
        return self._wrap("print", node.expression)

    def print_var(self, node: Var) -> str:
        if node.initializer is None:
            return self._wrap("var", node.name.lexeme)
        return self._wrap("var", node.name.lexeme, node.initializer)

    def print_block(self, node: Block) -> str:
        return self._wrap("block", *node.statements)

    def print_if(self, node: If) -> str:
        if node.else_branch is None:
            return self._wrap("if", node.condition, node.then_branch)
        return self._wrap("if-else", node.condition, node.then_branch, node.else_branch)

    def print_while(self, node: While) -> str:
        return self._wrap("while", node.condition, node.body)

    def print_function(self, node: Function) -> str:
        params = "(" + " ".join(p.lexeme for p in node.params) + ")"
        return self._wrap("fun", node.name.lexeme, params, *node.body)

    def print_return(self, node: Return) -> str:
        if node.value is None:
            return "(return)"
        return self._wrap("return", node.value)

    def print_errorstmt(self, node: ErrorStmt) -> str:
        return f'(error "{node.message}")'
