"""Recursive descent parser for predicate expressions.

Grammar, lowest precedence first::

    expression  := term (OR term)*
    term        := factor (AND factor)*
    factor      := NOT factor | comparison
    comparison  := operand ((== | != | < | > | <= | >= | in) operand)?
    operand     := literal | path | path '(' args ')' | '[' args ']' | '(' expression ')'
"""

from .ast import BinaryOp, FunctionCall, ListLiteral, Literal, Node, UnaryOp, Variable
from .exceptions import ExpressionSyntaxError
from .lexer import Lexer, Token, TokenType

COMPARISON_OPERATORS = {
    TokenType.EQ: "==",
    TokenType.NEQ: "!=",
    TokenType.LT: "<",
    TokenType.GT: ">",
    TokenType.LTE: "<=",
    TokenType.GTE: ">=",
    TokenType.IN: "in",
}

LITERAL_TOKENS = (
    TokenType.INTEGER,
    TokenType.FLOAT,
    TokenType.STRING,
    TokenType.BOOLEAN,
    TokenType.NULL,
)


class Parser:
    """Builds an AST from the lexer's token stream."""

    def __init__(self, lexer: Lexer):
        self.lexer = lexer
        self.current_token: Token = self.lexer.get_next_token()

    def error(self, message: str) -> None:
        """Raise a syntax error at the current token."""
        raise ExpressionSyntaxError(message, self.current_token.position)

    def consume(self, token_type: TokenType) -> Token:
        """Consume the current token if it matches the expected type."""
        token = self.current_token
        if token.type != token_type:
            self.error(f"Expected {token_type.name}, found {token.type.name}")
        self.current_token = self.lexer.get_next_token()
        return token

    def parse(self) -> Node:
        """Parse the entire expression."""
        node = self.expression()
        if self.current_token.type != TokenType.EOF:
            self.error("Unexpected token after expression")
        return node

    def expression(self) -> Node:
        node = self.term()
        while self.current_token.type == TokenType.OR:
            self.consume(TokenType.OR)
            node = BinaryOp(left=node, operator="or", right=self.term())
        return node

    def term(self) -> Node:
        node = self.factor()
        while self.current_token.type == TokenType.AND:
            self.consume(TokenType.AND)
            node = BinaryOp(left=node, operator="and", right=self.factor())
        return node

    def factor(self) -> Node:
        if self.current_token.type == TokenType.NOT:
            self.consume(TokenType.NOT)
            return UnaryOp(operator="not", operand=self.factor())
        return self.comparison()

    def comparison(self) -> Node:
        node = self.operand()
        operator = COMPARISON_OPERATORS.get(self.current_token.type)
        if operator is not None:
            self.consume(self.current_token.type)
            node = BinaryOp(left=node, operator=operator, right=self.operand())
        return node

    def operand(self) -> Node:
        token = self.current_token

        if token.type in LITERAL_TOKENS:
            self.consume(token.type)
            return Literal(token.value)

        if token.type == TokenType.LPAREN:
            self.consume(TokenType.LPAREN)
            node = self.expression()
            self.consume(TokenType.RPAREN)
            return node

        if token.type == TokenType.LBRACKET:
            self.consume(TokenType.LBRACKET)
            items = self._arguments(TokenType.RBRACKET)
            return ListLiteral(items)

        if token.type == TokenType.IDENTIFIER:
            self.consume(TokenType.IDENTIFIER)
            if self.current_token.type == TokenType.LPAREN:
                self.consume(TokenType.LPAREN)
                return FunctionCall(str(token.value), self._arguments(TokenType.RPAREN))
            return Variable(str(token.value))

        self.error(f"Unexpected token: {token.type.name}")
        raise AssertionError("unreachable")

    def _arguments(self, closing: TokenType) -> tuple[Node, ...]:
        arguments = []
        if self.current_token.type != closing:
            arguments.append(self.expression())
            while self.current_token.type == TokenType.COMMA:
                self.consume(TokenType.COMMA)
                arguments.append(self.expression())
        self.consume(closing)
        return tuple(arguments)
