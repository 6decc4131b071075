"""
A Pratt parser: each token kind may carry a prefix handler, an infix handler,
and a binding power. Expression parsing takes one prefix phrase and then keeps
folding in infix operators for as long as they bind tighter than the caller asked for.

Structural failures are written down as SyntaxIssues rather than raised.
The phrase that failed comes back as None and the statement loop carries on,
so one run of the parser reports as much as it reasonably can.
"""
from enum import IntEnum
from typing import Callable, Optional

from .tokens import Token, TokenKind
from .lexer import Lexer
from .diagnostics import Report, SyntaxIssue, TooManyIssues
from . import syntax

class Precedence(IntEnum):
	LOWEST = 1
	PIPE = 2        # |
	LOGICAL = 3     # && ||
	EQUALITY = 4    # == !=
	RELATIONAL = 5  # > >= < <=
	SUM = 6         # + -
	PRODUCT = 7     # * /
	PREFIX = 8      # -x !x
	CALL = 9        # a(b)
	INDEX = 10      # a[b]

PRECEDENCES = {
	TokenKind.PIPE: Precedence.PIPE,
	TokenKind.AND: Precedence.LOGICAL,
	TokenKind.OR: Precedence.LOGICAL,
	TokenKind.EQ: Precedence.EQUALITY,
	TokenKind.NEQ: Precedence.EQUALITY,
	TokenKind.GT: Precedence.RELATIONAL,
	TokenKind.GE: Precedence.RELATIONAL,
	TokenKind.LT: Precedence.RELATIONAL,
	TokenKind.LE: Precedence.RELATIONAL,
	TokenKind.PLUS: Precedence.SUM,
	TokenKind.MINUS: Precedence.SUM,
	TokenKind.MUL: Precedence.PRODUCT,
	TokenKind.DIV: Precedence.PRODUCT,
	TokenKind.LPAREN: Precedence.CALL,
	TokenKind.LBRACKET: Precedence.INDEX,
}

PrefixHandler = Callable[[], Optional[syntax.Expression]]
InfixHandler = Callable[[syntax.Expression], Optional[syntax.Expression]]

class Parser:
	_curr: Token
	_next: Token

	def __init__(self, text:str, report:Optional[Report]=None):
		self._tokens = iter(Lexer(text))
		self._report = report
		self.errors: list[SyntaxIssue] = []
		self._curr = self._next = None
		self._advance()
		self._advance()

		self._prefix: dict[TokenKind, PrefixHandler] = {
			TokenKind.ID: self._parse_identifier,
			TokenKind.NUMBER: self._parse_number,
			TokenKind.STRING: self._parse_string,
			TokenKind.TRUE: self._parse_boolean,
			TokenKind.FALSE: self._parse_boolean,
			TokenKind.LBRACKET: self._parse_array,
			TokenKind.LBRACE: self._parse_hash,
			TokenKind.NOT: self._parse_prefix_expression,
			TokenKind.MINUS: self._parse_prefix_expression,
			TokenKind.LPAREN: self._parse_grouped_expression,
			TokenKind.IF: self._parse_if_expression,
			TokenKind.FN: self._parse_function_literal,
			TokenKind.ERROR: self._parse_illegal,
		}
		self._infix: dict[TokenKind, InfixHandler] = {kind: self._parse_infix_expression for kind in PRECEDENCES}
		self._infix[TokenKind.LPAREN] = self._parse_call_expression
		self._infix[TokenKind.LBRACKET] = self._parse_index_expression

	def parse(self) -> tuple[syntax.Module, list[SyntaxIssue]]:
		statements = []
		try:
			while self._curr.kind is not TokenKind.EOF:
				before = len(self.errors)
				statement = self._parse_statement()
				if statement is not None:
					statements.append(statement)
				if len(self.errors) > before:
					self._synchronize()
				self._advance()
		except TooManyIssues:
			pass
		return syntax.Module(statements), self.errors

	# Token-stream plumbing:

	def _advance(self):
		self._curr = self._next
		self._next = next(self._tokens, self._next)

	def _synchronize(self):
		""" After a broken statement, skip ahead to the next statement boundary. """
		while self._curr.kind not in (TokenKind.EOL, TokenKind.EOF):
			self._advance()

	def _expect(self, kind:TokenKind) -> bool:
		if self._next.kind is kind:
			self._advance()
			return True
		self._error("expected next token to be %s, got %s instead" % (kind, self._next.kind))
		return False

	def _error(self, message:str):
		issue = SyntaxIssue(self._curr.line, self._curr.column, message)
		self.errors.append(issue)
		if self._report is not None:
			self._report.syntax_issue(issue, max(len(self._curr.text), 1))

	def _skip_terminator(self):
		if self._next.kind is TokenKind.EOL:
			self._advance()

	# Statements:

	def _parse_statement(self) -> Optional[syntax.Statement]:
		if self._curr.kind is TokenKind.LET: return self._parse_let_statement()
		if self._curr.kind is TokenKind.RETURN: return self._parse_return_statement()
		return self._parse_expression_statement()

	def _parse_let_statement(self) -> Optional[syntax.LetStatement]:
		token = self._curr
		if not self._expect(TokenKind.ID):
			return None
		name = syntax.Identifier(self._curr)
		if not self._expect(TokenKind.ASSIGN):
			return None
		self._advance()
		value = self._parse_expression(Precedence.LOWEST)
		self._skip_terminator()
		return syntax.LetStatement(token, name, value)

	def _parse_return_statement(self) -> syntax.ReturnStatement:
		token = self._curr
		self._advance()
		value = self._parse_expression(Precedence.LOWEST)
		self._skip_terminator()
		return syntax.ReturnStatement(token, value)

	def _parse_expression_statement(self) -> syntax.ExpressionStatement:
		token = self._curr
		expression = self._parse_expression(Precedence.LOWEST)
		self._skip_terminator()
		return syntax.ExpressionStatement(token, expression)

	def _parse_block(self) -> syntax.Block:
		token = self._curr
		statements = []
		self._advance()
		while self._curr.kind not in (TokenKind.RBRACE, TokenKind.EOF):
			statement = self._parse_statement()
			if statement is not None:
				statements.append(statement)
			self._advance()
		if self._curr.kind is TokenKind.EOF:
			self._error("expected next token to be %s, got %s instead" % (TokenKind.RBRACE, TokenKind.EOF))
		return syntax.Block(token, statements)

	# Expressions:

	def _parse_expression(self, precedence:Precedence) -> Optional[syntax.Expression]:
		try: prefix = self._prefix[self._curr.kind]
		except KeyError:
			self._error("no prefix parse function for %s" % self._curr.kind)
			return None
		left = prefix()
		while self._next.kind is not TokenKind.EOL and precedence < self._next_precedence():
			if left is None:
				return None
			infix = self._infix[self._next.kind]
			self._advance()
			left = infix(left)
		return left

	def _next_precedence(self) -> Precedence:
		return PRECEDENCES.get(self._next.kind, Precedence.LOWEST)

	def _curr_precedence(self) -> Precedence:
		return PRECEDENCES.get(self._curr.kind, Precedence.LOWEST)

	def _parse_identifier(self): return syntax.Identifier(self._curr)

	def _parse_number(self):
		try: value = float(self._curr.text)
		except ValueError:
			self._error('could not parse "%s" as number' % self._curr.text)
			return None
		return syntax.NumberLiteral(self._curr, value)

	def _parse_string(self): return syntax.StringLiteral(self._curr, self._curr.text)

	def _parse_boolean(self): return syntax.BooleanLiteral(self._curr, self._curr.kind is TokenKind.TRUE)

	def _parse_illegal(self):
		self._error('illegal token "%s"' % self._curr.text)
		return None

	def _parse_array(self):
		token = self._curr
		elements = self._parse_list(TokenKind.RBRACKET, self._parse_list_item)
		return None if elements is None else syntax.ArrayLiteral(token, elements)

	def _parse_hash(self):
		token = self._curr
		pairs = []
		while self._next.kind is not TokenKind.RBRACE:
			self._advance()
			key = self._parse_expression(Precedence.LOWEST)
			if not self._expect(TokenKind.COLON):
				return None
			self._advance()
			value = self._parse_expression(Precedence.LOWEST)
			if key is None or value is None:
				return None
			pairs.append((key, value))
			if self._next.kind is not TokenKind.RBRACE and not self._expect(TokenKind.COMMA):
				return None
		self._advance()
		return syntax.HashLiteral(token, pairs)

	def _parse_prefix_expression(self):
		token = self._curr
		self._advance()
		right = self._parse_expression(Precedence.PREFIX)
		return None if right is None else syntax.PrefixExpression(token, token.text, right)

	def _parse_infix_expression(self, left:syntax.Expression):
		token = self._curr
		precedence = self._curr_precedence()
		self._advance()
		right = self._parse_expression(precedence)
		return None if right is None else syntax.InfixExpression(token, left, token.text, right)

	def _parse_grouped_expression(self):
		self._advance()
		expression = self._parse_expression(Precedence.LOWEST)
		if not self._expect(TokenKind.RPAREN):
			return None
		return expression

	def _parse_if_expression(self):
		token = self._curr
		if not self._expect(TokenKind.LPAREN):
			return None
		self._advance()
		condition = self._parse_expression(Precedence.LOWEST)
		if not self._expect(TokenKind.RPAREN):
			return None
		if not self._expect(TokenKind.LBRACE):
			return None
		consequence = self._parse_block()
		alternative = None
		if self._next.kind is TokenKind.ELSE:
			self._advance()
			if not self._expect(TokenKind.LBRACE):
				return None
			alternative = self._parse_block()
		if condition is None:
			return None
		return syntax.IfExpression(token, condition, consequence, alternative)

	def _parse_function_literal(self):
		token = self._curr
		if not self._expect(TokenKind.LPAREN):
			return None
		params = self._parse_list(TokenKind.RPAREN, self._parse_parameter)
		if params is None:
			return None
		if not self._expect(TokenKind.LBRACE):
			return None
		return syntax.FunctionLiteral(token, params, self._parse_block())

	def _parse_parameter(self):
		if self._curr.kind is not TokenKind.ID:
			self._error("expected parameter name, got %s instead" % self._curr.kind)
			return None
		return syntax.Identifier(self._curr)

	def _parse_call_expression(self, function:syntax.Expression):
		token = self._curr
		args = self._parse_list(TokenKind.RPAREN, self._parse_list_item)
		return None if args is None else syntax.CallExpression(token, function, args)

	def _parse_index_expression(self, left:syntax.Expression):
		token = self._curr
		self._advance()
		index = self._parse_expression(Precedence.LOWEST)
		if not self._expect(TokenKind.RBRACKET):
			return None
		return None if index is None else syntax.IndexExpression(token, left, index)

	def _parse_list_item(self): return self._parse_expression(Precedence.LOWEST)

	def _parse_list(self, end:TokenKind, parse_item:PrefixHandler) -> Optional[list]:
		"""
		Comma-separated items up to the closing delimiter, which may
		immediately follow the opener. A trailing comma is tolerated.
		"""
		items = []
		if self._next.kind is end:
			self._advance()
			return items
		self._advance()
		items.append(parse_item())
		while self._next.kind is TokenKind.COMMA:
			self._advance()
			if self._next.kind is end:
				break
			self._advance()
			items.append(parse_item())
		if not self._expect(end):
			return None
		if any(item is None for item in items):
			return None
		return items

def parse(text:str, report:Optional[Report]=None) -> tuple[syntax.Module, list[SyntaxIssue]]:
	return Parser(text, report).parse()
