"""
The set of parse-nodes.
The parser builds these top-down; the evaluator walks them with a Visitor.
Every node keeps the token it started from, so diagnostics can point somewhere.
Printing a node yields its fully-parenthesized form, which re-parses to the same tree.
"""
import math
from typing import Optional, Sequence
from .tokens import Token

def format_number(value:float) -> str:
	""" Integral values print without a decimal point, like the number you wrote. """
	if math.isnan(value): return "NaN"
	if math.isinf(value): return "+Inf" if value > 0 else "-Inf"
	if value.is_integer() and abs(value) < 1e21:
		return str(int(value))
	return repr(value)

class Node:
	token: Token
	def __init__(self, token:Token): self.token = token
	def line(self) -> int: return self.token.line
	def column(self) -> int: return self.token.column

class Statement(Node): pass
class Expression(Node): pass

def _join(items, sep=", "): return sep.join(map(str, items))

class Module(Node):
	def __init__(self, statements:Sequence[Statement]):
		super().__init__(None)
		self.statements = list(statements)
	def __str__(self): return _join(self.statements, "; ")

###############################################################################

class LetStatement(Statement):
	def __init__(self, token:Token, name:"Identifier", value:Optional[Expression]):
		super().__init__(token)
		self.name, self.value = name, value
	def __str__(self): return "let %s = %s" % (self.name, self.value)

class ReturnStatement(Statement):
	def __init__(self, token:Token, value:Optional[Expression]):
		super().__init__(token)
		self.value = value
	def __str__(self): return "return %s" % self.value

class ExpressionStatement(Statement):
	def __init__(self, token:Token, expression:Optional[Expression]):
		super().__init__(token)
		self.expression = expression
	def __str__(self): return "" if self.expression is None else str(self.expression)

class Block(Statement):
	""" A braced run of statements. Evaluating one opens a fresh scope. """
	def __init__(self, token:Token, statements:Sequence[Statement]):
		super().__init__(token)
		self.statements = list(statements)
	def __str__(self): return _join(self.statements, "; ")

###############################################################################

class Identifier(Expression):
	def __init__(self, token:Token):
		super().__init__(token)
		self.name = token.text
	def __str__(self): return self.name
	def __repr__(self): return "<Identifier %s>" % self.name

class NumberLiteral(Expression):
	def __init__(self, token:Token, value:float):
		super().__init__(token)
		self.value = value
	def __str__(self): return format_number(self.value)

class BooleanLiteral(Expression):
	def __init__(self, token:Token, value:bool):
		super().__init__(token)
		self.value = value
	def __str__(self): return "true" if self.value else "false"

class StringLiteral(Expression):
	def __init__(self, token:Token, value:str):
		super().__init__(token)
		self.value = value
	def __str__(self): return '"%s"' % self.value

class ArrayLiteral(Expression):
	def __init__(self, token:Token, elements:Sequence[Expression]):
		super().__init__(token)
		self.elements = list(elements)
	def __str__(self): return "[%s]" % _join(self.elements)

class HashLiteral(Expression):
	"""
	Pairs stay in source order. Keys are expressions, so nothing about
	them can be known until evaluation; duplicates are the evaluator's problem.
	"""
	def __init__(self, token:Token, pairs:Sequence[tuple[Expression, Expression]]):
		super().__init__(token)
		self.pairs = list(pairs)
	def __str__(self): return "{%s}" % ", ".join("%s: %s" % kv for kv in self.pairs)

class PrefixExpression(Expression):
	def __init__(self, token:Token, op:str, right:Expression):
		super().__init__(token)
		self.op, self.right = op, right
	def __str__(self): return "(%s%s)" % (self.op, self.right)

class InfixExpression(Expression):
	def __init__(self, token:Token, left:Expression, op:str, right:Expression):
		super().__init__(token)
		self.left, self.op, self.right = left, op, right
	def __str__(self): return "(%s %s %s)" % (self.left, self.op, self.right)

class IfExpression(Expression):
	def __init__(self, token:Token, condition:Expression, consequence:Block, alternative:Optional[Block]):
		super().__init__(token)
		self.condition, self.consequence, self.alternative = condition, consequence, alternative
	def __str__(self):
		text = "if (%s) { %s }" % (self.condition, self.consequence)
		if self.alternative is not None:
			text += " else { %s }" % self.alternative
		return text

class FunctionLiteral(Expression):
	""" Note the absence of any scope: capture happens when the literal is evaluated. """
	def __init__(self, token:Token, params:Sequence[Identifier], body:Block):
		super().__init__(token)
		self.params, self.body = list(params), body
	def __str__(self): return "fn(%s) { %s }" % (_join(self.params), self.body)

class CallExpression(Expression):
	def __init__(self, token:Token, function:Expression, args:Sequence[Expression]):
		super().__init__(token)
		self.function, self.args = function, list(args)
	def __str__(self): return "%s(%s)" % (self.function, _join(self.args))

class IndexExpression(Expression):
	def __init__(self, token:Token, left:Expression, index:Expression):
		super().__init__(token)
		self.left, self.index = left, index
	def __str__(self): return "(%s[%s])" % (self.left, self.index)
