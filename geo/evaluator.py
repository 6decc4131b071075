"""
Direct interpretation by walking the tree.

Control flow rides on two sentinel values rather than Python exceptions:
a Return travels up through blocks until a function call unwraps it,
and an Error travels up through everything. So every place that evaluates
a sub-expression checks for an Error and, finding one, hands it straight back.

The evaluator owns its builtin table and its module registry outright,
so separate evaluators (in tests, say) never share state.
"""
import sys, math
from typing import Optional, Sequence, Union

from boozetools.support.foundation import Visitor

from . import syntax
from .diagnostics import SyntaxErrors
from .environment import Scope, new_root_environment
from .modularity import ModuleRegistry, ModuleNotFound
from .primitive import builtin_table
from .values import (
	ObjectType, Object, Hashable, Number, String, Array, Hash, HashPair,
	Function, Builtin, Return, Error,
	NULL, native_bool, is_error, is_truthy,
)

STACK_OVERFLOW = "stack overflow"
DEFAULT_MAX_DEPTH = 200
FRAMES_PER_CALL = 40  # Generous bound on Python frames per interpreted call.
MAX_HOST_FRAMES = 20_000

def _divide(a:float, b:float) -> float:
	""" Python raises where IEEE-754 answers; give the IEEE-754 answer. """
	if b != 0: return a / b
	if a == 0 or math.isnan(a): return math.nan
	return math.copysign(math.inf, a) * math.copysign(1.0, b)

NUMERIC_OPS = {
	"+": lambda a, b: Number(a + b),
	"-": lambda a, b: Number(a - b),
	"*": lambda a, b: Number(a * b),
	"/": lambda a, b: Number(_divide(a, b)),
	">": lambda a, b: native_bool(a > b),
	">=": lambda a, b: native_bool(a >= b),
	"<": lambda a, b: native_bool(a < b),
	"<=": lambda a, b: native_bool(a <= b),
	"==": lambda a, b: native_bool(a == b),
	"!=": lambda a, b: native_bool(a != b),
}

class Evaluator(Visitor):
	def __init__(self, builtins:Optional[dict[str, Builtin]]=None, registry:Optional[ModuleRegistry]=None, max_depth:int=DEFAULT_MAX_DEPTH, out=None):
		self.builtins = dict(builtins) if builtins is not None else builtin_table(out)
		self.builtins.setdefault("import", Builtin("import", [ObjectType.STRING], self._import))
		self.registry = registry if registry is not None else ModuleRegistry()
		self.max_depth = max_depth
		self._depth = 0

	def evaluate(self, node:syntax.Node, scope:Scope) -> Object:
		"""
		The top-level driver. However deep the interpreted program recurses,
		what comes back is a value or an Error, never a Python stack overflow.
		The host recursion limit is raised to fit max_depth for the duration.
		"""
		limit = sys.getrecursionlimit()
		sys.setrecursionlimit(max(limit, min(self.max_depth * FRAMES_PER_CALL, MAX_HOST_FRAMES)))
		try: return self.visit(node, scope)
		except RecursionError:
			return Error(STACK_OVERFLOW, node)
		finally: sys.setrecursionlimit(limit)

	def _error(self, node:syntax.Node, message:str) -> Error:
		return Error(message, node)

	def _evaluate_all(self, exprs:Sequence[syntax.Expression], scope:Scope) -> Union[list[Object], Error]:
		""" Left to right; the first Error stops everything. """
		results = []
		for expr in exprs:
			it = self.visit(expr, scope)
			if is_error(it):
				return it
			results.append(it)
		return results

	# Statements:

	def visit_Module(self, module:syntax.Module, scope:Scope) -> Object:
		result = NULL
		for statement in module.statements:
			result = self.visit(statement, scope)
			if isinstance(result, Return): return result.value
			if is_error(result): return result
		return result

	def visit_Block(self, block:syntax.Block, scope:Scope) -> Object:
		inner = Scope(scope)
		result = NULL
		for statement in block.statements:
			result = self.visit(statement, inner)
			if result.type in (ObjectType.RETURN, ObjectType.ERROR):
				return result
		return result

	def visit_LetStatement(self, statement:syntax.LetStatement, scope:Scope) -> Object:
		value = self.visit(statement.value, scope)
		if is_error(value):
			return value
		scope.set(statement.name.name, value)
		return NULL

	def visit_ReturnStatement(self, statement:syntax.ReturnStatement, scope:Scope) -> Object:
		value = self.visit(statement.value, scope)
		if is_error(value):
			return value
		return Return(value)

	def visit_ExpressionStatement(self, statement:syntax.ExpressionStatement, scope:Scope) -> Object:
		return self.visit(statement.expression, scope)

	# Expressions:

	def visit_Identifier(self, expr:syntax.Identifier, scope:Scope) -> Object:
		value = scope.get(expr.name)
		if value is not None:
			return value
		try: return self.builtins[expr.name]
		except KeyError: return self._error(expr, "identifier not found: " + expr.name)

	def visit_NumberLiteral(self, expr:syntax.NumberLiteral, scope:Scope): return Number(expr.value)
	def visit_BooleanLiteral(self, expr:syntax.BooleanLiteral, scope:Scope): return native_bool(expr.value)
	def visit_StringLiteral(self, expr:syntax.StringLiteral, scope:Scope): return String(expr.value)

	def visit_ArrayLiteral(self, expr:syntax.ArrayLiteral, scope:Scope) -> Object:
		elements = self._evaluate_all(expr.elements, scope)
		if is_error(elements):
			return elements
		return Array(elements)

	def visit_HashLiteral(self, expr:syntax.HashLiteral, scope:Scope) -> Object:
		pairs = {}
		for key_expr, value_expr in expr.pairs:
			key = self.visit(key_expr, scope)
			if is_error(key):
				return key
			if not isinstance(key, Hashable):
				return self._error(key_expr, "unusable as hash key: %s" % key.type)
			value = self.visit(value_expr, scope)
			if is_error(value):
				return value
			pairs[key.hash_key()] = HashPair(key, value)
		return Hash(pairs)

	def visit_PrefixExpression(self, expr:syntax.PrefixExpression, scope:Scope) -> Object:
		right = self.visit(expr.right, scope)
		if is_error(right):
			return right
		if expr.op == "!":
			return native_bool(not is_truthy(right))
		if expr.op == "-" and isinstance(right, Number):
			return Number(-right.value)
		return self._error(expr, "unknown operator: %s%s" % (expr.op, right.type))

	def visit_InfixExpression(self, expr:syntax.InfixExpression, scope:Scope) -> Object:
		left = self.visit(expr.left, scope)
		if is_error(left):
			return left
		if expr.op == "&&" and not is_truthy(left): return native_bool(False)
		if expr.op == "||" and is_truthy(left): return native_bool(True)
		right = self.visit(expr.right, scope)
		if is_error(right):
			return right
		if expr.op in ("&&", "||"):
			return native_bool(is_truthy(right))
		return self._infix(expr, left, right)

	def _infix(self, expr:syntax.InfixExpression, left:Object, right:Object) -> Object:
		op = expr.op
		if isinstance(left, Number) and isinstance(right, Number):
			try: fn = NUMERIC_OPS[op]
			except KeyError: pass
			else: return fn(left.value, right.value)
		elif isinstance(left, String) and isinstance(right, String):
			if op == "+":
				return String(left.value + right.value)
		elif op == "==":
			return native_bool(left is right)
		elif op == "!=":
			return native_bool(left is not right)
		elif op == "|":
			return self.apply_function(right, [left], expr)
		elif left.type is not right.type:
			return self._error(expr, "type mismatch: %s %s %s" % (left.type, op, right.type))
		return self._error(expr, "unknown operator: %s %s %s" % (left.type, op, right.type))

	def visit_IfExpression(self, expr:syntax.IfExpression, scope:Scope) -> Object:
		condition = self.visit(expr.condition, scope)
		if is_error(condition):
			return condition
		if is_truthy(condition):
			return self.visit(expr.consequence, scope)
		if expr.alternative is not None:
			return self.visit(expr.alternative, scope)
		return NULL

	def visit_FunctionLiteral(self, expr:syntax.FunctionLiteral, scope:Scope) -> Object:
		return Function(expr.params, expr.body, scope)

	def visit_CallExpression(self, expr:syntax.CallExpression, scope:Scope) -> Object:
		function = self.visit(expr.function, scope)
		if is_error(function):
			return function
		args = self._evaluate_all(expr.args, scope)
		if is_error(args):
			return args
		return self.apply_function(function, args, expr)

	def visit_IndexExpression(self, expr:syntax.IndexExpression, scope:Scope) -> Object:
		left = self.visit(expr.left, scope)
		if is_error(left):
			return left
		index = self.visit(expr.index, scope)
		if is_error(index):
			return index
		if isinstance(left, Array) and isinstance(index, Number):
			if not math.isfinite(index.value):
				return NULL
			i = int(index.value)
			return left.elements[i] if 0 <= i < len(left.elements) else NULL
		if isinstance(left, Hash):
			if not isinstance(index, Hashable):
				return self._error(expr.index, "unusable as hash key: %s" % index.type)
			value = left.get(index)
			return NULL if value is None else value
		return self._error(expr, "index operator not supported: %s" % left.type)

	# Application:

	def apply_function(self, fn:Object, args:Sequence[Object], site:Optional[syntax.Node]=None) -> Object:
		if isinstance(fn, Function):
			return self._apply_closure(fn, args, site)
		if isinstance(fn, Builtin):
			return self._apply_builtin(fn, args, site)
		return self._error(site, "not a function: %s" % fn.type)

	def _apply_closure(self, fn:Function, args:Sequence[Object], site) -> Object:
		inner = Scope(fn.scope)
		for param, arg in zip(fn.params, args):
			inner.set(param.name, arg)
		if len(args) < len(fn.params):
			# Too few arguments: what comes back waits for the rest.
			return Function(fn.params[len(args):], fn.body, inner)
		if self._depth >= self.max_depth:
			return self._error(site, STACK_OVERFLOW)
		self._depth += 1
		try: result = self.visit(fn.body, inner)
		finally: self._depth -= 1
		return result.value if isinstance(result, Return) else result

	def _apply_builtin(self, fn:Builtin, args:Sequence[Object], site) -> Object:
		if len(args) < len(fn.params):
			return self._error(site, "wrong number of arguments. got=%d, want=%d" % (len(args), len(fn.params)))
		for mask, arg in zip(fn.params, args):
			if not arg.type & mask:
				return self._error(site, "argument to `%s` must be (%s), got %s" % (fn.name, mask, arg.type))
		if not fn.variadic:
			args = args[:len(fn.params)]
		return fn.fn(*args)

	# Modules:

	def _import(self, name:String) -> Object:
		"""
		Evaluate the named module in a fresh root scope, and
		answer a hash of whatever it bound at top level.
		"""
		key = name.value
		try: module = self.registry.load(key)
		except ModuleNotFound: return Error("module not found: " + key)
		except SyntaxErrors as ex: return Error("syntax error in module %s: %s" % (key, ex.issues[0]))
		if not self.registry.enter(key):
			return Error("cyclic import: " + key)
		scope = new_root_environment()
		try: result = self.visit(module, scope)
		finally: self.registry.leave(key)
		if is_error(result):
			return result
		pairs = {}
		for binding, value in scope.local_items():
			label = String(binding)
			pairs[label.hash_key()] = HashPair(label, value)
		return Hash(pairs)
