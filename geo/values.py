"""
This module defines the run-time values the evaluator operates in terms of.

The set is closed: every value is an instance of one of the classes here,
and its ObjectType tag says which. Tags are bit-flags so that builtins can
declare which types each parameter accepts as a simple mask.

Numbers, booleans and strings can serve as hash keys. Each carries a
structural HashKey, computed once at construction, so that two equal
values built separately still find the same entry.
"""
import struct
from enum import Flag
from typing import Callable, NamedTuple, Optional, Sequence

from . import syntax
from .syntax import format_number
from .environment import Scope

class ObjectType(Flag):
	ERROR = 1
	NUMBER = 2
	BOOL = 4
	STRING = 8
	ARRAY = 16
	HASH = 32
	NULL = 64
	RETURN = 128
	FUNCTION = 256
	BUILTIN = 512

	def __str__(self):
		return ", ".join(_TYPE_NAMES[t] for t in _EACH_TYPE if t & self)

_TYPE_NAMES = {
	ObjectType.ERROR: "TypeError",
	ObjectType.NUMBER: "TypeNumber",
	ObjectType.BOOL: "TypeBool",
	ObjectType.STRING: "TypeString",
	ObjectType.ARRAY: "TypeArray",
	ObjectType.HASH: "TypeHash",
	ObjectType.NULL: "TypeNull",
	ObjectType.RETURN: "TypeReturn",
	ObjectType.FUNCTION: "TypeFn",
	ObjectType.BUILTIN: "TypeBuiltin",
}
_EACH_TYPE = tuple(_TYPE_NAMES)

ANY = ObjectType(0)
for _t in _EACH_TYPE: ANY |= _t

class HashKey(NamedTuple):
	type: ObjectType
	value: int

_FNV_OFFSET = 0xcbf29ce484222325
_FNV_PRIME = 0x100000001b3
_MASK_64 = 0xffffffffffffffff

def fnv1a_64(data:bytes) -> int:
	h = _FNV_OFFSET
	for byte in data:
		h = ((h ^ byte) * _FNV_PRIME) & _MASK_64
	return h

###############################################################################

class Object:
	""" Root of the run-time value classes. """
	type: ObjectType
	def inspect(self) -> str: raise NotImplementedError(type(self))
	def __str__(self): return self.inspect()

class Hashable(Object):
	""" The capability to act as a hash key. """
	_hash_key: HashKey
	def hash_key(self) -> HashKey: return self._hash_key

class Number(Hashable):
	type = ObjectType.NUMBER
	def __init__(self, value:float):
		self.value = float(value)
		# Adding zero folds negative zero onto zero, so equal numbers agree.
		bits = struct.unpack("<Q", struct.pack("<d", self.value + 0.0))[0]
		self._hash_key = HashKey(self.type, bits)
	def inspect(self): return format_number(self.value)
	def __repr__(self): return "<Number %s>" % self.inspect()

class Bool(Hashable):
	type = ObjectType.BOOL
	def __init__(self, value:bool):
		self.value = value
		self._hash_key = HashKey(self.type, 1 if value else 0)
	def inspect(self): return "true" if self.value else "false"
	def __repr__(self): return "<Bool %s>" % self.inspect()

class String(Hashable):
	type = ObjectType.STRING
	def __init__(self, value:str):
		self.value = value
		self._hash_key = HashKey(self.type, fnv1a_64(value.encode("utf-8")))
	def inspect(self): return self.value
	def __repr__(self): return "<String %r>" % self.value

class Array(Object):
	""" Elements are a tuple: builtins make new arrays rather than alter old ones. """
	type = ObjectType.ARRAY
	def __init__(self, elements:Sequence[Object]):
		self.elements = tuple(elements)
	def inspect(self): return "[%s]" % ", ".join(e.inspect() for e in self.elements)

class HashPair(NamedTuple):
	key: Hashable
	value: Object

class Hash(Object):
	type = ObjectType.HASH
	def __init__(self, pairs:dict[HashKey, HashPair]):
		self.pairs = pairs
	def get(self, key:Hashable) -> Optional[Object]:
		pair = self.pairs.get(key.hash_key())
		return None if pair is None else pair.value
	def inspect(self):
		return "{%s}" % ", ".join("%s: %s" % (p.key.inspect(), p.value.inspect()) for p in self.pairs.values())

class Null(Object):
	type = ObjectType.NULL
	def inspect(self): return "null"
	def __repr__(self): return "<Null>"

class Return(Object):
	""" Carries a value up through enclosing blocks as far as the nearest call. """
	type = ObjectType.RETURN
	def __init__(self, value:Object): self.value = value
	def inspect(self): return self.value.inspect()

class Error(Object):
	""" The failure channel. Once made, it passes up through every level untouched. """
	type = ObjectType.ERROR
	def __init__(self, message:str, node:Optional[syntax.Node]=None):
		self.message = message
		self.node = node
	def inspect(self): return "ERROR: " + self.message
	def __repr__(self): return "<Error %r>" % self.message

class Function(Object):
	""" A function literal closed over the scope in which it was evaluated. """
	type = ObjectType.FUNCTION
	def __init__(self, params:Sequence[syntax.Identifier], body:syntax.Block, scope:Scope):
		self.params = list(params)
		self.body = body
		self.scope = scope
	def inspect(self):
		return "fn(%s) {\n%s\n}" % (", ".join(p.name for p in self.params), self.body)

NativeFunction = Callable[..., Object]

class Builtin(Object):
	"""
	A native function with a declared signature: one type-mask per required
	parameter. Surplus arguments are dropped, as for user functions, except
	that a builtin declaring no parameters at all takes everything it is given.
	"""
	@property
	def variadic(self) -> bool: return not self.params
	type = ObjectType.BUILTIN
	def __init__(self, name:str, params:Sequence[ObjectType], fn:NativeFunction):
		self.name = name
		self.params = tuple(params)
		self.fn = fn
	def inspect(self): return "builtin function"
	def __repr__(self): return "<Builtin %s>" % self.name

TRUE = Bool(True)
FALSE = Bool(False)
NULL = Null()

def native_bool(value:bool) -> Bool:
	return TRUE if value else FALSE

def is_error(it) -> bool:
	return isinstance(it, Error)

def is_truthy(it:Object) -> bool:
	if it is TRUE: return True
	if it is FALSE or it is NULL: return False
	if isinstance(it, Number): return it.value != 0
	if isinstance(it, String): return it.value != ""
	if isinstance(it, Array): return bool(it.elements)
	if isinstance(it, Hash): return bool(it.pairs)
	return True
