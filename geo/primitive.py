"""
Build the primitive namespace: the table of builtin functions every
evaluator starts from. The table is made fresh for each caller, so
an evaluator (or a test) can have its own, with its own output stream.
"""
import sys
from typing import Optional, TextIO

from .values import (
	ObjectType, ANY, Object, Builtin, Array, Number, NULL,
)

def _len(it:Object) -> Object:
	if isinstance(it, Array): return Number(len(it.elements))
	else: return Number(len(it.value))

def _head(ary:Array) -> Object:
	return ary.elements[0] if ary.elements else NULL

def _last(ary:Array) -> Object:
	return ary.elements[-1] if ary.elements else NULL

def _tail(ary:Array) -> Object:
	return Array(ary.elements[1:]) if ary.elements else NULL

def _push(ary:Array, item:Object) -> Object:
	return Array(ary.elements + (item,))

def _puts(out:Optional[TextIO]):
	def puts(*args:Object) -> Object:
		stream = out or sys.stdout
		for arg in args:
			print(arg.inspect(), file=stream)
		return NULL
	return puts

def builtin_table(out:Optional[TextIO]=None) -> dict[str, Builtin]:
	""" `out` is where puts! writes; by default, whatever sys.stdout is at the time. """
	table = [
		Builtin("len", [ObjectType.STRING | ObjectType.ARRAY], _len),
		Builtin("head", [ObjectType.ARRAY], _head),
		Builtin("last", [ObjectType.ARRAY], _last),
		Builtin("tail", [ObjectType.ARRAY], _tail),
		Builtin("push", [ObjectType.ARRAY, ANY], _push),
		Builtin("puts!", [], _puts(out)),
	]
	return {b.name: b for b in table}
