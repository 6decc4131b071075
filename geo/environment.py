"""
Simplest possible environment concept.

This is the canonical list-structured search: each scope owns its own
bindings and merely refers to its parent. Closures hold on to scopes,
so a `let` made later in a shared scope is visible to all of them.
"""
from typing import Any, Iterator, Optional

class Scope:
	def __init__(self, parent:Optional["Scope"]=None):
		self._bindings: dict[str, Any] = {}
		self.parent = parent

	def get(self, name:str) -> Optional[Any]:
		""" Returns None if the name is bound nowhere along the chain. """
		scope = self
		while scope is not None:
			try: return scope._bindings[name]
			except KeyError: scope = scope.parent
		return None

	def set(self, name:str, value:Any) -> Any:
		""" Rebinding within the same scope simply overwrites. """
		self._bindings[name] = value
		return value

	def local_items(self) -> Iterator[tuple[str, Any]]:
		return iter(self._bindings.items())

	def __repr__(self):
		return "<Scope %s%s>" % (sorted(self._bindings), "" if self.parent is None else " ...")

def new_root_environment() -> Scope:
	""" A fresh parent-less scope. A REPL keeps one of these across lines. """
	return Scope()
