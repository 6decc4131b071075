"""
Here find the module system -- such as it is.

A registry turns a module name into a parsed syntax.Module by asking each of
its resolvers in turn for source text. The first one with an answer wins,
and the parsed result is cached under the name, so importing the same
thing twice costs one parse.
"""
from pathlib import Path
from typing import Iterable, Mapping, Optional, Sequence, Union

from .diagnostics import Report, SyntaxErrors
from .parser import parse
from .syntax import Module

SOURCE_SUFFIX = ".geo"

class ModuleNotFound(Exception):
	""" As distinct from a Python import error """

class ModuleResolver:
	""" Strategy for finding source text by name. Empty string means "not here". """
	def resolve(self, name:str) -> str:
		raise NotImplementedError(type(self))

class FileResolver(ModuleResolver):
	"""
	Looks for the name as given, then with the source suffix added,
	relative to each directory of the search path in order.
	"""
	def __init__(self, search_path:Iterable[Union[str, Path]]=(".",)):
		self.search_path = [Path(p) for p in search_path]

	def _candidates(self, name:str):
		for base in self.search_path:
			yield base / name
			if not name.endswith(SOURCE_SUFFIX):
				yield base / (name + SOURCE_SUFFIX)

	def resolve(self, name:str) -> str:
		for path in self._candidates(name):
			if path.is_file():
				try:
					with open(path, "r", encoding="utf-8") as fh:
						return fh.read()
				except OSError:
					continue
		return ""

class DictResolver(ModuleResolver):
	""" Source text held in memory: handy for embedding, and for tests. """
	def __init__(self, sources:Mapping[str, str]):
		self.sources = dict(sources)
	def resolve(self, name:str) -> str:
		return self.sources.get(name, "")

class ModuleRegistry:
	def __init__(self, resolvers:Optional[Sequence[ModuleResolver]]=None, report:Optional[Report]=None):
		self.resolvers = list(resolvers) if resolvers is not None else [FileResolver()]
		self._report = report or Report()
		self._cache: dict[str, Module] = {}
		self._loading: list[str] = []

	def load(self, name:str) -> Module:
		""" Raises ModuleNotFound or SyntaxErrors rather than return something unusable. """
		try: return self._cache[name]
		except KeyError: pass
		for resolver in self.resolvers:
			text = resolver.resolve(name)
			if text:
				self._report.info("Loading", name, "via", type(resolver).__name__)
				module, errors = parse(text)
				if errors:
					raise SyntaxErrors(errors)
				self._cache[name] = module
				return module
		raise ModuleNotFound(name)

	def is_cached(self, name:str) -> bool:
		return name in self._cache

	# The evaluator brackets each import with these, so a module that
	# (directly or not) imports itself gets noticed instead of recursing forever.

	def enter(self, name:str) -> bool:
		if name in self._loading:
			return False
		self._loading.append(name)
		return True

	def leave(self, name:str):
		assert self._loading and self._loading[-1] == name, (self._loading, name)
		self._loading.pop()
