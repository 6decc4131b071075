from pathlib import Path
import tempfile
import unittest

from geo.diagnostics import SyntaxErrors
from geo.evaluator import Evaluator
from geo.front_end import run_text
from geo.modularity import ModuleRegistry, ModuleNotFound, DictResolver, FileResolver
from geo.values import Hash, Error

LIBRARY = {
	"math": "let double = fn(x) { x * 2 }; let pi = 3;",
	"bad": "let = 1",
	"oops": "1 + true",
	"a": 'let b = import("b");',
	"b": 'let a = import("a");',
	"uses_math": 'let m = import("math"); let quad = fn(x) { m["double"](m["double"](x)) };',
}

def _evaluator(sources=LIBRARY) -> Evaluator:
	return Evaluator(registry=ModuleRegistry([DictResolver(sources)]))

class RegistryTests(unittest.TestCase):

	def test_load_caches(self):
		registry = ModuleRegistry([DictResolver(LIBRARY)])
		self.assertFalse(registry.is_cached("math"))
		first = registry.load("math")
		self.assertTrue(registry.is_cached("math"))
		self.assertIs(first, registry.load("math"))

	def test_first_resolver_with_an_answer_wins(self):
		registry = ModuleRegistry([DictResolver({}), DictResolver({"x": "1"}), DictResolver({"x": "2"})])
		self.assertEqual("1", str(registry.load("x")))

	def test_failures_raise(self):
		registry = ModuleRegistry([DictResolver(LIBRARY)])
		with self.assertRaises(ModuleNotFound):
			registry.load("nowhere")
		with self.assertRaises(SyntaxErrors) as cm:
			registry.load("bad")
		self.assertEqual(1, len(cm.exception.issues))
		self.assertFalse(registry.is_cached("bad"))

	def test_cycle_bookkeeping(self):
		registry = ModuleRegistry([])
		self.assertTrue(registry.enter("a"))
		self.assertFalse(registry.enter("a"))
		registry.leave("a")
		self.assertTrue(registry.enter("a"))

class FileResolverTests(unittest.TestCase):

	def test_suffix_is_optional(self):
		with tempfile.TemporaryDirectory() as tmp:
			(Path(tmp) / "util.geo").write_text("let x = 7;", encoding="utf-8")
			resolver = FileResolver([tmp])
			self.assertEqual("let x = 7;", resolver.resolve("util"))
			self.assertEqual("let x = 7;", resolver.resolve("util.geo"))
			self.assertEqual("", resolver.resolve("missing"))

	def test_search_path_in_order(self):
		with tempfile.TemporaryDirectory() as first, tempfile.TemporaryDirectory() as second:
			(Path(second) / "m.geo").write_text("2", encoding="utf-8")
			resolver = FileResolver([first, second])
			self.assertEqual("2", resolver.resolve("m"))
			(Path(first) / "m.geo").write_text("1", encoding="utf-8")
			self.assertEqual("1", resolver.resolve("m"))

class ImportTests(unittest.TestCase):

	def test_import_answers_a_hash_of_bindings(self):
		result = run_text('import("math")', evaluator=_evaluator())
		self.assertIsInstance(result, Hash)
		self.assertEqual("{double, pi}", "{%s}" % ", ".join(p.key.inspect() for p in result.pairs.values()))

	def test_imported_things_work(self):
		for text, expect in [
			('let m = import("math"); m["double"](4)', "8"),
			('import("math")["pi"]', "3"),
			('import("math")["nope"]', "null"),
			('import("uses_math")["quad"](1)', "4"),
			('"math" | import | fn(m) { m["pi"] }', "3"),
		]:
			with self.subTest(text):
				self.assertEqual(expect, run_text(text, evaluator=_evaluator()).inspect())

	def test_import_failures(self):
		for text, message in [
			('import("nowhere")', "module not found: nowhere"),
			('import("bad")', "syntax error in module bad: at line 1, column 1: expected next token to be ID, got ASSIGN instead"),
			('import("oops")', "type mismatch: TypeNumber + TypeBool"),
			('import("a")', "cyclic import: a"),
			("import(5)", "argument to `import` must be (TypeString), got TypeNumber"),
		]:
			with self.subTest(text):
				result = run_text(text, evaluator=_evaluator())
				self.assertIsInstance(result, Error)
				self.assertEqual(message, result.message)

	def test_repeat_import_is_fine(self):
		evaluator = _evaluator()
		text = 'import("math")["pi"] + import("math")["pi"]'
		self.assertEqual(6, run_text(text, evaluator=evaluator).value)
		self.assertTrue(evaluator.registry.is_cached("math"))

	def test_import_from_files(self):
		with tempfile.TemporaryDirectory() as tmp:
			(Path(tmp) / "greet.geo").write_text('let hello = fn(who) { "Hello, " + who };', encoding="utf-8")
			evaluator = Evaluator(registry=ModuleRegistry([FileResolver([tmp])]))
			result = run_text('import("greet")["hello"]("world")', evaluator=evaluator)
			self.assertEqual("Hello, world", result.inspect())

if __name__ == '__main__':
	unittest.main()
