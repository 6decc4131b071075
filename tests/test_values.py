import math
import unittest

from geo.environment import Scope, new_root_environment
from geo.values import (
	ObjectType, ANY, fnv1a_64,
	Number, Bool, String, Array, Hash, HashPair, Error, Builtin,
	TRUE, FALSE, NULL, native_bool, is_error, is_truthy,
)

class HashKeyTests(unittest.TestCase):

	def test_equal_strings_make_equal_keys(self):
		hello1 = String("Hello World")
		hello2 = String("Hello World")
		diff1 = String("My name is johnny")
		diff2 = String("My name is johnny")
		self.assertIsNot(hello1, hello2)
		self.assertEqual(hello1.hash_key(), hello2.hash_key())
		self.assertEqual(diff1.hash_key(), diff2.hash_key())
		self.assertNotEqual(hello1.hash_key(), diff1.hash_key())

	def test_numbers(self):
		self.assertEqual(Number(1).hash_key(), Number(1.0).hash_key())
		self.assertEqual(Number(-0.0).hash_key(), Number(0).hash_key())
		self.assertNotEqual(Number(1).hash_key(), Number(1.5).hash_key())

	def test_types_keep_keys_apart(self):
		self.assertNotEqual(Bool(True).hash_key(), Number(1).hash_key())
		self.assertNotEqual(Bool(False).hash_key(), Number(0).hash_key())
		self.assertEqual(TRUE.hash_key(), Bool(True).hash_key())

	def test_fnv(self):
		self.assertEqual(0xcbf29ce484222325, fnv1a_64(b""))
		self.assertEqual(0xaf63dc4c8601ec8c, fnv1a_64(b"a"))

	def test_hash_lookup(self):
		one = String("one")
		h = Hash({one.hash_key(): HashPair(one, Number(1))})
		self.assertEqual(1, h.get(String("one")).value)
		self.assertIsNone(h.get(String("two")))

class TypeTests(unittest.TestCase):

	def test_mask_names(self):
		for mask, expect in [
			(ObjectType.NUMBER, "TypeNumber"),
			(ObjectType.FUNCTION, "TypeFn"),
			(ObjectType.BUILTIN, "TypeBuiltin"),
			(ObjectType.STRING | ObjectType.ARRAY, "TypeString, TypeArray"),
			(ObjectType.ARRAY | ObjectType.STRING, "TypeString, TypeArray"),
		]:
			with self.subTest(expect):
				self.assertEqual(expect, str(mask))

	def test_any_admits_everything(self):
		for t in ObjectType:
			with self.subTest(t):
				self.assertTrue(t & ANY)

	def test_builtin_signature(self):
		self.assertTrue(Builtin("puts!", [], print).variadic)
		self.assertFalse(Builtin("len", [ObjectType.ARRAY], len).variadic)

class DisplayTests(unittest.TestCase):

	def test_inspect(self):
		for value, expect in [
			(Number(5), "5"),
			(Number(-3), "-3"),
			(Number(2.5), "2.5"),
			(Number(math.inf), "+Inf"),
			(Number(-math.inf), "-Inf"),
			(Number(math.nan), "NaN"),
			(TRUE, "true"),
			(FALSE, "false"),
			(NULL, "null"),
			(String("hi there"), "hi there"),
			(Array([Number(1), String("a"), Array([])]), "[1, a, []]"),
			(Error("oops"), "ERROR: oops"),
			(Builtin("len", [ObjectType.ARRAY], len), "builtin function"),
		]:
			with self.subTest(expect):
				self.assertEqual(expect, value.inspect())

	def test_hash_inspect_in_insertion_order(self):
		b, a = String("b"), String("a")
		h = Hash({b.hash_key(): HashPair(b, Number(1)), a.hash_key(): HashPair(a, Number(2))})
		self.assertEqual("{b: 1, a: 2}", h.inspect())

class TruthTests(unittest.TestCase):

	def test_truthiness(self):
		for value, expect in [
			(TRUE, True),
			(FALSE, False),
			(NULL, False),
			(Number(0), False),
			(Number(-0.0), False),
			(Number(3), True),
			(String(""), False),
			(String("x"), True),
			(Array([]), False),
			(Array([NULL]), True),
			(Hash({}), False),
			(Error("x"), True),
		]:
			with self.subTest(value=value.inspect()):
				self.assertIs(expect, is_truthy(value))

	def test_native_bool_gives_singletons(self):
		self.assertIs(TRUE, native_bool(1 < 2))
		self.assertIs(FALSE, native_bool(2 < 1))

	def test_is_error(self):
		self.assertTrue(is_error(Error("x")))
		self.assertFalse(is_error(NULL))
		self.assertFalse(is_error(None))
		self.assertFalse(is_error([]))
		self.assertFalse(is_error([Error("x")]))

class ScopeTests(unittest.TestCase):

	def test_lookup_walks_outward(self):
		root = new_root_environment()
		root.set("x", Number(1))
		inner = Scope(root)
		inner.set("y", Number(2))
		self.assertEqual(1, inner.get("x").value)
		self.assertEqual(2, inner.get("y").value)
		self.assertIsNone(root.get("y"))
		self.assertIsNone(inner.get("z"))

	def test_inner_bindings_shadow_without_disturbing(self):
		root = new_root_environment()
		root.set("x", Number(5))
		inner = Scope(root)
		inner.set("x", Number(6))
		self.assertEqual(6, inner.get("x").value)
		self.assertEqual(5, root.get("x").value)
		self.assertEqual(["x"], [k for k, v in inner.local_items()])

if __name__ == '__main__':
	unittest.main()
