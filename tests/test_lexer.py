import unittest

from geo.lexer import Lexer, tokenize
from geo.tokens import TokenKind as K

class LexerTests(unittest.TestCase):

	def test_every_kind_of_token(self):
		text = "\n".join([
			'fn let return true false',
			'123 1.23 1.4e5',
			'foo _foo f12 io! option? 1f',
			'=+-*/==!!=>>=<<=|&&||',
			';,:(){}[]',
			'"foobar" "foo \\"bar"',
			'',
		])
		expected = [
			(K.FN, "fn", 1, 1),
			(K.LET, "let", 1, 4),
			(K.RETURN, "return", 1, 8),
			(K.TRUE, "true", 1, 15),
			(K.FALSE, "false", 1, 20),
			(K.NUMBER, "123", 2, 1),
			(K.NUMBER, "1.23", 2, 5),
			(K.NUMBER, "1.4e5", 2, 10),
			(K.ID, "foo", 3, 1),
			(K.ID, "_foo", 3, 5),
			(K.ID, "f12", 3, 10),
			(K.ID, "io!", 3, 14),
			(K.ID, "option?", 3, 18),
			(K.NUMBER, "1", 3, 26),
			(K.ID, "f", 3, 27),
			(K.ASSIGN, "=", 4, 1),
			(K.PLUS, "+", 4, 2),
			(K.MINUS, "-", 4, 3),
			(K.MUL, "*", 4, 4),
			(K.DIV, "/", 4, 5),
			(K.EQ, "==", 4, 6),
			(K.NOT, "!", 4, 8),
			(K.NEQ, "!=", 4, 9),
			(K.GT, ">", 4, 11),
			(K.GE, ">=", 4, 12),
			(K.LT, "<", 4, 14),
			(K.LE, "<=", 4, 15),
			(K.PIPE, "|", 4, 17),
			(K.AND, "&&", 4, 18),
			(K.OR, "||", 4, 20),
			(K.EOL, ";", 5, 1),
			(K.COMMA, ",", 5, 2),
			(K.COLON, ":", 5, 3),
			(K.LPAREN, "(", 5, 4),
			(K.RPAREN, ")", 5, 5),
			(K.LBRACE, "{", 5, 6),
			(K.RBRACE, "}", 5, 7),
			(K.LBRACKET, "[", 5, 8),
			(K.RBRACKET, "]", 5, 9),
			(K.STRING, "foobar", 6, 1),
			(K.STRING, 'foo \\"bar', 6, 10),
			(K.EOF, "", 7, 1),
		]
		actual = tokenize(text)
		self.assertEqual(len(expected), len(actual))
		for want, got in zip(expected, actual):
			with self.subTest(want=want):
				self.assertEqual(want, tuple(got))

	def test_unrecognized_characters_become_error_tokens(self):
		kinds = [t.kind for t in tokenize("a @ b & c")]
		self.assertEqual([K.ID, K.ERROR, K.ID, K.ERROR, K.ID, K.EOF], kinds)
		self.assertEqual("@", tokenize("@")[0].text)

	def test_unterminated_string(self):
		first = tokenize('"abc')[0]
		self.assertIs(K.ERROR, first.kind)
		self.assertEqual('"abc', first.text)

	def test_bang_equal_is_not_swallowed_by_a_name(self):
		kinds = [t.kind for t in tokenize("x!=y")]
		self.assertEqual([K.ID, K.NEQ, K.ID, K.EOF], kinds)

	def test_comments_and_unicode_names(self):
		tokens = tokenize("# nothing to see\n世界 # trailing")
		self.assertEqual((K.ID, "世界", 2, 1), tuple(tokens[0]))
		self.assertIs(K.EOF, tokens[1].kind)

	def test_iteration_ends_after_eof(self):
		lexer = Lexer("")
		self.assertEqual([K.EOF], [t.kind for t in lexer])
		self.assertIs(K.EOF, lexer.next_token().kind)

if __name__ == '__main__':
	unittest.main()
