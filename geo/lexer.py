"""
Character-level scanning. The lexer never gives up: anything it does not
recognize becomes an ERROR token and scanning carries on from the next
character, so the parser gets to decide how bad things are.
"""
from typing import Iterator
from .tokens import Token, TokenKind, PUNCTUATION, DIGRAPHS, lookup_id

def _is_word_start(c:str) -> bool: return c.isalpha() or c == "_"
def _is_word_part(c:str) -> bool: return c.isalnum() or c == "_"
def _is_digit(c:str) -> bool: return "0" <= c <= "9"

class Lexer:
	"""
	Produces tokens on demand. Lines and columns are 1-based and refer
	to the first character of each token.
	"""
	def __init__(self, text:str):
		self._text = text
		self._pos = 0
		self._line = 1
		self._col = 1

	def __iter__(self) -> Iterator[Token]:
		while True:
			token = self.next_token()
			yield token
			if token.kind is TokenKind.EOF:
				return

	def _peek(self, offset=0) -> str:
		index = self._pos + offset
		return self._text[index] if index < len(self._text) else ""

	def _advance(self) -> str:
		c = self._text[self._pos]
		self._pos += 1
		if c == "\n":
			self._line += 1
			self._col = 1
		else:
			self._col += 1
		return c

	def _skip_blanks(self):
		while self._pos < len(self._text):
			c = self._peek()
			if c.isspace():
				self._advance()
			elif c == "#":
				while self._pos < len(self._text) and self._peek() != "\n":
					self._advance()
			else:
				return

	def next_token(self) -> Token:
		self._skip_blanks()
		line, col, start = self._line, self._col, self._pos
		if start >= len(self._text):
			return Token(TokenKind.EOF, "", line, col)
		c = self._peek()
		if _is_word_start(c):
			return self._scan_word(line, col)
		if _is_digit(c):
			return self._scan_number(line, col)
		if c == '"':
			return self._scan_string(line, col)
		self._advance()
		if c in DIGRAPHS:
			second, kind = DIGRAPHS[c]
			if self._peek() == second:
				self._advance()
				return Token(kind, c + second, line, col)
		if c in PUNCTUATION:
			return Token(PUNCTUATION[c], c, line, col)
		return Token(TokenKind.ERROR, c, line, col)

	def _scan_word(self, line, col) -> Token:
		start = self._pos
		while _is_word_part(self._peek()):
			self._advance()
		# A single trailing bang or question mark belongs to the name: io! option?
		if self._peek() in ("!", "?") and self._peek(1) != "=":
			self._advance()
		text = self._text[start:self._pos]
		return Token(lookup_id(text), text, line, col)

	def _scan_number(self, line, col) -> Token:
		start = self._pos
		while _is_digit(self._peek()):
			self._advance()
		if self._peek() == "." and _is_digit(self._peek(1)):
			self._advance()
			while _is_digit(self._peek()):
				self._advance()
		if self._peek() in ("e", "E"):
			sign = 1 if self._peek(1) in ("+", "-") else 0
			if _is_digit(self._peek(1 + sign)):
				for _ in range(1 + sign):
					self._advance()
				while _is_digit(self._peek()):
					self._advance()
		return Token(TokenKind.NUMBER, self._text[start:self._pos], line, col)

	def _scan_string(self, line, col) -> Token:
		self._advance()
		start = self._pos
		while self._pos < len(self._text):
			c = self._peek()
			if c == '"':
				text = self._text[start:self._pos]
				self._advance()
				return Token(TokenKind.STRING, text, line, col)
			if c == "\\" and self._peek(1):
				self._advance()
			self._advance()
		return Token(TokenKind.ERROR, self._text[start-1:], line, col)

def tokenize(text:str) -> list[Token]:
	return list(Lexer(text))
