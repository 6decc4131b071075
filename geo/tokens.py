"""
The vocabulary of the language: token kinds, the token record,
and the keyword table the lexer consults for every identifier.
"""
from enum import Enum
from typing import NamedTuple

class TokenKind(Enum):
	ERROR = "ERROR"
	EOF = "EOF"

	# Identifiers + literals
	ID = "ID"
	NUMBER = "NUMBER"
	STRING = "STRING"

	# Operators
	ASSIGN = "="
	PLUS = "+"
	MINUS = "-"
	MUL = "*"
	DIV = "/"
	NOT = "!"
	EQ = "=="
	NEQ = "!="
	GT = ">"
	GE = ">="
	LT = "<"
	LE = "<="
	PIPE = "|"
	AND = "&&"
	OR = "||"

	# Delimiters
	EOL = ";"
	COMMA = ","
	COLON = ":"
	LPAREN = "("
	RPAREN = ")"
	LBRACE = "{"
	RBRACE = "}"
	LBRACKET = "["
	RBRACKET = "]"

	# Keywords
	FN = "fn"
	LET = "let"
	RETURN = "return"
	TRUE = "true"
	FALSE = "false"
	IF = "if"
	ELSE = "else"

	def __str__(self): return self.name

class Token(NamedTuple):
	kind: TokenKind
	text: str
	line: int
	column: int

	def __repr__(self): return "<%s %r @%d:%d>" % (self.kind.name, self.text, self.line, self.column)

KEYWORDS = {
	kind.value: kind
	for kind in (TokenKind.FN, TokenKind.LET, TokenKind.RETURN, TokenKind.TRUE, TokenKind.FALSE, TokenKind.IF, TokenKind.ELSE)
}

# Single-character operators and delimiters.
PUNCTUATION = {
	kind.value: kind
	for kind in TokenKind
	if len(kind.value) == 1
}

# Where a second character may extend the first: first -> (second, combined kind).
DIGRAPHS = {
	"=": ("=", TokenKind.EQ),
	"!": ("=", TokenKind.NEQ),
	">": ("=", TokenKind.GE),
	"<": ("=", TokenKind.LE),
	"&": ("&", TokenKind.AND),
	"|": ("|", TokenKind.OR),
}

def lookup_id(text:str) -> TokenKind:
	return KEYWORDS.get(text, TokenKind.ID)
