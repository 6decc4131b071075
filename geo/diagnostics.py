"""
Everything to do with complaining: the syntax-issue record the parser produces,
and the Report that collects issues and eventually explains them to a human.
Informational chatter also goes through the Report, gated on verbosity.
"""
import sys, random
from typing import NamedTuple, Optional, Sequence
from boozetools.support.failureprone import illustration

class TooManyIssues(Exception):
	pass

class SyntaxIssue(NamedTuple):
	line: int
	column: int
	message: str
	def __str__(self): return "at line %d, column %d: %s" % self

class SyntaxErrors(Exception):
	""" Raised where a caller wanted a runnable module and got complaints instead. """
	def __init__(self, issues:Sequence[SyntaxIssue]):
		super().__init__(*issues)
		self.issues = list(issues)
	def __str__(self): return "\n".join("- %s" % i for i in self.issues)

def _outburst():
	particle = ["Oh, ", "Well, ", "Aw, ", "", ""]
	minced_oaths = [
		'Ack', 'ARGH', 'Blargh', 'Confound it', 'Crud', 'Curses', 'Drat',
		'Fiddlesticks', 'Good Grief', 'Great Scott', 'Heavens', 'Nuts', 'Rats',
	]
	resignations = [
		'I am undone.',
		'I cannot continue.',
		'The path before me fades into darkness.',
		'I need to ask for help.',
	]
	return "%s%s! %s"%tuple(map(random.choice, (particle, minced_oaths, resignations)))

class Report:
	""" Collects issues as they turn up, so they can all be explained together. """
	_issues : list["Pic"]

	def __init__(self, *, verbose:int=0, max_issues=None):
		self._verbose = verbose or 0   # Because None is incomparable.
		self._issues = []
		self._max_issues = max_issues
		self._path = None
		self._lines = []

	def ok(self): return not self._issues
	def sick(self): return bool(self._issues)
	@property
	def issues(self): return list(self._issues)

	def issue(self, it:"Pic"):
		self._issues.append(it)
		if len(self._issues) == self._max_issues:
			raise TooManyIssues(self)

	def set_source(self, text:str, path:Optional[str]=None):
		""" Issues filed after this point illustrate against this text. """
		self._path = path
		self._lines = text.splitlines()

	def info(self, *args):
		if self._verbose:
			print(*args, file=sys.stderr)

	def complain_to_console(self):
		""" Emit all the issues to the console. """
		_bemoan(self._issues)

	def _annotate(self, line:int, column:int, width:int, caption:str) -> "Annotation":
		text = self._lines[line-1] if 0 < line <= len(self._lines) else ""
		return Annotation(self._path, line, column, width, text, caption)

	# Methods the front-end is likely to call:
	def syntax_issue(self, issue:SyntaxIssue, width:int=1):
		intro = "Syntax error " + str(issue)
		self.issue(Pic(intro, [self._annotate(issue.line, issue.column, width, "confused here")]))

	# Methods the command line and module registry call:
	def no_such_file(self, path):
		self.issue(Pic("I see no file called "+str(path), []))

	def broken_file(self, path):
		self.issue(Pic("Something went pear-shaped while trying to read "+str(path), []))

	def runtime_error(self, message:str, line:Optional[int]=None, column:Optional[int]=None):
		intro = "Evaluation failed: " + message
		problem = [] if line is None else [self._annotate(line, column, 1, "")]
		self.issue(Pic(intro, problem))

class Annotation(NamedTuple):
	path: Optional[str]
	line: int
	column: int
	width: int
	text: str
	caption: str
	def illustrate(self):
		return illustration(self.text, max(self.column-1, 0), self.width, prefix='% 6d |' % self.line, caption=self.caption)

class Pic:
	def __init__(self, intro:str, anns:list[Annotation], footer=()):
		self._intro, self._anns, self._footer = intro, anns, footer
	@property
	def description(self): return self._intro
	def as_text(self):
		lines = [self._intro, ""]
		path = None
		for ann in self._anns:
			if ann.path != path:
				path = ann.path
				lines.append(str(path))
			lines.append(ann.illustrate())
		lines.extend(self._footer)
		return '\n'.join(lines)

def _bemoan(issues):
	""" Emit all the issues to the console. """
	if issues:
		print("*"*60, file=sys.stderr)
		print(_outburst(), file=sys.stderr)
	for i in issues:
		print("  -"*20, file=sys.stderr)
		print(i.as_text(), file=sys.stderr)
	sys.stderr.flush()
