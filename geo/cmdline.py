"""
This is an interpreter for the geo expression language.

For example:

    geo program.geo

will run program.geo and print its value, if it has one.

    geo

with no program starts an interactive session.

    geo -h

will explain all the arguments.
"""
import sys, argparse
from pathlib import Path
from typing import Optional, TextIO

from .diagnostics import Report
from .environment import new_root_environment
from .evaluator import Evaluator, DEFAULT_MAX_DEPTH
from .front_end import compile
from .modularity import ModuleRegistry, FileResolver
from .values import Error, NULL

PROMPT = ">> "

parser = argparse.ArgumentParser(
	prog="geo",
	description="Interpreter for the geo expression language.",
)
parser.add_argument("program", nargs="?", help="script to run; omit it for an interactive session.")
parser.add_argument('-c', "--check", action="store_true", help="Parse the program but do not actually run it.")
parser.add_argument('-v', "--verbose", action="count", default=0, help="Say more about what is going on.")
parser.add_argument('-I', "--include", action="append", default=[], metavar="DIR", help="Search this directory for imported modules. May repeat.")
parser.add_argument("--max-depth", type=int, default=DEFAULT_MAX_DEPTH, help="How deep interpreted calls may nest before a stack overflow error.")

def _make_evaluator(args, report:Report, home:Path) -> Evaluator:
	search_path = [Path(p) for p in args.include] or [home]
	registry = ModuleRegistry([FileResolver(search_path)], report)
	return Evaluator(registry=registry, max_depth=args.max_depth)

def run_program(args, report:Report) -> int:
	path = Path(args.program)
	try:
		with open(path, "r", encoding="utf-8") as fh:
			text = fh.read()
	except FileNotFoundError:
		report.no_such_file(path)
		report.complain_to_console()
		return 1
	except OSError:
		report.broken_file(path)
		report.complain_to_console()
		return 1
	module, errors = compile(text, report, str(path))
	if errors:
		report.complain_to_console()
		return 1
	if args.check:
		print("Looks plausible to me.", file=sys.stderr)
		return 0
	evaluator = _make_evaluator(args, report, path.resolve().parent)
	result = evaluator.evaluate(module, new_root_environment())
	if isinstance(result, Error):
		node = result.node
		if node is None or node.token is None:
			report.runtime_error(result.message)
		else:
			report.runtime_error(result.message, node.line(), node.column())
		report.complain_to_console()
		return 1
	if result is not NULL:
		print(result.inspect())
	return 0

def repl(evaluator:Evaluator, instream:Optional[TextIO]=None, outstream:Optional[TextIO]=None):
	"""
	Read a line, evaluate it, print "value : type", and go around again.
	All lines share one root scope, so bindings carry over. Errors of
	either kind get reported and the session continues.
	"""
	instream = instream or sys.stdin
	out = outstream or sys.stdout
	scope = new_root_environment()
	while True:
		out.write(PROMPT)
		out.flush()
		line = instream.readline()
		if not line:
			return
		if not line.strip():
			continue
		module, errors = compile(line)
		if errors:
			for issue in errors:
				print(issue, file=out)
			continue
		result = evaluator.evaluate(module, scope)
		print("%s : %s" % (result.inspect(), result.type), file=out)

def run(args) -> int:
	report = Report(verbose=args.verbose)
	if args.program:
		return run_program(args, report)
	repl(_make_evaluator(args, report, Path.cwd()))
	return 0

def main(argv=None):
	sys.exit(run(parser.parse_args(argv)))
