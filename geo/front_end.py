"""
The embedding surface: what a REPL, a command line, or a host program needs
to go from text to a value. Compile first; never evaluate a module that
came back with syntax issues.
"""
from typing import Optional

from . import syntax
from .diagnostics import Report, SyntaxIssue, SyntaxErrors
from .environment import Scope, new_root_environment
from .evaluator import Evaluator
from .parser import parse
from .values import Object

__all__ = ["compile", "new_root_environment", "evaluate", "run_text"]

def compile(source:str, report:Optional[Report]=None, path:Optional[str]=None) -> tuple[syntax.Module, list[SyntaxIssue]]:
	""" Tokenize and parse. A non-empty issue list means the module must not be run. """
	if report is not None:
		report.set_source(source, path)
	module, errors = parse(source, report)
	if report is not None:
		report.info("Parsed %d statement(s) with %d issue(s)" % (len(module.statements), len(errors)))
	return module, errors

def evaluate(module:syntax.Module, scope:Scope, evaluator:Optional[Evaluator]=None) -> Object:
	return (evaluator or Evaluator()).evaluate(module, scope)

def run_text(source:str, scope:Optional[Scope]=None, evaluator:Optional[Evaluator]=None) -> Object:
	""" Compile and evaluate in one go; syntax issues raise SyntaxErrors. """
	module, errors = compile(source)
	if errors:
		raise SyntaxErrors(errors)
	return evaluate(module, scope if scope is not None else new_root_environment(), evaluator)
