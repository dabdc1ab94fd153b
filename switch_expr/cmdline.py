"""
This expands Switch-chains in Python source into plain conditional expressions.

{0}

For example:

    switch-expr program.py

will print program.py with every Switch-chain expanded, or else try to explain why not.

    switch-expr -h

will explain all the arguments.
"""
import sys, argparse
from pathlib import Path

from .options import TERMINATORS, CALL

parser = argparse.ArgumentParser(
	prog="switch-expr",
	description="Expand Switch-chains in Python source into conditional expressions.",
)
parser.add_argument("program", help="the Python source file to expand")
parser.add_argument('-o', "--output", help="write the expanded source here instead of to standard output")
parser.add_argument('-c', "--check", action="store_true", help="Expand, but only report whether that worked.")
parser.add_argument('-v', "--verbose", action="count", help="Explain each step of the expansion on standard error.")
parser.add_argument('-t', "--terminator", choices=TERMINATORS, default=CALL, help="How chains end: () or .end() (default: %(default)s)")

def run(args):
	from .diagnostics import Report, SwitchExprError
	from .front_end import expand_file
	from .options import Options
	report = Report(verbose=args.verbose)
	options = Options(terminator=args.terminator)
	path = Path.cwd() / args.program
	try:
		text = expand_file(path, report, options)
	except SwitchExprError:
		assert report.sick()
		report.complain_to_console()
		return 1
	except SyntaxError as ex:
		print("Python could not parse %s: %s" % (path, ex), file=sys.stderr)
		return 1
	except OSError as ex:
		print("Something went pear-shaped while trying to read %s: %s" % (path, ex), file=sys.stderr)
		return 1
	if args.check:
		print("Looks plausible to me.", file=sys.stderr)
	elif args.output:
		with open(args.output, "w", encoding="utf-8") as fh:
			print(text, file=fh)
	else:
		print(text)
	return 0

def main():
	if len(sys.argv) > 1:
		exit(run(parser.parse_args()))
	else:
		print(__doc__.strip().format(parser.format_usage()))
