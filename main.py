from rich.pretty import pprint

from argsparser import *

parser = Parser()
file = parser.positional("file", "file to read")
count = parser.option("count", "c", "number of lines", converter=int, default=10)
debug = parser.switch("debug", "d", "print the parsed values")


if __name__ == '__main__':
    result = parser.parse()
    if not result.ok:
        report(result)
        raise SystemExit(2)
    if parser.getvalue(debug):
        pprint({
            "file": parser.getvalue(file, str),
            "count": parser.getvalue(count, int),
        })
