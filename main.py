import sys

from rich.pretty import pprint

from argsmith import Parser


def main(argv):
    with Parser(argv) as parser:
        help = parser.default_help_flag()
        parser.help(help).write("Usage: <command> [options]")

        force = parser.flag("force").alias("f").description("Force").get_value()
        source = parser.option("input").alias("i").description("Input file").required().get_value()

        def do(parser):
            parser.help(help).write("Do something\nUsage: do [options]")
            if parser.has_errors():
                return 1
            pprint({"command": "do", "force": force, "input": source, "remaining": parser.remaining()})
            return 0

        def pause(parser):
            parser.help(help).write("Doesn't do anything\nUsage: [pause] [options]")
            quiet = parser.flag("quiet").alias("q").description("Quiet").get_value()
            if parser.has_errors():
                return 1
            pprint({"command": "pause", "quiet": quiet, "force": force, "input": source, "remaining": parser.remaining()})
            return 0

        parser.command("do").alias("make").description("Do something").execute(do)
        parser.default_command().alias("pause").description("Don't do anything").execute(pause)

        executed, result = parser.execute_command()
        if parser.has_errors():
            return 1
        return result if executed else 0


if __name__ == '__main__':
    sys.exit(main(sys.argv))
