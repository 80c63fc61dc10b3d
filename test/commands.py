"""
Command dispatch behavioral tests (matching, default command, scopes, faults).

Scope
- Commands match by name or alias anywhere in the argument vector.
- Global flags resolve in the root scope, local flags in the command scope.
- The default command runs without consuming tokens when no command token exists.
- Unknown commands and dispatching without commands report faults.
- Dispatch is cached per scope and propagates the handler result unchanged.

Conventions
- Test method names follow CamelCase per project convention.
"""
import io
import unittest
from unittest import TestCase

from argsmith import Parser, Dispatch, FaultCode


class TestCommandDispatch(TestCase):
    """Behavioral tests mirroring a global flag and a "do"/"make" command with a local flag."""

    def declare(self, *argv):
        self.stream = io.StringIO()
        self.calls = []
        self.local = None
        parser = Parser(list(argv), self.stream, self.stream)
        self.glob = parser.flag("global").alias("g").description("Global").get_value()

        def do(parser):
            self.calls.append("do")
            self.local = parser.flag("local").alias("l").description("Local").get_value()
            return 0

        parser.command("do").alias("make").description("Do something").execute(do)
        return parser

    def declareDefault(self, parser, result=0):
        def pause(parser):
            self.calls.append("pause")
            return result

        parser.default_command().alias("pause").description("Don't do anything").execute(pause)

    def testNoCommandsExecuted(self):
        parser = self.declare("$0", "-l")
        self.assertFalse(parser.has_errors())
        self.assertFalse(self.glob)
        self.assertIsNone(self.local)
        self.assertEqual(parser.remaining(), ["$0", "-l"])

    def testNoCommandsGiven(self):
        parser = self.declare("$0", "-l")
        self.assertEqual(parser.execute_command(), Dispatch(False, None))
        self.assertTrue(parser.has_errors())
        self.assertEqual(parser.errors[0].code, FaultCode.UNMATCHED_COMMAND)
        self.assertEqual(parser.errors[0].message, "no command matched")
        self.assertFalse(self.glob)
        self.assertIsNone(self.local)
        self.assertEqual(parser.remaining(), ["$0", "-l"])

    def testCommandIsParsed(self):
        parser = self.declare("$0", "do")
        self.assertEqual(parser.execute_command(), Dispatch(True, 0))
        self.assertFalse(parser.has_errors())
        self.assertFalse(self.glob)
        self.assertFalse(self.local)
        self.assertEqual(parser.remaining(), ["$0"])

    def testCommandAliasIsParsed(self):
        parser = self.declare("$0", "make")
        executed, result = parser.execute_command()
        self.assertTrue(executed)
        self.assertEqual(result, 0)
        self.assertEqual(self.calls, ["do"])
        self.assertEqual(parser.remaining(), ["$0"])

    def testUnknownCommand(self):
        parser = self.declare("$0", "drink")
        self.assertEqual(parser.execute_command(), Dispatch(False, None))
        self.assertTrue(parser.has_errors())
        self.assertEqual(parser.errors[0].code, FaultCode.UNKNOWN_COMMAND)
        self.assertEqual(parser.errors[0].message, "unknown command 'drink'")
        self.assertEqual(self.calls, [])
        self.assertEqual(parser.remaining(), ["$0", "drink"])

    def testCommandIsParsedWithGlobalOptions(self):
        parser = self.declare("$0", "do", "-g")
        self.assertEqual(parser.execute_command(), Dispatch(True, 0))
        self.assertFalse(parser.has_errors())
        self.assertTrue(self.glob)
        self.assertFalse(self.local)
        self.assertEqual(parser.remaining(), ["$0"])

    def testCommandIsParsedWithLocalOptions(self):
        parser = self.declare("$0", "do", "-l")
        self.assertEqual(parser.execute_command(), Dispatch(True, 0))
        self.assertFalse(parser.has_errors())
        self.assertFalse(self.glob)
        self.assertTrue(self.local)
        self.assertEqual(parser.remaining(), ["$0"])

    def testCommandDoesNotNeedToBeFirstArgument(self):
        parser = self.declare("$0", "-l", "do")
        self.assertEqual(parser.execute_command(), Dispatch(True, 0))
        self.assertFalse(parser.has_errors())
        self.assertTrue(self.local)
        self.assertEqual(parser.remaining(), ["$0"])

    def testDefaultCommandIsParsed(self):
        parser = self.declare("$0")
        self.declareDefault(parser)
        self.assertEqual(parser.execute_command(), Dispatch(True, 0))
        self.assertFalse(parser.has_errors())
        self.assertEqual(self.calls, ["pause"])
        self.assertEqual(parser.remaining(), ["$0"])

    def testDefaultCommandConsumesNothing(self):
        parser = self.declare("$0", "-x", "file.txt")
        self.declareDefault(parser)
        self.assertEqual(parser.execute_command(), Dispatch(True, 0))
        self.assertFalse(parser.has_errors())
        self.assertEqual(parser.remaining(), ["$0", "-x", "file.txt"])

    def testDefaultCommandAliasIsParsed(self):
        parser = self.declare("$0", "pause")
        self.declareDefault(parser)
        self.assertEqual(parser.execute_command(), Dispatch(True, 0))
        self.assertEqual(self.calls, ["pause"])
        self.assertEqual(parser.remaining(), ["$0"])

    def testCommandResultCodeIsRetrieved(self):
        parser = self.declare("$0")
        self.declareDefault(parser, 1337)
        self.assertEqual(parser.execute_command(), Dispatch(True, 1337))
        self.assertFalse(parser.has_errors())

    def testDispatchIsCached(self):
        parser = self.declare("$0", "do", "do")
        first = parser.execute_command()
        second = parser.execute_command()
        self.assertIs(first, second)
        self.assertEqual(self.calls, ["do"])
        self.assertEqual(parser.remaining(), ["$0", "do"])

    def testCommandAfterSeparatorIsNotMatched(self):
        parser = self.declare("$0", "--", "do")
        self.assertEqual(parser.execute_command(), Dispatch(False, None))
        self.assertTrue(parser.has_errors())
        self.assertEqual(self.calls, [])
        self.assertEqual(parser.remaining(), ["$0", "do"])

    def testOptionValueIsNotTakenAsCommand(self):
        parser = self.declare("$0", "-i", "do", "make")
        self.assertEqual(parser.option("input").alias("i").get_value(), "do")
        self.assertEqual(parser.execute_command(), Dispatch(True, 0))
        self.assertEqual(parser.remaining(), ["$0"])


class TestCommandScopes(TestCase):
    """Nested scopes, sub-commands and API misuse."""

    def setUp(self):
        self.stream = io.StringIO()

    def testNoCommandDeclared(self):
        parser = Parser(["$0", "do"], self.stream, self.stream)
        self.assertEqual(parser.execute_command(), Dispatch(False, None))
        self.assertTrue(parser.has_errors())
        self.assertEqual(parser.errors[0].code, FaultCode.UNDECLARED_COMMANDS)
        self.assertEqual(parser.remaining(), ["$0", "do"])

    def testCommandWithoutHandlerRaises(self):
        parser = Parser(["$0", "do"], self.stream, self.stream)
        parser.command("do")
        with self.assertRaises(TypeError):
            parser.execute_command()

    def testHandlerMustBeCallable(self):
        parser = Parser(["$0"], self.stream, self.stream)
        with self.assertRaises(TypeError):
            parser.command("do").execute(0)

    def testHandlerRunsInNestedScope(self):
        parser = Parser(["$0", "do", "-v", "-v"], self.stream, self.stream)
        outer = parser.flag("verbose").alias("v")
        seen = {}

        def do(parser):
            seen["depth"] = parser.scope.depth
            seen["inner"] = parser.flag("verbose").alias("v")
            return 0

        parser.command("do").execute(do)
        self.assertTrue(outer.get_value())
        parser.execute_command()

        self.assertEqual(seen["depth"], 1)
        self.assertIsNot(seen["inner"], outer)
        self.assertTrue(seen["inner"].get_value())
        self.assertEqual(parser.scope.depth, 0)
        self.assertEqual(parser.remaining(), ["$0"])

    def testScopeIsRestoredWhenHandlerRaises(self):
        parser = Parser(["$0", "do"], self.stream, self.stream)

        def do(parser):
            raise RuntimeError("boom")

        parser.command("do").execute(do)
        with self.assertRaises(RuntimeError):
            parser.execute_command()
        self.assertIs(parser.scope.parent, None)

    def testSubcommandIsDispatched(self):
        parser = Parser(["$0", "remote", "add", "origin"], self.stream, self.stream)

        def add(parser):
            return 7

        def remote(parser):
            parser.command("add").execute(add)
            executed, result = parser.execute_command()
            return result if executed else 1

        parser.command("remote").execute(remote)
        self.assertEqual(parser.execute_command(), Dispatch(True, 7))
        self.assertFalse(parser.has_errors())
        self.assertEqual(parser.remaining(), ["$0", "origin"])

    def testLambdaHandlerResult(self):
        parser = Parser(["$0", "run"], self.stream, self.stream)
        parser.command("run").execute(lambda parser: 3)
        self.assertEqual(parser.execute_command().result, 3)


if __name__ == "__main__":
    unittest.main()
