import os
import tempfile
import unittest

from nlc.ai.context import RequestContext, build_messages
from nlc.errors import InputError
from nlc.files import load_file_with_line_numbers, number_lines


class TestLineNumbering(unittest.TestCase):
    def test_every_line_is_prefixed_in_order(self):
        text = "#!/bin/bash\necho one\n\necho two"
        numbered = number_lines(text)

        lines = numbered.split("\n")
        self.assertEqual(len(lines), 4)
        for idx, (original, line) in enumerate(zip(text.split("\n"), lines), start=1):
            self.assertEqual(line, f"{idx}> {original}")

    def test_trailing_newline_yields_empty_last_line(self):
        self.assertEqual(number_lines("a\n"), "1> a\n2> ")

    def test_load_missing_file_returns_none(self):
        self.assertIsNone(load_file_with_line_numbers("/definitely/not/here.sh"))

    def test_load_directory_returns_none(self):
        with tempfile.TemporaryDirectory() as tmp:
            self.assertIsNone(load_file_with_line_numbers(tmp))

    def test_load_existing_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "deploy.sh")
            with open(path, "w", encoding="utf-8") as f:
                f.write("echo hi\nexit 0")

            self.assertEqual(load_file_with_line_numbers(path), "1> echo hi\n2> exit 0")


class TestRequestContext(unittest.TestCase):
    def test_load_without_file(self):
        context = RequestContext.load("list files")
        self.assertEqual(context, RequestContext(prompt="list files"))
        self.assertIsNone(context.file_content)

    def test_load_missing_file_fails_fast(self):
        with self.assertRaises(InputError) as cm:
            RequestContext.load("fix this script", "missing.sh")
        self.assertIn('File not found: "missing.sh"', str(cm.exception))

    def test_load_directory_is_an_input_error(self):
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(InputError) as cm:
                RequestContext.load("fix this script", tmp)
        self.assertIn(f'File not found: "{tmp}"', str(cm.exception))

    def test_amend_appends_revision_and_keeps_file(self):
        context = RequestContext(prompt="download the file", file_path="get.sh", file_content="1> wget x")

        amended = context.amend("use curl instead")

        self.assertEqual(amended.prompt, "download the file // Revision: use curl instead")
        self.assertEqual(amended.file_path, "get.sh")
        self.assertEqual(amended.file_content, "1> wget x")
        # The original snapshot is untouched.
        self.assertEqual(context.prompt, "download the file")

    def test_repeated_amendments_accumulate(self):
        context = RequestContext(prompt="a").amend("b").amend("c")
        self.assertEqual(context.prompt, "a // Revision: b // Revision: c")

    def test_user_message_without_file(self):
        self.assertEqual(RequestContext(prompt="list files").user_message(), "Task: list files")

    def test_user_message_with_file(self):
        context = RequestContext(prompt="fix this script", file_path="deploy.sh", file_content="1> echo hi")
        self.assertEqual(
            context.user_message(),
            "Here is the script `deploy.sh`:\n\n1> echo hi\n\n---\n\nTask: fix this script",
        )

    def test_build_messages_is_always_three_in_fixed_order(self):
        messages = build_messages(RequestContext(prompt="list files"), "system text", "greeting")
        self.assertEqual(
            messages,
            [
                {"role": "system", "content": "system text"},
                {"role": "assistant", "content": "greeting"},
                {"role": "user", "content": "Task: list files"},
            ],
        )
