import contextlib
import io
import json
import logging
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from vault_formatter.__main__ import _main_async


class CliTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.vault = self.root / "vault"
        self.vault.mkdir()
        self.config = self.root / "config.yaml"
        self.config.write_text("engine:\n  kind: mock\nlogging:\n  level: WARNING\n", encoding="utf-8")

    async def asyncTearDown(self) -> None:
        root = logging.getLogger()
        for handler in list(root.handlers):
            if getattr(handler, "_vault_formatter_handler", False):
                root.removeHandler(handler)
                handler.close()
        self._tmp.cleanup()

    async def _run(self, *argv: str) -> tuple[int, str]:
        out = io.StringIO()
        with contextlib.redirect_stdout(out), contextlib.redirect_stderr(io.StringIO()):
            code = await _main_async(["--config", str(self.config), "--vault", str(self.vault), "--no-dotenv", *argv])
        return code, out.getvalue()

    async def test_format_rewrites_documents(self) -> None:
        (self.vault / "a.md").write_text("# A   \n\n\n", encoding="utf-8")

        code, _ = await self._run("format", "a.md")

        self.assertEqual(code, 0)
        self.assertEqual((self.vault / "a.md").read_text(encoding="utf-8"), "# A\n")

    async def test_format_missing_document_fails(self) -> None:
        code, _ = await self._run("format", "missing.md")
        self.assertEqual(code, 1)

    async def test_format_continues_after_path_outside_vault(self) -> None:
        (self.vault / "a.md").write_text("# A   \n", encoding="utf-8")
        (self.vault / "b.md").write_text("# B   \n", encoding="utf-8")

        code, _ = await self._run("format", "a.md", "../outside.md", "b.md")

        self.assertEqual(code, 1)
        self.assertEqual((self.vault / "a.md").read_text(encoding="utf-8"), "# A\n")
        self.assertEqual((self.vault / "b.md").read_text(encoding="utf-8"), "# B\n")

    async def test_run_reads_events_from_redirected_file(self) -> None:
        settings_dir = self.vault / ".vault-formatter"
        settings_dir.mkdir()
        (settings_dir / "data.json").write_text(
            json.dumps({"autoFormat": True, "autoFormatDebounceMs": 60_000}), encoding="utf-8"
        )
        (self.vault / "a.md").write_text("hi   \n\n\n", encoding="utf-8")
        (self.vault / "b.md").write_text("# B\n", encoding="utf-8")
        events = self.root / "events.txt"
        events.write_text("a.md\nb.md\n", encoding="utf-8")

        with events.open("r", encoding="utf-8") as stdin, mock.patch("sys.stdin", stdin):
            code, _ = await self._run("run")

        self.assertEqual(code, 0)
        # Leaving a.md schedules it; end of input flushes the pending format.
        self.assertEqual((self.vault / "a.md").read_text(encoding="utf-8"), "hi\n")
        self.assertEqual((self.vault / "b.md").read_text(encoding="utf-8"), "# B\n")

    async def test_options_prints_effective_options(self) -> None:
        (self.vault / ".prettierrc").write_text('{"printWidth": 120}', encoding="utf-8")

        code, output = await self._run("options")

        self.assertEqual(code, 0)
        options = json.loads(output)
        self.assertEqual(options["printWidth"], 120)
        self.assertEqual(options["tabWidth"], 2)

    async def test_settings_lists_every_section(self) -> None:
        code, output = await self._run("settings")

        self.assertEqual(code, 0)
        for section in ("[Formatting]", "[Markdown]", "[Code Blocks]", "[File Options]", "[Plugin]"):
            self.assertIn(section, output)


if __name__ == "__main__":
    unittest.main()
