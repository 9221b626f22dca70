import unittest

from tests.fakes import FakeEngine, FakeVault
from vault_formatter.config.cascade import ConfigCascade
from vault_formatter.errors import (
    DocumentNotFoundError,
    DocumentReadError,
    DocumentWriteError,
    EngineError,
)
from vault_formatter.formatting.coordinator import FormatCoordinator
from vault_formatter.formatting.types import FormatOutcome


class FormatCoordinatorTests(unittest.IsolatedAsyncioTestCase):
    def _coordinator(self, vault: FakeVault, engine: FakeEngine, baseline=None) -> FormatCoordinator:
        baseline = baseline if baseline is not None else {"printWidth": 80}
        return FormatCoordinator(
            storage=vault,
            engine=engine,
            resolver=ConfigCascade(vault),
            baseline=lambda: dict(baseline),
        )

    async def test_formatted_content_is_unchanged_and_not_written(self) -> None:
        vault = FakeVault({"note.md": "# Title\n"})
        engine = FakeEngine()

        outcome = await self._coordinator(vault, engine).format_document("note.md")

        self.assertEqual(outcome, FormatOutcome.UNCHANGED)
        self.assertEqual(vault.writes, [])

    async def test_changed_content_is_written_once(self) -> None:
        vault = FakeVault({"note.md": "# Title   \n\n\n"})
        engine = FakeEngine()

        outcome = await self._coordinator(vault, engine).format_document("note.md")

        self.assertEqual(outcome, FormatOutcome.CHANGED)
        self.assertEqual(vault.writes, ["note.md"])
        self.assertEqual(vault.files["note.md"], "# Title\n")

    async def test_formatting_twice_is_idempotent(self) -> None:
        vault = FakeVault({"note.md": "text  \n"})
        coordinator = self._coordinator(vault, FakeEngine())

        first = await coordinator.format_document("note.md")
        second = await coordinator.format_document("note.md")

        self.assertEqual(first, FormatOutcome.CHANGED)
        self.assertEqual(second, FormatOutcome.UNCHANGED)
        self.assertEqual(len(vault.writes), 1)

    async def test_missing_document_raises_not_found(self) -> None:
        engine = FakeEngine()
        with self.assertRaises(DocumentNotFoundError):
            await self._coordinator(FakeVault(), engine).format_document("gone.md")
        self.assertEqual(engine.calls, [])

    async def test_engine_failure_leaves_content_untouched(self) -> None:
        vault = FakeVault({"note.md": "```js\nlet = ;\n```  \n"})
        engine = FakeEngine(error=EngineError("note.md", "SyntaxError: Unexpected token"))

        with self.assertRaises(EngineError) as ctx:
            await self._coordinator(vault, engine).format_document("note.md")

        self.assertIn("SyntaxError", ctx.exception.reason)
        self.assertEqual(vault.writes, [])
        self.assertEqual(vault.files["note.md"], "```js\nlet = ;\n```  \n")

    async def test_unexpected_engine_exception_becomes_engine_error(self) -> None:
        vault = FakeVault({"note.md": "x  \n"})
        engine = FakeEngine(error=RuntimeError("crashed"))

        with self.assertRaises(EngineError) as ctx:
            await self._coordinator(vault, engine).format_document("note.md")

        self.assertIn("RuntimeError", ctx.exception.reason)

    async def test_read_failure_raises_read_error(self) -> None:
        vault = FakeVault({"note.md": "x"})
        vault.unreadable.add("note.md")

        with self.assertRaises(DocumentReadError):
            await self._coordinator(vault, FakeEngine()).format_document("note.md")

    async def test_write_failure_raises_write_error(self) -> None:
        vault = FakeVault({"note.md": "x  \n"})
        vault.fail_writes = True

        with self.assertRaises(DocumentWriteError):
            await self._coordinator(vault, FakeEngine()).format_document("note.md")

        self.assertEqual(vault.files["note.md"], "x  \n")

    async def test_engine_receives_resolved_options_and_parser(self) -> None:
        vault = FakeVault({"notes/a.md": "x\n", ".prettierrc.json": '{"proseWrap": "always"}'})
        engine = FakeEngine()

        await self._coordinator(vault, engine).format_document("./notes//a.md")

        call = engine.calls[0]
        self.assertEqual(call["options"], {"printWidth": 80, "proseWrap": "always"})
        self.assertEqual(call["parser"], "markdown")
        self.assertEqual(call["filepath"], "notes/a.md")

    async def test_baseline_is_read_on_every_call(self) -> None:
        vault = FakeVault({"a.md": "x\n"})
        engine = FakeEngine()
        baseline = {"printWidth": 80}
        coordinator = FormatCoordinator(
            storage=vault,
            engine=engine,
            resolver=ConfigCascade(vault),
            baseline=lambda: dict(baseline),
        )

        await coordinator.format_document("a.md")
        baseline["printWidth"] = 100
        await coordinator.format_document("a.md")

        self.assertEqual([c["options"]["printWidth"] for c in engine.calls], [80, 100])


if __name__ == "__main__":
    unittest.main()
