import tempfile
import unittest
from pathlib import Path

from vault_formatter.vault import FileSystemVault, normalize_path


class NormalizePathTests(unittest.TestCase):
    def test_normalization(self) -> None:
        self.assertEqual(normalize_path("notes/a.md"), "notes/a.md")
        self.assertEqual(normalize_path("./notes//a.md"), "notes/a.md")
        self.assertEqual(normalize_path("notes\\daily\\a.md"), "notes/daily/a.md")
        self.assertEqual(normalize_path("/notes/x/../a.md/"), "notes/a.md")

    def test_escaping_the_root_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            normalize_path("../secret.md")
        with self.assertRaises(ValueError):
            normalize_path("./")


class FileSystemVaultTests(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.vault = FileSystemVault(self.root)

    async def asyncTearDown(self) -> None:
        self._tmp.cleanup()

    async def test_write_then_read_preserves_line_endings(self) -> None:
        await self.vault.write("notes/a.md", "one\r\ntwo\r\n")

        self.assertTrue(await self.vault.exists("notes/a.md"))
        self.assertEqual(await self.vault.read("notes/a.md"), "one\r\ntwo\r\n")
        self.assertFalse((self.root / "notes" / "a.md.tmp").exists())

    async def test_exists_is_false_for_directories_and_bad_paths(self) -> None:
        (self.root / "notes").mkdir()
        self.assertFalse(await self.vault.exists("notes"))
        self.assertFalse(await self.vault.exists("../outside.md"))
        self.assertFalse(await self.vault.exists("missing.md"))

    async def test_read_missing_raises_file_not_found(self) -> None:
        with self.assertRaises(FileNotFoundError):
            await self.vault.read("missing.md")


if __name__ == "__main__":
    unittest.main()
