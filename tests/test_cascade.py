import unittest

from tests.fakes import FakeVault
from vault_formatter.config.cascade import DEFAULT_CANDIDATES, ConfigCandidate, ConfigCascade, decode_candidate
from vault_formatter.errors import ConfigDecodeError

FMT_CANDIDATES = (
    ConfigCandidate(path=".fmtrc", encodings=("json",)),
    ConfigCandidate(path=".fmtrc.yaml", encodings=("yaml",)),
)


class ConfigCascadeTests(unittest.IsolatedAsyncioTestCase):
    async def test_no_candidates_present_returns_baseline(self) -> None:
        cascade = ConfigCascade(FakeVault({"note.md": "x"}), FMT_CANDIDATES)
        baseline = {"width": 80}

        options = await cascade.resolve_effective_options(baseline)

        self.assertEqual(options, {"width": 80})
        self.assertIsNot(options, baseline)

    async def test_only_yaml_candidate_present(self) -> None:
        vault = FakeVault({".fmtrc.yaml": "width: 100\nquotes: single\n"})
        cascade = ConfigCascade(vault, FMT_CANDIDATES)

        options = await cascade.resolve_effective_options({"width": 80})

        self.assertEqual(options, {"width": 100, "quotes": "single"})

    async def test_later_candidate_wins_for_shared_key(self) -> None:
        vault = FakeVault(
            {
                ".fmtrc": '{"width": 90, "semi": false}',
                ".fmtrc.yaml": "width: 120\n",
            }
        )
        cascade = ConfigCascade(vault, FMT_CANDIDATES)

        options = await cascade.resolve_effective_options({"width": 80, "tabs": True})

        self.assertEqual(options, {"width": 120, "semi": False, "tabs": True})

    async def test_malformed_candidate_is_skipped(self) -> None:
        vault = FakeVault({".fmtrc": "{not json", ".fmtrc.yaml": "width: 100\n"})
        cascade = ConfigCascade(vault, FMT_CANDIDATES)

        with self.assertLogs("vault_formatter.config.cascade", level="WARNING") as logs:
            options = await cascade.resolve_effective_options({"width": 80})

        self.assertEqual(options, {"width": 100})
        self.assertIn(".fmtrc", logs.output[0])

    async def test_unreadable_candidate_is_skipped(self) -> None:
        vault = FakeVault({".fmtrc": '{"width": 90}', ".fmtrc.yaml": "quotes: single\n"})
        vault.unreadable.add(".fmtrc")
        cascade = ConfigCascade(vault, FMT_CANDIDATES)

        with self.assertLogs("vault_formatter.config.cascade", level="WARNING"):
            options = await cascade.resolve_effective_options({"width": 80})

        self.assertEqual(options, {"width": 80, "quotes": "single"})

    async def test_storage_fault_never_escapes(self) -> None:
        class BrokenVault(FakeVault):
            async def exists(self, path: str) -> bool:
                raise RuntimeError("storage offline")

        cascade = ConfigCascade(BrokenVault(), FMT_CANDIDATES)

        with self.assertLogs("vault_formatter.config.cascade", level="ERROR"):
            options = await cascade.resolve_effective_options({"width": 80})

        self.assertEqual(options, {"width": 80})

    async def test_permissive_encoding_used_when_json_fails(self) -> None:
        vault = FakeVault({".prettierrc": "printWidth: 120\nsemi: false\n"})
        cascade = ConfigCascade(vault)

        options = await cascade.resolve_effective_options({"printWidth": 80})

        self.assertEqual(options, {"printWidth": 120, "semi": False})

    async def test_empty_yaml_contributes_nothing(self) -> None:
        cascade = ConfigCascade(FakeVault({".fmtrc.yaml": ""}), FMT_CANDIDATES)

        options = await cascade.resolve_effective_options({"width": 80})

        self.assertEqual(options, {"width": 80})

    async def test_options_are_not_cached_between_calls(self) -> None:
        vault = FakeVault({".fmtrc": '{"width": 90}'})
        cascade = ConfigCascade(vault, FMT_CANDIDATES)

        first = await cascade.resolve_effective_options({})
        vault.files[".fmtrc"] = '{"width": 70}'
        second = await cascade.resolve_effective_options({})

        self.assertEqual(first["width"], 90)
        self.assertEqual(second["width"], 70)

    async def test_default_candidates_fold_in_precedence_order(self) -> None:
        vault = FakeVault(
            {
                ".prettierrc": '{"tabWidth": 4, "semi": false}',
                ".prettierrc.json": '{"tabWidth": 3}',
                ".prettierrc.yml": "tabWidth: 8\n",
            }
        )
        cascade = ConfigCascade(vault)

        options = await cascade.resolve_effective_options({"tabWidth": 2})

        self.assertEqual(options, {"tabWidth": 8, "semi": False})


class DecodeCandidateTests(unittest.TestCase):
    def test_non_mapping_is_rejected(self) -> None:
        candidate = ConfigCandidate(path=".prettierrc", encodings=("json", "yaml"))
        with self.assertRaises(ConfigDecodeError) as ctx:
            decode_candidate(candidate, "[1, 2, 3]")
        self.assertEqual(ctx.exception.path, ".prettierrc")

    def test_first_accepted_encoding_wins(self) -> None:
        candidate = ConfigCandidate(path=".prettierrc", encodings=("json", "yaml"))
        self.assertEqual(decode_candidate(candidate, '{"semi": true}'), {"semi": True})

    def test_default_candidate_order(self) -> None:
        self.assertEqual(
            [c.path for c in DEFAULT_CANDIDATES],
            [".prettierrc", ".prettierrc.json", "prettierrc.json", ".prettierrc.yaml", ".prettierrc.yml"],
        )


if __name__ == "__main__":
    unittest.main()
