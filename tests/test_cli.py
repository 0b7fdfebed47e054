import io
import json
import logging
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path

from concert_match.cli import main

CANDIDATES = {
    "artists": [
        {"id": "a1", "name": "The Beatles", "aliases": ["Beatles", "Fab Four"]},
        {"id": "a3", "name": "Radiohead"},
    ],
    "venues": [
        {"id": "v1", "name": "Madison Square Garden", "aliases": ["MSG"], "city": "New York"},
        {"id": "v2", "name": "Madison Square Garden", "aliases": ["MSG"], "city": "Boston"},
    ],
}


class CliTestCase(unittest.TestCase):
    def setUp(self):
        root_logger = logging.getLogger()
        saved_handlers = list(root_logger.handlers)
        saved_level = root_logger.level

        def restore_logging():
            root_logger.handlers[:] = saved_handlers
            root_logger.setLevel(saved_level)

        self.addCleanup(restore_logging)
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.root = Path(tmp.name)
        self.config = self.root / "config.yaml"
        self.config.write_text(
            "cache:\n  cleanup_interval: 0\ncustom_aliases:\n"
            "  - alias: purple one\n    canonical: Prince\n    category: artist\n",
            encoding="utf-8",
        )
        self.candidates = self.root / "candidates.json"
        self.candidates.write_text(json.dumps(CANDIDATES), encoding="utf-8")

    def run_cli(self, *args):
        out = io.StringIO()
        err = io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            status = main(["--config", str(self.config), *args])
        return status, out.getvalue()


class TestMatchCommand(CliTestCase):
    def test_match_artists_json(self):
        status, output = self.run_cli("match", "artists", "Beatles", "--candidates", str(self.candidates), "--json")
        self.assertEqual(status, 0)
        payload = json.loads(output)
        self.assertEqual(payload[0]["id"], "a1")
        self.assertEqual(payload[0]["breakdown"]["exact_match"], 100)

    def test_match_venues_with_city(self):
        status, output = self.run_cli(
            "match", "venues", "MSG", "--candidates", str(self.candidates), "--city", "boston"
        )
        self.assertEqual(status, 0)
        self.assertIn("[v2]", output)
        self.assertNotIn("[v1]", output)

    def test_preset(self):
        status, output = self.run_cli(
            "match", "artists", "Radiohed", "--candidates", str(self.candidates), "--preset", "precision"
        )
        self.assertEqual(status, 0)
        self.assertIn("No artists matched", output)

    def test_malformed_candidates(self):
        broken = self.root / "broken.json"
        broken.write_text("{not json", encoding="utf-8")
        status, _ = self.run_cli("match", "artists", "Beatles", "--candidates", str(broken))
        self.assertEqual(status, 2)


class TestAliasCommands(CliTestCase):
    def test_resolve(self):
        status, output = self.run_cli("resolve", "nyc", "--category", "city")
        self.assertEqual(status, 0)
        self.assertIn("New York City", output)

    def test_resolve_custom_alias_from_config(self):
        status, output = self.run_cli("resolve", "Purple One")
        self.assertEqual(status, 0)
        self.assertIn("Prince", output)

    def test_resolve_unknown(self):
        status, output = self.run_cli("resolve", "qqqqqqqq")
        self.assertEqual(status, 1)
        self.assertIn("No alias found", output)

    def test_aliases(self):
        status, output = self.run_cli("aliases", "Prince", "--category", "artist")
        self.assertEqual(status, 0)
        self.assertIn("tafkap", output)
        self.assertIn("purple one", output)

    def test_stats(self):
        status, output = self.run_cli("stats")
        self.assertEqual(status, 0)
        self.assertIn("Built-in aliases", output)
        self.assertIn("Custom aliases: 1", output)


class TestConfigErrors(CliTestCase):
    def test_invalid_config(self):
        self.config.write_text("matching:\n  min_confidence: 500\n", encoding="utf-8")
        status, _ = self.run_cli("stats")
        self.assertEqual(status, 2)


if __name__ == "__main__":
    unittest.main()
