import json
import os
import tempfile
import unittest
from unittest import mock

from textlab import config
from textlab.models import Tool
from textlab.results import ToolError
from textlab.suggestions import SUGGESTION_RULES
from textlab.tool_catalog import TOOL_CATALOG, ToolRegistry, load_registry


class ToolRegistryTests(unittest.TestCase):
    def setUp(self):
        self.registry = ToolRegistry(
            [
                Tool(id="a", name="Alpha", category="Text"),
                Tool(id="b", name="Beta", category="Dev"),
                Tool(id="c", name="Gamma", category="Text"),
            ]
        )

    def test_get(self):
        self.assertEqual(self.registry.get("b").name, "Beta")
        self.assertIsNone(self.registry.get("missing"))
        self.assertIsNone(self.registry.get(None))

    def test_all_keeps_catalog_order(self):
        self.assertEqual([t.id for t in self.registry.all()], ["a", "b", "c"])

    def test_categories_in_first_seen_order(self):
        self.assertEqual(self.registry.categories(), ["Text", "Dev"])
        self.assertEqual([t.id for t in self.registry.by_category("Text")], ["a", "c"])
        self.assertEqual(self.registry.by_category("Nope"), [])

    def test_contains_and_len(self):
        self.assertIn("a", self.registry)
        self.assertNotIn("z", self.registry)
        self.assertEqual(len(self.registry), 3)

    def test_duplicate_ids_are_rejected(self):
        with self.assertRaises(ValueError):
            ToolRegistry([Tool(id="a", name="A", category="x"), Tool(id="a", name="B", category="y")])

    def test_tools_are_immutable(self):
        with self.assertRaises(Exception):
            self.registry.get("a").name = "Changed"

    def test_all_returns_a_copy(self):
        self.registry.all().clear()
        self.assertEqual(len(self.registry.all()), 3)


class LoadRegistryTests(unittest.TestCase):
    def _write(self, content):
        fd, path = tempfile.mkstemp(suffix=".json")
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        self.addCleanup(os.remove, path)
        return path

    def test_builtin_catalog_covers_every_suggested_tool(self):
        with mock.patch.object(config, "TEXTLAB_TOOLS_FILE", None):
            registry = load_registry()
        self.assertEqual(len(registry), len(TOOL_CATALOG))
        for rule in SUGGESTION_RULES:
            self.assertIsNotNone(registry.get(rule.tool_id))

    def test_loads_json_file(self):
        path = self._write(json.dumps([{"id": "x", "name": "X Tool", "category": "Misc", "api_step": "x"}]))
        registry = load_registry(path)
        self.assertEqual(registry.get("x").name, "X Tool")
        self.assertEqual(len(registry), 1)

    def test_env_file_is_used_when_no_path_given(self):
        path = self._write(json.dumps([{"id": "y", "name": "Y", "category": "Misc"}]))
        with mock.patch.object(config, "TEXTLAB_TOOLS_FILE", path):
            registry = load_registry()
        self.assertIn("y", registry)

    def test_invalid_files_raise_tool_error(self):
        for content in ["not json", '{"id": "x"}', '[{"id": "x"}]', '[{"id":"a","name":"A","category":"c"},{"id":"a","name":"B","category":"c"}]']:
            path = self._write(content)
            with self.assertRaises(ToolError) as ctx:
                load_registry(path)
            self.assertEqual(ctx.exception.code, "invalid_catalog")

    def test_missing_file_raises_tool_error(self):
        with self.assertRaises(ToolError) as ctx:
            load_registry("/nonexistent/tools.json")
        self.assertEqual(ctx.exception.code, "invalid_catalog")


if __name__ == '__main__':
    unittest.main()
