# -*- coding: utf-8 -*-

import tempfile
import unittest
from pathlib import Path

from fastapi.testclient import TestClient

from newvocab.segmenters import BasicSegmenter
from newvocab.workspace import Workspace
from webapp.app import create_app

from _fixtures import make_session


class TestWebApi(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.ws = Workspace(Path(self._tmp.name))
        self.session = make_session(segmenter=BasicSegmenter())
        self.client = TestClient(create_app(self.session, workspace=self.ws))

    def tearDown(self):
        self._tmp.cleanup()

    def _words(self, resp):
        self.assertEqual(resp.status_code, 200, resp.text)
        return [it["word"] for it in resp.json()["items"]]

    def test_health_and_sources(self):
        self.assertTrue(self.client.get("/api/health").json()["ok"])
        data = self.client.get("/api/sources").json()
        self.assertEqual(data["active"], "lai")
        self.assertEqual([s["id"] for s in data["sources"]], ["lai", "mtc"])

    def test_analyze_then_toggle(self):
        words = self._words(self.client.post("/api/analyze", json={"text": "你好，世界！"}))
        self.assertEqual(words, ["你好", "世界"])

        resp = self.client.post("/api/lessons/toggle", json={"source": "lai", "key": "B1"})
        self.assertEqual(self._words(resp), ["世界"])
        self.assertEqual(resp.json()["selected_count"], 1)

        resp = self.client.post("/api/lessons/toggle", json={"source": "lai", "key": "B99"})
        self.assertEqual(resp.status_code, 400)

    def test_lessons_and_group_toggle(self):
        resp = self.client.post("/api/lessons/toggle_group", json={"source": "mtc", "group": "第 1 冊"})
        self.assertEqual(resp.status_code, 200)
        groups = self.client.get("/api/lessons", params={"source": "mtc"}).json()["groups"]
        self.assertEqual(groups[0]["name"], "第 1 冊")
        self.assertEqual(groups[0]["state"], "all")
        self.assertEqual([l["key"] for l in groups[0]["lessons"]], ["1-2", "1-10"])
        self.assertEqual(self.client.get("/api/lessons", params={"source": "zzz"}).status_code, 400)

    def test_split_needs_confirmation(self):
        self.client.post("/api/analyze", json={"text": "你好"})
        resp = self.client.post("/api/split", json={"index": 0, "parts": "你 壞"})
        self.assertEqual(resp.status_code, 409)
        detail = resp.json()["detail"]
        self.assertTrue(detail["needs_confirmation"])
        self.assertEqual(detail["original"], "你好")

        resp = self.client.post("/api/split", json={"index": 0, "parts": "你 壞", "confirmed": True})
        self.assertEqual(self._words(resp), ["你", "壞"])

    def test_merge_bad_index(self):
        self.client.post("/api/analyze", json={"text": "你好"})
        self.assertEqual(self.client.post("/api/merge", json={"index": 0}).status_code, 400)
        self.assertEqual(self.client.post("/api/merge", json={}).status_code, 400)

    def test_custom_vocabulary_saved(self):
        self.client.post("/api/analyze", json={"text": "咖啡世界"})
        resp = self.client.post("/api/custom", json={"words": "咖啡", "save": True})
        self.assertEqual(self._words(resp), ["世界"])
        self.assertEqual(self.ws.custom_vocab_path().read_text(encoding="utf-8").count("咖啡"), 1)
        resp = self.client.post("/api/custom/clear", json={})
        self.assertEqual(self._words(resp), ["咖啡", "世界"])

    def test_locate_cycles(self):
        self.client.post("/api/analyze", json={"text": "你好 你好"})
        first = self.client.post("/api/locate", json={"word": "你好"}).json()
        second = self.client.post("/api/locate", json={"word": "你好"}).json()
        self.assertEqual((first["offset"], second["offset"]), (0, 3))
        self.assertEqual(second["segments"], {"before": "你好 ", "target": "你好", "after": ""})
        self.assertFalse(self.client.post("/api/locate", json={"word": "老師"}).json()["found"])

    def test_export_formats(self):
        self.client.post("/api/analyze", json={"text": "你好，世界！"})
        data = self.client.get("/api/export").json()
        self.assertEqual(data["stats"]["new_words"], 2)
        md = self.client.get("/api/export", params={"fmt": "md"}).json()["content"]
        self.assertIn("# 生詞分析報告", md)
        self.assertEqual(self.client.get("/api/export", params={"fmt": "xml"}).status_code, 400)


class TestWebApiWithoutData(unittest.TestCase):
    def test_missing_data_disables_api(self):
        with tempfile.TemporaryDirectory() as td:
            client = TestClient(create_app(workspace=Workspace(Path(td))))
            health = client.get("/api/health").json()
            self.assertFalse(health["ok"])
            self.assertIn("missing data file", health["error"])
            self.assertEqual(client.post("/api/analyze", json={"text": "你好"}).status_code, 503)


if __name__ == "__main__":
    unittest.main()
