# -*- coding: utf-8 -*-

import unittest
from unittest import mock

from newvocab.errors import SegmenterUnavailable
from newvocab.segmenters import BasicSegmenter, JiebaSegmenter, make_segmenter

from _fixtures import make_session


class _FakeTokenizer:
    def __init__(self):
        self.added = []
        self.deleted = []
        self.hmm = []

    def add_word(self, word, freq=None, tag=None):
        self.added.append((word, freq))

    def del_word(self, word):
        self.deleted.append(word)

    def lcut(self, text, cut_all=False, HMM=True):
        self.hmm.append(HMM)
        return list(text)


class TestBasicSegmenter(unittest.TestCase):
    def test_max_match_with_bias(self):
        seg = BasicSegmenter()
        tokens = seg.segment("你好，世界！ok 2024", {"世界": "2", "你好": "-"}, set())
        self.assertEqual(tokens, ["你好", "，", "世界", "！", "ok", " ", "2024"])

    def test_protected_words_are_kept_whole(self):
        seg = BasicSegmenter()
        tokens = seg.segment("我喜歡看書", {}, {"喜歡", "看書"})
        self.assertEqual(tokens, ["我", "喜歡", "看書"])

    def test_without_bias_han_runs_stay_whole(self):
        seg = BasicSegmenter()
        tokens = seg.segment("我喜歡看書。", {"喜歡": "1"}, set(), bias_multi_char=False)
        self.assertEqual(tokens, ["我喜歡看書", "。"])

    def test_long_protected_word_is_not_cut(self):
        seg = BasicSegmenter()
        word = "中華人民共和國國歌"
        self.assertEqual(seg.segment(word, {"人民": "1"}, {word}), [word])
        self.assertEqual(seg.segment(word + "很好", {}, {word}, bias_multi_char=False), [word, "很", "好"])

    def test_longest_match_wins(self):
        seg = BasicSegmenter()
        tokens = seg.segment("世界和平", {"世界": "2", "世界和平": "-"}, set())
        self.assertEqual(tokens, ["世界和平"])


class TestJiebaSegmenter(unittest.TestCase):
    def test_sync_adds_and_removes_words(self):
        tk = _FakeTokenizer()
        seg = JiebaSegmenter(dictionary_freq=10, protect_freq=99, tokenizer=tk)

        seg.segment("看書", {"看書": "-", "書": "1"}, {"喜歡"})
        self.assertEqual(sorted(tk.added), [("喜歡", 99), ("看書", 10)])

        tk.added.clear()
        seg.segment("看書", {"看": "-", "書": "1"}, {"喜歡"})
        self.assertEqual(tk.added, [])
        self.assertEqual(tk.deleted, ["看書"])

        # a word that comes back is registered again
        seg.segment("看書", {"看書": "-"}, set())
        self.assertIn(("看書", 10), tk.added)
        self.assertIn("喜歡", tk.deleted)

    def test_protect_frequency_overrides_dictionary(self):
        tk = _FakeTokenizer()
        seg = JiebaSegmenter(dictionary_freq=10, protect_freq=99, tokenizer=tk)
        seg.segment("你好", {"你好": "-"}, {"你好"})
        self.assertEqual(tk.added, [("你好", 99)])

    def test_grammar_heuristics_flag_maps_to_hmm(self):
        tk = _FakeTokenizer()
        seg = JiebaSegmenter(tokenizer=tk)
        seg.segment("你好", {}, set(), use_grammar_heuristics=False)
        seg.segment("你好", {}, set())
        self.assertEqual(tk.hmm, [False, True])

    def test_real_jieba_keeps_dictionary_words(self):
        seg = JiebaSegmenter()
        tokens = seg.segment("你好，世界！", {"你好": "-", "世界": "2"}, set())
        self.assertIn("你好", tokens)
        self.assertIn("世界", tokens)
        self.assertEqual("".join(tokens), "你好，世界！")


class TestMakeSegmenter(unittest.TestCase):
    def test_names(self):
        self.assertIsInstance(make_segmenter("basic"), BasicSegmenter)
        self.assertIsInstance(make_segmenter(""), JiebaSegmenter)
        seg = make_segmenter("JIEBA", dictionary_freq=5)
        self.assertEqual(seg.dictionary_freq, 5)
        with self.assertRaises(ValueError):
            make_segmenter("nope")

    def test_failed_dictionary_load_falls_back_to_basic(self):
        seg = JiebaSegmenter()
        with mock.patch("newvocab.segmenters.jieba.Tokenizer") as tokenizer_cls:
            tokenizer_cls.return_value.initialize.side_effect = OSError("dict.txt missing")
            with self.assertRaises(SegmenterUnavailable):
                seg.segment("你好", {}, set())

            s = make_session(segmenter=seg)
            with self.assertLogs("newvocab.pipeline", level="WARNING") as cm:
                s.analyze("你好，世界！")
        self.assertEqual([it.word for it in s.result], ["你好", "世界"])
        self.assertIn("using basic", cm.output[0])


if __name__ == "__main__":
    unittest.main()
