# -*- coding: utf-8 -*-

import unittest

from newvocab.locator import HighlightLocator, highlight_segments


class TestHighlightLocator(unittest.TestCase):
    def test_cycles_through_occurrences_and_wraps(self):
        loc = HighlightLocator()
        text = "ab ab ab"
        offsets = [loc.locate(text, "ab").offset for _ in range(3)]
        self.assertEqual(offsets, [0, 3, 6])
        fourth = loc.locate(text, "ab")
        self.assertEqual(fourth.offset, 0)
        self.assertTrue(fourth.wrapped)
        self.assertFalse(fourth.sole)

    def test_not_found_is_distinct_from_sole_occurrence(self):
        loc = HighlightLocator()
        self.assertIsNone(loc.locate("你好，世界", "老師"))

        first = loc.locate("你好，世界", "世界")
        again = loc.locate("你好，世界", "世界")
        self.assertEqual(first.offset, 3)
        self.assertEqual(again.offset, 3)
        self.assertTrue(first.sole)
        self.assertTrue(again.sole)

    def test_new_word_restarts_from_beginning(self):
        loc = HighlightLocator()
        text = "看書 看 看書"
        self.assertEqual(loc.locate(text, "看書").offset, 0)
        self.assertEqual(loc.locate(text, "看書").offset, 5)
        self.assertEqual(loc.locate(text, "看").offset, 0)
        self.assertEqual(loc.locate(text, "看書").offset, 0)

    def test_text_change_resets_state(self):
        loc = HighlightLocator()
        loc.locate("ab ab", "ab")
        self.assertEqual(loc.locate("ab ab", "ab").offset, 3)
        self.assertEqual(loc.locate("xab ab", "ab").offset, 1)

    def test_reset(self):
        loc = HighlightLocator()
        loc.locate("ab ab", "ab")
        loc.reset()
        self.assertEqual(loc.locate("ab ab", "ab").offset, 0)

    def test_empty_word(self):
        self.assertIsNone(HighlightLocator().locate("abc", ""))

    def test_highlight_segments(self):
        loc = HighlightLocator()
        m = loc.locate("我喜歡看書", "看書")
        self.assertEqual(highlight_segments("我喜歡看書", m), ("我喜歡", "看書", ""))


if __name__ == "__main__":
    unittest.main()
