# -*- coding: utf-8 -*-

import unittest

from newvocab.errors import InvalidReferenceError
from newvocab.lexicon import KnownWordDictionary
from newvocab.selection import BlocklistManager, GroupState, parse_lesson_ref, split_words

from _fixtures import LAI, MTC, make_store


class TestBlocklistManager(unittest.TestCase):
    def setUp(self):
        self.known = KnownWordDictionary()
        self.mgr = BlocklistManager(make_store(), self.known)

    def test_blocklist_is_union_of_selected_lessons_and_custom(self):
        self.mgr.toggle_lesson("lai", "B1")
        self.mgr.toggle_lesson("mtc", "2-1")
        self.mgr.add_custom_vocabulary("咖啡 茶")
        expected = set(LAI["B1"]) | set(MTC["2-1"]) | {"咖啡", "茶"}
        self.assertEqual(set(self.mgr.blocklist), expected)

    def test_toggle_twice_restores_blocklist(self):
        self.mgr.toggle_lesson("lai", "B2")
        before = self.mgr.blocklist
        self.mgr.toggle_lesson("lai", "B1")
        self.assertNotEqual(self.mgr.blocklist, before)
        self.mgr.toggle_lesson("lai", "B1")
        self.assertEqual(self.mgr.blocklist, before)

    def test_shared_word_stays_blocked_while_one_lesson_selected(self):
        self.mgr.toggle_lesson("lai", "B1")
        self.mgr.toggle_lesson("lai", "B2")
        self.mgr.toggle_lesson("lai", "B2")
        self.assertIn("謝謝", self.mgr.blocklist)

    def test_group_toggle_is_two_state(self):
        keys = ["1-2", "1-10"]
        self.mgr.toggle_lesson("mtc", "1-2")
        self.assertIs(self.mgr.group_state("mtc", keys), GroupState.SOME)
        # partially selected -> select all
        self.mgr.toggle_group("mtc", keys)
        self.assertIs(self.mgr.group_state("mtc", keys), GroupState.ALL)
        # fully selected -> deselect all
        self.mgr.toggle_group("mtc", keys)
        self.assertIs(self.mgr.group_state("mtc", keys), GroupState.NONE)
        self.assertEqual(self.mgr.blocklist, frozenset())

    def test_unknown_references_do_not_mutate(self):
        self.mgr.toggle_lesson("lai", "B1")
        before = (self.mgr.selected, self.mgr.blocklist)
        with self.assertRaises(InvalidReferenceError):
            self.mgr.toggle_lesson("lai", "B99")
        with self.assertRaises(InvalidReferenceError):
            self.mgr.toggle_lesson("nope", "B1")
        with self.assertRaises(InvalidReferenceError):
            self.mgr.toggle_group("lai", ["B2", "B99"])
        self.assertEqual((self.mgr.selected, self.mgr.blocklist), before)

    def test_selected_count_per_source(self):
        self.mgr.toggle_group("mtc", ["1-2", "1-10", "2-1"])
        self.mgr.toggle_lesson("lai", "B1")
        self.assertEqual(self.mgr.selected_count("mtc"), 3)
        self.assertEqual(self.mgr.selected_count("lai"), 1)

    def test_custom_vocabulary_teaches_segmenter_and_clears(self):
        self.mgr.add_custom_vocabulary(["珍珠奶茶", "  ", "滷肉飯"])
        self.assertIn("珍珠奶茶", self.known)
        self.assertEqual(self.mgr.custom_vocabulary, frozenset({"珍珠奶茶", "滷肉飯"}))
        self.mgr.clear_custom_vocabulary()
        self.assertEqual(self.mgr.blocklist, frozenset())
        # the segmenter keeps what it learned
        self.assertIn("珍珠奶茶", self.known)

    def test_set_custom_vocabulary_replaces(self):
        self.mgr.add_custom_vocabulary("甲 乙")
        self.mgr.set_custom_vocabulary(["丙"])
        self.assertEqual(self.mgr.blocklist, frozenset({"丙"}))


class TestHelpers(unittest.TestCase):
    def test_parse_lesson_ref(self):
        self.assertEqual(parse_lesson_ref("mtc:1-2"), ("mtc", "1-2"))
        with self.assertRaises(InvalidReferenceError):
            parse_lesson_ref("B1")

    def test_split_words(self):
        self.assertEqual(split_words(" 看  書\n"), ["看", "書"])
        self.assertEqual(split_words(["看", "", " 書 "]), ["看", "書"])


if __name__ == "__main__":
    unittest.main()
