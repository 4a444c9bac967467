"""
Tests for the fuzzy removal matcher.
"""

from voice_cart.interpreter import REMOVAL_MATCH_THRESHOLD, find_best_removal_match, similarity


def _items(*names):
    return [{"id": f"id-{i}", "name": name} for i, name in enumerate(names)]


class TestSimilarity:
    """Tests for token-overlap similarity."""

    def test_identical(self):
        assert similarity("whole milk", "whole milk") == 1
        assert similarity("पानी", "पानी") == 1

    def test_partial_overlap(self):
        assert similarity("whole milk", "milk") == 0.5

    def test_no_shared_tokens(self):
        assert similarity("milk", "bread") == 0

    def test_empty_side(self):
        assert similarity("", "milk") == 0
        assert similarity("milk", "!!!") == 0

    def test_case_and_punctuation_ignored(self):
        assert similarity("Orange Juice!", "orange juice") == 1


class TestFindBestRemovalMatch:
    """Tests for picking the list entry a spoken name refers to."""

    def test_exact_match_preferred_over_containment(self):
        items = _items("milk chocolate", "milk")
        assert find_best_removal_match(items, "Milk")["name"] == "milk"

    def test_substring_match(self):
        items = _items("bread", "whole milk")
        assert find_best_removal_match(items, "milk")["name"] == "whole milk"

    def test_spoken_name_contains_item_name(self):
        items = _items("eggs", "rice")
        assert find_best_removal_match(items, "basmati rice")["name"] == "rice"

    def test_containment_takes_first_in_list_order(self):
        items = _items("milk powder", "soy milk")
        assert find_best_removal_match(items, "milk")["name"] == "milk powder"

    def test_score_at_threshold_is_accepted(self):
        items = _items("red apples")
        assert similarity("red apples", "green apples") == REMOVAL_MATCH_THRESHOLD
        assert find_best_removal_match(items, "green apples")["name"] == "red apples"

    def test_score_below_threshold_is_rejected(self):
        items = _items("orange juice")
        assert find_best_removal_match(items, "big apple juice") is None

    def test_empty_name_matches_nothing(self):
        assert find_best_removal_match(_items("milk"), "") is None
        assert find_best_removal_match(_items("milk"), "   ") is None

    def test_empty_list(self):
        assert find_best_removal_match([], "milk") is None

    def test_hindi_names(self):
        items = _items("दूध", "पानी")
        assert find_best_removal_match(items, "पानी")["name"] == "पानी"

    def test_objects_with_name_attribute(self):
        class Row:
            def __init__(self, name):
                self.name = name

        rows = [Row("bread"), Row("eggs")]
        assert find_best_removal_match(rows, "eggs") is rows[1]
