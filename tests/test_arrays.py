"""Tests for [n] placeholder resolution."""

from attrcomplete.completions.arrays import count_placeholders, max_indices, resolve_placeholders


class TestMaxIndices:
    """Highest index per placeholder position."""

    def test_unseen(self):
        """Positions without any supplied path are -1."""
        assert max_indices("a[n].b[n]", []) == [-1, -1]

    def test_seen(self):
        """Each position keeps its own maximum."""
        supplied = ["a[0].b[3]", "a[2].b[1]", "a[1].c[7]", "other"]
        assert max_indices("a[n].b[n]", supplied) == [2, 3]

    def test_no_placeholder(self):
        """A plain path has no position."""
        assert max_indices("name", ["name"]) == []


class TestResolvePlaceholders:
    """Candidate generation."""

    def test_no_placeholder(self):
        """Paths without [n] are returned unchanged."""
        assert resolve_placeholders("name", ["name"]) == ["name"]

    def test_first_element(self):
        """Nothing supplied yet starts at index 0."""
        assert resolve_placeholders("items[n].sku", []) == ["items[0].sku"]

    def test_next_element(self):
        """The next index follows the highest one supplied."""
        assert resolve_placeholders("items[n].sku", ["items[0].sku", "items[1].sku"]) == ["items[2].sku"]

    def test_nested(self):
        """Each position advances on its own."""
        assert resolve_placeholders("a[n].b[n]", ["a[0].b[1]"]) == ["a[1].b[1]", "a[0].b[2]"]

    def test_nested_unseen(self):
        """Unseen positions stay at 0 while another advances."""
        assert resolve_placeholders("a[n].b[n]", []) == ["a[0].b[0]", "a[0].b[0]"]

    def test_regex_metacharacters(self):
        """Template text is matched literally."""
        assert resolve_placeholders("a.b[n]", ["aXb[4]"]) == ["a.b[0]"]

    def test_one_candidate_per_placeholder(self):
        """k placeholders give k candidates, each one step ahead on one coordinate."""
        template = "x[n].y[n].z[n]"
        supplied = ["x[1].y[0].z[2]", "x[0].y[4].z[0]"]
        highest = [max(i, 0) for i in max_indices(template, supplied)]
        candidates = resolve_placeholders(template, supplied)
        assert len(candidates) == count_placeholders(template) == 3
        for position, candidate in enumerate(candidates):
            indices = [int(i) for i in candidate.replace("x[", " ").replace("].y[", " ").replace("].z[", " ").rstrip("]").split()]
            expected = list(highest)
            expected[position] = max_indices(template, supplied)[position] + 1
            assert indices == expected
