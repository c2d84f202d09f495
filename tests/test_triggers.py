"""
Tests for popup trigger scanning.
"""

from modalis.triggers import Trigger, TriggerScanner


class TestTriggerScanner:

    def test_class_and_href(self):
        html = (
            '<a href="#spp-trigger-12">open</a>'
            '<button class="btn spp-trigger-42">x</button>'
            '<div class="spp-trigger-7-800"></div>'
        )
        triggers = TriggerScanner().scan_html(html)
        assert triggers == [
            Trigger("class", 42),
            Trigger("class", 7, 800),
            Trigger("href", 12),
        ]

    def test_href_with_width(self):
        html = '<a href="/page#spp-trigger-5-1200">x</a>'
        assert TriggerScanner().scan_html(html) == [Trigger("href", 5, 1200)]

    def test_width_out_of_range_dropped(self):
        html = '<span class="spp-trigger-3-50"></span><span class="spp-trigger-4-9000"></span>'
        assert TriggerScanner().scan_html(html) == [Trigger("class", 3), Trigger("class", 4)]

    def test_id_range(self):
        html = '<span class="spp-trigger-0"></span><span class="spp-trigger-2147483648"></span>'
        assert TriggerScanner().scan_html(html) == []

    def test_deduplicated(self):
        html = '<i class="spp-trigger-1"></i><i class="spp-trigger-1"></i><i class="spp-trigger-1-300"></i>'
        assert TriggerScanner().scan_html(html) == [Trigger("class", 1), Trigger("class", 1, 300)]

    def test_partial_class_tokens_ignored(self):
        html = '<i class="my-spp-trigger-1 spp-trigger-1x"></i>'
        assert TriggerScanner().scan_html(html) == []

    def test_non_ascii_digits_ignored(self):
        html = '<i class="spp-trigger-٣"></i><a href="#spp-trigger-٣">x</a><i class="spp-trigger-4-３００"></i>'
        assert TriggerScanner().scan_html(html) == []

    def test_no_triggers(self):
        assert TriggerScanner().scan_html("<p>nothing</p>") == []
        assert TriggerScanner().scan_html("") == []

    def test_fragment_ids(self):
        html = '<i class="spp-trigger-2-300"></i><a href="#spp-trigger-2">x</a><a href="#spp-trigger-9">y</a>'
        assert TriggerScanner().fragment_ids(html) == [2, 9]

    def test_to_dict(self):
        assert Trigger("class", 3).to_dict() == {"type": "class", "id": 3}
        assert Trigger("href", 3, 400).to_dict() == {"type": "href", "id": 3, "max_width": 400}
