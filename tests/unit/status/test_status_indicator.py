from __future__ import annotations

import unittest

from bufmark.status import StatusIndicator, render_status


class RenderStatusTests(unittest.TestCase):
    def test_current_marked_buffer_is_highlighted(self) -> None:
        text = render_status(
            [("b", "/p/b.py"), ("a", "/p/a.py")],
            ["/p/a.py", "/p/b.py"],
            "/p/b.py",
        )
        self.assertEqual(text, "%#TabLine# a %#TabLineSel# b %*")

    def test_unmarked_current_buffer_gets_blank_slot(self) -> None:
        text = render_status([("a", "/p/a.py")], ["/p/a.py", "/p/c.py"], "/p/c.py")
        self.assertEqual(text, "%#TabLine# a %#DiffText#  %*")

    def test_marks_for_unloaded_buffers_are_hidden(self) -> None:
        text = render_status([("a", "/p/a.py"), ("z", "/p/z.py")], ["/p/z.py"], "/p/z.py")
        self.assertEqual(text, "%#TabLineSel# z %*")

    def test_no_marks(self) -> None:
        self.assertEqual(render_status([], [], ""), "%#DiffText#  %*")


class StatusIndicatorTests(unittest.TestCase):
    def test_get_returns_last_rendering(self) -> None:
        indicator = StatusIndicator()
        self.assertEqual(indicator.get(), "")
        indicator.update([("a", "/p/a.py")], ["/p/a.py"], "/p/a.py")
        self.assertEqual(indicator.get(), "%#TabLineSel# a %*")


if __name__ == "__main__":
    unittest.main()
