import base64
import os
import tempfile
import threading
import unittest

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt

from hicpage.errors import ValidationError
from hicpage.page import Page, clear_page, create_page, get_current_page, page_to_base64_and_close


class TestPage(unittest.TestCase):

    def test_size(self):
        page = Page(4, 2.5)
        self.assertEqual(page.get_size(), (4.0, 2.5))
        width_cm, height_cm = page.get_size("cm")
        self.assertAlmostEqual(width_cm, 10.16)
        self.assertAlmostEqual(height_cm, 6.35)

    def test_invalid_size(self):
        with self.assertRaises(ValidationError):
            Page(0, 2)

    def test_invalid_units(self):
        with self.assertRaises(ValidationError):
            Page(4, 2, units="npc")

    def test_register_viewport(self):
        page = Page(4, 4)
        self.assertEqual(page.register_viewport("hicTriangle"), "hicTriangle1")
        self.assertEqual(page.register_viewport("hicTriangle"), "hicTriangle2")
        self.assertEqual(page.register_viewport("hicSquare"), "hicSquare1")
        self.assertEqual(page.viewports, ("hicTriangle1", "hicTriangle2", "hicSquare1"))

    def test_register_viewport_concurrent(self):
        page = Page(4, 4)
        names = []
        names_lock = threading.Lock()

        def register():
            for _ in range(50):
                name = page.register_viewport("hicTriangle")
                with names_lock:
                    names.append(name)

        threads = [threading.Thread(target=register) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(len(names), 400)
        self.assertEqual(len(set(names)), 400)

    def test_axes_span_page(self):
        page = Page(10, 5, units="cm")
        ax = page.get_axes()
        self.assertEqual(ax.get_xlim(), (0.0, 10.0))
        self.assertEqual(ax.get_ylim(), (0.0, 5.0))
        width_in, height_in = page.get_figure().get_size_inches()
        self.assertAlmostEqual(width_in, 10 / 2.54)
        self.assertAlmostEqual(height_in, 5 / 2.54)
        page.close()


class TestCurrentPage(unittest.TestCase):

    def tearDown(self):
        clear_page()

    def test_create_page(self):
        page = create_page(4, 2.5, units="inches")
        self.assertIs(get_current_page(), page)

    def test_create_page_closes_previous(self):
        plt.close("all")
        first = create_page(4, 2.5)
        first.get_axes()
        second = create_page(4, 2.5)
        second.get_axes()
        self.assertEqual(len(plt.get_fignums()), 1)
        self.assertIsNone(first._figure)

    def test_clear_page(self):
        create_page(4, 2.5)
        clear_page()
        self.assertIsNone(get_current_page())

    def test_page_to_base64(self):
        page = create_page(1, 1)
        page.get_axes()
        encoded = page_to_base64_and_close(page)
        self.assertTrue(base64.b64decode(encoded).startswith(b"\x89PNG"))

    def test_save(self):
        page = create_page(2, 2)
        page.get_axes()
        with tempfile.TemporaryDirectory() as tmpdir:
            filepath = os.path.join(tmpdir, "page.png")
            page.save(filepath, dpi=50)
            self.assertTrue(os.path.exists(filepath))
        page.close()
