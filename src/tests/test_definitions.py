import unittest

from hicpage.utilities import *
from hicpage.constants import *
from hicpage.definitions import *
from hicpage.errors import ValidationError


class TestGenomicRegion(unittest.TestCase):

    def test_init_sets_alt(self):
        gregion = GenomicRegion("chr21", 28000000, 30300000)
        self.assertEqual(gregion.chrom, "chr21")
        self.assertEqual(gregion.start, 28000000)
        self.assertEqual(gregion.end, 30300000)
        self.assertEqual(gregion.altchrom, "chr21")
        self.assertEqual(gregion.altstart, 28000000)
        self.assertEqual(gregion.altend, 30300000)

    def test_init_float(self):
        gregion = GenomicRegion("chr21", 28000000.0, 30300000.0)
        self.assertIsInstance(gregion.start, int)
        self.assertIsInstance(gregion.end, int)

    def test_chrom_not_prefixed(self):
        gregion = GenomicRegion("21", 1, 2)
        self.assertEqual(gregion.chrom, "21")

    def test_whole_chromosome(self):
        gregion = GenomicRegion("chr21")
        self.assertTrue(gregion.is_whole_chromosome())
        self.assertEqual(str(gregion), "chr21")

    def test_with_bounds(self):
        gregion = GenomicRegion("chr21").with_bounds(1, 48129895)
        self.assertFalse(gregion.is_whole_chromosome())
        self.assertEqual(gregion.get_unpacked(), ("chr21", 1, 48129895))
        self.assertEqual(gregion.altend, 48129895)
        self.assertEqual(gregion.get_size(), 48129894)

    def test_str(self):
        self.assertEqual(str(GenomicRegion("chr8", 10, 20)), "chr8:10-20")


class TestAssembly(unittest.TestCase):

    def test_known_assembly(self):
        assembly = Assembly.from_name("hg19")
        self.assertEqual(assembly.chrom_prefix, "chr")
        self.assertEqual(assembly.get_chrom_size("chr21"), 48129895)

    def test_known_assembly_case_insensitive(self):
        assembly = Assembly.from_name("HG38")
        self.assertEqual(assembly.get_chrom_size("chr21"), 46709983)

    def test_unknown_assembly(self):
        assembly = Assembly.from_name("mm10")
        self.assertIsNone(assembly.chrom_sizes)
        self.assertIsNone(assembly.chrom_prefix)
        self.assertIsNone(assembly.get_chrom_size("chr1"))

    def test_unknown_chrom(self):
        self.assertIsNone(Assembly.from_name("hg19").get_chrom_size("chrM"))


class TestUnit(unittest.TestCase):

    def test_to_inches(self):
        self.assertAlmostEqual(Unit(2.54, "cm").to("inches"), 1.0)

    def test_alias(self):
        self.assertEqual(Unit(1, "in").units, "inches")

    def test_invalid_units(self):
        with self.assertRaises(ValidationError):
            Unit(1, "furlongs")

    def test_coerce_number(self):
        self.assertEqual(Unit.coerce(3, "cm"), Unit(3.0, "cm"))

    def test_coerce_passthrough(self):
        unit = Unit(1, "mm")
        self.assertIs(Unit.coerce(unit, "inches"), unit)
        self.assertIsNone(Unit.coerce(None, "inches"))

    def test_coerce_invalid(self):
        with self.assertRaises(ValidationError):
            Unit.coerce("3", "inches")


class TestMatrixType(unittest.TestCase):

    def test_from_string(self):
        self.assertEqual(MatrixType.from_string("observed"), MatrixType.OBSERVED)
        self.assertEqual(MatrixType.from_string("OE"), MatrixType.OE)
        self.assertEqual(str(MatrixType.OE), "oe")

    def test_from_string_invalid(self):
        with self.assertRaises(ValidationError):
            MatrixType.from_string("expected")


class TestTriangleFrame(unittest.TestCase):

    def setUp(self):
        self.frame = TriangleFrame(x=1.0, y=0.5, width=2.0, scale=(0, 100))

    def test_side(self):
        self.assertAlmostEqual(float(self.frame.side), 2.0 / 2 ** 0.5)

    def test_diagonal_on_base(self):
        self.assertEqual(self.frame.to_page(0, 0), (1.0, 0.5))
        px, py = self.frame.to_page(100, 100)
        self.assertAlmostEqual(px, 3.0)
        self.assertAlmostEqual(py, 0.5)
        px, py = self.frame.to_page(50, 50)
        self.assertAlmostEqual(px, 2.0)
        self.assertAlmostEqual(py, 0.5)

    def test_apex(self):
        px, py = self.frame.to_page(0, 100)
        self.assertAlmostEqual(px, 2.0)
        self.assertAlmostEqual(py, 1.5)

    def test_square_vertices(self):
        square = Square(0, 50, 50, 50, "#ffffff")
        vertices = square.page_vertices(self.frame)
        self.assertEqual(len(vertices), 4)
        expected = [(1.5, 1.0), (2.0, 0.5), (2.5, 1.0), (2.0, 1.5)]
        for (px, py), (ex, ey) in zip(vertices, expected):
            self.assertAlmostEqual(px, ex)
            self.assertAlmostEqual(py, ey)

    def test_triangle_vertices(self):
        triangle = Triangle(0, 0, 50, None)
        self.assertEqual(triangle.native_vertices(), [(0, 0), (0, 50), (50, 50)])
        vertices = triangle.page_vertices(self.frame)
        self.assertEqual(len(vertices), 3)
        self.assertAlmostEqual(vertices[1][0], 1.5)
        self.assertAlmostEqual(vertices[1][1], 1.0)
