import os
import tempfile
import unittest
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import numpy as np
import pandas as pd

from hicpage.definitions import Assembly, FileSource, FrameSource, MatrixType
from hicpage.errors import ValidationError
from hicpage.readers import (
    get_assembly,
    match_hic_chrom,
    read_frame_contacts,
    read_hic_contacts,
    to_source,
    validate_source,
)


def record(binX, binY, counts):
    return SimpleNamespace(binX=binX, binY=binY, counts=counts)


def mock_hic(records, chrom_names=("1", "21", "X")):
    hic = MagicMock()
    hic.getChromosomes.return_value = [SimpleNamespace(name=name) for name in chrom_names]
    hic.getMatrixZoomData.return_value.getRecords.return_value = records
    return hic


class TestToSource(unittest.TestCase):

    def test_frame(self):
        frame = pd.DataFrame({"a": [0], "b": [0], "c": [1.0]})
        source = to_source(frame)
        self.assertIsInstance(source, FrameSource)
        self.assertIs(source.frame, frame)

    def test_path(self):
        self.assertEqual(to_source("sample.hic"), FileSource("sample.hic"))

    def test_path_like(self):
        self.assertEqual(to_source(Path("sample.hic")), FileSource("sample.hic"))

    def test_invalid(self):
        for data in [[(0, 10000, 1.0)], np.zeros((2, 3)), 42, None]:
            with self.assertRaises(ValidationError):
                to_source(data)

    def test_passthrough(self):
        source = FileSource("sample.hic")
        self.assertIs(to_source(source), source)


class TestValidateSource(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.hic_path = os.path.join(self.tmpdir.name, "sample.hic")
        open(self.hic_path, "w").close()

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_valid_file(self):
        validate_source(FileSource(self.hic_path), "KR")

    def test_wrong_extension(self):
        with self.assertRaises(ValidationError):
            validate_source(FileSource(os.path.join(self.tmpdir.name, "sample.cool")), "KR")

    def test_missing_file(self):
        with self.assertRaises(ValidationError):
            validate_source(FileSource(os.path.join(self.tmpdir.name, "missing.hic")), "KR")

    def test_missing_norm(self):
        with self.assertRaises(ValidationError):
            validate_source(FileSource(self.hic_path), None)

    def test_frame_columns(self):
        validate_source(FrameSource(pd.DataFrame({"a": [0], "b": [0], "c": [1.0]})), None)
        with self.assertRaises(ValidationError):
            validate_source(FrameSource(pd.DataFrame({"a": [0], "b": [0]})), None)


class TestGetAssembly(unittest.TestCase):

    def test_name(self):
        self.assertEqual(get_assembly("hg38").name, "hg38")

    def test_passthrough(self):
        assembly = Assembly("custom", {"chrA": 1000})
        self.assertIs(get_assembly(assembly), assembly)

    def test_invalid(self):
        with self.assertRaises(ValidationError):
            get_assembly(19)


class TestMatchHicChrom(unittest.TestCase):

    def test_unprefixed_file(self):
        self.assertEqual(match_hic_chrom(mock_hic([]), "chr21"), "21")

    def test_prefixed_file(self):
        self.assertEqual(match_hic_chrom(mock_hic([], ("chr21",)), "21"), "chr21")

    def test_exact(self):
        self.assertEqual(match_hic_chrom(mock_hic([], ("chr21", "21")), "chr21"), "chr21")

    def test_not_found(self):
        self.assertEqual(match_hic_chrom(mock_hic([], ("1",)), "chr21"), "21")


class TestReadHicContacts(unittest.TestCase):

    def test_read(self):
        hic = mock_hic([record(10000, 0, 4.0), record(0, 0, float("nan")), record(10000, 10000, 90.0)])
        with patch("hicpage.readers.HiCFile", return_value=hic) as hic_file:
            contacts = read_hic_contacts("sample.hic", "chr21", -10000, 30000, 10000, norm="KR", matrix="oe")

        hic_file.assert_called_once_with("sample.hic")
        hic.getMatrixZoomData.assert_called_once_with("21", "21", "oe", "KR", "BP", 10000)
        hic.getMatrixZoomData.return_value.getRecords.assert_called_once_with(0, 30000, 0, 30000)
        self.assertEqual(list(contacts.columns), ["x", "y", "counts"])
        self.assertEqual(list(contacts["x"]), [0, 10000])
        self.assertEqual(list(contacts["y"]), [10000, 10000])
        self.assertEqual(list(contacts["counts"]), [4.0, 90.0])

    def test_zrange_clamps(self):
        hic = mock_hic([record(0, 10000, 90.0), record(0, 0, -1.0)])
        with patch("hicpage.readers.HiCFile", return_value=hic):
            contacts = read_hic_contacts(
                "sample.hic", "chr21", 0, 30000, 10000, matrix=MatrixType.OBSERVED, zrange=(0, 70)
            )
        self.assertEqual(list(contacts["counts"]), [70.0, 0.0])

    def test_no_records(self):
        with patch("hicpage.readers.HiCFile", return_value=mock_hic([])):
            contacts = read_hic_contacts("sample.hic", "chr21", 0, 30000, 10000)
        self.assertTrue(contacts.empty)
        self.assertEqual(list(contacts.columns), ["x", "y", "counts"])


class TestReadFrameContacts(unittest.TestCase):

    def test_renames_and_drops_missing(self):
        frame = pd.DataFrame({"binA": [0, 0], "binB": [0, 10000], "score": [None, 2.0]})
        contacts = read_frame_contacts(frame)
        self.assertEqual(list(contacts.columns), ["x", "y", "counts"])
        self.assertEqual(len(contacts), 1)
        self.assertEqual(list(frame.columns), ["binA", "binB", "score"])
