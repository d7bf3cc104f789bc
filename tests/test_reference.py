"""
Tests for the reference dataset loader

Run with: python -m pytest tests/test_reference.py -v
"""

import logging

import pytest

from amatc_audit.errors import ReferenceDataError
from amatc_audit.reference import load_reference

logger = logging.getLogger(__name__)


class TestLoadReference:
    """Test suite for load_reference."""

    def test_loads_rows_in_file_order(self, tmp_path):
        path = tmp_path / "yukon.csv"
        path.write_text(
            "year,amatc,msstc,pice,fifdj,qdj,mdj\n"
            "1962,-8.1,-0.3,0.71,10,14,19\n"
            "1961,-4.0,1.2,0.55,7,11,16\n"
        )

        df = load_reference(path)
        logger.info(f"[TEST] Loaded:\n{df}")

        assert df["year"].tolist() == [1962, 1961]
        assert df["year"].dtype.kind == "i"
        assert list(df.columns) == ["year", "amatc", "msstc", "pice", "fifdj", "qdj", "mdj"]
        assert df.loc[1, "amatc"] == -4.0

    def test_float_years_coerced(self, tmp_path):
        path = tmp_path / "yukon.csv"
        path.write_text("year,amatc\n1961.0,-4.0\n1962.0,-8.1\n")

        df = load_reference(path)

        assert df["year"].tolist() == [1961, 1962]
        assert df["year"].dtype.kind == "i"

    def test_missing_year_column(self, tmp_path):
        path = tmp_path / "bad.csv"
        path.write_text("yr,amatc\n1961,-4.0\n")

        with pytest.raises(ReferenceDataError):
            load_reference(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_reference(tmp_path / "nope.csv")


if __name__ == "__main__":
    pytest.main([__file__, "-v", "--tb=short"])
