"""Shared fixtures for converter tests."""

import pytest

from tests.sample_lines import V3_HEADER, v3_line


@pytest.fixture
def v3_export(tmp_path):
    path = tmp_path / "export.csv"
    path.write_text("\n".join([V3_HEADER, v3_line(), v3_line(volgnr="000000000000007002")]) + "\n",
                    encoding="utf-8")
    return path
