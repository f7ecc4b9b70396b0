"""End-to-end tests for the conversion pipeline."""

from rabo2kmm.etl.pipeline import ConversionPipeline
from tests.sample_lines import V1_LINE, V2_HEADER, V2_LINE, V3_HEADER, v1_line, v3_line


def final_result(pipeline, path):
    items = list(pipeline.process(path))
    return items[-1][1], [message for message, result in items if result is None]


def test_v1_line_converts_end_to_end(tmp_path):
    source = tmp_path / "mutaties.txt"
    source.write_text(V1_LINE + "\n", encoding="utf-8")
    out_dir = tmp_path / "out"
    out_dir.mkdir()

    result, diagnostics = final_result(ConversionPipeline(output_dir=out_dir), source)

    output = out_dir / "mutaties#NL00RABO0123456789.txt"
    lines = output.read_text(encoding="utf-8").splitlines()
    assert result.success and result.schema_version == "v1"
    assert result.accounts == ["NL00RABO0123456789"]
    assert lines == ['" ","20200101","100,00"," ","XX","Jane Doe","[NL99X] note1"']
    assert any("tegenrekening" in message for message in diagnostics)


def test_header_is_skipped_and_accounts_are_distinct(tmp_path, v3_export):
    extra = v3_line(account="NL55RABO0500000005")
    with open(v3_export, "a", encoding="utf-8") as f:
        f.write(extra + "\n" + v3_line(volgnr="000000000000007003") + "\n")

    result, diagnostics = final_result(ConversionPipeline(output_dir=tmp_path), v3_export)

    assert result.schema_version == "v3"
    assert result.line_count == 4
    assert result.accounts == ["NL33RABO0300000003", "NL55RABO0500000005"]
    assert diagnostics == []
    first = (tmp_path / "export#NL33RABO0300000003.csv").read_text(encoding="utf-8").splitlines()
    assert [line.split(",")[0] for line in first] == [
        '"000000000000007001"', '"000000000000007002"', '"000000000000007003"',
    ]


def test_second_run_replaces_previous_output(tmp_path, v3_export):
    ConversionPipeline(output_dir=tmp_path).run([v3_export])
    ConversionPipeline(output_dir=tmp_path).run([v3_export])

    output = tmp_path / "export#NL33RABO0300000003.csv"
    assert len(output.read_text(encoding="utf-8").splitlines()) == 2


def test_v2_export_is_detected(tmp_path):
    source = tmp_path / "transacties.csv"
    source.write_text("\n".join([V2_HEADER, V2_LINE]) + "\n", encoding="utf-8")

    result, _ = final_result(ConversionPipeline(output_dir=tmp_path), source)

    assert result.schema_version == "v2"
    assert result.accounts == ["NL11RABO0000000001"]
    output = tmp_path / "transacties#NL11RABO0000000001.csv"
    assert output.read_text(encoding="utf-8").startswith('" ","2017-03-01"," ","25,50"')


def test_forced_version_overrides_detection(tmp_path, v3_export):
    result, diagnostics = final_result(ConversionPipeline(version="v1", output_dir=tmp_path), v3_export)

    assert result.schema_version == "v1"
    assert result.line_count == 3
    assert result.invalid_count == 3
    # The header row is read as data; its "IBAN/BBAN" key is not a valid file name.
    assert result.write_failures == 1
    assert len(diagnostics) == 4


def test_invalid_lines_warn_but_still_convert(tmp_path):
    source = tmp_path / "bad.csv"
    source.write_text("\n".join([V3_HEADER, '"NL33RABO0300000003","EUR","x"', "garbage"]) + "\n",
                      encoding="utf-8")

    result, diagnostics = final_result(ConversionPipeline(output_dir=tmp_path), source)

    assert result.success
    assert result.invalid_count == 2
    assert diagnostics[0].startswith("line 2: ")
    assert result.accounts == ["NL33RABO0300000003", ""]
    assert (tmp_path / "bad#.csv").read_text(encoding="utf-8") == '" "," "," "," "," "," "\n'


def test_unreadable_file_fails_only_that_file(tmp_path, v3_export):
    missing = tmp_path / "missing.csv"

    results = ConversionPipeline(output_dir=tmp_path).run([missing, v3_export])

    assert [r.success for r in results] == [False, True]
    assert results[0].error
    assert results[1].accounts == ["NL33RABO0300000003"]


def test_write_failures_are_surfaced(tmp_path, v3_export):
    result, diagnostics = final_result(ConversionPipeline(output_dir=tmp_path / "nope"), v3_export)

    assert result.success
    assert result.write_failures == 2
    assert all("Failed to write" in message for message in diagnostics)


def test_empty_file_produces_empty_result(tmp_path):
    source = tmp_path / "empty.csv"
    source.write_text("", encoding="utf-8")

    result, _ = final_result(ConversionPipeline(output_dir=tmp_path), source)

    assert result.success
    assert result.accounts == []
    assert result.schema_version == "v3"


def test_v1_first_row_with_empty_rentedatum_is_kept(tmp_path):
    source = tmp_path / "m.txt"
    rows = [v1_line(rentedatum="", omschr1="first"), v1_line(code="C", amount="5.00", omschr1="second")]
    source.write_text("\n".join(rows) + "\n", encoding="utf-8")

    result, _ = final_result(ConversionPipeline(output_dir=tmp_path), source)

    lines = (tmp_path / "m#NL00RABO0123456789.txt").read_text(encoding="utf-8").splitlines()
    assert result.schema_version == "v1"
    assert result.line_count == 2
    assert [line.split(",")[2] for line in lines] == ['"100,00"', '" "']
    assert lines[0].endswith('"[NL99X] first"')


def test_form_feed_inside_a_field_does_not_split_the_record(tmp_path):
    source = tmp_path / "m.txt"
    source.write_text(v1_line(omschr1="sec\x0cond") + "\n", encoding="utf-8")

    result, _ = final_result(ConversionPipeline(version="v1", output_dir=tmp_path), source)

    assert result.line_count == 1
    assert result.accounts == ["NL00RABO0123456789"]
    assert sorted(p.name for p in tmp_path.iterdir()) == ["m#NL00RABO0123456789.txt", "m.txt"]


def test_diagnostics_use_physical_line_numbers(tmp_path):
    source = tmp_path / "bad.csv"
    source.write_text("\n".join([V3_HEADER, "", v3_line(), "", '"NL33RABO0300000003","EUR"']) + "\n",
                      encoding="utf-8")

    result, diagnostics = final_result(ConversionPipeline(output_dir=tmp_path), source)

    assert result.line_count == 2
    assert len(diagnostics) == 1
    assert diagnostics[0].startswith("line 5: ")
