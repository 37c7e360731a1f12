import io
import math

from portfolio.data import (
    DEFAULT_PROPERTIES,
    PROPERTY_COLUMNS,
    PortfolioStore,
    count_invalid_rows,
    format_currency_0,
    format_percent,
    parse_property_csv,
    records_to_frame,
)


def test_parse_assigns_sequential_ids_and_skips_blank_lines(sample_csv):
    df = parse_property_csv(sample_csv)
    assert list(df.columns) == PROPERTY_COLUMNS
    assert df["id"].tolist() == [1, 2]
    assert df["address"].tolist() == ["1 River Rd", "2 Hill Ave"]
    assert df["value"].tolist() == [200000.0, 400000.0]
    assert df["monthly_rent"].tolist() == [1200.0, 2500.0]


def test_parse_maps_columns_by_position_not_header():
    data = b"id,rent,whatever\n17,500000,3000\n99,10,20\n"
    df = parse_property_csv(data)
    assert df["id"].tolist() == [1, 2]
    assert df["address"].tolist() == ["17", "99"]
    assert df["value"].tolist() == [500000.0, 10.0]
    assert df["monthly_rent"].tolist() == [3000.0, 20.0]


def test_parse_optional_columns_absent_are_nan(sample_csv):
    df = parse_property_csv(sample_csv)
    assert df["annual_appreciation_pct"].isna().all()
    assert df["operating_expense_pct"].isna().all()


def test_parse_optional_columns_present():
    data = "address,value,rent,appreciation,expenses\n5 Bay St,300000,1800,2.5,18\n"
    df = parse_property_csv(io.StringIO(data))
    assert df["annual_appreciation_pct"].tolist() == [2.5]
    assert df["operating_expense_pct"].tolist() == [18.0]


def test_parse_non_numeric_becomes_nan_and_row_is_kept():
    data = b"address,value,rent\nA St,lots,1000\nB St,150000,\n"
    df = parse_property_csv(data)
    assert len(df) == 2
    assert math.isnan(df["value"].iloc[0])
    assert math.isnan(df["monthly_rent"].iloc[1])
    assert count_invalid_rows(df) == 2


def test_parse_empty_file_gives_empty_frame():
    df = parse_property_csv(b"")
    assert df.empty
    assert list(df.columns) == PROPERTY_COLUMNS


def test_store_starts_with_defaults():
    store = PortfolioStore()
    assert store.source == "default"
    assert [r.id for r in store.records] == [1, 2, 3]
    assert [r.address for r in store.records] == [p["address"] for p in DEFAULT_PROPERTIES]


def test_store_upload_replaces_wholesale_then_reset_restores_defaults(sample_csv):
    store = PortfolioStore()
    result = store.load_csv(sample_csv, source_name="properties.csv")
    assert result.count == 2
    assert result.invalid_rows == 0
    assert result.message
    assert store.source == "upload"
    assert store.source_name == "properties.csv"
    assert [r.address for r in store.records] == ["1 River Rd", "2 Hill Ave"]

    store.reset()
    assert store.source == "default"
    assert store.source_name is None
    records = store.records
    assert [r.id for r in records] == [1, 2, 3]
    assert records[0].value == 250000.0
    assert records[2].operating_expense_pct == 22.0


def test_store_frame_is_a_copy():
    store = PortfolioStore()
    df = store.frame
    df.loc[0, "value"] = 1.0
    assert store.records[0].value == 250000.0


def test_format_helpers():
    assert format_currency_0(830000) == "$830,000"
    assert format_percent(7.0843) == "7.08%"
    assert format_currency_0(None) == "N/A"
    assert format_percent(float("inf")) == "inf%"


def test_records_and_frame_agree():
    store = PortfolioStore()
    rebuilt = records_to_frame(store.records)
    assert rebuilt.equals(store.frame)


def test_parse_header_after_leading_blank_line_is_discarded():
    df = parse_property_csv(b"\naddress,value,rent\nA St,100000,1000\n")
    assert df["id"].tolist() == [1]
    assert df["address"].tolist() == ["A St"]
    assert df["value"].tolist() == [100000.0]


def test_parse_keeps_literal_na_like_addresses():
    df = parse_property_csv(b"address,value,rent\nNA,100000,1000\nnull,200000,\n")
    assert df["address"].tolist() == ["NA", "null"]
    assert math.isnan(df["monthly_rent"].iloc[1])


def test_empty_store_is_still_truthy():
    store = PortfolioStore()
    store.load_csv(b"address,value,rent\n")
    assert len(store) == 0
    assert bool(store) is True
