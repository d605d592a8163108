"""Tests for digitizer.core.export module."""

from datetime import date

from digitizer.core.export import export_csv, export_filename
from digitizer.core.registry import DEFAULT_CONFIGS
from digitizer.pydantic_models import ColumnDefinition, DocumentType, ExtractedItem


class TestExportCsv:
    """Tests for export_csv()."""

    def test_quotes_are_doubled(self):
        columns = [ColumnDefinition(key="a", label="a"), ColumnDefinition(key="b", label="b")]
        items = [ExtractedItem(fields={"a": "1", "b": 'x"y'})]

        assert export_csv(items, columns) == b'a,b\n"1","x""y"'

    def test_bom_export(self):
        items = [
            ExtractedItem(fields={"partNumber": "100", "description": "Bolt", "quantity": "5", "unit": "ea"}),
            ExtractedItem(fields={"partNumber": "101", "description": "Nut, M6", "quantity": "10", "notes": "zinc"}),
        ]
        content = export_csv(items, DEFAULT_CONFIGS[DocumentType.BOM].columns)

        assert content.decode("utf-8") == (
            "Part #,Description,Qty,Unit,Notes\n"
            '"100","Bolt","5","ea",""\n'
            '"101","Nut, M6","10","","zinc"'
        )

    def test_header_label_with_comma_is_quoted(self):
        columns = [ColumnDefinition(key="a", label="Qty, boxes")]
        assert export_csv([], columns) == b'"Qty, boxes"'

    def test_columns_control_order_and_extras_are_dropped(self):
        columns = [ColumnDefinition(key="b", label="B"), ColumnDefinition(key="a", label="A")]
        items = [ExtractedItem(fields={"a": "1", "b": "2", "extra": "3"})]
        assert export_csv(items, columns) == b'B,A\n"2","1"'

    def test_newlines_inside_values_stay_quoted(self):
        columns = [ColumnDefinition(key="a", label="A")]
        items = [ExtractedItem(fields={"a": "line1\nline2"})]
        assert export_csv(items, columns) == b'A\n"line1\nline2"'

    def test_unicode(self):
        columns = [ColumnDefinition(key="a", label="Désignation")]
        items = [ExtractedItem(fields={"a": "Écrou Ø6"})]
        assert export_csv(items, columns).decode("utf-8") == 'Désignation\n"Écrou Ø6"'

    def test_deterministic(self):
        columns = DEFAULT_CONFIGS[DocumentType.INVOICE].columns
        items = [ExtractedItem(fields={"description": "Service", "total": "12.00"})]
        assert export_csv(items, columns) == export_csv(items, columns)


class TestExportFilename:
    """Tests for export_filename()."""

    def test_pattern(self):
        assert export_filename(DocumentType.PO, on=date(2024, 3, 9)) == "PO_Export_2024-03-09.csv"

    def test_accepts_string_type(self):
        assert export_filename("INVOICE", on=date(2025, 1, 1)) == "INVOICE_Export_2025-01-01.csv"

    def test_defaults_to_today(self):
        assert export_filename(DocumentType.BOM) == f"BOM_Export_{date.today().isoformat()}.csv"
