#!/usr/bin/env python3
"""
Quick Start Guide for xml2xlsx.

Writes a small product catalogue, converts it to an Excel workbook with the
one-call API, then repeats the conversion with a custom configuration and an
in-memory backend to show what the converter sees.
"""

import io
import sys
import tempfile
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from xml2xlsx import ConversionConfig, GenericConverter, convert_file
from xml2xlsx.writer import MemoryBackend

CATALOGUE = """<?xml version="1.0" encoding="UTF-8"?>
<catalogue>
  <product><sku>A-100</sku><name>Widget</name><price>9.99</price></product>
  <product><sku>A-101</sku><name>Gadget</name><price>19.50</price><stock>12</stock></product>
  <product><sku>A-102</sku><name>Gizmo &amp; Co</name><price>4.25</price></product>
</catalogue>
"""


def quick_start_example(workdir: Path) -> None:
    """Convert a file with automatic mode detection."""

    print("🚀 QUICK START - xml2xlsx")
    print("=" * 45)

    print("\n📄 Step 1: Writing XML input")
    print("-" * 30)
    source = workdir / "catalogue.xml"
    source.write_text(CATALOGUE, encoding="utf-8")
    print(f"✅ Wrote {source}")

    print("\n📊 Step 2: Converting to Excel")
    print("-" * 30)
    result = convert_file(source)
    print(f"✅ Repeating element: <{result.repeating_element}>")
    for sheet, rows in result.sheets.items():
        print(f"   {sheet}: {rows} rows, columns {result.headers[sheet]}")
    print(f"   Saved to {result.output_path}")


def custom_configuration_example() -> None:
    """Run the generic converter against an in-memory backend."""

    print("\n⚙️  Step 3: Custom configuration")
    print("-" * 30)
    config = ConversionConfig.low_memory().override(
        batch_size=2, generic_sheet_name="Products"
    )
    backend = MemoryBackend()
    converter = GenericConverter(config, backend_factory=lambda _config: backend)
    converter.convert(io.BytesIO(CATALOGUE.encode("utf-8")), "products.xlsx")
    for row in backend.sheets["Products"].rows:
        print("   " + " | ".join(value or "-" for value in row))


def main() -> None:
    with tempfile.TemporaryDirectory() as tmp:
        quick_start_example(Path(tmp))
    custom_configuration_example()
    print("\n🎉 Done!")


if __name__ == "__main__":
    main()
