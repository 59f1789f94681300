#!/usr/bin/env python3
"""
CMSIS-SVD Register Map Demo.

Converts a tiny device description into the linked Peripherals, Registers and
Fields sheets and prints how fields reference their registers.
"""

import sys
import tempfile
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from openpyxl import load_workbook

from xml2xlsx import ConversionMode, classify, convert_svd

DEVICE = """<?xml version="1.0" encoding="utf-8"?>
<device schemaVersion="1.3">
  <name>DEMO32</name>
  <peripherals>
    <peripheral>
      <name>GPIOA</name>
      <description>General-purpose I/Os</description>
      <baseAddress>0x40020000</baseAddress>
      <registers>
        <register>
          <name>MODER</name>
          <addressOffset>0x00</addressOffset>
          <resetValue>0xA8000000</resetValue>
          <fields>
            <field><name>MODER1</name><bitOffset>2</bitOffset><bitWidth>2</bitWidth></field>
            <field><name>MODER0</name><bitOffset>0</bitOffset><bitWidth>2</bitWidth></field>
          </fields>
        </register>
        <register>
          <name>IDR</name>
          <addressOffset>0x10</addressOffset>
          <access>read-only</access>
        </register>
      </registers>
    </peripheral>
  </peripherals>
</device>
"""


def main() -> None:
    print("🔌 CMSIS-SVD REGISTER MAP DEMO")
    print("=" * 45)

    with tempfile.TemporaryDirectory() as tmp:
        source = Path(tmp) / "demo32.xml"
        source.write_text(DEVICE, encoding="utf-8")
        mode = classify(source)
        print(f"🔍 Detected mode: {mode.name}")
        assert mode is ConversionMode.SVD

        output = Path(tmp) / "demo32.xlsx"
        result = convert_svd(source, output)
        for sheet, rows in result.sheets.items():
            print(f"   {sheet}: {rows} rows")

        print("\n🔗 Field references")
        print("-" * 30)
        fields = load_workbook(output)["Fields"]
        for row in fields.iter_rows(min_row=2, values_only=True):
            field_id, register_id, register_name, peripheral_id, peripheral_name, name = row[:6]
            print(f"   {field_id} {name} -> {register_id} {register_name} "
                  f"-> {peripheral_id} {peripheral_name}")

    print("\n🎉 Done!")


if __name__ == "__main__":
    main()
