"""Generic flattening conversion.

A producer thread detects the repeating element, rewinds the source and
streams flattened records into a bounded stream. The calling thread samples
the leading records to freeze the column set, then writes every record into a
single sheet.
"""

import itertools
import time
from pathlib import Path
from typing import BinaryIO, Callable, List, Optional, Tuple, Union

from xml2xlsx.flatten import Record, RepeatingElementDetector, StreamingFlattener
from xml2xlsx.shared.config import ConversionConfig
from xml2xlsx.shared.errors import NoColumnsError
from xml2xlsx.shared.logging import ProgressReporter, get_logger, new_correlation_id
from xml2xlsx.shared.result import ConversionMode, ConversionResult
from xml2xlsx.tokenization import InputType, open_source, rewind
from xml2xlsx.writer import OpenpyxlBackend, SheetWriter, SpreadsheetBackend

from .streams import ErrorChannel, RecordStream, start_producer

BackendFactory = Callable[[ConversionConfig], SpreadsheetBackend]


def default_backend(config: ConversionConfig) -> SpreadsheetBackend:
    return OpenpyxlBackend(header_fill=config.header_fill_rgb)


def sample_headers(records: List[Record]) -> List[str]:
    """Sorted union of the keys of ``records``."""
    return sorted({key for record in records for key in record})


class GenericProducer:
    """Two-pass parser feeding one record stream."""

    def __init__(
        self,
        source: BinaryIO,
        stream: RecordStream,
        errors: ErrorChannel,
        config: ConversionConfig
    ) -> None:
        self.source = source
        self.stream = stream
        self.errors = errors
        self.config = config
        self.repeating_element: Optional[str] = None

    def run(self) -> None:
        try:
            detector = RepeatingElementDetector(
                self.config.buffer_size, correlation_id=self.config.correlation_id
            )
            self.repeating_element = detector.detect(self.source)
            rewind(self.source)
            flattener = StreamingFlattener(
                self.repeating_element,
                self.config.buffer_size,
                self.config.correlation_id,
            )
            for record in flattener.records(self.source):
                self.stream.put(record)
        except Exception as e:
            self.errors.report(e)
        finally:
            self.stream.close()


class GenericConverter:
    """Convert any XML document with a repeating element into one sheet."""

    def __init__(
        self,
        config: Optional[ConversionConfig] = None,
        backend_factory: BackendFactory = default_backend
    ) -> None:
        self.config = config or ConversionConfig()
        self.backend_factory = backend_factory

    def convert(
        self, input_data: InputType, output_path: Union[str, Path]
    ) -> ConversionResult:
        """Convert ``input_data`` and save the workbook to ``output_path``.

        Raises:
            ConversionError: On any input, structural, detection or writer failure
        """
        start_time = time.time()
        config = self.config
        if config.correlation_id is None:
            config = config.override(correlation_id=new_correlation_id())
        logger = get_logger(__name__, config.correlation_id, "generic_converter")
        logger.info("Using generic flattening converter", extra={"output": str(output_path)})

        with open_source(input_data) as source:
            stream = RecordStream(config.queue_size, "rows")
            errors = ErrorChannel(config.correlation_id)
            producer = GenericProducer(source, stream, errors, config)
            thread = start_producer(producer.run, "xml2xlsx-generic-parser")
            try:
                headers, count = self._write(stream, errors, output_path, config)
            finally:
                stream.drain()
                thread.join()

        sheet_name = config.generic_sheet_name
        result = ConversionResult(
            output_path=Path(output_path),
            mode=ConversionMode.GENERIC,
            sheets={sheet_name: count},
            headers={sheet_name: headers},
            repeating_element=producer.repeating_element,
            processing_time_ms=(time.time() - start_time) * 1000,
            correlation_id=config.correlation_id,
        )
        logger.info(
            f"Data writing completed: {count} rows",
            extra={"rows": count, "processing_time_ms": result.processing_time_ms},
        )
        return result

    def _write(
        self,
        stream: RecordStream,
        errors: ErrorChannel,
        output_path: Union[str, Path],
        config: ConversionConfig
    ) -> Tuple[List[str], int]:
        logger = get_logger(__name__, config.correlation_id, "generic_converter")
        sample = stream.take(config.header_sample_size)
        headers = sample_headers(sample)
        if not headers:
            # A failed parse closes the stream early; report that failure
            errors.raise_if_set()
            raise NoColumnsError("No data columns found")
        logger.info(f"Detected {len(headers)} columns: {headers}")

        sheet_name = config.generic_sheet_name
        progress = ProgressReporter(logger, "rows", config.progress_interval)
        backend = self.backend_factory(config)
        with SheetWriter(
            backend,
            output_path,
            batch_size=config.batch_size,
            column_width=config.column_width,
            correlation_id=config.correlation_id,
        ) as writer:
            writer.create_sheet(sheet_name, headers)
            for record in itertools.chain(sample, stream):
                writer.write_row(sheet_name, record)
                progress.update()
            errors.raise_if_set()
            writer.close()
        return headers, progress.count
