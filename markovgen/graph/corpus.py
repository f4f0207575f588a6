"""Training corpus loading and compilation into a graph."""

import logging
from pathlib import Path

from markovgen.config.settings import CorpusConfig
from markovgen.graph.constructor import build_graph
from markovgen.graph.types import Graph

log = logging.getLogger(__name__)


def load_records(path: Path | str, skip_blank_records: bool = False) -> list[str]:
    """Read newline-separated training records from a UTF-8 text file.

    Records are split on "\n" only, with one trailing "\r" removed from each.
    Other control and separator characters (form feed, U+2028, ...) stay part
    of the record. A final newline does not start an extra empty record.

    Args:
        path: Input file.
        skip_blank_records: Drop empty lines instead of registering them as
            empty records.

    Returns:
        Records in file order.
    """
    # Decoded from bytes: text-mode reads would translate lone "\r" to "\n"
    text = Path(path).read_bytes().decode("utf-8")
    records = text.split("\n")
    if records[-1] == "":
        records.pop()
    records = [r[:-1] if r.endswith("\r") else r for r in records]
    if skip_blank_records:
        records = [r for r in records if r]
    log.info("Loaded %d records from %s", len(records), path)
    return records


def compile_corpus(path: Path | str, config: CorpusConfig | None = None) -> Graph:
    """Load a corpus file and build its graph with the configured sentinels."""
    config = config or CorpusConfig()
    records = load_records(path, skip_blank_records=config.skip_blank_records)
    return build_graph(records, config.start_symbol, config.end_symbol)
