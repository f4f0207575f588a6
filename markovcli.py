#!/usr/bin/env python3
"""Command-line entry point for compiling and sampling Markov chain graphs.

Usage:
    markovcli compile names.txt
    markovcli compile names.txt names.graph.npz --config config.json
    markovcli sample names.graph.npz 10 --min-length 3 --max-length 64 --seed 42
"""

import argparse
import logging
import sys
import time
from collections.abc import Generator
from contextlib import contextmanager
from dataclasses import replace
from pathlib import Path

from dacite import DaciteError

from markovgen.config import config_hash, load_config
from markovgen.graph import GraphFormatError, compile_corpus, load_graph, save_graph
from markovgen.stepper import GraphStepperError, InvalidParameterError, sample_sequences

log = logging.getLogger(__name__)

GRAPH_SUFFIX = ".graph.npz"


@contextmanager
def stage_timer(name: str) -> Generator[None, None, None]:
    """Context manager that logs stage start and elapsed time."""
    log.info("Starting: %s", name)
    t0 = time.monotonic()
    yield
    log.info("Completed: %s in %.3fs", name, time.monotonic() - t0)


def default_output_path(input_path: Path) -> Path:
    """names.txt -> names.graph.npz, next to the input."""
    return input_path.with_name(input_path.stem + GRAPH_SUFFIX)


def run_compile(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    input_path = Path(args.input_path)
    output_path = Path(args.output_path) if args.output_path else default_output_path(input_path)
    log.info("Config hash: %s", config_hash(config))

    with stage_timer("Graph Construction"):
        graph = compile_corpus(input_path, config.corpus)

    with stage_timer("Graph Write"):
        save_graph(graph, output_path)

    print(f"Compiled {len(graph)} vertices, {graph.edge_count} edges -> {output_path}")
    return 0


def run_sample(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    overrides = {
        key: value
        for key, value in (
            ("count", args.count),
            ("min_length", args.min_length),
            ("max_length", args.max_length),
        )
        if value is not None
    }
    # Dataclass validation rejects count 0 and other invalid overrides
    config = replace(
        config,
        sampling=replace(config.sampling, **overrides),
        seed=args.seed if args.seed is not None else config.seed,
    )
    log.info("Config hash: %s", config_hash(config))

    with stage_timer("Graph Load"):
        graph = load_graph(args.graph_path)

    with stage_timer("Sampling"):
        try:
            samples = sample_sequences(graph, config)
        except InvalidParameterError:
            print(
                "Invalid graph file provided. Start symbol is not present.",
                file=sys.stderr,
            )
            return 1

    for sample in samples:
        print(sample)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="markovcli",
        description="Build Markov chain graphs from sequence datasets and sample from them.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable DEBUG-level logging",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    compile_parser = subparsers.add_parser(
        "compile", help="Build a markov chain graph from a dataset of sequences."
    )
    compile_parser.add_argument(
        "input_path", help="Path to an input file with sequences separated by newlines."
    )
    compile_parser.add_argument(
        "output_path", nargs="?", default=None, help=f"Defaults to [input_name]{GRAPH_SUFFIX}"
    )
    compile_parser.add_argument("--config", default=None, help="Path to generator config JSON file")
    compile_parser.set_defaults(handler=run_compile)

    sample_parser = subparsers.add_parser(
        "sample", help="Sample sequences from a previously compiled graph."
    )
    sample_parser.add_argument("graph_path", help="Path to a previously compiled graph.")
    sample_parser.add_argument(
        "count", nargs="?", type=int, default=None, help="The number of sequences to sample."
    )
    sample_parser.add_argument(
        "--min-length", type=int, default=None, help="Minimum sample length (0 disables)."
    )
    sample_parser.add_argument(
        "--max-length", type=int, default=None, help="Maximum symbols generated per sequence."
    )
    sample_parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible output")
    sample_parser.add_argument("--config", default=None, help="Path to generator config JSON file")
    sample_parser.set_defaults(handler=run_sample)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        return args.handler(args)
    except FileNotFoundError as exc:
        print(f"Error: file not found: {exc.filename}", file=sys.stderr)
        return 1
    except (GraphFormatError, GraphStepperError, DaciteError, ValueError) as exc:
        log.exception("Command failed")
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
