"""Batch sampling of naturally terminated sequences from a compiled graph.

One stepper pinned at the corpus start sentinel is driven repeatedly with
step_until_end_state(). A drive is accepted when it reaches a dead end by
producing the corpus end sentinel; timeouts and drives cut short by
minimum-length exhaustion are discarded and retried, up to max_attempts
drives in total.
"""

import logging

import numpy as np

from markovgen.config.settings import GeneratorConfig
from markovgen.graph.types import Graph
from markovgen.graph.validation import reachable_from
from markovgen.reproducibility.seed import make_rng
from markovgen.stepper.stepper import GraphStepper
from markovgen.stepper.types import Outcome

log = logging.getLogger(__name__)


def sample_sequences(
    graph: Graph,
    config: GeneratorConfig | None = None,
    rng: np.random.Generator | None = None,
) -> list[str]:
    """Sample up to config.sampling.count sequences from the graph.

    Args:
        graph: Graph compiled with the same corpus sentinels as config.
        config: Corpus sentinels and sampling parameters.
        rng: Random source. Defaults to a Generator seeded with config.seed
            (unseeded when config.seed is None).

    Returns:
        Sampled sequences without sentinels, in generation order. Shorter
        than the requested count only if max_attempts ran out.

    Raises:
        InvalidParameterError: If the start sentinel is not in the graph.
    """
    config = config or GeneratorConfig()
    sampling = config.sampling
    end_symbol = config.corpus.end_symbol
    if rng is None:
        rng = make_rng(config.seed)

    stepper = GraphStepper(graph, config.stepper_config(), rng)

    end_index = graph.find(end_symbol)
    if end_index is None or end_index not in reachable_from(graph, stepper.position):
        log.warning(
            "End symbol %r is not reachable from the start symbol; "
            "no sample can terminate naturally",
            end_symbol,
        )

    samples: list[str] = []
    outcomes = {outcome: 0 for outcome in Outcome}
    discarded = 0
    attempts = 0
    while len(samples) < sampling.count and attempts < sampling.max_attempts:
        attempts += 1
        out = stepper.step_until_end_state(sampling.max_length)
        outcomes[out.outcome] += 1
        if out.outcome is Outcome.REACHED and out.symbols and out.symbols[-1] == end_symbol:
            samples.append("".join(str(s) for s in out.symbols[:-1]))
        else:
            discarded += 1

    log.info(
        "Sampled %d/%d sequences in %d drives (%d discarded, %d timeouts)",
        len(samples),
        sampling.count,
        attempts,
        discarded,
        outcomes[Outcome.TIMEOUT],
    )
    if len(samples) < sampling.count:
        log.warning(
            "Gave up after %d drives with %d of %d samples; consider raising "
            "max_length or lowering min_length",
            attempts,
            len(samples),
            sampling.count,
        )
    return samples
