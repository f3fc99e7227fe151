import time
from typing import Callable, Optional

import structlog

from codedoc.engine import HighlightEngine
from codedoc.errors import FetchError, SubmissionError
from codedoc.sinks import EditSink
from codedoc.sources import DocumentSource

logger = structlog.get_logger(__name__)


def run_once(source: DocumentSource, sink: EditSink, engine: HighlightEngine) -> int:
    """Runs one fetch -> highlight -> submit pass. Returns the number of requests submitted."""
    document = source.fetch()
    reqs = engine.process(document)
    if not reqs:
        logger.debug("Nothing to submit")
        return 0
    sink.submit(reqs)
    return len(reqs)


def run(
    source: DocumentSource,
    sink: EditSink,
    engine: HighlightEngine,
    interval: float = 2.0,
    iterations: Optional[int] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """
    Polls the document, sleeping `interval` seconds between passes. Fetch and
    submission failures are logged and the pass is retried on the next tick.
    Runs forever unless `iterations` is given. Returns the number of passes
    that submitted successfully.
    """
    completed = 0
    count = 0
    while iterations is None or count < iterations:
        count += 1
        try:
            submitted = run_once(source, sink, engine)
            completed += 1
            logger.info("Pass finished", iteration=count, requests=submitted)
        except FetchError as e:
            logger.error("Fetch failed", iteration=count, error=str(e))
        except SubmissionError as e:
            logger.error("Submission failed", iteration=count, error=str(e))

        if iterations is None or count < iterations:
            sleep(interval)
    return completed
