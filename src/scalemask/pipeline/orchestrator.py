"""Concurrent batch processing of target images.

Fans a list of image paths out over a thread pool, one transform per
image. Images are independent: a failure is logged and recorded for that
path only, and the rest of the batch carries on.
"""

import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Dict, Iterable, Optional

from scalemask.calibration.types import CalibrationTables
from scalemask.contracts import ContractViolation
from scalemask.errors import ImageIOError, MissingArguments
from scalemask.pipeline.transformer import ImageTransformer, TransformResult

__all__ = ['BatchOrchestrator']

logger = logging.getLogger(__name__)


class BatchOrchestrator:
    """Run the image transformer over a batch of target images.

    **Concurrency:**

    Up to ``config.parallel.image_workers`` images are transformed at the
    same time. All of them classify rows on the transformer's single pool of
    ``config.parallel.row_workers`` threads, so a run never holds more than
    ``image_workers + row_workers`` worker threads. The calibration tables
    are read-only and shared by reference between all of them.

    **Ordering:**

    None. Results are collected as they complete.

    **Failures:**

    Decode/encode errors, contract violations and unexpected exceptions
    are logged against the offending path, which maps to ``None`` in the
    returned dict. Nothing is retried and nothing is re-raised.

    Example usage::

        orch = BatchOrchestrator(config, tables)
        results = orch.run(["a.png", "b.png"])
        results["a.png"].output_path   # a_alfa.png
    """

    def __init__(self, config, tables: CalibrationTables,
                 transformer: ImageTransformer = None):
        """Initialize orchestrator.

        Parameters
        ----------
        config : InternalConfig
            Fully validated runtime configuration.
        tables : CalibrationTables
            Contract-checked calibration shared by all images.
        transformer : ImageTransformer, optional
            Created from config and tables if not provided, in which case
            its row pool is shut down at the end of every run.
        """
        self.config = config
        self.tables = tables
        self._owns_transformer = transformer is None
        self.transformer = transformer if transformer is not None else ImageTransformer(config, tables)
        self.max_workers = config.parallel.image_workers

    def run(self, image_paths: Iterable) -> Dict[str, Optional[TransformResult]]:
        """Transform every image concurrently.

        Duplicate paths are processed once since they would write the same
        output file.

        Parameters
        ----------
        image_paths : iterable of str or Path

        Returns
        -------
        dict
            ``{path: TransformResult}`` for successes, ``{path: None}`` for
            failures.

        Raises
        ------
        MissingArguments
            If ``image_paths`` is empty.
        """
        paths = list(dict.fromkeys(str(p) for p in image_paths))
        if not paths:
            raise MissingArguments()

        workers = min(self.max_workers, len(paths))
        logger.info("=" * 60)
        logger.info("Processing %d image(s) with %d worker(s)", len(paths), workers)
        logger.info("=" * 60)

        start = time.perf_counter()
        results = {}
        try:
            with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="image") as executor:
                futures = {executor.submit(self.transformer.transform, p): p for p in paths}
                for future in as_completed(futures):
                    path = futures[future]
                    results[path] = self._collect(path, future)
        finally:
            if self._owns_transformer:
                self.transformer.close()

        self._log_summary(results, time.perf_counter() - start)
        return results

    def _collect(self, path: str, future: Future) -> Optional[TransformResult]:
        """Unwrap one future, logging its outcome."""
        try:
            result = future.result()
        except ContractViolation as e:
            logger.critical("Pipeline contract violated while processing %s: %s", path, e)
            return None
        except ImageIOError as e:
            logger.error("Error processing image %s: %s", path, e)
            return None
        except Exception:
            logger.exception("Error processing image %s", path)
            return None

        logger.info("Processed %s in %d ms", Path(path).name, result.elapsed_ms)
        if result.gap_count:
            logger.warning(
                "%s: %d pixel(s) had no calibrated value and were left transparent",
                Path(path).name, result.gap_count
            )
        return result

    def _log_summary(self, results: Dict[str, Optional[TransformResult]], elapsed: float):
        failed = sum(1 for r in results.values() if r is None)
        logger.info("=" * 60)
        logger.info(
            "Batch finished: processed=%d, failed=%d, total=%d, runtime=%.1f s",
            len(results) - failed, failed, len(results), elapsed
        )
        logger.info("=" * 60)
