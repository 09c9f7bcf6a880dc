"""Run orchestration: walk the input tree and fan each file out to the detectors.

Each file is decoded once, then one task per enabled detector is submitted
to a thread pool. All tasks of a file are joined before the next file is
read. A task never raises: every failure is logged with its file and
detector and returned as a failed TaskResult.
"""

import enum
import time
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from tqdm import tqdm

from .detector import DetectorKind, TextDetector
from .errors import AnnotationError, DetectionError, ImageDecodeError, PathError
from .metrics import Stopwatch
from .paths import check_output_root, ensure_output_root, resolve
from .renderer import render_polygons, write_annotated
from .utils import ImageArray, ImagePath, load_image, setup_logger
from .walker import ImageFile, iter_image_files

logger = setup_logger(__name__)


class CoordinatorState(enum.Enum):
    IDLE = "idle"
    WALKING = "walking"
    DISPATCHING = "dispatching"
    JOINING = "joining"
    DONE = "done"
    FATAL = "fatal"


@dataclass(frozen=True)
class Task:
    """One (file, detector) unit of work."""

    image_file: ImageFile
    kind: DetectorKind
    output_root: Path


@dataclass
class TaskResult:
    task: Task
    output: Optional[Path] = None
    polygons: int = 0
    error: Optional[Exception] = None
    elapsed: float = 0.0

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class RunSummary:
    """Outcome of a complete traversal."""

    detector_kinds: List[DetectorKind] = field(default_factory=list)
    files_seen: int = 0
    files_skipped: int = 0
    results: List[TaskResult] = field(default_factory=list)
    elapsed: float = 0.0

    def kinds(self) -> List[DetectorKind]:
        return list(self.detector_kinds)

    def results_for(self, kind: DetectorKind) -> List[TaskResult]:
        return [r for r in self.results if r.task.kind is kind]

    def succeeded(self, kind: Optional[DetectorKind] = None) -> int:
        results = self.results if kind is None else self.results_for(kind)
        return sum(1 for r in results if r.ok)

    def failed(self, kind: Optional[DetectorKind] = None) -> int:
        results = self.results if kind is None else self.results_for(kind)
        return sum(1 for r in results if not r.ok)


class TaskCoordinator:
    """Drives one annotation run over an input tree.

    Args:
        input_root: Directory to scan
        detectors: Enabled detectors keyed by kind; may be empty
        output_roots: Output root per enabled kind
        progress: Show a tqdm progress bar over the files
    """

    def __init__(self,
                 input_root: ImagePath,
                 detectors: Mapping[DetectorKind, TextDetector],
                 output_roots: Mapping[DetectorKind, Path],
                 progress: bool = False) -> None:
        missing = [kind.name for kind in detectors if kind not in output_roots]
        if missing:
            raise ValueError(f"No output root given for: {', '.join(missing)}")

        self.input_root = Path(input_root)
        self.detectors: Dict[DetectorKind, TextDetector] = dict(detectors)
        self.output_roots: Dict[DetectorKind, Path] = {k: Path(output_roots[k]) for k in self.detectors}
        self.progress = progress
        self.state = CoordinatorState.IDLE

    def run(self) -> RunSummary:
        """Process every image under the input root.

        Returns:
            Summary of all task outcomes

        Raises:
            PathError: If the input root is invalid, an output root would
                overwrite it or an output root cannot be created. Nothing has
                been processed in that case.
        """
        try:
            files = iter_image_files(self.input_root, exclude=self.output_roots.values())
            for root in self.output_roots.values():
                check_output_root(self.input_root, root)
            for root in self.output_roots.values():
                ensure_output_root(root)
        except PathError:
            self.state = CoordinatorState.FATAL
            raise

        self._prepare_detectors()
        summary = RunSummary(detector_kinds=list(self.detectors))

        self.state = CoordinatorState.WALKING
        workers = max(1, len(self.detectors))
        with Stopwatch("traversal") as stopwatch, \
                ThreadPoolExecutor(max_workers=workers, thread_name_prefix="textoutline") as executor:
            files_iter = tqdm(files, desc="Annotating images", unit="image", disable=not self.progress)
            for image_file in files_iter:
                summary.files_seen += 1
                if self.detectors:
                    self._process_file(image_file, executor, summary)
                if self.progress:
                    files_iter.set_postfix({k.name: summary.succeeded(k) for k in self.detectors})

        summary.elapsed = stopwatch.elapsed
        self.state = CoordinatorState.DONE
        logger.info(f"Completed: {summary.files_seen} image(s) seen, "
                    f"{summary.succeeded()} annotated, {summary.failed()} task failure(s), "
                    f"{summary.files_skipped} unreadable")
        return summary

    def _prepare_detectors(self) -> None:
        if not self.detectors:
            logger.warning("No detector configured: pass --eastModel and/or --dbModel to annotate images")
            return

        for kind, detector in self.detectors.items():
            logger.info(f"{kind.name} output root: {self.output_roots[kind]}")
            try:
                detector.load()
            except DetectionError as e:
                # Every task of this detector will report the same error
                logger.error(f"{kind.name} detector unavailable: {e}")

    def _process_file(self, image_file: ImageFile, executor: ThreadPoolExecutor, summary: RunSummary) -> None:
        logger.debug(f"Processing {image_file.relative_path}")
        try:
            image = load_image(image_file.path)
        except ImageDecodeError as e:
            logger.error(f"Skipping {image_file.path}: {e}")
            summary.files_skipped += 1
            return

        self.state = CoordinatorState.DISPATCHING
        futures = []
        for kind in self.detectors:
            task = Task(image_file=image_file, kind=kind, output_root=self.output_roots[kind])
            futures.append(executor.submit(self._run_task, task, image.copy()))

        self.state = CoordinatorState.JOINING
        wait(futures)
        summary.results.extend(f.result() for f in futures)
        self.state = CoordinatorState.WALKING

    def _run_task(self, task: Task, image: ImageArray) -> TaskResult:
        start = time.perf_counter()
        kind = task.kind.name
        path = task.image_file.path
        try:
            target = resolve(task.image_file, task.output_root)
            polygons = self.detectors[task.kind].detect(image)
            annotated = render_polygons(image, polygons)
            write_annotated(annotated, target.path)
        except AnnotationError as e:
            logger.error(f"{kind} failed for {path}: {type(e).__name__}: {e}")
            return TaskResult(task=task, error=e, elapsed=time.perf_counter() - start)
        except Exception as e:
            logger.exception(f"{kind} failed unexpectedly for {path}")
            return TaskResult(task=task, error=e, elapsed=time.perf_counter() - start)

        elapsed = time.perf_counter() - start
        logger.debug(f"{kind}: {len(polygons)} region(s) in {task.image_file.relative_path} "
                     f"-> {target.path} ({elapsed:.2f}s)")
        return TaskResult(task=task, output=target.path, polygons=len(polygons), elapsed=elapsed)
