"""Watchdog based watch primitive feeding changed paths to the change loop."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence, Tuple, Type

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from ...core.exceptions import WatchError
from ...core.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class WatchTarget:
    """A directory scheduled on the observer"""
    directory: str
    recursive: bool


@dataclass(frozen=True)
class WatchedPath:
    """An entry of the watch set, made absolute"""
    path: str
    is_dir: bool
    is_file: bool = False

    def covers(self, candidate: str) -> bool:
        if self.is_dir:
            return candidate == self.path or candidate.startswith(self.path + os.sep)
        if self.is_file:
            # serverless.yml~ and other editor artifacts are not the file
            return candidate == self.path
        # Handler prefixes without extension (src/index -> src/index.js)
        return candidate.startswith(self.path)


def absolutize(paths: Iterable[str], base_dir: Optional[Path] = None) -> List[WatchedPath]:
    base = str(base_dir) if base_dir else os.getcwd()
    watched = []
    for raw in paths:
        expanded = os.path.expanduser(raw)
        if not os.path.isabs(expanded):
            expanded = os.path.join(base, expanded)
        path = os.path.normpath(expanded)
        watched.append(
            WatchedPath(path=path, is_dir=os.path.isdir(path), is_file=os.path.isfile(path))
        )
    return watched


def plan_watches(watched: Sequence[WatchedPath]) -> List[WatchTarget]:
    """
    Directories to schedule for a watch set.

    Directories are watched recursively; files and handler prefixes through
    their parent, non-recursively. Entries already covered by a recursive
    watch on an ancestor are dropped.
    """
    wanted = {}
    for entry in watched:
        directory = entry.path if entry.is_dir else os.path.dirname(entry.path)
        if not os.path.isdir(directory):
            logger.warning(f"Not watching {entry.path}: {directory} does not exist")
            continue
        wanted[directory] = wanted.get(directory, False) or entry.is_dir

    plan: List[WatchTarget] = []
    recursive_roots: List[str] = []
    for directory in sorted(wanted, key=lambda d: (len(d), d)):
        if any(directory == root or directory.startswith(root.rstrip(os.sep) + os.sep)
               for root in recursive_roots):
            continue
        plan.append(WatchTarget(directory=directory, recursive=wanted[directory]))
        if wanted[directory]:
            recursive_roots.append(directory)
    return plan


class ChangeEventHandler(FileSystemEventHandler):
    def __init__(self, watched: Sequence[WatchedPath], sink: Callable[[str], None]):
        super().__init__()
        self.watched = tuple(watched)
        self.sink = sink

    def _maybe_enqueue(self, raw_path) -> None:
        path = os.path.normpath(os.fsdecode(raw_path))
        if any(entry.covers(path) for entry in self.watched):
            self.sink(path)

    def on_modified(self, event):
        if not event.is_directory:
            self._maybe_enqueue(event.src_path)

    def on_moved(self, event):
        # editors that save atomically rename a temp file over the original
        if not event.is_directory:
            self._maybe_enqueue(event.dest_path)


def create_observer(use_polling: bool, observer_cls: Type[Observer] = Observer) -> Observer:
    """Create a watchdog observer based on configuration."""
    if use_polling:
        from watchdog.observers.polling import PollingObserver

        logger.info("Using polling observer for filesystem events")
        return PollingObserver()
    return observer_cls()


class ChangeObserver:
    """Owns the watchdog observer of one watch session"""

    def __init__(
        self,
        watch_set: Sequence[str],
        sink: Callable[[str], None],
        base_dir: Optional[Path] = None,
        use_polling: bool = False,
    ):
        self.watched = absolutize(watch_set, base_dir)
        self.plan: Tuple[WatchTarget, ...] = tuple(plan_watches(self.watched))
        self.handler = ChangeEventHandler(self.watched, sink)
        self.use_polling = use_polling
        self._observer: Optional[Observer] = None

    def start(self) -> None:
        if not self.plan:
            raise WatchError("Nothing to watch: none of the watched paths exist")

        obs = create_observer(self.use_polling)
        try:
            for target in self.plan:
                obs.schedule(self.handler, target.directory, recursive=target.recursive)
                logger.debug(
                    f"Watching {target.directory}"
                    + (" (recursive)" if target.recursive else "")
                )
            obs.start()
        except OSError as e:
            raise WatchError(f"Failed to start watching: {e}") from e
        self._observer = obs

    def stop(self) -> None:
        if self._observer is None:
            return
        self._observer.stop()
        self._observer.join()
        self._observer = None
