"""Concurrent discovery of Go source files beneath a set of roots.

One producer thread walks the directory trees and feeds a bounded queue;
the calling thread consumes paths and runs the per-file callback. A shared
event is the cancellation token: whichever side fails first sets it, and
the other side unwinds at its next check.
"""
import os
import queue
import threading
from pathlib import Path
from typing import Callable, Iterator, Optional, Sequence

from .errors import AnalysisCancelled, WalkError
from .parser import GO_SUFFIX
from ..config import get_config

# Vendored dependencies are never analyzed
VENDOR_DIR = 'vendor'

_DONE = object()


def _strip_sep(path: str) -> str:
    return path[:-len(os.sep)] if path.endswith(os.sep) else path


def iter_source_files(root: str | Path, excluding: Sequence[str] = (),
                      is_cancelled: Callable[[], bool] = lambda: False) -> Iterator[str]:
    """Yield every .go file beneath root in lexical order.

    Args:
        root: Directory (or single file) to traverse
        excluding: Absolute paths whose subtrees are pruned
        is_cancelled: Checked before every path is visited

    Raises:
        OSError: If the root or any directory beneath it cannot be read
        AnalysisCancelled: If is_cancelled() turns true mid-walk
    """
    excluded = {_strip_sep(str(ex)) for ex in excluding}
    root = str(root)
    is_dir = os.path.isdir(root)
    if not is_dir:
        # Raises for a missing root
        os.stat(root)

    # Explicit stack; popping reversed children keeps lexical pre-order
    stack = [(root, is_dir)]
    while stack:
        path, is_dir = stack.pop()
        if is_cancelled():
            raise AnalysisCancelled()
        if VENDOR_DIR in Path(path).parts:
            continue
        if _strip_sep(path) in excluded:
            continue
        if not is_dir:
            if path.endswith(GO_SUFFIX):
                yield path
            continue

        with os.scandir(path) as it:
            entries = sorted(it, key=lambda entry: entry.name)
        stack.extend(
            (entry.path, entry.is_dir(follow_symlinks=False)) for entry in reversed(entries)
        )


def run_on_files(files: Sequence[str], excluding: Sequence[str], fn: Callable[[str], object],
                 cancel: Optional[threading.Event] = None,
                 queue_size: Optional[int] = None,
                 poll_interval: Optional[float] = None) -> None:
    """Run fn on every .go file beneath the given roots.

    Args:
        files: Root paths, walked in order
        excluding: Absolute paths to prune
        fn: Per-file callback; an exception stops the whole pipeline
        cancel: External cancellation token (e.g. set on Ctrl-C)
        queue_size: Bounded queue capacity, defaults to config
        poll_interval: Seconds between cancellation checks while blocked

    Raises:
        WalkError: If traversing a root fails for any reason (fatal to the whole call)
        AnalysisCancelled: If the external cancel event was set
        Exception: Whatever fn raised first, unchanged
    """
    if queue_size is None or poll_interval is None:
        config = get_config()
        queue_size = queue_size or config.queue_size
        poll_interval = poll_interval or config.poll_interval

    files_queue = queue.Queue(maxsize=queue_size)
    stop = threading.Event()
    failures = []
    lock = threading.Lock()

    def record(err: BaseException):
        with lock:
            if not failures:
                failures.append(err)
        stop.set()

    def cancelled() -> bool:
        return stop.is_set() or (cancel is not None and cancel.is_set())

    def send(item) -> bool:
        # Blocks while the queue is full, giving up once cancelled
        while not cancelled():
            try:
                files_queue.put(item, timeout=poll_interval)
                return True
            except queue.Full:
                continue
        return False

    def produce():
        try:
            for root in files:
                try:
                    for path in iter_source_files(root, excluding, cancelled):
                        if not send(path):
                            return
                except AnalysisCancelled:
                    return
                except Exception as e:
                    # I/O errors and anything else: an unhandled error here would
                    # end the thread and look like a finished walk
                    record(WalkError(root, e))
                    return
        finally:
            send(_DONE)

    producer = threading.Thread(target=produce, name='refaudit-walker', daemon=True)
    producer.start()
    try:
        while not stop.is_set():
            if cancel is not None and cancel.is_set():
                raise AnalysisCancelled()
            try:
                item = files_queue.get(timeout=poll_interval)
            except queue.Empty:
                continue
            if item is _DONE:
                break
            fn(item)
    except Exception as e:
        record(e)
    finally:
        stop.set()
        producer.join()

    if failures:
        raise failures[0]
