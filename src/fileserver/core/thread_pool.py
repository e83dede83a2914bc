"""
=============================================================================
WORKER POOL
=============================================================================

A fixed set of worker threads pulling accepted connections off a queue.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   accept loop ──► submit(handle, conn) ──► [ queue ] ──► Worker-0   │
    │                                                     ──► Worker-1   │
    │                                                     ──► Worker-N   │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Every connection is independent: nothing is shared between workers except
the read-only config, the file store and the handler. So the pool needs no
locking beyond what queue.Queue already does.

The queue is bounded. When every worker is busy and the queue is full,
submit() blocks, which stalls the accept loop, which leaves new clients in
the OS backlog. That is the only back-pressure there is.

Shutdown uses the "poison pill" pattern: one None per worker. A worker
that pulls None exits its loop.

=============================================================================
"""

import threading
import queue
import time
import logging
from typing import Callable, Optional, Any
from enum import Enum


logger = logging.getLogger(__name__)


class WorkerState(Enum):
    IDLE = "idle"
    BUSY = "busy"
    STOPPED = "stopped"


class Worker(threading.Thread):
    """
    Worker thread that runs jobs from the shared queue until it gets None.

    A job that raises is logged and the worker moves on to the next one.
    """

    def __init__(self, jobs: queue.Queue, worker_id: int):
        super().__init__(name=f"Worker-{worker_id}", daemon=True)

        self.jobs = jobs
        self.worker_id = worker_id
        self.state = WorkerState.IDLE

        self.jobs_completed = 0
        self.jobs_failed = 0

    def run(self):
        logger.debug(f"Worker {self.worker_id} started")

        while True:
            job = self.jobs.get()
            try:
                if job is None:
                    break
                self._run_job(*job)
            finally:
                self.jobs.task_done()

        self.state = WorkerState.STOPPED
        logger.debug(f"Worker {self.worker_id} stopped")

    def _run_job(self, func: Callable[..., Any], args: tuple):
        self.state = WorkerState.BUSY
        start_time = time.time()

        try:
            func(*args)
            self.jobs_completed += 1
        except Exception as e:
            elapsed = time.time() - start_time
            logger.exception(f"Worker {self.worker_id} job failed after {elapsed:.3f}s: {e}")
            self.jobs_failed += 1
        finally:
            self.state = WorkerState.IDLE


class ThreadPool:
    """
    Fixed-size pool of worker threads.

    Usage:
        pool = ThreadPool(workers=4)
        pool.start()
        pool.submit(handle_connection, conn)
        pool.shutdown()
    """

    def __init__(self, workers: int = 4, queue_size: int = 100):
        """
        Args:
            workers: Number of worker threads (>= 1).
            queue_size: Jobs that may wait for a free worker before
                        submit() starts blocking.
        """
        if workers < 1:
            raise ValueError("ThreadPool needs at least one worker")

        self.workers = workers
        self.queue_size = queue_size

        self._jobs: queue.Queue[Optional[tuple]] = queue.Queue(maxsize=queue_size)
        self._workers: list[Worker] = []
        self._started = False
        self._shutdown = False

    def start(self):
        """Create and start the worker threads."""
        if self._started:
            return

        logger.info(f"Starting thread pool with {self.workers} workers")

        for worker_id in range(self.workers):
            worker = Worker(self._jobs, worker_id)
            self._workers.append(worker)
            worker.start()

        self._started = True

    def submit(self, func: Callable[..., Any], *args: Any):
        """
        Queue func(*args) for a worker. Blocks while the queue is full.

        Raises:
            RuntimeError: If the pool is not running.
        """
        if not self._started:
            raise RuntimeError("Thread pool not started")

        if self._shutdown:
            raise RuntimeError("Thread pool is shutting down")

        self._jobs.put((func, args))

    def shutdown(self, wait: bool = True, timeout: float = 5.0):
        """
        Stop the workers.

        Args:
            wait: Let queued jobs finish first. With False, jobs still in
                  the queue are dropped.
            timeout: How long to wait for each worker thread to exit.
        """
        if not self._started:
            return

        logger.info("Shutting down thread pool...")
        self._shutdown = True

        if not wait:
            dropped = 0
            while True:
                try:
                    self._jobs.get_nowait()
                except queue.Empty:
                    break
                self._jobs.task_done()
                dropped += 1
            if dropped:
                logger.warning(f"Dropped {dropped} queued connections")

        for _ in self._workers:
            self._jobs.put(None)

        for worker in self._workers:
            worker.join(timeout=timeout)

        completed = sum(w.jobs_completed for w in self._workers)
        failed = sum(w.jobs_failed for w in self._workers)

        self._workers.clear()
        self._started = False

        logger.info(f"Thread pool shutdown complete "
                    f"({completed} jobs completed, {failed} failed)")
