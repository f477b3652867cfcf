"""
Bounded failure history.

The error log keeps the most recent normalized failures, newest first, and
never holds more than ``max_errors`` entries. Overflow is dropped silently from
the tail.

Design goals
------------
- Ingestion never raises: every failure value becomes one readable line.
- Readers get immutable snapshots, never the live list.
- Removal by timestamp keeps millisecond-collision behavior; ``discard`` gives
  exact single-record removal by sequence number.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager

from helper_engine.clock import Clock, SystemClock
from helper_engine.data_models import FailureRecord
from helper_engine.diagnostics import debug_enabled, emit_failure
from helper_engine.normalize import Translator, parse_failure_text, resolve_failure

MAX_ERRORS = 10

Listener = Callable[[tuple[FailureRecord, ...]], None]

logger = logging.getLogger(__name__)


class ErrorLog:
    """
    In-memory, capacity-bounded store of FailureRecord entries.

    Parameters
    ----------
    max_errors:
        Capacity. Must be at least 1.
    clock:
        Timestamp source. Defaults to the system clock.
    translate:
        Optional lookup for the fallback message key.
    debug:
        Echo raw failures to the diagnostics logger. Defaults to the
        ``CONFHELPER_DEBUG`` environment switch.
    """

    def __init__(
        self,
        *,
        max_errors: int = MAX_ERRORS,
        clock: Clock | None = None,
        translate: Translator | None = None,
        debug: bool | None = None,
    ) -> None:
        if max_errors < 1:
            raise ValueError("max_errors must be at least 1")
        self._max_errors = max_errors
        self._clock: Clock = SystemClock() if clock is None else clock
        self._translate = translate
        self._debug = debug_enabled() if debug is None else debug
        self._lock = threading.RLock()
        self._records: tuple[FailureRecord, ...] = ()
        self._next_sequence = 1
        self._listeners: list[Listener] = []

    @property
    def max_errors(self) -> int:
        """Capacity of the history."""
        return self._max_errors

    @property
    def records(self) -> tuple[FailureRecord, ...]:
        """
        Immutable snapshot of the history, newest first.

        Later changes to the log never show up in a snapshot already handed out.
        """
        with self._lock:
            return self._records

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def ingest(self, failure: object, context: str | None = None) -> str:
        """
        Normalize a failure, record it, and return its display message.

        Parameters
        ----------
        failure:
            Any failure value: string, exception, mapping, or other object.
        context:
            Optional call-site label. Used for diagnostics only.

        Returns
        -------
        str
            The normalized message, ready for immediate display.
        """
        resolved = resolve_failure(failure)
        message = parse_failure_text(resolved.text, translate=self._translate)

        with self._lock:
            record = FailureRecord(
                message=message,
                timestamp=self._clock.now_ms(),
                sequence=self._next_sequence,
                stack_trace=resolved.stack_trace,
                context=context,
            )
            self._next_sequence += 1
            self._records = ((record,) + self._records)[: self._max_errors]
            snapshot = self._records

        if self._debug:
            emit_failure(failure, context)

        self._notify(snapshot)
        return message

    def clear_all(self) -> None:
        """Remove every record."""
        with self._lock:
            self._records = ()
            snapshot = self._records
        self._notify(snapshot)

    def clear_one(self, timestamp: int) -> int:
        """
        Remove every record whose timestamp equals ``timestamp``.

        Records ingested within the same millisecond share a timestamp, so more
        than one record may be removed.

        Returns
        -------
        int
            Number of records removed.
        """
        with self._lock:
            kept = tuple(r for r in self._records if r.timestamp != timestamp)
            removed = len(self._records) - len(kept)
            self._records = kept
            snapshot = self._records
        if removed:
            self._notify(snapshot)
        return removed

    def discard(self, sequence: int) -> bool:
        """
        Remove the single record with the given sequence number.

        Returns
        -------
        bool
            True if a record was removed.
        """
        with self._lock:
            kept = tuple(r for r in self._records if r.sequence != sequence)
            removed = len(kept) != len(self._records)
            self._records = kept
            snapshot = self._records
        if removed:
            self._notify(snapshot)
        return removed

    @contextmanager
    def absorb(self, context: str, *exc_types: type[BaseException]) -> Iterator[None]:
        """
        Record and suppress the listed exceptions raised inside the block.

        Parameters
        ----------
        context:
            Call-site label stored with the record.
        exc_types:
            Exception types to absorb. Defaults to Exception. Anything else
            propagates unchanged.
        """
        try:
            yield
        except (exc_types or (Exception,)) as exc:
            self.ingest(exc, context=context)

    def latest(self) -> FailureRecord | None:
        """Return the most recent record, or None when the history is empty."""
        with self._lock:
            return self._records[0] if self._records else None

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a callback invoked with a fresh snapshot after every change.

        Returns
        -------
        Callable[[], None]
            Call it to unsubscribe.
        """
        with self._lock:
            self._listeners.append(listener)

        def _unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self, snapshot: tuple[FailureRecord, ...]) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Error log listener failed")
