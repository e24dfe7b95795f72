"""Tests for the upload deduplication cache."""

import threading

from spendscan.runtime.processing_cache import ProcessingCache, file_fingerprint


def test_file_fingerprint() -> None:
    assert file_fingerprint("receipt.jpg", 2048, 1717000000) == "receipt.jpg-2048-1717000000"
    assert file_fingerprint("receipt.jpg", 2048) == "receipt.jpg-2048-"


def test_new_fingerprint_can_be_processed(clock) -> None:
    cache = ProcessingCache(clock=clock)
    assert cache.can_process("a")


def test_in_progress_fingerprint_is_rejected(clock) -> None:
    cache = ProcessingCache(clock=clock)
    cache.mark_in_progress("a")
    clock.advance(5)

    assert not cache.can_process("a")
    assert cache.can_process("b")


def test_rate_limit_between_starts(clock) -> None:
    cache = ProcessingCache(clock=clock)
    cache.mark_in_progress("a")
    clock.advance(0.5)
    assert not cache.can_process("b")

    clock.advance(0.5)
    assert cache.can_process("b")


def test_completed_result_is_served_within_ttl(clock) -> None:
    cache = ProcessingCache(clock=clock)
    cache.mark_in_progress("a")
    cache.mark_complete("a", {"total": "5.50"})

    clock.advance(9)
    assert cache.get_cached_result("a") == {"total": "5.50"}

    clock.advance(1)
    assert cache.get_cached_result("a") is None


def test_completed_fingerprint_can_be_processed_again(clock) -> None:
    cache = ProcessingCache(clock=clock)
    cache.mark_in_progress("a")
    cache.mark_complete("a")
    clock.advance(2)

    assert cache.can_process("a")
    assert cache.get_cached_result("a") is None


def test_evict_expired(clock) -> None:
    cache = ProcessingCache(clock=clock)
    cache.mark_complete("old")
    clock.advance(1000)
    cache.mark_complete("recent")

    clock.advance(800.5)
    assert cache.evict_expired() == 1
    assert len(cache) == 1

    clock.advance(1000)
    assert cache.evict_expired() == 1
    assert len(cache) == 0


def test_entry_at_exact_ttl_is_kept(clock) -> None:
    cache = ProcessingCache(clock=clock)
    cache.mark_complete("a")
    clock.advance(1800)

    assert cache.evict_expired() == 0


def test_begin_marks_in_progress(clock) -> None:
    cache = ProcessingCache(clock=clock)

    assert cache.begin("a")
    assert not cache.begin("a")

    clock.advance(2)
    assert not cache.begin("a")
    assert cache.begin("b")


def test_release_forgets_fingerprint(clock) -> None:
    cache = ProcessingCache(clock=clock)
    cache.begin("a")
    cache.release("a")
    clock.advance(2)

    assert cache.begin("a")


def test_begin_is_atomic_across_threads() -> None:
    cache = ProcessingCache(min_interval=0)
    barrier = threading.Barrier(8)
    results: list[bool] = []
    lock = threading.Lock()

    def worker() -> None:
        barrier.wait()
        started = cache.begin("same-upload")
        with lock:
            results.append(started)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert results.count(True) == 1
    assert len(results) == 8
