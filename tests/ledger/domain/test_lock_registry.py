import threading
import time

from stockroom.ledger.locks import SkuLockRegistry


class TestSkuLockRegistry:
    def test_one_lock_per_key(self):
        registry = SkuLockRegistry()
        with registry.hold(["b", "a", "a"]):
            pass
        assert len(registry) == 2

    def test_locks_released_on_error(self):
        registry = SkuLockRegistry()
        try:
            with registry.hold(["a"]):
                raise RuntimeError("boom")
        except RuntimeError:
            pass

        acquired = threading.Event()

        def worker():
            with registry.hold(["a"]):
                acquired.set()

        thread = threading.Thread(target=worker)
        thread.start()
        thread.join(timeout=2)
        assert acquired.is_set()

    def test_same_key_is_serialised(self):
        registry = SkuLockRegistry()
        active = []
        overlaps = []

        def worker():
            with registry.hold(["sku-1"]):
                active.append(1)
                if len(active) > 1:
                    overlaps.append(True)
                time.sleep(0.01)
                active.pop()

        threads = [threading.Thread(target=worker) for _ in range(5)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=5)

        assert overlaps == []

    def test_overlapping_key_sets_do_not_deadlock(self):
        registry = SkuLockRegistry()
        done = []

        def worker(keys):
            for _ in range(50):
                with registry.hold(keys):
                    pass
            done.append(keys)

        threads = [
            threading.Thread(target=worker, args=(["a", "b"],)),
            threading.Thread(target=worker, args=(["b", "a"],)),
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=5)

        assert len(done) == 2
