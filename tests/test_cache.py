"""Tests for the scan result cache."""

import threading

from spacemap.cache import SizeCache
from spacemap.models import ScanResult


def make_result(root: str = "/data") -> ScanResult:
    return ScanResult(root=root, sizes={root: 100, f"{root}/a": 60})


class TestSizeCache:
    def test_get_missing(self):
        cache = SizeCache()
        assert cache.get("/data") is None

    def test_put_and_get(self):
        cache = SizeCache()
        cache.put("/data", make_result())

        result = cache.get("/data")
        assert result is not None
        assert result.sizes == {"/data": 100, "/data/a": 60}
        assert "/data" in cache
        assert len(cache) == 1

    def test_get_returns_independent_copy(self):
        cache = SizeCache()
        cache.put("/data", make_result())

        first = cache.get("/data")
        first.sizes["/data"] = 0

        assert cache.get("/data").sizes["/data"] == 100

    def test_put_stores_copy(self):
        cache = SizeCache()
        result = make_result()
        cache.put("/data", result)

        result.sizes["/data/a"] = 1

        assert cache.get("/data").sizes["/data/a"] == 60

    def test_put_replaces(self):
        cache = SizeCache()
        cache.put("/data", make_result())
        cache.put("/data", ScanResult(root="/data", sizes={"/data": 5}))

        assert cache.get("/data").total_bytes == 5
        assert len(cache) == 1

    def test_evict(self):
        cache = SizeCache()
        cache.put("/data", make_result())

        assert cache.evict("/data") is True
        assert cache.evict("/data") is False
        assert cache.get("/data") is None

    def test_clear(self):
        cache = SizeCache()
        cache.put("/a", make_result("/a"))
        cache.put("/b", make_result("/b"))

        cache.clear()

        assert len(cache) == 0

    def test_concurrent_puts(self):
        cache = SizeCache()

        def worker(n: int) -> None:
            for i in range(50):
                cache.put(f"/w{n}/{i}", make_result(f"/w{n}/{i}"))

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(cache) == 400

    def test_get_during_put_on_same_key(self):
        cache = SizeCache()
        cache.put("/data", ScanResult(root="/data", sizes={"/data": 0}))
        stop = threading.Event()
        incomplete = []

        def writer() -> None:
            for n in range(1, 200):
                sizes = {f"/data/{i}": 1 for i in range(n)}
                sizes["/data"] = n
                cache.put("/data", ScanResult(root="/data", sizes=sizes))
            stop.set()

        def reader() -> None:
            while not stop.is_set():
                result = cache.get("/data")
                if result.total_bytes != result.directory_count - 1:
                    incomplete.append(result.directory_count)

        threads = [threading.Thread(target=writer)]
        threads += [threading.Thread(target=reader) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert incomplete == []
        assert cache.get("/data").total_bytes == 199
