import sys


def pytest_configure(config):
    # pytest's tmp_path cleanup uses the recursive shutil.rmtree; the deep
    # directory-chain scanner test exceeds the default recursion limit there.
    sys.setrecursionlimit(max(sys.getrecursionlimit(), 10000))
