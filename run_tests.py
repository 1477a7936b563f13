""" Run some or all the tests. """
import os
import sys

if not os.path.exists("tests/"):
    raise FileNotFoundError("No tests found.")

if len(sys.argv) == 1 or (len(sys.argv) == 2 and sys.argv[1] == "all"):
    os.system("python -m pytest tests/")
else:
    # Paths are relative to tests/ unless they already start with it
    test_paths = [path if path.startswith("tests/") else f"tests/{path}" for path in sys.argv[1:]]
    os.system(f"python -m pytest {' '.join(test_paths)}")
