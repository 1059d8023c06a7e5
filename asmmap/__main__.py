"""
    Invoke tool for normalizing captured compiler/toolchain output

    Usage: `python -m asmmap --view ir captured_stdout.txt`
"""
import sys

from . import tool

if __name__ == "__main__":
    exit_code = tool.main()
    sys.exit(exit_code)
