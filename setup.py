"""
Build script for FixupHTML with optional mypyc compilation.

Usage:
    # Pure Python build (default)
    pip install .

    # Compiled with mypyc
    FIXUPHTML_USE_MYPYC=1 pip install .
"""

import os
import sys
from pathlib import Path

from setuptools import find_packages, setup

# Determine if we should use mypyc
USE_MYPYC = os.environ.get("FIXUPHTML_USE_MYPYC", "0") == "1"

# Modules to compile with mypyc: the per-character scanning code.
# rewriter.py and cli.py stay interpreted; they run once per token or per file.
MYPYC_MODULES = [
    "src/fixuphtml/source.py",
    "src/fixuphtml/tokenizer.py",
    "src/fixuphtml/table.py",
]


def build_with_mypyc() -> list:
    """Build extension modules using mypyc."""
    try:
        from mypyc.build import mypycify
    except ImportError:
        print(
            "ERROR: mypyc is not installed. Install with: pip install mypy",
            file=sys.stderr,
        )
        print("Or install with mypyc support: pip install fixuphtml[mypyc]", file=sys.stderr)
        sys.exit(1)

    # Verify all modules exist
    for module_path in MYPYC_MODULES:
        if not Path(module_path).exists():
            print(f"ERROR: Module not found: {module_path}", file=sys.stderr)
            sys.exit(1)

    print("=" * 70)
    print("Building FixupHTML with mypyc compilation")
    print("=" * 70)
    print(f"Compiling {len(MYPYC_MODULES)} modules:")
    for module in MYPYC_MODULES:
        print(f"  - {module}")
    print("=" * 70)

    opt_level = os.environ.get("MYPYC_OPT_LEVEL", "3")
    debug_level = os.environ.get("MYPYC_DEBUG_LEVEL", "0")

    mypyc_options = {
        "opt_level": opt_level,
        "debug_level": debug_level,
        "verbose": True,
        "separate": False,
        "multi_file": False,
    }

    return mypycify(MYPYC_MODULES, **mypyc_options)


if __name__ == "__main__":
    ext_modules = []

    if USE_MYPYC:
        ext_modules = build_with_mypyc()
    else:
        print("Building FixupHTML in pure Python mode (no mypyc compilation)")
        print("To enable mypyc: FIXUPHTML_USE_MYPYC=1 pip install .")

    setup(
        name="fixuphtml",
        version="0.1.0",
        description="Fix up HTML generated by pandoc: <main>, row headers, TOC and generator metadata",
        python_requires=">=3.10",
        package_dir={"": "src"},
        packages=find_packages("src"),
        extras_require={
            "test": ["pytest"],
            "mypyc": ["mypy"],
        },
        entry_points={
            "console_scripts": [
                "fixuphtml = fixuphtml.cli:main",
            ],
        },
        ext_modules=ext_modules,
    )
