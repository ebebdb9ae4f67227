"""
Setup script for quiz-sync package with optional Cython compilation.

Set QUIZ_SYNC_CYTHON=1 to build the internal core modules (_core/*.py)
as compiled extensions, keeping the public API (runner.py, ledger.py,
types.py, errors.py) as readable Python source.
"""

from setuptools import setup, find_packages, Extension
import os

# Check if Cython is available and requested
try:
    from Cython.Build import cythonize
    USE_CYTHON = os.environ.get("QUIZ_SYNC_CYTHON") == "1"
except ImportError:
    USE_CYTHON = False

# Internal modules to compile with Cython
CYTHON_MODULES = [
    "src/quiz_sync/_core/clock.py",
    "src/quiz_sync/_core/scoring.py",
    "src/quiz_sync/_core/capture.py",
    "src/quiz_sync/_core/phase.py",
]


def get_extensions():
    """Build Extension objects for Cython compilation."""
    if not USE_CYTHON:
        return []

    extensions = []
    for module_path in CYTHON_MODULES:
        if os.path.exists(module_path):
            # Convert path to module name: src/quiz_sync/_core/foo.py -> quiz_sync._core.foo
            module_name = module_path.replace("src/", "").replace("/", ".").replace(".py", "")
            extensions.append(
                Extension(
                    name=module_name,
                    sources=[module_path],
                )
            )
    return extensions


def get_ext_modules():
    """Get extension modules, cythonized if Cython is available."""
    extensions = get_extensions()
    if not extensions:
        return []

    return cythonize(
        extensions,
        compiler_directives={
            "language_level": "3",
            "boundscheck": False,
            "wraparound": False,
        },
        nthreads=os.cpu_count() or 1,
    )


setup(
    name="quiz-sync",
    version="1.0.0",
    description="Clock-synchronized multi-player quiz rounds over a shared ledger",
    author="Course Staff",
    license="Proprietary",
    python_requires=">=3.10",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    ext_modules=get_ext_modules(),
    install_requires=[
        "python-dotenv>=1.0.0",
        "pydantic>=2.5.0",
        "requests>=2.31.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.4",
        ],
        "dev": [
            "cython>=3.0",
            "build",
            "wheel",
        ],
    },
    entry_points={
        "console_scripts": [
            "quiz-sync=quiz_sync.cli:main",
        ],
    },
    package_data={
        "quiz_sync": ["*.so", "*.pyd"],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Education",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Cython",
    ],
)
