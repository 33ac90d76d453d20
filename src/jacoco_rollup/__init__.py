"""jacoco-rollup: aggregate per-module JaCoCo HTML reports into one summary."""

__version__ = "0.1.0"
