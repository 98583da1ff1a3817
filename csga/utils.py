"""
Utility functions for file reading, console output, and score arithmetic.
"""

import os
import re
import sys
import math
import fnmatch

from .config import RESET, GREY, YELLOW, SCORE_MIN, SCORE_MAX
from .errors import ScoringInvariantError

_quiet = False

# =============================================================================
# CONSOLE OUTPUT
# =============================================================================

def set_quiet(quiet):
    """Silence progress messages (warnings are always shown)."""
    global _quiet
    _quiet = bool(quiet)


def warn(message):
    """Print a warning to stderr."""
    print(f"{YELLOW}Warning: {message}{RESET}", file=sys.stderr)


def progress(message):
    """Print a progress line to stderr unless quiet mode is on."""
    if not _quiet:
        print(f"{GREY}{message}{RESET}", file=sys.stderr)


def remove_ansi_colors(text):
    """Remove ANSI color codes from text."""
    if not text:
        return ""
    return re.sub(r"\033\[[0-9;]*m", "", text)

# =============================================================================
# FILE HELPERS
# =============================================================================

def is_binary_file(file_path):
    """Check if a file is binary."""
    try:
        with open(file_path, 'rb') as f:
            chunk = f.read(1024)
            return b'\x00' in chunk
    except (OSError, IOError):
        return True


def read_file_content(file_path):
    """
    Reads the content of a text file.

    Undecodable bytes are dropped rather than failing the read.

    Args:
        file_path (str): The path to the file.

    Returns:
        str: The content of the file, or None if it cannot be read.
    """
    try:
        with open(file_path, 'r', encoding='utf-8', errors='ignore') as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        warn(f"Could not read {file_path}: {e}")
        return None


def read_optional_text(root, names):
    """Return the text of the first existing file among names under root, or None."""
    for name in names:
        path = os.path.join(str(root), name)
        if os.path.isfile(path):
            return read_file_content(path)
    return None


def should_ignore(relative_path, patterns):
    """Check a '/'-separated relative path against fnmatch exclude patterns."""
    name = relative_path.rsplit("/", 1)[-1]
    for pattern in patterns:
        if fnmatch.fnmatch(relative_path, pattern) or fnmatch.fnmatch(name, pattern):
            return True
    return False

# =============================================================================
# SCORE ARITHMETIC
# =============================================================================

def clamp_score(value, low=SCORE_MIN, high=SCORE_MAX):
    """Clamp a score into [low, high]. NaN is an engine defect."""
    value = float(value)
    if math.isnan(value):
        raise ScoringInvariantError("Score computation produced NaN")
    return max(low, min(high, value))


def safe_ratio(numerator, denominator, vacuous=1.0):
    """numerator / denominator, or the vacuous value when there is nothing to measure."""
    if denominator <= 0:
        return vacuous
    return numerator / denominator


def weighted_sum(values, weights):
    """Sum of values[name] * weights[name] over the weight keys."""
    return sum(values[name] * weight for name, weight in weights.items())
