"""
Named text heuristics for Julia source.

Every check here is a line-level regular expression, not a parser. Each
heuristic documents the false positives and false negatives it is known
to produce so that scores can be read with the right amount of salt.
"""

import re

# =============================================================================
# LINE SANITIZING
# =============================================================================

_STRING_LITERAL = re.compile(r'"(?:\\.|[^"\\])*"')
_CHAR_LITERAL = re.compile(r"'(?:\\.|[^'\\])'")
_BRACKETED = re.compile(r"\([^()]*\)|\[[^\[\]]*\]")


def is_comment_line(line):
    """
    A line whose first non-blank character is '#'.

    False negatives: trailing comments after code and lines inside
    #= ... =# block comments are not counted.
    """
    return line.lstrip().startswith("#")


def strip_strings_and_comments(line):
    """Remove string/char literals and any trailing '#' comment from one line."""
    line = _STRING_LITERAL.sub('""', line)
    line = _CHAR_LITERAL.sub("''", line)
    hash_index = line.find("#")
    if hash_index != -1:
        line = line[:hash_index]
    return line


def strip_bracketed(line):
    """
    Remove (...) and [...] groups with their contents, innermost first.

    This hides `end` used as an index (x[end]) and generator `for`
    inside calls from the block counter.
    """
    previous = None
    while previous != line:
        previous = line
        line = _BRACKETED.sub("", line)
    return line

# =============================================================================
# SECURITY RISK PATTERNS
# =============================================================================

# Hardcoded credential: an identifier named like a secret assigned a
# non-empty string literal on the same line.
# False positives: test fixtures and documentation examples.
# False negatives: secrets built by concatenation or read from other files.
HARDCODED_CREDENTIAL_PATTERNS = [
    re.compile(r"password\s*=\s*[\"'][^\"']+[\"']", re.IGNORECASE),
    re.compile(r"secret\s*=\s*[\"'][^\"']+[\"']", re.IGNORECASE),
    re.compile(r"api_key\s*=\s*[\"'][^\"']+[\"']", re.IGNORECASE),
    re.compile(r"token\s*=\s*[\"'][^\"']+[\"']", re.IGNORECASE),
]

# Dynamic code execution: eval(...) calls and the @eval macro.
# False positives: metaprogramming that only splices trusted symbols.
DYNAMIC_EXECUTION_PATTERNS = [
    re.compile(r"\beval\s*\("),
    re.compile(r"@eval\b"),
]

# Foreign or unchecked memory access: ccall and the unsafe_* family.
# False positives: well-audited bindings to system libraries.
UNSAFE_CALL_PATTERNS = [
    re.compile(r"\bunsafe_\w*"),
    re.compile(r"\bccall\s*\("),
]

RISK_CATEGORIES = (
    ("hardcoded_credential", HARDCODED_CREDENTIAL_PATTERNS, False),
    ("dynamic_code_execution", DYNAMIC_EXECUTION_PATTERNS, True),
    ("unsafe_call", UNSAFE_CALL_PATTERNS, True),
)


def find_security_risk(line):
    """
    Return the name of the first risk category matched by a line, or None.

    A line contributes at most one violation. Comment lines never match;
    calls are checked with string literals removed, credentials are
    checked on the raw line since they need the literal.
    """
    if is_comment_line(line):
        return None
    code_only = strip_strings_and_comments(line)
    for name, patterns, code_scoped in RISK_CATEGORIES:
        target = code_only if code_scoped else line
        if any(pattern.search(target) for pattern in patterns):
            return name
    return None

# =============================================================================
# EFFICIENCY PATTERNS
# =============================================================================

# Idioms that avoid bounds checks, copies, or repeated allocation.
# False positives: a macro mentioned in a comment still counts.
EFFICIENT_PATTERNS = [
    re.compile(r"@inbounds\b"),
    re.compile(r"@simd\b"),
    re.compile(r"@views?\b"),
    re.compile(r"\bview\s*\("),
    re.compile(r"@fastmath\b"),
    re.compile(r"@threads\b"),
    re.compile(r"\bsimilar\s*\("),
    re.compile(r"\bsizehint!\s*\("),
    re.compile(r"\bresize!\s*\("),
    re.compile(r"\bfill!\s*\("),
    re.compile(r"\bVector\{[^}]+\}\(undef"),
    re.compile(r"\bStaticArrays\b"),
    re.compile(r"@benchmark\b"),
    re.compile(r"@btime\b"),
    re.compile(r"@allocated\b"),
]

# Idioms that usually cost performance.
# False negatives: type-unstable code without any of these markers.
INEFFICIENT_PATTERNS = [
    re.compile(r"^\s*global\s+[A-Za-z_]"),
    re.compile(r"\bappend!\s*\(\s*\[\s*\]"),
    re.compile(r"\bfor\b.*\bin\s+collect\s*\("),
    re.compile(r"\bcollect\s*\(\s*keys\s*\("),
    re.compile(r"\bArray\{Any\}"),
    re.compile(r"\bVector\{Any\}"),
]


def count_efficiency_patterns(line):
    """Return (efficient_hits, inefficient_hits) for one line; each pattern counts once."""
    good = sum(1 for pattern in EFFICIENT_PATTERNS if pattern.search(line))
    bad = sum(1 for pattern in INEFFICIENT_PATTERNS if pattern.search(line))
    return good, bad

# =============================================================================
# RESOURCE MANAGEMENT PATTERNS
# =============================================================================

# Counted on code with strings and comments removed.
# False positives: `close(` on a channel counts as closing a resource.
TRY_PATTERN = re.compile(r"\btry\b")
FINALLY_PATTERN = re.compile(r"\bfinally\b")
OPEN_CALL_PATTERN = re.compile(r"\bopen\s*\(")
OPEN_DO_PATTERN = re.compile(r"\bopen\s*\(.*\)\s*do\b")
CLOSE_CALL_PATTERN = re.compile(r"\bclose\s*\(")


def count_resource_patterns(line):
    """Return a dict of resource-handling counts for one line."""
    code = strip_strings_and_comments(line)
    return {
        "try": len(TRY_PATTERN.findall(code)),
        "finally": len(FINALLY_PATTERN.findall(code)),
        "open": len(OPEN_CALL_PATTERN.findall(code)),
        "open_do": len(OPEN_DO_PATTERN.findall(code)),
        "close": len(CLOSE_CALL_PATTERN.findall(code)),
    }

# =============================================================================
# NAMING CONVENTIONS
# =============================================================================

SNAKE_CASE = re.compile(r"^_*[a-z][a-z0-9_]*!?$")
PASCAL_CASE = re.compile(r"^_*[A-Z][A-Za-z0-9]*$")
UPPER_CASE = re.compile(r"^_*[A-Z][A-Z0-9_]*$")

STRUCT_DEFINITION = re.compile(r"^\s*(?:mutable\s+)?struct\s+([A-Za-z_]\w*)")
ABSTRACT_DEFINITION = re.compile(r"^\s*abstract\s+type\s+([A-Za-z_]\w*)")
CONST_DEFINITION = re.compile(r"^\s*const\s+([A-Za-z_]\w*)\s*(?:::[^=]+)?=")


def is_snake_case(name):
    """Function names: lower case with underscores, optional trailing '!'.

    Julia's own style also allows squashed lower case (e.g. `haskey`),
    which this accepts as well.
    """
    return bool(SNAKE_CASE.match(name))


def is_pascal_case(name):
    return bool(PASCAL_CASE.match(name))


def is_upper_case(name):
    return bool(UPPER_CASE.match(name))


def naming_checks(line):
    """
    Yield (kind, name, ok) for struct and const definitions on a line.

    False negatives: constants defined inside a `const begin ... end`
    block and structs generated by macros.
    """
    match = STRUCT_DEFINITION.match(line) or ABSTRACT_DEFINITION.match(line)
    if match:
        yield "type", match.group(1), is_pascal_case(match.group(1))
        return
    match = CONST_DEFINITION.match(line)
    if match:
        name = match.group(1)
        # Constants holding types or modules are allowed to be PascalCase
        yield "const", name, is_upper_case(name) or is_pascal_case(name)

# =============================================================================
# TEST AND AGENT DOCUMENT PATTERNS
# =============================================================================

TESTSET_PATTERN = re.compile(r"@testset\b")
ASSERTION_PATTERN = re.compile(r"@test(?:_throws|_nowarn|_broken|_logs|_warn)?\b")

# Executable command references in agent docs.
# False positives: example commands that do not exist in the Makefile.
AGENT_COMMAND_PATTERNS = [
    re.compile(r"`make\s+[\w\-]+`"),
    re.compile(r"`julia\s+[^`]*\.jl[^`]*`"),
    re.compile(r"```\s*bash"),
    re.compile(r"```\s*julia"),
]


def count_agent_commands(text):
    """Count executable-command references in an agents document."""
    return sum(len(pattern.findall(text)) for pattern in AGENT_COMMAND_PATTERNS)
