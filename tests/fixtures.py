"""
Shared on-disk Julia project fixtures for the test suite.
"""

import os
import textwrap

PROJECT_TOML = '''\
name = "Exemplar"
uuid = "5d2a7f0e-3b8c-4c61-9a0e-2f7e1f6b9c11"
authors = ["Quality Team <quality@example.com>"]
version = "0.3.1"

[deps]
BenchmarkTools = "6e4b80f9-dd63-53aa-95a3-0cdb28fa8baf"
Debugger = "31a5f54b-26ea-5ae9-a837-f05ce5417438"
JuliaFormatter = "98e50ef6-434e-11e9-1051-2b60c6c9e899"
LinearAlgebra = "37e2e46d-f89d-539d-b4ee-838fcccc9c8e"
Revise = "295af30f-e4ad-537b-8983-00126c2a3abe"
Test = "8dfed614-e22c-5e08-85e1-65c5234f0b40"

[compat]
BenchmarkTools = "1"
Debugger = "0.7"
JuliaFormatter = "1"
LinearAlgebra = "1"
Revise = "3"
Test = "1"
julia = "1.9"
'''

MODULE_JL = '''\
module Exemplar

using LinearAlgebra

include("math_utils.jl")
include("io_utils.jl")

export scaled_sum, normalize_values!, prepare_buffer, collect_squares
export read_lines, write_report

end # module
'''

MATH_UTILS_JL = '''\
const DEFAULT_SCALE = 2.0

"""
    Accumulator

Running total with a fixed scale.
"""
struct Accumulator
    scale::Float64
end

"""
    scaled_sum(values, scale)

Sum `values` multiplied by `scale` without bounds checks.
"""
function scaled_sum(values::Vector{Float64}, scale::Float64 = DEFAULT_SCALE)
    total = 0.0
    @inbounds @simd for i in eachindex(values)
        total += values[i] * scale
    end
    return total
end

"""
    normalize_values!(values)

Normalize `values` in place so they sum to one.
"""
function normalize_values!(values::Vector{Float64})
    total = sum(values)
    if total == 0
        return values
    end
    @views values[:] ./= total
    return values
end

"""
    prepare_buffer(values)

Allocate a zeroed output buffer shaped like `values`.
"""
function prepare_buffer(values::Vector{Float64})
    buffer = similar(values)
    fill!(buffer, 0.0)
    return buffer
end

"""
    collect_squares(n)

Squares of `1:n` with the result size reserved up front.
"""
function collect_squares(n::Int)
    result = Vector{Float64}(undef, 0)
    sizehint!(result, n)
    for i in 1:n
        push!(result, Float64(i)^2)
    end
    return result
end
'''

IO_UTILS_JL = '''\
"""
    read_lines(path)

Read all lines from `path`, closing the file when done.
"""
function read_lines(path::AbstractString)
    open(path, "r") do io
        return readlines(io)
    end
end

"""
    write_report(path, lines)

Write `lines` to `path`, always releasing the handle.
"""
function write_report(path::AbstractString, lines::Vector{String})
    io = open(path, "w")
    try
        for line in lines
            println(io, line)
        end
    finally
        close(io)
    end
    return path
end
'''

BENCHMARK_JL = '''\
using BenchmarkTools
using Exemplar

const SAMPLE = rand(1_000)

"""
    run_suite()

Benchmark the core numeric kernels.
"""
function run_suite()
    trial = @benchmark scaled_sum($SAMPLE, 2.0)
    allocated = @allocated normalize_values!(copy(SAMPLE))
    println("median time: ", median(trial).time)
    println("allocated bytes: ", allocated)
    return trial
end

run_suite()
'''

EXAMPLE_JL = '''\
using Exemplar

values = [1.0, 2.0, 3.0]
println(scaled_sum(values, 2.0))
'''

RUNTESTS_JL = '''\
using Test
using Exemplar

@testset "Exemplar" begin
    include("test_security_pillar.jl")
    include("test_clean_code_pillar.jl")
    include("test_green_code_pillar.jl")
    include("test_automation_pillar.jl")
    include("test_integration.jl")
    include("test_performance.jl")
end
'''

PILLAR_TEST_FILES = (
    "test_security_pillar.jl",
    "test_clean_code_pillar.jl",
    "test_green_code_pillar.jl",
    "test_automation_pillar.jl",
    "test_integration.jl",
    "test_performance.jl",
)

MAKEFILE = '''\
.PHONY: test install clean setup dev format docs bench csga validate audit security

test:
\tjulia --project=. -e 'using Pkg; Pkg.test()'

install:
\tjulia --project=. -e 'using Pkg; Pkg.instantiate()'

setup: install

dev:
\tjulia --project=. -e 'using Revise'

format:
\tjulia --project=. -e 'using JuliaFormatter; format(".")'

docs:
\tjulia --project=docs docs/make.jl

bench:
\tjulia --project=. benchmarks/run_benchmarks.jl

csga: validate

validate: test audit

audit:
\tjulia --project=. -e 'using Pkg; Pkg.status()'

security: audit

clean:
\trm -rf docs/build
'''

AGENTS_MD = '''\
# Agent Guide

## Security
Run `make audit` and `make security` before every release. The audit checks
that all dependencies come from the official registry.

## Clean Code
Run `make format` before committing. Keep functions short and documented.

## Green Code
Run `make bench` to compare performance against the previous release.

## Automation
- `make test` runs the full suite
- `make dev` starts a Revise session
- `make clean` removes build output
- `make docs` builds the documentation
- `make install` and `make setup` prepare the environment
- `make csga` and `make validate` run the quality gate

```bash
make test
```
'''

README_MD = '''\
# Exemplar.jl

Exemplar is a small numerical utility package used to demonstrate a fully
automated Julia workflow. It provides scaled reductions, in-place
normalization and buffered file helpers with predictable allocation
behaviour.

## Installation

```julia
using Pkg
Pkg.add(url="https://example.com/Exemplar.jl")
```

## Usage

```julia
using Exemplar
scaled_sum([1.0, 2.0, 3.0], 2.0)
```

## Development

Run `make setup` once, then `make test` to execute the suite and
`make bench` to run the benchmarks. Formatting is enforced with
JuliaFormatter through `make format` and a pre-commit hook.
'''


def write_file(root, relative_path, content=""):
    """Write content to root/relative_path, creating parent directories."""
    path = os.path.join(str(root), *relative_path.split("/"))
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)
    return path


def pillar_test_file(name, testsets=3, assertions=9):
    """A Julia test file with the given number of @testset blocks and @test lines."""
    label = name[len("test_"):-len(".jl")].replace("_", " ")
    lines = []
    for set_index in range(1, testsets + 1):
        lines.append(f'@testset "{label} {set_index}" begin')
        for k in range(1, assertions + 1):
            lines.append(f"    @test scaled_sum(fill(1.0, {k}), 1.0) == {k}.0")
        lines.append("end")
        lines.append("")
    return "\n".join(lines)


def build_full_project(root):
    """
    Create a project that satisfies every pillar's checks.

    Expected to score at least 90 overall and be classified Expert.
    """
    write_file(root, "Project.toml", PROJECT_TOML)
    write_file(root, "Manifest.toml", "# This file is machine-generated\njulia_version = \"1.10.0\"\n")
    write_file(root, "Makefile", MAKEFILE)
    write_file(root, "AGENTS.md", AGENTS_MD)
    write_file(root, "README.md", README_MD)
    write_file(root, ".JuliaFormatter.toml", 'style = "blue"\n')
    write_file(root, ".vscode/settings.json", "{}\n")
    write_file(root, ".git/hooks/pre-commit", "#!/bin/sh\nmake format\n")
    write_file(root, "src/Exemplar.jl", MODULE_JL)
    write_file(root, "src/math_utils.jl", MATH_UTILS_JL)
    write_file(root, "src/io_utils.jl", IO_UTILS_JL)
    write_file(root, "benchmarks/run_benchmarks.jl", BENCHMARK_JL)
    write_file(root, "examples/demo.jl", EXAMPLE_JL)
    write_file(root, "docs/index.md", "# Exemplar\n\nAPI documentation.\n")
    os.makedirs(os.path.join(str(root), "notebooks"), exist_ok=True)
    write_file(root, "test/runtests.jl", RUNTESTS_JL)
    for name in PILLAR_TEST_FILES:
        write_file(root, f"test/{name}", pillar_test_file(name))
    return root


def build_minimal_project(root, source=None):
    """A single source file and nothing else: no manifest, no tests, no tooling."""
    write_file(root, "main.jl", source if source is not None else textwrap.dedent('''\
        function greet(name)
            println("Hello, ", name)
        end

        greet("world")
        '''))
    return root
