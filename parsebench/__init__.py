"""parsebench — exceptions versus results for a recursive-descent parser.

Times two implementations of the same prefix-notation expression evaluator,
one signalling errors with exceptions and one with returned results, on a
well-formed and a malformed input program, and logs CPU time per run.

Usage:
    python -m parsebench generate                    # Write input.ok / input.err
    python -m parsebench run 100000                  # Time the whole matrix
    python -m parsebench score                       # Compare results
"""
