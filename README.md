# coremark

A pure-Python implementation of the CoreMark processor benchmark. It runs
three workloads over a fixed block of data:

- **list processing**: find, reverse, remove and merge sort on a linked list;
- **matrix manipulation**: constant add and multiply, matrix-vector and
  matrix-matrix products, and a product with bit extraction;
- **state machine**: scanning a comma-separated buffer and classifying each
  token as an integer, float, scientific number or invalid.

Every workload folds its results into a 16-bit CRC. For the standard seed
sets the CRCs are checked against known values, so a run reports both how
fast it was and whether the computation was correct.

## Installation

```
pip install .
```

## Running the benchmark

```
coremark [seed1 seed2 seed3 iterations execs unused size]
```

All arguments are optional. They accept decimal or `0x`-prefixed lower-case
hexadecimal values, optionally negative and with a `K` or `M` suffix; a
missing argument counts as 0.

- `seed1`, `seed2`, `seed3`: input seeds. `0 0 0` becomes the performance
  seeds `0, 0, 0x66`; `1 0 0` becomes the validation seeds
  `0x3415, 0x3415, 0x66`.
- `iterations`: number of iterations; `0` picks a count automatically, by
  running ten times more iterations until a run takes at least a second and
  then scaling to roughly ten seconds.
- `execs`: bit mask of the algorithms to run (1 = list, 2 = matrix,
  4 = state); `0` runs all of them. The list algorithm drives the other two
  and must be enabled, otherwise a `ValueError` is raised.
- `unused`: ignored.
- `size`: total data size in bytes, shared equally between the enabled
  algorithms; `0` means the default of 2000.

For example, a short validation run of 10 iterations:

```
coremark 1 0 0 10
```

The report gives the data size, the ticks (milliseconds) and seconds taken,
iterations per second, the seed CRC and the per-algorithm and final CRCs. When
the seed CRC matches one of the known parameter sets, each CRC is compared
with its known value and any mismatch is listed. A run shorter than ten
seconds is reported as an error. The last line says whether operation was
validated, errors were detected, or the seeds cannot be validated.

## Using it as a library

```python
from coremark.runner import prepare, iterate

res = prepare(0x3415, 0x3415, 0x66, 1, 0, 2000)
iterate(res)
print(hex(res.crclist), hex(res.crcmatrix), hex(res.crcstate), hex(res.crc))
```

`coremark.runner` also has `run_benchmark(argv)`, which returns a
`BenchmarkReport` (with `lines()`, `text()`, `total_errors`, `mismatches` and
`iterations_per_sec`), `known_run(seedcrc)`, and `preset_seeds(run_type)`
with the `RunType` values `VALIDATION`, `PERFORMANCE` and `PROFILE`.

The building blocks can be used on their own:

- `coremark.crc`: `crcu8`, `crcu16`, `crcu32`, `crc16`, and `parseval` /
  `get_seed_args` for parsing seed arguments;
- `coremark.state`: `CoreState`, `init_state`, `state_transition` (returns
  the final state and the position where scanning stopped) and
  `bench_state`;
- `coremark.matrix`: `MatrixParams`, `init_matrix`, `bench_matrix`,
  `matrix_test`, `matrix_sum` and the matrix kernels;
- `coremark.listbench`: `ListData`, `ListNode`, `CoreResults`, `list_init`,
  `list_find`, `list_reverse`, `list_remove`, `list_undo_remove`,
  `list_mergesort`, `calc_func`, `cmp_complex`, `cmp_idx` and `bench_list`;
- `coremark.formatting`: `ecvt`, `fcvt` and a small printf-style `sprintf`;
- `coremark.timer`: `Timer` (also a context manager), `time_in_secs` and
  `split_context_arg` for an `M<n>` context-count argument.

## What it does not do

The benchmark always runs a single context. There is no way to run several
copies in parallel, and the `coremark` command does not accept an `M<n>`
argument; `split_context_arg` only parses one.

## Running the tests

```
pip install .[test]
pytest
```