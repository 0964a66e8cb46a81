# gmeasure

`gmeasure` records measurements of code, summarises them and ranks them. Everything is built
around an **Experiment** (`gmeasure.experiment.Experiment`), which holds named **Measurements**
(`gmeasure.measurement.Measurement`). A measurement holds one of three things: numeric values,
durations (`datetime.timedelta`), or a text note. Each recorded value or duration can carry an
annotation. An experiment is safe to use from several threads.

## Recording

```python
from datetime import timedelta

from gmeasure.experiment import Experiment
from gmeasure.decorations import Annotation, SamplingConfig, Style, Units, precision

e = Experiment("My Experiment")
e.record_value("length", 3.141, Units("inches"), precision(2), Annotation("bob"))
e.record_duration("cooking time", timedelta(seconds=3.2), Style("{{red}}"))
e.record_note("baseline run", Style("{{blue}}"))

e.measure_duration("work", lambda: do_work())           # returns the timedelta
e.measure_value("size", lambda: 42.0)                   # returns the value
e.sample_value("score", lambda idx: compute(idx), SamplingConfig(n=10))
e.sample_duration("step", lambda idx: step(idx), SamplingConfig(duration=timedelta(seconds=1)))
e.sample_annotated_value("score", lambda idx: (compute(idx), f"run-{idx}"), SamplingConfig(n=5))
```

Decorations can be passed after the recorded data, in any order:

- `Units("...")` sets the units of a value measurement. Duration measurements always have the
  units `"duration"`.
- `Style("...")` sets style markup, such as `{{blue}}{{bold}}`, that is used in styled reports.
- `precision(n)` sets the number of decimal places for values. `precision(timedelta(...))` sets
  the rounding used when durations are shown. The defaults are `"%.3f"` and 100µs.
- `Annotation("...")` annotates a single data point.

Units, style and precision are fixed by the first record under a name. Any argument that is not
one of these decorations raises `TypeError`. Recording a value under a name that already holds
durations raises `ValueError`, and so does recording a duration under a name that holds values.

`SamplingConfig` limits sampling by the number of samples (`n`), by total time (`duration`), or
by both. At least one of the two must be set. It can also set a minimum interval between samples
(`min_sampling_interval`), or run the callback on several worker threads (`num_parallel`). The
minimum interval and parallel workers cannot be combined. `Experiment.sample(callback, config)`
calls any callback with increasing indices under the same rules.

## Stopwatches

```python
sw = e.new_stopwatch()
step_one()
sw.record("step one").reset()
sw.pause()
unrelated()
sw.resume()
sw.record("step two")
```

Time spent paused is not counted. Calling `record` or `pause` on a paused stopwatch raises
`RuntimeError`, and so does calling `resume` on a running one. `new_stopwatch()` on a stopwatch
returns a fresh stopwatch for the same experiment.

## Stats and reports

```python
from gmeasure.stats import Stat

m = e.get("length")                  # an empty Measurement if the name is unknown
stats = e.get_stats("length")
stats.value_for(Stat.MEDIAN)         # value measurements
stats.duration_for(Stat.MEAN)        # duration measurements
stats.float_for(Stat.MAX)            # either kind; durations in nanoseconds
print(stats)                         # "MIN < [MEDIAN] | <MEAN> ±STDDEV < MAX"
print(m)                             # every data point of one measurement
print(e)                             # a plain table of every measurement
print(e.colorable_string())          # the same table with {{style}} markup
```

The styled strings only contain `{{...}}` markup. The package does not turn that markup into
terminal colours.

## Ranking

```python
from gmeasure.rank import RankingCriteria, rank_stats

ranking = rank_stats(RankingCriteria.LOWER_MEAN_IS_BETTER, stats_a, stats_b, stats_c)
best = ranking.winner()
print(ranking)
```

## Caching

```python
from gmeasure.cache import ExperimentCache

cache = ExperimentCache("./gmeasure-cache")   # creates the directory if needed
cached = cache.load("My Experiment", 1)
if cached is None:
    cache.save("My Experiment", 1, e)

cache.list()     # CachedExperimentHeader(name, version) for each cached experiment
cache.delete("My Experiment")
cache.clear()    # removes every cache file in the directory
```

Each experiment is stored as JSON in a file named after an MD5 hash of its name. If the path
exists but is not a directory, `ExperimentCache` raises `NotADirectoryError`. `load` returns
`None` in three cases: nothing is stored under the name, the stored version is older than the
version you ask for, or the file cannot be read.

## Tables

`gmeasure.table` holds the plain-text table renderer that the reports use. It provides `Table`,
`Row`, `Cell`, `TableStyle` and the `row(...)` and `cell(...)` helpers. It can also be used by
itself.

## What it does not do

`gmeasure` is a library only. It has no command-line tool, and it does not hook into any test
runner's reporting. To include a report in test output, print `str(...)` or
`colorable_string()` yourself.

## Running the tests

```
pip install .[test]
pytest
```