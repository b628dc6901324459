"""
Example benchmarks.

    pacebench run examples/sorting.py --run size:*:10:10:3
"""

import random

from pacebench import benchmark, declare_param

declare_param("size", 100)


@benchmark("list append")
def list_append():
    items = []
    items.append(1)


@benchmark("sorted reversed")
def sorted_reversed(meter):
    data = list(range(meter.param("size"), 0, -1))
    meter.measure(lambda: sorted(data))


@benchmark("sorted shuffled")
def sorted_shuffled(meter):
    data = list(range(meter.param("size")))
    random.Random(0).shuffle(data)
    meter.measure(lambda: sorted(data))


@benchmark("dict lookup")
def dict_lookup(meter):
    table = {i: i for i in range(meter.param("size"))}
    keys = list(table)
    meter.measure(lambda i: table[keys[i % len(keys)]])
