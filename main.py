from time import sleep, perf_counter

from enumerable import Enumerable
from fifoqueue import Queue
from hashset import HashSet
from iterable import Iterable
from utils import setup_logging

setup_logging()


def expensive_transform(x):
    # Simulate a costly step so laziness is visible
    print(f"  computing f({x}) ...")
    sleep(0.05)  # pretend this is expensive
    return x * x

print("\n--- Demo: laziness (no work until pulled) ---")
pipeline = (
    Iterable.range()                    # unbounded source
    .select(expensive_transform)        # expensive; watch when it runs
    .where(lambda v: v % 2 == 0)
    .skip(3)
    .take(5)
)

print("Constructed pipeline. where/skip already pulled what they need to know where to start.")
print("\nPulling (should compute only what's needed for 5 items):")
t0 = perf_counter()
out = pipeline.to_array()
t1 = perf_counter()
print(f"Result: {out}")
print(f"Time: {t1 - t0:.2f}s\n")

print("--- Demo: take_while / skip_while over MIDI note numbers ---")
notes = Enumerable.range(48, 1, stop=84)
print("Below middle C:", notes.take_while(lambda n: n < 60).to_array())
print("From middle C:", notes.skip_while(lambda n: n < 60).take(5).to_array())
print("Octave groups:", {k: len(v) for k, v in notes.group_by(lambda n: n // 12 - 1).items()})
print()

print("--- Demo: hash-keyed sets (pitch classes) ---")
chord = HashSet(lambda n: n % 12)
chord.add_range([60, 64, 67, 72])    # 72 is C again, dropped
other = HashSet(lambda n: n % 12)
other.add_range([67, 71, 74])
print("C major:", sorted(chord.to_array()))
print("Shared pitch classes with G major:", chord.intersect(other).to_array())
print("Union:", sorted(chord.union(other).to_array()))
print()

print("--- Demo: FIFO queue of bars ---")
bars = Queue()
for bar in ["bar 1", "bar 2", "bar 3"]:
    bars.enqueue(bar)
print("Playing:", bars.dequeue())
bars.enqueue("bar 4")
while bars.count():
    print("Playing:", bars.dequeue())
print("Queue empty:", bars.empty())
