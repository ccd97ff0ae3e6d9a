import numpy as np
import shiftmi as sm

# Two noisy sensor streams, the second one trailing the first by 25 samples.
rng = np.random.default_rng()
n = 5000
lag = 25
source = np.cumsum(rng.normal(0.0, 1.0, n + lag))
x = source[lag:] + rng.normal(0.0, 2.0, n)
y = source[:n] + rng.normal(0.0, 2.0, n)

shift_from, shift_to, step = -60, 61, 5
bounds = (*sm.data_bounds(x), *sm.data_bounds(y))

mi = sm.shifted_mutual_information(
    shift_from, shift_to, 16, 16, *bounds, x, y,
    shift_step=step, show_progressbar=True,
)
boot = sm.shifted_mutual_information_with_bootstrap(
    shift_from, shift_to, 16, 16, *bounds, x, y, 10,
    shift_step=step, show_progressbar=True,
)

shifts = np.array(sm.lag_range(shift_from, shift_to, step))
print("Mutual Information for each shift:")
for s, a, b in zip(shifts, mi, boot):
    print(f"Shift {s:4d}: {a:.6f}  (bootstrap {b:.6f})")
print(f"Strongest coupling at shift {shifts[np.argmax(mi)]}")
