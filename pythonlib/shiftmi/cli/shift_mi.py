#!/usr/bin/env python3
import sys
import pickle
import argparse
from pathlib import Path

import numpy as np
import shiftmi as sm
from shiftmi.config import get_by_path, load_config


def read_series(path: Path) -> np.ndarray:
    if path.suffix == ".npy":
        return np.load(path)
    return np.loadtxt(path, dtype=float, ndmin=1)


def _bounds(cfg, key, values):
    r = get_by_path(cfg, f"Range.{key}")
    if r is None:
        return sm.data_bounds(values, key)
    if not isinstance(r, (list, tuple)) or len(r) != 2:
        raise sm.DomainError(f"Range.{key} must be null or a [min, max] pair, got {r!r}")
    lo, hi = r
    return lo, hi


def main(argv=None):
    ap = argparse.ArgumentParser(
        description="Mutual information of two series for a range of lags."
    )
    ap.add_argument("x_file", help="First series (.npy or text, one value per line)")
    ap.add_argument("y_file", help="Second series, same length as the first")
    ap.add_argument("--config", help="YAML config; flags below override it")
    ap.add_argument("--shift-from", type=int, default=None)
    ap.add_argument("--shift-to", type=int, default=None, help="Exclusive upper lag")
    ap.add_argument("--shift-step", type=int, default=None)
    ap.add_argument("--bins", type=int, nargs=2, metavar=("BX", "BY"), default=None)
    ap.add_argument(
        "--bootstrap",
        type=int,
        default=None,
        metavar="N",
        help="Number of bootstrap samples (default: no bootstrap)",
    )
    ap.add_argument("--seed", type=int, default=None)
    ap.add_argument("--max-workers", type=int, default=None)
    ap.add_argument(
        "--show-progressbar",
        action="store_true",
        help="Show tqdm progress bar",
    )
    ap.add_argument("--output", "-o", help="Write shifts, MI and config to this pickle")
    ap.add_argument("-v", "--verbose", action="store_true")

    args = ap.parse_args(argv)

    overrides = {}
    if args.shift_from is not None:
        overrides["Shift.From"] = args.shift_from
    if args.shift_to is not None:
        overrides["Shift.To"] = args.shift_to
    if args.shift_step is not None:
        overrides["Shift.Step"] = args.shift_step
    if args.bins is not None:
        overrides["Bins.X"], overrides["Bins.Y"] = args.bins
    if args.bootstrap is not None:
        overrides["Bootstrap.Samples"] = args.bootstrap
    if args.seed is not None:
        overrides["Bootstrap.Seed"] = args.seed
    if args.max_workers is not None:
        overrides["Execution.Max_Workers"] = args.max_workers
    if args.show_progressbar:
        overrides["Execution.Progressbar"] = True

    cfg = load_config(args.config, overrides)

    x = read_series(Path(args.x_file).resolve())
    y = read_series(Path(args.y_file).resolve())

    shift_from = get_by_path(cfg, "Shift.From")
    shift_to = get_by_path(cfg, "Shift.To")
    shift_step = get_by_path(cfg, "Shift.Step")
    bins_x = get_by_path(cfg, "Bins.X")
    bins_y = get_by_path(cfg, "Bins.Y")
    nr_samples = get_by_path(cfg, "Bootstrap.Samples")
    opts = dict(
        shift_step=shift_step,
        max_workers=get_by_path(cfg, "Execution.Max_Workers"),
        show_progressbar=bool(get_by_path(cfg, "Execution.Progressbar")),
    )

    try:
        min_x, max_x = _bounds(cfg, "X", x)
        min_y, max_y = _bounds(cfg, "Y", y)
        if args.verbose:
            print(f"[INFO] N values: {len(x)}, {len(y)}")
            print(f"[INFO] Range X: [{min_x}, {max_x}], Y: [{min_y}, {max_y}]")
            print(f"[INFO] Shifts: [{shift_from}, {shift_to}) step {shift_step}")
        if nr_samples is None:
            mi = sm.shifted_mutual_information(
                shift_from, shift_to, bins_x, bins_y,
                min_x, max_x, min_y, max_y, x, y, **opts,
            )
        else:
            mi = sm.shifted_mutual_information_with_bootstrap(
                shift_from, shift_to, bins_x, bins_y,
                min_x, max_x, min_y, max_y, x, y, nr_samples,
                seed=get_by_path(cfg, "Bootstrap.Seed"), **opts,
            )
    except ValueError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 2

    shifts = np.arange(shift_from, shift_to, shift_step, dtype=np.int64)
    print("Mutual Information for each shift:")
    for s, val in zip(shifts, mi):
        print(f"Shift {s}: {val:.6f}")

    if args.output:
        output = Path(args.output).resolve()
        with open(output, "wb") as f:
            pickle.dump({"shifts": shifts, "mi": mi, "config": cfg}, f)
        if args.verbose:
            print(f"[DONE] wrote {output}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
