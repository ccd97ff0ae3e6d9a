import yaml


def default_cfg():
    return {
        "Shift": {"From": -500, "To": 500, "Step": 1},
        "Bins": {"X": 10, "Y": 10},
        # None -> min/max of the data
        "Range": {"X": None, "Y": None},
        "Bootstrap": {"Samples": None, "Seed": None},
        "Execution": {"Max_Workers": 1, "Progressbar": False},
    }


def get_by_path(d, dotted, default=None):
    cur = d
    for p in dotted.split("."):
        if not isinstance(cur, dict) or p not in cur:
            return default
        cur = cur[p]
    return cur


def set_by_path(d, dotted, value):
    parts = dotted.split(".")
    cur = d
    for p in parts[:-1]:
        if p not in cur or not isinstance(cur[p], dict):
            cur[p] = {}
        cur = cur[p]
    cur[parts[-1]] = value


def deep_merge(base, upd):
    """Recursively merge upd into base."""
    for k, v in upd.items():
        if isinstance(v, dict) and isinstance(base.get(k), dict):
            deep_merge(base[k], v)
        else:
            base[k] = v
    return base


def load_config(path=None, overrides=None):
    """
    Defaults, updated by the YAML file at ``path`` and then by ``overrides``
    (a mapping of dotted keys, e.g. ``{"Shift.From": -10}``).
    """
    cfg = default_cfg()
    if path is not None:
        with open(path, "r") as f:
            loaded = yaml.safe_load(f) or {}
        if not isinstance(loaded, dict):
            raise ValueError(f"config {path} must be a mapping, got {type(loaded).__name__}")
        deep_merge(cfg, loaded)
    for dotted, value in (overrides or {}).items():
        set_by_path(cfg, dotted, value)
    return cfg
