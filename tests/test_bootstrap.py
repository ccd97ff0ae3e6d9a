import numpy as np
import pytest

import shiftmi as sm


def correlated(seed, n=2000, noise=0.8):
    rng = np.random.default_rng(seed)
    x = rng.normal(0, 1, n)
    y = x + rng.normal(0, noise, n)
    return x, y


def plain_mi(x, y, bins, bounds):
    h = sm.make_histogram2d(bins, bins, *bounds, *bounds)
    h.fill_binned(
        sm.calculate_indices_1d(bins, *bounds, x),
        sm.calculate_indices_1d(bins, *bounds, y),
    )
    return h.mutual_information()


def test_single_sample_bootstrap_approximates_mi():
    x, y = correlated(1)
    bounds = (-4.0, 4.0)
    expected = plain_mi(x, y, 8, bounds)

    estimates = [
        sm.bootstrapped_mutual_information(x, y, 8, 8, *bounds, *bounds, 1, seed=s)
        for s in range(10)
    ]
    assert np.mean(estimates) == pytest.approx(expected, abs=0.05)


def test_bootstrap_of_identical_series():
    data = np.sin(np.arange(1000) * 0.01)
    expected = sm.Hist1D.from_values(10, -1.0, 1.0, data).entropy()

    estimates = [
        sm.bootstrapped_mutual_information(
            data, data, 10, 10, -1.0, 1.0, -1.0, 1.0, 1, seed=s
        )
        for s in range(5)
    ]
    assert np.mean(estimates) == pytest.approx(expected, abs=0.05)


def test_bootstrap_is_reproducible_with_seed():
    x, y = correlated(2, n=500)
    args = (x, y, 6, 6, -4.0, 4.0, -4.0, 4.0, 5)

    first = sm.bootstrapped_mutual_information(*args, seed=42)
    again = sm.bootstrapped_mutual_information(*args, seed=42)
    other = sm.bootstrapped_mutual_information(*args, seed=43)

    assert first == again
    assert first != other
    assert first >= 0.0


def test_bootstrap_accepts_generator():
    x, y = correlated(3, n=300)
    rng = np.random.default_rng(0)
    mi = sm.bootstrapped_mutual_information(x, y, 5, 5, -4.0, 4.0, -4.0, 4.0, 3, seed=rng)
    assert np.isfinite(mi)


def test_more_samples_than_values_gives_zero():
    x = np.linspace(0, 1, 5)
    mi = sm.bootstrapped_mutual_information(x, x, 2, 2, 0.0, 1.0, 0.0, 1.0, 10, seed=1)
    assert mi == 0.0


def test_remainder_warning(capsys):
    x = np.linspace(0, 1, 10)
    sm.bootstrapped_mutual_information(x, x, 2, 2, 0.0, 1.0, 0.0, 1.0, 3, seed=1)
    assert "[WARN]" in capsys.readouterr().err

    sm.bootstrapped_mutual_information(x, x, 2, 2, 0.0, 1.0, 0.0, 1.0, 5, seed=1)
    assert capsys.readouterr().err == ""


def test_bootstrap_validation():
    x = np.linspace(0, 1, 10)
    with pytest.raises(sm.InvalidArgumentError):
        sm.bootstrapped_mutual_information(x, x, 2, 2, 0.0, 1.0, 0.0, 1.0, 0)
    with pytest.raises(sm.DomainError):
        sm.bootstrapped_mutual_information(x, x[:-1], 2, 2, 0.0, 1.0, 0.0, 1.0, 2)
    with pytest.raises(sm.DomainError):
        sm.bootstrapped_mutual_information(x, x, 2, 2, 1.0, 0.0, 0.0, 1.0, 2)
    with pytest.raises(sm.InvalidArgumentError):
        sm.bootstrapped_mutual_information(x, x, 2, 0, 0.0, 1.0, 0.0, 1.0, 2)


def test_shifted_bootstrap_shape_and_reproducibility():
    data = np.sin(np.arange(1000) * 0.01)
    args = (-20, 21, 10, 10, -1.0, 1.0, -1.0, 1.0, data, data, 4)

    first = sm.shifted_mutual_information_with_bootstrap(*args, seed=7, max_workers=1)
    again = sm.shifted_mutual_information_with_bootstrap(*args, seed=7, max_workers=4)

    assert first.shape == (41,)
    assert np.array_equal(first, again)
    assert np.all(first >= 0.0)


def test_shifted_bootstrap_with_step():
    data = np.sin(np.arange(300) * 0.05)
    result = sm.shifted_mutual_information_with_bootstrap(
        -30, 31, 5, 5, -1.0, 1.0, -1.0, 1.0, data, data, 2, shift_step=4, seed=0
    )
    assert result.shape == (16,)


def test_shifted_bootstrap_follows_plain_profile():
    x, y = correlated(5, n=1500, noise=0.5)
    y = np.roll(y, 4)
    bounds = (-4.0, 4.0, -4.0, 4.0)

    plain = sm.shifted_mutual_information(-10, 11, 8, 8, *bounds, x, y)
    boot = sm.shifted_mutual_information_with_bootstrap(
        -10, 11, 8, 8, *bounds, x, y, 1, seed=11
    )

    assert int(np.argmax(plain)) == int(np.argmax(boot)) == 6
    assert np.allclose(boot, plain, atol=0.1)


def test_shifted_bootstrap_validation():
    x = np.linspace(0, 1, 10)
    with pytest.raises(sm.InvalidArgumentError):
        sm.shifted_mutual_information_with_bootstrap(
            -2, 2, 2, 2, 0.0, 1.0, 0.0, 1.0, x, x, 0
        )
    with pytest.raises(sm.DomainError):
        sm.shifted_mutual_information_with_bootstrap(
            -10, 2, 2, 2, 0.0, 1.0, 0.0, 1.0, x, x, 2
        )
    with pytest.raises(sm.InvalidArgumentError):
        sm.shifted_mutual_information_with_bootstrap(
            -2, 2, 2, 2, 0.0, 1.0, 0.0, 1.0, x, x, 2, shift_step=0
        )
