import random
import secrets


class RandomSource:
    """Source of uniform randomness consumed by grid generation."""

    def next_int(self, bound):
        """Return an integer uniformly drawn from [0, bound)."""
        raise NotImplementedError

    def next_float(self):
        """Return a float uniformly drawn from [0, 1)."""
        raise NotImplementedError


class _StdlibRandomSource(RandomSource):
    def __init__(self, generator):
        self._generator = generator

    def next_int(self, bound):
        if bound <= 0:
            raise ValueError(f"bound must be positive, got {bound}")
        return self._generator.randrange(bound)

    def next_float(self):
        return self._generator.random()


class SystemRandomSource(_StdlibRandomSource):
    """OS-entropy backed source used for real play."""

    def __init__(self):
        super().__init__(secrets.SystemRandom())


class SeededRandomSource(_StdlibRandomSource):
    """Reproducible source for simulations and tests."""

    def __init__(self, seed=None):
        self.seed = seed
        super().__init__(random.Random(seed))
