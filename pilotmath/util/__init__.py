from .randomness import RandomSource, Randomness, default_source, seed_from_env

__all__ = ["RandomSource", "Randomness", "default_source", "seed_from_env"]
