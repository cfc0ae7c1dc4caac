# particle_pool.py

import logging
from particle import FragmentParticle

logger = logging.getLogger("fireworks")


class ParticlePool:
    """
    Recycles dead FragmentParticles to avoid allocating thousands of objects
    per explosion.

    Data Contract:
    - Inputs: size (int) - Number of fragments to pre-allocate.
    - acquire() pops an idle fragment, or allocates a fresh one when the pool
      is empty (underflow is never an error).
    - release() pushes a fragment back. The caller must have removed it from
      every active collection first.
    - Invariants: A fragment is either in the pool or in exactly one active
      collection, never both.
    """
    def __init__(self, size: int = 0):
        self._idle = [FragmentParticle() for _ in range(size)]
        self.allocations = 0  # Fragments created because the pool was empty

        logger.info(f"ParticlePool pre-allocated {size} fragments.")

    def acquire(self) -> FragmentParticle:
        if self._idle:
            return self._idle.pop()
        self.allocations += 1
        if self.allocations % 1000 == 1:
            logger.debug(f"Pool underflow, allocating fresh fragments (total allocations: {self.allocations}).")
        return FragmentParticle()

    def release(self, fragment: FragmentParticle):
        fragment.dead = True
        self._idle.append(fragment)

    def idle(self):
        """Iterates the idle fragments without removing them."""
        return iter(self._idle)

    def __len__(self):
        return len(self._idle)
