# mtengine/domain/analysis/keystream.py
from typing import Iterable, Iterator, Optional

from mtengine.domain.engine.mersenne_twister import MersenneTwister, create_engine
from mtengine.domain.engine.params import MT19937_PARAMS, TwisterParams


class MersenneTwisterKeystream:
    """
    Stream cipher that XORs data with the twister output.

    Each output word is serialized big-endian (4 bytes for MT19937, 8 for
    MT19937-64). With a 16-bit seed this is trivially brute-forced; it
    exists to demonstrate exactly that.
    """
    def __init__(self, seed: Optional[int] = None, params: TwisterParams = MT19937_PARAMS):
        self.params = params
        self.seed = params.default_seed if seed is None else seed
        self._engine = create_engine(params, self.seed)
        self._buffer = b""
        self._offset = 0

    @classmethod
    def from_engine(cls, engine: MersenneTwister) -> "MersenneTwisterKeystream":
        """Wrap an existing engine; the keystream continues from its current position."""
        keystream = cls.__new__(cls)
        keystream.params = engine.params
        keystream.seed = None
        keystream._engine = engine
        keystream._buffer = b""
        keystream._offset = 0
        return keystream

    def __iter__(self) -> Iterator[int]:
        return self

    def __next__(self) -> int:
        if self._offset >= len(self._buffer):
            word = self._engine.generate()
            self._buffer = word.to_bytes(self.params.word_bytes, "big")
            self._offset = 0
        value = self._buffer[self._offset]
        self._offset += 1
        return value

    def encrypt_mut(self, plaintext: bytes) -> bytes:
        """Encrypt, consuming keystream; a second call continues where this one stopped."""
        return bytes(a ^ b for a, b in zip(plaintext, self))

    def decrypt_mut(self, ciphertext: bytes) -> bytes:
        return self.encrypt_mut(ciphertext)

    def encrypt(self, plaintext: bytes) -> bytes:
        """Encrypt from the current keystream position without consuming it."""
        return self._fork().encrypt_mut(plaintext)

    def decrypt(self, ciphertext: bytes) -> bytes:
        return self._fork().decrypt_mut(ciphertext)

    def _fork(self) -> "MersenneTwisterKeystream":
        keystream = self.from_engine(self._engine.copy())
        keystream.seed = self.seed
        keystream._buffer = self._buffer
        keystream._offset = self._offset
        return keystream


def recover_keystream_seed(ciphertext: bytes, known_suffix: bytes,
                           candidates: Iterable[int] = range(1 << 16),
                           params: TwisterParams = MT19937_PARAMS) -> Optional[int]:
    """
    Brute-force the seed of a keystream ciphertext whose plaintext ends in a known suffix.

    Args:
        ciphertext: Encrypted bytes
        known_suffix: Plaintext bytes known to end the message
        candidates: Seeds to try, 16-bit seeds by default
        params: Coefficient set of the keystream generator

    Returns:
        The first matching seed or None
    """
    if not known_suffix or len(known_suffix) > len(ciphertext):
        raise ValueError("Known suffix must be non-empty and no longer than the ciphertext")

    offset = len(ciphertext) - len(known_suffix)
    target = ciphertext[offset:]
    for candidate in candidates:
        keystream = MersenneTwisterKeystream(candidate, params)
        keystream.encrypt_mut(bytes(offset))  # skip the unknown prefix
        if keystream.decrypt_mut(target) == known_suffix:
            return candidate
    return None
